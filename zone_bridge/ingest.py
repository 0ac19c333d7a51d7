"""
Ingestion loop: serial lines in, zone temperatures out.

One line is read per iteration. Decode failures, read timeouts and
overlong lines are counted and skipped; a serial I/O failure ends the loop and is re-raised.
"""

import logging
import threading
from dataclasses import asdict, dataclass
from enum import Enum, auto
from typing import Any, Dict, Optional

from evohome_core.errors import LineOverflow, SerialIoFailure, SerialTimeout, TelegramError
from evohome_core.payloads import ZoneTemperature
from evohome_core.telegram import Packet, TelegramParser


# Packets with a signal quality value this high usually carry bit errors
DEFAULT_SIGNAL_QUALITY_THRESHOLD = 80


class LoopState(Enum):
    RUNNING = auto()
    STOPPING = auto()
    STOPPED = auto()
    FAILED = auto()


@dataclass
class IngestionStats:
    timeouts: int = 0
    overflows: int = 0
    discarded_low_signal: int = 0
    forwarded: int = 0
    forward_failures: int = 0


class IngestionLoop:
    """
    Reads telegrams from a line source and forwards zone temperatures.

    Args:
        source: object with read_line() and disconnect(), see GatewayConnection
        forwarder: object with forward(ZoneTemperature) -> bool
        stop_event: cooperative stop flag, checked before every read
        signal_quality_threshold: packets at or above this value are dropped
    """

    def __init__(
        self,
        source,
        forwarder,
        stop_event: Optional[threading.Event] = None,
        signal_quality_threshold: int = DEFAULT_SIGNAL_QUALITY_THRESHOLD,
    ):
        self.source = source
        self.forwarder = forwarder
        self.stop_event = stop_event or threading.Event()
        self.signal_quality_threshold = signal_quality_threshold
        self.parser = TelegramParser()
        self.stats = IngestionStats()
        self.state = LoopState.RUNNING
        self.logger = logging.getLogger(self.__class__.__name__)

    def run(self) -> None:
        """Loop until the stop event is set or the source fails."""
        self.logger.info("Ingestion loop started")
        try:
            while not self.stop_event.is_set():
                self.step()
        except SerialIoFailure as e:
            self.state = LoopState.FAILED
            self.logger.error(f"Serial read failed, stopping ingestion: {e}")
            raise
        except Exception:
            self.state = LoopState.FAILED
            self.logger.exception("Unexpected error in ingestion loop")
            raise
        else:
            self.state = LoopState.STOPPING
        finally:
            self._disconnect_source()

        self.state = LoopState.STOPPED
        self.logger.info("Ingestion loop stopped")

    def _disconnect_source(self) -> None:
        # Must not replace the exception that ended the loop
        try:
            self.source.disconnect()
        except Exception:
            self.logger.exception("Error while closing the line source")

    def step(self) -> None:
        """Read and handle a single line."""
        try:
            line = self.source.read_line()
        except SerialTimeout as e:
            self.stats.timeouts += 1
            self.logger.debug(f"Read timeout: {e}")
            return
        except LineOverflow as e:
            self.stats.overflows += 1
            self.logger.warning(f"{e}")
            return

        try:
            packet = self.parser.parse(line)
        except TelegramError:
            # Noisy radio link, already counted and logged by the parser
            return

        self.handle_packet(packet)

    def handle_packet(self, packet: Packet) -> None:
        if packet.signal_quality >= self.signal_quality_threshold:
            self.stats.discarded_low_signal += 1
            self.logger.debug(
                f"Discarding {packet}: signal quality {packet.signal_quality} "
                f">= {self.signal_quality_threshold}"
            )
            return

        if not isinstance(packet.payload, ZoneTemperature) or not packet.payload.temperatures:
            return

        self.logger.info(f"Temperature {packet.payload.temperatures}")
        if self.forwarder.forward(packet.payload):
            self.stats.forwarded += 1
        else:
            self.stats.forward_failures += 1

    def get_stats(self) -> Dict[str, Any]:
        return {**self.parser.get_stats(), **asdict(self.stats)}
