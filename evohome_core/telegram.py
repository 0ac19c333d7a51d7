"""
evohome gateway telegram structure and parsing.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple
import logging
import re

from .commands import Command, resolve_command
from .errors import (
    InvalidSignalQuality,
    MalformedFrame,
    PayloadSizeMismatch,
    TelegramError,
    UnknownPacketType,
)
from .payloads import decode_payload

EXPECTED_COLUMNS = 9
MAX_SIGNAL_QUALITY = 0xFFFF

# The gateway emits stray control bytes between telegrams
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_DECIMAL = re.compile(r"[0-9]+")


class PacketType(Enum):
    """Packet type, keyed by its wire code (column 1)."""
    INFORMATION = "I"
    REQUEST = "RQ"
    RESPONSE = "RP"
    WRITE = "W"


@dataclass(frozen=True)
class Packet:
    """
    One decoded gateway telegram.

    Wire format (9 columns):
    - signal quality (3 decimal digits, higher is worse)
    - packet type (I, RQ, RP, W)
    - reserved (---)
    - three device ids (e.g. 04:143260, --:------)
    - command code (4 hex digits)
    - payload length in bytes (3 decimal digits)
    - payload (hex, 2 characters per byte)

    Example:
        063  I --- 04:143260 --:------ 04:143260 30C9 006 000702030814
    """

    signal_quality: int
    packet_type: PacketType
    command: Command
    device_ids: Tuple[str, str, str]
    payload: Optional[object] = None

    def __repr__(self) -> str:
        return (
            f"Packet(sq={self.signal_quality}, type={self.packet_type.value}, "
            f"cmd={self.command.code_hex}, ids={','.join(self.device_ids)}, "
            f"payload={self.payload})"
        )


def split_telegram(line: str) -> list:
    """
    Strip control characters and split a telegram line into its columns.

    Raises:
        MalformedFrame: column count is not 9
        PayloadSizeMismatch: declared length does not match the payload
    """
    filtered = _CONTROL_CHARS.sub("", line)
    columns = [column for column in filtered.split(" ") if column]

    if len(columns) != EXPECTED_COLUMNS:
        raise MalformedFrame(
            f"Column count should be {EXPECTED_COLUMNS}, got {len(columns)} '{filtered}'"
        )

    declared = columns[7]
    if not _DECIMAL.fullmatch(declared):
        raise PayloadSizeMismatch(f"Invalid payload size '{declared}'")

    # Declared size is in bytes, two characters per byte
    payload_chars = 2 * int(declared)
    if payload_chars != len(columns[8]):
        raise PayloadSizeMismatch(
            f"Payload size does not match, expected {payload_chars} chars, "
            f"got {len(columns[8])}"
        )

    return columns


def parse_signal_quality(data: str) -> int:
    if not _DECIMAL.fullmatch(data) or int(data) > MAX_SIGNAL_QUALITY:
        raise InvalidSignalQuality(f"Invalid signal quality (column 0) '{data}'")
    return int(data)


def parse_packet_type(data: str) -> PacketType:
    try:
        return PacketType(data)
    except ValueError:
        raise UnknownPacketType(f"Unknown packet type '{data}'") from None


def parse_packet(line: str) -> Packet:
    """
    Parse one telegram line into a Packet.

    Stops at the first failure; any TelegramError subclass may be raised.
    """
    columns = split_telegram(line)

    signal_quality = parse_signal_quality(columns[0])
    packet_type = parse_packet_type(columns[1])
    command = resolve_command(columns[6])
    payload = decode_payload(command, columns[8])

    return Packet(
        signal_quality=signal_quality,
        packet_type=packet_type,
        command=command,
        device_ids=(columns[3], columns[4], columns[5]),
        payload=payload,
    )


class TelegramParser:
    """
    Parser for gateway telegram lines.

    Wraps parse_packet() and keeps counters for diagnostics.
    """

    def __init__(self):
        self._logger = logging.getLogger(self.__class__.__name__)
        self.stats: Dict[str, int] = {"total": 0, "parsed": 0}

    def parse(self, line: str) -> Packet:
        """
        Parse a telegram line.

        Raises:
            TelegramError: the line could not be decoded
        """
        self.stats["total"] += 1
        try:
            packet = parse_packet(line)
        except TelegramError as e:
            name = type(e).__name__
            self.stats[name] = self.stats.get(name, 0) + 1
            self._logger.debug(f"{name}: {e} (line {line!r})")
            raise

        self.stats["parsed"] += 1
        return packet

    def get_stats(self) -> Dict[str, int]:
        return dict(self.stats)

    def reset(self) -> None:
        """Clear the counters."""
        self.stats = {"total": 0, "parsed": 0}
