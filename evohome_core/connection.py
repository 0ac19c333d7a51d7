"""
Serial line source for the evohome gateway (HGI80 and compatibles).

The gateway prints one telegram per line at 115200 baud.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import serial

from .errors import LineOverflow, SerialIoFailure, SerialTimeout


@dataclass
class ConnectionConfig:
    """Connection configuration."""
    port: str = "/dev/ttyUSB0"
    baudrate: int = 115200
    timeout: float = 0.5
    max_line_length: int = 1024


class GatewayConnection(ABC):
    """Abstract base class for line-oriented gateway connections."""

    def __init__(self, config: ConnectionConfig):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    @abstractmethod
    def connect(self) -> bool:
        """Establish connection."""

    @abstractmethod
    def disconnect(self) -> None:
        """Close connection."""

    @abstractmethod
    def read_line(self) -> str:
        """
        Read one telegram line, blocking for at most the configured timeout.

        Raises:
            SerialTimeout: no complete line arrived in time
            LineOverflow: a line exceeded max_line_length and was dropped
            SerialIoFailure: the device failed
        """


class SerialConnection(GatewayConnection):
    """Direct serial connection to the gateway."""

    def __init__(self, config: ConnectionConfig):
        super().__init__(config)
        self._serial: Optional[serial.Serial] = None
        self._buffer = bytearray()

    def connect(self) -> bool:
        """Open serial port connection."""
        try:
            self._serial = serial.Serial(
                port=self.config.port,
                baudrate=self.config.baudrate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=self.config.timeout
            )
            self._connected = True
            self.logger.info(f"Connected to {self.config.port}")
            return True
        except serial.SerialException as e:
            self.logger.error(f"Failed to connect: {e}")
            self._connected = False
            return False

    def disconnect(self) -> None:
        """Close serial connection."""
        if self._serial and self._serial.is_open:
            self._serial.close()
        self._buffer.clear()
        self._connected = False
        self.logger.info("Disconnected")

    def read_line(self) -> str:
        """
        Read a complete line from the serial port.

        A line cut short by the timeout is kept and completed by the
        next call.
        """
        if not self._serial or not self._serial.is_open:
            raise SerialIoFailure(f"Serial port {self.config.port} is not open")

        try:
            data = self._serial.readline()
        except (serial.SerialException, OSError) as e:
            self._connected = False
            raise SerialIoFailure(f"Read error on {self.config.port}: {e}") from e

        self._buffer.extend(data)

        if not self._buffer.endswith(b"\n"):
            # Prevent buffer overflow on a line that never ends
            if len(self._buffer) > self.config.max_line_length:
                dropped = len(self._buffer)
                self._buffer.clear()
                raise LineOverflow(
                    f"Dropped {dropped} bytes without newline on {self.config.port}"
                )
            raise SerialTimeout(
                f"No telegram within {self.config.timeout}s on {self.config.port}"
            )

        line = bytes(self._buffer)
        self._buffer.clear()
        # Non-ASCII garbage stays in the line and fails decoding there
        return line.decode("ascii", errors="replace")
