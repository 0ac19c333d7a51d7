"""
Exceptions raised while reading and decoding gateway telegrams.

Everything derived from TelegramError is scoped to a single line and is
recoverable. SerialIoFailure is the only error that ends ingestion.
"""


class TelegramError(Exception):
    """Base class for per-telegram decode failures."""


class MalformedFrame(TelegramError):
    """Line does not split into the expected number of columns."""


class PayloadSizeMismatch(TelegramError):
    """Declared payload length does not match the payload column."""


class InvalidSignalQuality(TelegramError):
    """Signal-quality column is not an unsigned decimal number."""


class UnknownPacketType(TelegramError):
    """Packet-type column is not one of I, RQ, RP or W."""


class InvalidCommandCode(TelegramError):
    """Command column is not a 16-bit hex number."""


class UnknownCommand(TelegramError):
    """Command code is valid hex but not in the command table."""

    def __init__(self, code: int):
        super().__init__(f"Unknown command 0x{code:04X}")
        self.code = code


class UnsupportedPayload(TelegramError):
    """Command is known but has no payload decoder."""


class PayloadLengthNotMultipleOfSix(TelegramError):
    """Zone temperature payload is not made of 6-character records."""


class InvalidHexDigit(TelegramError):
    """Payload contains a character that is not a hex digit."""


class SerialReadError(Exception):
    """Base class for serial line source failures."""


class SerialTimeout(SerialReadError):
    """No complete line arrived within the read timeout."""


class SerialIoFailure(SerialReadError):
    """The serial device failed (disconnect, I/O error)."""


class LineOverflow(SerialReadError):
    """Data arrived but no line end within the maximum line length."""
