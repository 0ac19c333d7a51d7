"""evohome core - telegram decoding and gateway connection handling."""

from .commands import Command, resolve_command
from .connection import ConnectionConfig, GatewayConnection, SerialConnection
from .errors import (
    InvalidCommandCode,
    InvalidHexDigit,
    InvalidSignalQuality,
    LineOverflow,
    MalformedFrame,
    PayloadLengthNotMultipleOfSix,
    PayloadSizeMismatch,
    SerialIoFailure,
    SerialReadError,
    SerialTimeout,
    TelegramError,
    UnknownCommand,
    UnknownPacketType,
    UnsupportedPayload,
)
from .payloads import ZoneTemperature, decode_payload
from .telegram import Packet, PacketType, TelegramParser, parse_packet, split_telegram

__all__ = [
    "Command",
    "resolve_command",
    "ConnectionConfig",
    "GatewayConnection",
    "SerialConnection",
    "TelegramError",
    "MalformedFrame",
    "PayloadSizeMismatch",
    "InvalidSignalQuality",
    "UnknownPacketType",
    "InvalidCommandCode",
    "UnknownCommand",
    "UnsupportedPayload",
    "PayloadLengthNotMultipleOfSix",
    "InvalidHexDigit",
    "SerialReadError",
    "SerialTimeout",
    "SerialIoFailure",
    "LineOverflow",
    "ZoneTemperature",
    "decode_payload",
    "Packet",
    "PacketType",
    "TelegramParser",
    "parse_packet",
    "split_telegram",
]
