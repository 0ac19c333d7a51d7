"""
Payload decoders, keyed by command.

Only the zone temperature payload (30C9) is decoded. Its payload is any
number of 6-character records:

    ZZ TTTT
    ZZ   - zone id (unsigned byte)
    TTTT - temperature in hundredths of a degree (signed 16-bit, big endian)

Example: 000702030814 -> {0: 17.94, 3: 20.68}
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Dict

from .commands import Command
from .errors import (
    InvalidHexDigit,
    PayloadLengthNotMultipleOfSix,
    UnsupportedPayload,
)


_HEX_DIGITS = re.compile(r"[0-9A-Fa-f]*")

ZONE_RECORD_CHARS = 6


def _hex_to_bytes(data: str, what: str) -> bytes:
    # bytes.fromhex() also accepts whitespace, so check the digits first
    if not _HEX_DIGITS.fullmatch(data):
        raise InvalidHexDigit(f"Invalid {what} '{data}'")
    return bytes.fromhex(data)


@dataclass(frozen=True)
class ZoneTemperature:
    """Zone temperatures in degrees Celsius, keyed by zone id."""
    temperatures: Dict[int, float] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, data: str) -> "ZoneTemperature":
        if len(data) % ZONE_RECORD_CHARS != 0:
            raise PayloadLengthNotMultipleOfSix(
                f"Zone temperature payload should be a multiple of "
                f"{ZONE_RECORD_CHARS} characters (payload '{data}')"
            )

        temperatures: Dict[int, float] = {}
        for i in range(0, len(data), ZONE_RECORD_CHARS):
            record = data[i:i + ZONE_RECORD_CHARS]
            zone_id = _hex_to_bytes(record[0:2], f"zone id in '{data}' (i={i})")[0]
            raw = _hex_to_bytes(record[2:6], f"zone temperature in '{data}' (i={i})")
            centi_degrees = int.from_bytes(raw, "big", signed=True)
            temperatures[zone_id] = centi_degrees / 100.0

        return cls(temperatures)

    def __len__(self) -> int:
        return len(self.temperatures)


PAYLOAD_DECODERS: Dict[Command, Callable[[str], object]] = {
    Command.ZONE_TEMP: ZoneTemperature.from_payload,
}


def decode_payload(command: Command, data: str):
    """
    Decode the payload column for the given command.

    Raises:
        UnsupportedPayload: no decoder for this command
        TelegramError: the decoder rejected the payload
    """
    decoder = PAYLOAD_DECODERS.get(command)
    if decoder is None:
        raise UnsupportedPayload(
            f"Don't know how to parse the payload for {command.name} ({command.code_hex})"
        )
    return decoder(data)
