"""
evohome command codes.

This is the only table of known codes; payload dispatch in payloads.py is
keyed by these members.
"""

import re
from enum import IntEnum

from .errors import InvalidCommandCode, UnknownCommand


_HEX_CODE = re.compile(r"[0-9A-Fa-f]{1,4}")


class Command(IntEnum):
    """Known command codes (column 6 of a telegram)."""
    EXTERNAL_SENSOR = 0x0002
    ZONE_NAME = 0x0004
    CONTROLLER_HEAT_DEMAND = 0x0008  # CH / DHW / boiler (F9/FA/FC)
    ZONE_INFO = 0x000A
    DEVICE_INFO = 0x0418
    BATTERY_INFO = 0x1060
    DHW_SETTINGS = 0x10A0
    SYS_INFO = 0x10E0
    DHW_TEMP = 0x1260
    ZONE_WINDOW = 0x12B0  # open window function
    SYNC = 0x1F09
    DHW_STATE = 0x1F41
    BINDING = 0x1FC9
    OPENTHERM_SETPOINT = 0x22D9
    SETPOINT = 0x2309
    SETPOINT_OVERRIDE = 0x2349
    CONTROLLER_MODE = 0x2E04
    ZONE_TEMP = 0x30C9
    ZONE_HEAT_DEMAND = 0x3150  # sent by an individual zone
    OPENTHERM_BRIDGE = 0x3220
    ACTUATOR_CHECK = 0x3B00
    ACTUATOR_STATE = 0x3EF0

    @property
    def code_hex(self) -> str:
        """Return the code as it appears on the wire, e.g. '30C9'."""
        return f"{self.value:04X}"


def resolve_command(data: str) -> Command:
    """
    Resolve the hex command column to a Command.

    Raises:
        InvalidCommandCode: column is not 1-4 hex digits
        UnknownCommand: code is not in the command table
    """
    if not _HEX_CODE.fullmatch(data):
        raise InvalidCommandCode(f"Invalid command code '{data}'")

    code = int(data, 16)
    try:
        return Command(code)
    except ValueError:
        raise UnknownCommand(code) from None
