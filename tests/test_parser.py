#!/usr/bin/env python3
"""Tests for the telegram parser."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from evohome_core.commands import Command, resolve_command
from evohome_core.errors import (
    InvalidCommandCode,
    InvalidHexDigit,
    InvalidSignalQuality,
    MalformedFrame,
    PayloadLengthNotMultipleOfSix,
    PayloadSizeMismatch,
    TelegramError,
    UnknownCommand,
    UnknownPacketType,
    UnsupportedPayload,
)
from evohome_core.payloads import ZoneTemperature, decode_payload
from evohome_core.telegram import PacketType, TelegramParser, parse_packet, split_telegram


ZONE_TEMP_LINE = "063  I --- 04:143260 --:------ 04:143260 30C9 006 000702030814"


def test_parse_zonetemp():
    packet = parse_packet(ZONE_TEMP_LINE)

    assert packet.signal_quality == 63
    assert packet.packet_type is PacketType.INFORMATION
    assert packet.command is Command.ZONE_TEMP
    assert packet.device_ids == ("04:143260", "--:------", "04:143260")
    assert packet.payload.temperatures == {0: 17.94, 3: 20.68}


def test_packet_is_immutable():
    packet = parse_packet(ZONE_TEMP_LINE)
    with pytest.raises(AttributeError):
        packet.signal_quality = 1


def test_too_few_columns():
    for line in ("", "   ", "\n", "1 2 3 4 5 6 7 8 "):
        with pytest.raises(MalformedFrame):
            split_telegram(line)


def test_too_many_columns():
    with pytest.raises(MalformedFrame):
        parse_packet(ZONE_TEMP_LINE + " 00")


def test_payload_length_mismatch():
    # Declared length counts bytes, two payload characters each
    with pytest.raises(PayloadSizeMismatch):
        parse_packet("063  I --- 04:143260 --:------ 04:143260 30C9 006 00070203081")
    with pytest.raises(PayloadSizeMismatch):
        parse_packet("063  I --- 04:143260 --:------ 04:143260 30C9 006 000702030814A")


def test_payload_length_not_a_number():
    with pytest.raises(PayloadSizeMismatch):
        parse_packet("063  I --- 04:143260 --:------ 04:143260 30C9 +06 000702030814")


def test_invalid_characters_are_filtered_out():
    # The gateway outputs non readable ASCII characters quite often
    packet = parse_packet(
        "\x11\x11095  I --- 04:112669 --:------ 04:112669 30C9 003 0006E1\x11\x11\n"
    )
    assert packet.signal_quality == 95
    assert packet.payload.temperatures == {0: 17.61}


def test_invalid_signal_quality():
    with pytest.raises(InvalidSignalQuality):
        parse_packet("0x3  I --- 04:143260 --:------ 04:143260 30C9 003 000702")
    with pytest.raises(InvalidSignalQuality):
        parse_packet("99999  I --- 04:143260 --:------ 04:143260 30C9 003 000702")


def test_packet_types():
    for code, expected in (("I", PacketType.INFORMATION), ("RQ", PacketType.REQUEST),
                           ("RP", PacketType.RESPONSE), ("W", PacketType.WRITE)):
        line = f"045 {code} --- 01:073979 --:------ 01:073979 30C9 003 000702"
        assert parse_packet(line).packet_type is expected

    with pytest.raises(UnknownPacketType):
        parse_packet("045 XX --- 01:073979 --:------ 01:073979 30C9 003 000702")


def test_unknown_command_is_an_error():
    with pytest.raises(UnknownCommand) as exc_info:
        parse_packet("045  I --- 01:073979 --:------ 01:073979 7FFF 003 000702")
    assert exc_info.value.code == 0x7FFF


def test_unsupported_payload():
    with pytest.raises(UnsupportedPayload):
        parse_packet("045  I --- 04:143260 --:------ 04:143260 1060 003 00FF01")


def test_first_failure_wins():
    # Bad signal quality and unknown packet type: the earlier column is reported
    with pytest.raises(InvalidSignalQuality):
        parse_packet("abc XX --- 04:143260 --:------ 04:143260 30C9 003 000702")


def test_resolve_command():
    assert resolve_command("30C9") is Command.ZONE_TEMP
    assert resolve_command("30c9") is Command.ZONE_TEMP
    assert resolve_command("0002") is Command.EXTERNAL_SENSOR
    assert resolve_command("1F09") is Command.SYNC
    assert Command.BATTERY_INFO.code_hex == "1060"

    for bad in ("", "GHIJ", "0x30", "+3C9", "130C9", "30_9"):
        with pytest.raises(InvalidCommandCode):
            resolve_command(bad)

    with pytest.raises(UnknownCommand):
        resolve_command("FFFF")


def test_every_known_command_resolves():
    for command in Command:
        assert resolve_command(command.code_hex) is command


def test_zonetemp_payload():
    assert ZoneTemperature.from_payload("030702010814").temperatures == {3: 17.94, 1: 20.68}
    assert ZoneTemperature.from_payload("040702").temperatures == {4: 17.94}
    assert ZoneTemperature.from_payload("").temperatures == {}


def test_zonetemp_is_signed():
    assert ZoneTemperature.from_payload("05FFFF").temperatures == {5: -0.01}
    assert ZoneTemperature.from_payload("05FE0C").temperatures == {5: -5.0}


def test_zonetemp_last_zone_wins():
    reading = ZoneTemperature.from_payload("0107020208140107D0")
    assert reading.temperatures == {1: 20.0, 2: 20.68}
    assert list(reading.temperatures) == [1, 2]


def test_zonetemp_payload_errors():
    # Not multiples of 6 chars
    for data in ("01", "01020", "0107020"):
        with pytest.raises(PayloadLengthNotMultipleOfSix):
            ZoneTemperature.from_payload(data)

    # Non-hex characters, anywhere in the payload
    for data in ("1234X6", "1X3456", "0107020X0814", "01 702"):
        with pytest.raises(InvalidHexDigit):
            ZoneTemperature.from_payload(data)


def test_decode_payload_dispatch():
    assert decode_payload(Command.ZONE_TEMP, "030702").temperatures == {3: 17.94}
    for command in Command:
        if command is Command.ZONE_TEMP:
            continue
        with pytest.raises(UnsupportedPayload):
            decode_payload(command, "")


def test_all_errors_are_telegram_errors():
    for line in ("", "abc I --- a b c 30C9 003 000702",
                 "045 I --- a b c 30C9 002 0007", "045 I --- a b c 30C9 003 00070Z"):
        with pytest.raises(TelegramError):
            parse_packet(line)


def test_parser_stats():
    parser = TelegramParser()
    parser.parse(ZONE_TEMP_LINE)
    for line in ("", "063  I --- 04:143260 --:------ 04:143260 1060 003 00FF01"):
        with pytest.raises(TelegramError):
            parser.parse(line)

    stats = parser.get_stats()
    assert stats["total"] == 3
    assert stats["parsed"] == 1
    assert stats["MalformedFrame"] == 1
    assert stats["UnsupportedPayload"] == 1

    parser.reset()
    assert parser.get_stats() == {"total": 0, "parsed": 0}


def test_empty_payload_column_is_missing_column():
    with pytest.raises(MalformedFrame):
        parse_packet("045  I --- 04:143260 --:------ 04:143260 30C9 000 \r\n")
