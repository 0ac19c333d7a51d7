#!/usr/bin/env python3
"""Tests for configuration loading."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from zone_bridge.config import ConfigLoader, load_config


CONFIG_YAML = """
serial:
  port: /dev/ttyACM0
  timeout: 2
forwarder:
  endpoint: http://collector.local/temps
gateway:
  signal_quality_threshold: 70
logging:
  level: debug
"""


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = load_config()

    assert config.connection.port == "/dev/ttyUSB0"
    assert config.connection.baudrate == 115200
    assert config.connection.timeout == 0.5
    assert config.endpoint is None
    assert config.signal_quality_threshold == 80
    assert config.logging.level == "INFO"


def test_load_from_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG_YAML)

    config = load_config(str(path))

    assert config.connection.port == "/dev/ttyACM0"
    assert config.connection.timeout == 2.0
    assert config.endpoint == "http://collector.local/temps"
    assert config.signal_quality_threshold == 70
    assert config.logging.level == "DEBUG"


def test_overrides_win(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG_YAML)

    config = load_config(
        str(path),
        overrides={"port": "COM7", "endpoint": "http://other/", "timeout": None},
    )

    assert config.connection.port == "COM7"
    assert config.endpoint == "http://other/"
    assert config.connection.timeout == 2.0


def test_explicit_missing_file_fails(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))


def test_dot_notation(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG_YAML)
    loader = ConfigLoader(path)

    assert loader.get("serial.port") == "/dev/ttyACM0"
    assert loader.get("serial.missing", "x") == "x"
    assert loader.get("forwarder.endpoint.deeper") is None


def test_empty_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert ConfigLoader(path, required=True).config == {}
