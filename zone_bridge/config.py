"""
Bridge configuration from a YAML file.

Example (config/config.example.yaml):

    serial:
      port: /dev/ttyUSB0
      baudrate: 115200
      timeout: 0.5
    forwarder:
      endpoint: http://collector.local/api/temperatures
      timeout: 10
    gateway:
      signal_quality_threshold: 80
      stats_interval: 60
    logging:
      level: INFO
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from evohome_core.connection import ConnectionConfig
from .ingest import DEFAULT_SIGNAL_QUALITY_THRESHOLD


DEFAULT_CONFIG_PATH = "config/config.yaml"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ConfigLoader:
    """Load and manage configuration from YAML file."""

    def __init__(self, config_path=DEFAULT_CONFIG_PATH, required=False):
        self.config_path = Path(config_path)
        self.config = self._load_config(required)

    def _load_config(self, required):
        """Load configuration from YAML file. A missing optional file means defaults."""
        if not self.config_path.exists():
            if required:
                raise FileNotFoundError(f"Config file not found: {self.config_path}")
            return {}

        with open(self.config_path, 'r') as f:
            return yaml.safe_load(f) or {}

    def get(self, key_path, default=None):
        """Get configuration value using dot notation (e.g., 'serial.port')."""
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value


@dataclass
class LoggingConfig:
    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT
    file: Optional[str] = None


@dataclass
class BridgeConfig:
    connection: ConnectionConfig = field(default_factory=ConnectionConfig)
    endpoint: Optional[str] = None
    forward_timeout: float = 10.0
    signal_quality_threshold: int = DEFAULT_SIGNAL_QUALITY_THRESHOLD
    stats_interval: float = 60.0
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(
    path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> BridgeConfig:
    """
    Build a BridgeConfig from a YAML file and command line overrides.

    Args:
        path: YAML file; when None the default path is used if it exists
        overrides: values that win over the file ('port', 'endpoint', 'timeout')
    """
    loader = ConfigLoader(path or DEFAULT_CONFIG_PATH, required=path is not None)
    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}

    defaults = ConnectionConfig()
    connection = ConnectionConfig(
        port=overrides.get("port", loader.get("serial.port", defaults.port)),
        baudrate=int(loader.get("serial.baudrate", defaults.baudrate)),
        timeout=float(overrides.get("timeout", loader.get("serial.timeout", defaults.timeout))),
    )

    return BridgeConfig(
        connection=connection,
        endpoint=overrides.get("endpoint", loader.get("forwarder.endpoint")),
        forward_timeout=float(loader.get("forwarder.timeout", 10.0)),
        signal_quality_threshold=int(
            loader.get("gateway.signal_quality_threshold", DEFAULT_SIGNAL_QUALITY_THRESHOLD)
        ),
        stats_interval=float(loader.get("gateway.stats_interval", 60.0)),
        logging=LoggingConfig(
            level=str(loader.get("logging.level", "INFO")).upper(),
            format=loader.get("logging.format", DEFAULT_LOG_FORMAT),
            file=loader.get("logging.file"),
        ),
    )
