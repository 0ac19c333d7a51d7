"""Zone temperature bridge: gateway telegrams to an HTTP collector."""

from .config import BridgeConfig, ConfigLoader, LoggingConfig, load_config
from .controller import BridgeHandle, start
from .forwarder import HttpForwarder
from .ingest import (
    DEFAULT_SIGNAL_QUALITY_THRESHOLD,
    IngestionLoop,
    IngestionStats,
    LoopState,
)

__all__ = [
    "BridgeConfig",
    "ConfigLoader",
    "LoggingConfig",
    "load_config",
    "BridgeHandle",
    "start",
    "HttpForwarder",
    "DEFAULT_SIGNAL_QUALITY_THRESHOLD",
    "IngestionLoop",
    "IngestionStats",
    "LoopState",
]
