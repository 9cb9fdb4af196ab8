"""Configuration loading."""

from __future__ import annotations

from hivewatch.config.loader import load_config
from hivewatch.config.schema import (
    DiscoveryConfig,
    HivewatchConfig,
    LoggingConfig,
    MetricsConfig,
)

__all__ = [
    "DiscoveryConfig",
    "HivewatchConfig",
    "LoggingConfig",
    "MetricsConfig",
    "load_config",
]
