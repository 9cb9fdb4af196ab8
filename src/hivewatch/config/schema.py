"""Configuration schema for hivewatch YAML files."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class DiscoveryConfig:
    tmux_binary: str = "tmux"
    timeout_seconds: float = 2.0
    poll_interval_seconds: float = 10.0


@dataclass(slots=True)
class MetricsConfig:
    latency_window: int | None = 10_000  # None = keep every sample


@dataclass(slots=True)
class LoggingConfig:
    debug: bool = False
    json: bool = False


@dataclass(slots=True)
class HivewatchConfig:
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
