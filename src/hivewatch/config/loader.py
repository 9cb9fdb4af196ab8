"""YAML config loader for hivewatch."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from hivewatch.config.schema import (
    DiscoveryConfig,
    HivewatchConfig,
    LoggingConfig,
    MetricsConfig,
)
from hivewatch.errors import ConfigurationError


def load_config(path: str | Path | None) -> HivewatchConfig:
    if path is None:
        return HivewatchConfig()
    p = Path(path)
    if not p.exists():
        return HivewatchConfig()
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Cannot read config {p}: {exc}") from exc
    if not isinstance(raw, dict):
        raw = {}

    discovery_raw = raw.get("discovery", {}) if isinstance(raw.get("discovery"), dict) else {}
    metrics_raw = raw.get("metrics", {}) if isinstance(raw.get("metrics"), dict) else {}
    logging_raw = raw.get("logging", {}) if isinstance(raw.get("logging"), dict) else {}

    discovery = DiscoveryConfig(**_pick(discovery_raw, DiscoveryConfig))
    _expect(isinstance(discovery.tmux_binary, str) and discovery.tmux_binary, "discovery.tmux_binary")
    _expect(_is_number(discovery.timeout_seconds) and discovery.timeout_seconds > 0, "discovery.timeout_seconds")
    _expect(
        _is_number(discovery.poll_interval_seconds) and discovery.poll_interval_seconds > 0,
        "discovery.poll_interval_seconds",
    )

    metrics = MetricsConfig(**_pick(metrics_raw, MetricsConfig))
    window = metrics.latency_window
    _expect(
        window is None or (isinstance(window, int) and not isinstance(window, bool) and window > 0),
        "metrics.latency_window",
    )

    log_cfg = LoggingConfig(**_pick(logging_raw, LoggingConfig))
    _expect(isinstance(log_cfg.debug, bool), "logging.debug")
    _expect(isinstance(log_cfg.json, bool), "logging.json")

    return HivewatchConfig(discovery=discovery, metrics=metrics, logging=log_cfg)


def _pick(raw: dict[str, Any], model_type: type[Any]) -> dict[str, Any]:
    allowed = set(model_type.__dataclass_fields__.keys())
    return {k: v for k, v in raw.items() if k in allowed}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _expect(ok: Any, key: str) -> None:
    if not ok:
        raise ConfigurationError(f"Invalid value for {key}", key=key)
