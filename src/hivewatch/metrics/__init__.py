"""Per-session tool-use metrics."""

from __future__ import annotations

from hivewatch.metrics.collector import DEFAULT_LATENCY_WINDOW, MetricsCollector
from hivewatch.metrics.stats import percentile
from hivewatch.metrics.types import (
    DEFAULT_PRICING,
    LatencyStats,
    MetricsSnapshot,
    ModelPricing,
    TokenStats,
    ToolUse,
)

__all__ = [
    "DEFAULT_LATENCY_WINDOW",
    "DEFAULT_PRICING",
    "LatencyStats",
    "MetricsCollector",
    "MetricsSnapshot",
    "ModelPricing",
    "TokenStats",
    "ToolUse",
    "percentile",
]
