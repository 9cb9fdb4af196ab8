"""Metrics data types and pricing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class ModelPricing:
    """Pricing per million tokens."""

    input_per_million: float = 0.0
    output_per_million: float = 0.0

    def estimate_cost(self, input_tokens: int, output_tokens: int) -> float:
        """Estimate cost in dollars for given token counts."""
        return (
            (input_tokens * self.input_per_million / 1_000_000)
            + (output_tokens * self.output_per_million / 1_000_000)
        )


#: Fixed estimate used for every session: $3 / $15 per million tokens.
DEFAULT_PRICING = ModelPricing(input_per_million=3.0, output_per_million=15.0)


@dataclass(frozen=True, slots=True)
class ToolUse:
    """One completed tool invocation within a session.

    Token counts that are ``None``, non-numeric or negative contribute 0 to
    the session totals.
    """

    tool: str
    duration_ms: float
    success: bool
    input_tokens: int | None = None
    output_tokens: int | None = None


@dataclass(slots=True)
class TokenStats:
    input: int = 0
    output: int = 0
    total: int = 0
    cost: float = 0.0


@dataclass(slots=True)
class LatencyStats:
    avg: float = 0.0
    p95: float = 0.0
    p99: float = 0.0


@dataclass(slots=True)
class MetricsSnapshot:
    """Point-in-time aggregate for one session.

    A session with no recorded data is represented by the all-zero default
    instance, never by ``None``.
    """

    tokens: TokenStats = field(default_factory=TokenStats)
    latency: LatencyStats = field(default_factory=LatencyStats)
    error_rate: float = 0.0
    tool_counts: dict[str, int] = field(default_factory=dict)
    duration_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "tokens": {
                "input": self.tokens.input,
                "output": self.tokens.output,
                "total": self.tokens.total,
                "cost": self.tokens.cost,
            },
            "latency": {
                "avg": self.latency.avg,
                "p95": self.latency.p95,
                "p99": self.latency.p99,
            },
            "errorRate": self.error_rate,
            "toolCounts": dict(self.tool_counts),
            "duration": self.duration_ms,
        }
