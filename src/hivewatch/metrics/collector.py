"""Per-session streaming aggregation of tool-use observations.

Usage::

    collector = MetricsCollector()
    collector.record_tool_use("sess-1", ToolUse(tool="Read", duration_ms=120, success=True,
                                                input_tokens=900, output_tokens=40))
    snapshot = collector.get_metrics("sess-1")
    snapshot.latency.p95, snapshot.tokens.cost

The collector performs no locking of its own; concurrent writers must be
serialised by the owner (see :class:`hivewatch.monitor.SessionMonitor`).
"""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable

from hivewatch.metrics.stats import percentile
from hivewatch.metrics.types import (
    DEFAULT_PRICING,
    LatencyStats,
    MetricsSnapshot,
    TokenStats,
    ToolUse,
)

logger = logging.getLogger(__name__)

#: Default number of latency samples retained per session for percentiles.
DEFAULT_LATENCY_WINDOW = 10_000


def _as_count(value: Any) -> int | float:
    """Coerce an optional numeric field to a non-negative contribution."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value if value > 0 else 0


@dataclass(slots=True)
class SessionMetrics:
    """Running totals for one session."""

    started_at: float
    durations: deque[float]
    input_tokens: int = 0
    output_tokens: int = 0
    duration_sum: float = 0.0
    error_count: int = 0
    total_count: int = 0
    tool_counts: dict[str, int] = field(default_factory=dict)


class MetricsCollector:
    """Folds :class:`ToolUse` observations into per-session statistics.

    Parameters:
        latency_window: Latency samples kept per session for p95/p99.  The
            oldest samples are evicted first.  ``None`` keeps every sample.
            The average always covers every observation.
        clock: Monotonic time source in seconds, used for session uptime.
    """

    def __init__(
        self,
        *,
        latency_window: int | None = DEFAULT_LATENCY_WINDOW,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if latency_window is not None and latency_window < 1:
            raise ValueError(f"latency_window must be positive, got {latency_window}")
        self._latency_window = latency_window
        self._clock = clock
        self._sessions: dict[str, SessionMetrics] = {}

    @property
    def latency_window(self) -> int | None:
        return self._latency_window

    def record_tool_use(self, session_id: str, data: ToolUse) -> None:
        """Fold one tool use into *session_id*'s running statistics."""
        session = self._sessions.get(session_id)
        if session is None:
            session = SessionMetrics(
                started_at=self._clock(),
                durations=deque(maxlen=self._latency_window),
            )
            self._sessions[session_id] = session
            logger.debug("Tracking metrics for session %s", session_id)

        session.input_tokens += _as_count(data.input_tokens)
        session.output_tokens += _as_count(data.output_tokens)

        duration = data.duration_ms
        if isinstance(duration, bool) or not isinstance(duration, (int, float)):
            duration = 0
        session.durations.append(duration)
        session.duration_sum += duration

        session.total_count += 1
        if not data.success:
            session.error_count += 1

        session.tool_counts[data.tool] = session.tool_counts.get(data.tool, 0) + 1

    def get_metrics(self, session_id: str) -> MetricsSnapshot:
        """Compute a fresh snapshot; unknown sessions get the all-zero one."""
        session = self._sessions.get(session_id)
        if session is None:
            return MetricsSnapshot()

        samples = list(session.durations)
        avg = session.duration_sum / session.total_count if session.total_count else 0.0
        error_rate = (
            session.error_count / session.total_count * 100 if session.total_count else 0.0
        )

        return MetricsSnapshot(
            tokens=TokenStats(
                input=session.input_tokens,
                output=session.output_tokens,
                total=session.input_tokens + session.output_tokens,
                cost=DEFAULT_PRICING.estimate_cost(session.input_tokens, session.output_tokens),
            ),
            latency=LatencyStats(
                avg=avg,
                p95=percentile(samples, 95),
                p99=percentile(samples, 99),
            ),
            error_rate=error_rate,
            tool_counts=dict(session.tool_counts),
            duration_ms=max(0.0, (self._clock() - session.started_at) * 1000),
        )

    def get_all_metrics(self) -> dict[str, MetricsSnapshot]:
        return {sid: self.get_metrics(sid) for sid in self._sessions}

    def has(self, session_id: str) -> bool:
        return session_id in self._sessions

    def session_ids(self) -> list[str]:
        return list(self._sessions)

    def clear_session(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def clear_all(self) -> None:
        self._sessions.clear()
