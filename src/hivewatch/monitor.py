"""SessionMonitor -- composes discovery, metrics and hierarchy.

The three engine components are lock-free.  The monitor owns one of each and
serialises every call through a single lock, so discovery polling and live
event ingestion may run on different threads.  The external discovery call
itself runs outside the lock; only reconciling its result is locked.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Any, Callable

from hivewatch.config.schema import HivewatchConfig
from hivewatch.discovery.reconciler import discover_sessions
from hivewatch.discovery.registry import ReconcileResult, SessionRegistry
from hivewatch.discovery.sources import ProcessSource, TmuxSource
from hivewatch.discovery.types import DiscoveredSession
from hivewatch.errors import EventFormatError
from hivewatch.events import HookEvent, HookEventType, parse_hook_event, spawned_session_id
from hivewatch.hierarchy.tracker import HierarchyTracker
from hivewatch.hierarchy.types import HierarchySnapshot
from hivewatch.metrics.collector import MetricsCollector
from hivewatch.metrics.types import MetricsSnapshot, ToolUse

logger = logging.getLogger(__name__)

#: Pre-tool-use events kept while awaiting their post event; oldest evicted first.
MAX_PENDING_TOOL_USES = 1000


class SessionMonitor:
    """In-process orchestrator over the telemetry engine.

    Parameters:
        source: Where discovery passes read process listings from.
        collector: Metrics collector; a fresh one is created when omitted.
        hierarchy: Hierarchy tracker; a fresh one is created when omitted.
        registry: Known-session registry; a fresh one is created when omitted.
        max_pending: Most pre-tool-use events held awaiting their post
            event.  Beyond it the oldest is dropped and its post event is
            timed from its own ``duration`` or recorded as 0 ms.
    """

    def __init__(
        self,
        source: ProcessSource | None = None,
        *,
        collector: MetricsCollector | None = None,
        hierarchy: HierarchyTracker | None = None,
        registry: SessionRegistry | None = None,
        max_pending: int = MAX_PENDING_TOOL_USES,
    ) -> None:
        if max_pending < 1:
            raise ValueError(f"max_pending must be positive, got {max_pending}")
        self._source = source or TmuxSource()
        self._collector = collector or MetricsCollector()
        self._hierarchy = hierarchy or HierarchyTracker()
        self._registry = registry or SessionRegistry()
        self._lock = threading.Lock()
        # toolUseId -> pre_tool_use event awaiting its post event
        self._pending: OrderedDict[str, HookEvent] = OrderedDict()
        self._max_pending = max_pending
        self._new_session_callbacks: list[Callable[[DiscoveredSession], Any]] = []

    @classmethod
    def from_config(cls, config: HivewatchConfig) -> SessionMonitor:
        return cls(
            TmuxSource(
                binary=config.discovery.tmux_binary,
                timeout=config.discovery.timeout_seconds,
            ),
            collector=MetricsCollector(latency_window=config.metrics.latency_window),
        )

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def on_new_session(self, callback: Callable[[DiscoveredSession], Any]) -> None:
        """Register a callback for sessions that appear for the first time."""
        self._new_session_callbacks.append(callback)

    def poll(self) -> ReconcileResult:
        """Run one discovery pass and reconcile it with known sessions."""
        discovered = discover_sessions(self._source)
        with self._lock:
            result = self._registry.reconcile(discovered)

        for session in result.new:
            for cb in self._new_session_callbacks:
                try:
                    cb(session)
                except Exception as exc:
                    logger.debug("New-session callback error: %s", exc)
        return result

    def known_sessions(self) -> list[DiscoveredSession]:
        with self._lock:
            return self._registry.known()

    # ------------------------------------------------------------------
    # Event ingestion
    # ------------------------------------------------------------------

    def ingest(self, raw: dict[str, Any]) -> bool:
        """Route one hook event.  Returns ``False`` if it was malformed."""
        try:
            event = parse_hook_event(raw)
        except EventFormatError as exc:
            logger.debug("Dropping hook event: %s", exc)
            return False
        with self._lock:
            self._route(event)
        return True

    def record_tool_use(self, session_id: str, data: ToolUse) -> None:
        with self._lock:
            self._collector.record_tool_use(session_id, data)

    def add_root(self, session_id: str) -> None:
        with self._lock:
            self._hierarchy.add_root(session_id)

    def add_child(
        self,
        parent_id: str,
        child_id: str,
        tool_use_id: str | None = None,
        *,
        description: str | None = None,
        subagent_type: str | None = None,
    ) -> bool:
        with self._lock:
            return self._hierarchy.add_child(
                parent_id,
                child_id,
                tool_use_id,
                description=description,
                subagent_type=subagent_type,
            )

    def mark_completed(self, session_id: str) -> None:
        with self._lock:
            self._hierarchy.mark_completed(session_id)

    def forget(self, session_id: str) -> None:
        """Drop metrics and the hierarchy subtree of *session_id*."""
        with self._lock:
            self._collector.clear_session(session_id)
            self._hierarchy.remove(session_id)
            self._drop_pending(session_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def metrics(self, session_id: str) -> MetricsSnapshot:
        with self._lock:
            return self._collector.get_metrics(session_id)

    def all_metrics(self) -> dict[str, MetricsSnapshot]:
        with self._lock:
            return self._collector.get_all_metrics()

    def hierarchy(self) -> HierarchySnapshot:
        with self._lock:
            return self._hierarchy.get_hierarchy()

    @property
    def pending_tool_uses(self) -> int:
        return len(self._pending)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _route(self, event: HookEvent) -> None:
        kind = event.type
        if kind == HookEventType.SESSION_START:
            self._hierarchy.add_root(event.session_id)
        elif kind == HookEventType.PRE_TOOL_USE:
            self._on_pre_tool_use(event)
        elif kind == HookEventType.POST_TOOL_USE:
            self._on_post_tool_use(event)
        elif kind == HookEventType.SESSION_END:
            self._hierarchy.mark_completed(event.session_id)
            self._drop_pending(event.session_id)

    def _drop_pending(self, session_id: str) -> None:
        for key in [k for k, v in self._pending.items() if v.session_id == session_id]:
            del self._pending[key]

    def _on_pre_tool_use(self, event: HookEvent) -> None:
        if event.tool_use_id:
            self._pending[event.tool_use_id] = event
            self._pending.move_to_end(event.tool_use_id)
            while len(self._pending) > self._max_pending:
                evicted, _ = self._pending.popitem(last=False)
                logger.debug("Evicting unmatched tool use %s", evicted)
        if not event.is_spawn:
            return
        if not event.tool_use_id:
            # Child id is derived from toolUseId; without one it would collide.
            logger.debug("Ignoring %s spawn without toolUseId in %s", event.tool, event.session_id)
            return
        description = event.tool_input.get("description")
        subagent_type = event.tool_input.get("subagent_type")
        self._hierarchy.add_child(
            event.session_id,
            spawned_session_id(event),
            event.tool_use_id,
            description=description if isinstance(description, str) else None,
            subagent_type=subagent_type if isinstance(subagent_type, str) else None,
        )

    def _on_post_tool_use(self, event: HookEvent) -> None:
        pre = self._pending.pop(event.tool_use_id, None) if event.tool_use_id else None
        duration = event.duration_ms
        if duration is None:
            if pre is not None and event.timestamp and pre.timestamp:
                duration = max(0.0, event.timestamp - pre.timestamp)
            else:
                duration = 0.0

        self._collector.record_tool_use(
            event.session_id,
            ToolUse(
                tool=event.tool or "unknown",
                duration_ms=duration,
                success=event.success,
                input_tokens=event.input_tokens,
                output_tokens=event.output_tokens,
            ),
        )
        if event.is_spawn and event.tool_use_id:
            self._hierarchy.mark_completed(spawned_session_id(event))
