"""Discovery of agent sessions running inside terminal-multiplexer groups."""

from __future__ import annotations

from hivewatch.discovery.parser import parse_pane_line
from hivewatch.discovery.reconciler import discover_sessions, find_agent_pane
from hivewatch.discovery.registry import ReconcileResult, SessionRegistry
from hivewatch.discovery.sources import ProcessSource, TmuxSource
from hivewatch.discovery.types import (
    AGENT_COMMANDS,
    DiscoveredSession,
    PaneLine,
    RejectedLine,
)

__all__ = [
    "AGENT_COMMANDS",
    "DiscoveredSession",
    "PaneLine",
    "ProcessSource",
    "ReconcileResult",
    "RejectedLine",
    "SessionRegistry",
    "TmuxSource",
    "discover_sessions",
    "find_agent_pane",
    "parse_pane_line",
]
