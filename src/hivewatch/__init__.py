"""hivewatch -- telemetry and spawn hierarchy for running AI-agent sessions."""

from __future__ import annotations

from hivewatch.discovery import DiscoveredSession, SessionRegistry, TmuxSource, discover_sessions
from hivewatch.hierarchy import AgentNode, HierarchySnapshot, HierarchyTracker
from hivewatch.metrics import MetricsCollector, MetricsSnapshot, ToolUse
from hivewatch.monitor import SessionMonitor

__version__ = "0.1.0"

__all__ = [
    "AgentNode",
    "DiscoveredSession",
    "HierarchySnapshot",
    "HierarchyTracker",
    "MetricsCollector",
    "MetricsSnapshot",
    "SessionMonitor",
    "SessionRegistry",
    "TmuxSource",
    "ToolUse",
    "discover_sessions",
]
