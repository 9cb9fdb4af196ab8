"""Parent/child spawn hierarchy of agent sessions."""

from __future__ import annotations

from hivewatch.hierarchy.tracker import HierarchyTracker
from hivewatch.hierarchy.types import AgentNode, HierarchySnapshot

__all__ = ["AgentNode", "HierarchySnapshot", "HierarchyTracker"]
