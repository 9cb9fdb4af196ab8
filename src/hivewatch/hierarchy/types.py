"""Hierarchy node and snapshot types."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(slots=True)
class AgentNode:
    """One session in the spawn forest.

    ``parent_id is None`` marks a root.  ``tool_use_id`` is the id of the
    tool invocation that spawned the session (``None`` for roots).
    """

    session_id: str
    parent_id: str | None = None
    tool_use_id: str | None = None
    description: str | None = None
    subagent_type: str | None = None
    spawned_at: float = 0.0
    completed_at: float | None = None

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    def copy(self) -> AgentNode:
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "parentId": self.parent_id,
            "toolUseId": self.tool_use_id,
            "description": self.description,
            "subagentType": self.subagent_type,
            "spawnedAt": int(self.spawned_at * 1000),
            "completedAt": int(self.completed_at * 1000) if self.completed_at is not None else None,
        }


@dataclass(slots=True)
class HierarchySnapshot:
    """Detached copy of the whole forest, suitable for serialisation."""

    nodes: dict[str, AgentNode] = field(default_factory=dict)
    roots: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": {sid: node.to_dict() for sid, node in self.nodes.items()},
            "roots": list(self.roots),
        }
