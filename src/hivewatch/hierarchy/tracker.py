"""Forest of parent/child agent spawn relationships.

Nodes are keyed by session id.  A parent -> children index is kept in sync
with every insertion, re-parent and removal so that both bottom-up
(:meth:`HierarchyTracker.get_ancestors`) and top-down
(:meth:`HierarchyTracker.get_descendants`) walks are cheap.

Re-parenting: a repeated :meth:`HierarchyTracker.add_child` for an existing
id moves the node, detaching it from its old parent's child set first.  A
move that would put a node under itself or one of its descendants is
refused.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from typing import Callable

from hivewatch.hierarchy.types import AgentNode, HierarchySnapshot

logger = logging.getLogger(__name__)


class HierarchyTracker:
    """Tracks the tree structure of spawned subagents.

    Parameters:
        clock: Wall-clock time source in epoch seconds, used for
            ``spawned_at`` / ``completed_at``.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._nodes: dict[str, AgentNode] = {}
        self._children: dict[str, dict[str, None]] = {}  # parent -> ordered child ids

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_root(self, session_id: str) -> None:
        """Register *session_id* as a root; no-op if it is already known."""
        if session_id in self._nodes:
            return
        self._nodes[session_id] = AgentNode(session_id=session_id, spawned_at=self._clock())

    def add_child(
        self,
        parent_id: str,
        child_id: str,
        tool_use_id: str | None = None,
        *,
        description: str | None = None,
        subagent_type: str | None = None,
    ) -> bool:
        """Record that *parent_id* spawned *child_id*.

        An unseen parent is created as a root.  An existing child record is
        replaced and moved under the new parent.  Returns ``False`` when the
        move is refused because it would create a cycle.
        """
        if child_id == parent_id or parent_id in self._descendant_ids(child_id):
            logger.warning(
                "Refusing to place %s under %s: would create a cycle", child_id, parent_id
            )
            return False

        self.add_root(parent_id)

        previous = self._nodes.get(child_id)
        if previous is not None and previous.parent_id is not None:
            self._detach(child_id, previous.parent_id)
            if previous.parent_id != parent_id:
                logger.debug(
                    "Re-parenting %s: %s -> %s", child_id, previous.parent_id, parent_id
                )

        self._nodes[child_id] = AgentNode(
            session_id=child_id,
            parent_id=parent_id,
            tool_use_id=tool_use_id,
            description=description,
            subagent_type=subagent_type,
            spawned_at=self._clock(),
        )
        self._children.setdefault(parent_id, {})[child_id] = None
        return True

    def mark_completed(self, session_id: str) -> None:
        node = self._nodes.get(session_id)
        if node is not None:
            node.completed_at = self._clock()

    def remove(self, session_id: str) -> None:
        """Remove *session_id* and its entire subtree."""
        node = self._nodes.get(session_id)
        if node is None:
            return

        # Collect before mutating anything.
        descendants = self._descendant_ids(session_id)
        for sid in descendants:
            self._nodes.pop(sid, None)
            self._children.pop(sid, None)

        self._nodes.pop(session_id, None)
        self._children.pop(session_id, None)
        if node.parent_id is not None:
            self._detach(session_id, node.parent_id)

    def clear(self) -> None:
        self._nodes.clear()
        self._children.clear()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def has(self, session_id: str) -> bool:
        return session_id in self._nodes

    def get_node(self, session_id: str) -> AgentNode | None:
        return self._nodes.get(session_id)

    def get_parent(self, session_id: str) -> AgentNode | None:
        node = self._nodes.get(session_id)
        if node is None or node.parent_id is None:
            return None
        return self._nodes.get(node.parent_id)

    def get_children(self, session_id: str) -> list[AgentNode]:
        child_ids = self._children.get(session_id)
        if not child_ids:
            return []
        return [self._nodes[cid] for cid in child_ids if cid in self._nodes]

    def get_ancestors(self, session_id: str) -> list[AgentNode]:
        """Parent, grandparent, ... up to the root, nearest first.

        Stops at a dangling parent id.
        """
        ancestors: list[AgentNode] = []
        seen = {session_id}
        current = self._nodes.get(session_id)
        while current is not None and current.parent_id is not None:
            if current.parent_id in seen:
                break
            parent = self._nodes.get(current.parent_id)
            if parent is None:
                break
            ancestors.append(parent)
            seen.add(parent.session_id)
            current = parent
        return ancestors

    def get_descendants(self, session_id: str) -> list[AgentNode]:
        """Children, grandchildren, ... in breadth-first discovery order."""
        return [self._nodes[sid] for sid in self._descendant_ids(session_id)]

    def get_depth(self, session_id: str) -> int:
        return len(self.get_ancestors(session_id))

    def get_roots(self) -> list[AgentNode]:
        return [n for n in self._nodes.values() if n.parent_id is None]

    def get_hierarchy(self) -> HierarchySnapshot:
        return HierarchySnapshot(
            nodes={sid: node.copy() for sid, node in self._nodes.items()},
            roots=[n.session_id for n in self.get_roots()],
        )

    def __len__(self) -> int:
        return len(self._nodes)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _descendant_ids(self, session_id: str) -> list[str]:
        found: list[str] = []
        visited = {session_id}
        queue = deque(c.session_id for c in self.get_children(session_id))
        while queue:
            sid = queue.popleft()
            if sid in visited:
                continue
            visited.add(sid)
            found.append(sid)
            queue.extend(c.session_id for c in self.get_children(sid))
        return found

    def _detach(self, child_id: str, parent_id: str) -> None:
        siblings = self._children.get(parent_id)
        if siblings is None:
            return
        siblings.pop(child_id, None)
        if not siblings:
            del self._children[parent_id]
