"""Reconciliation of discovery passes against previously known sessions."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field

from hivewatch.discovery.types import DiscoveredSession

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ReconcileResult:
    """Outcome of reconciling one discovery pass."""

    new: list[DiscoveredSession] = field(default_factory=list)
    gone: list[DiscoveredSession] = field(default_factory=list)
    active: list[DiscoveredSession] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.new or self.gone)


class SessionRegistry:
    """Remembers discovered sessions keyed by their group handle.

    Reconciling the same listing twice is a no-op: identity follows the
    group, so a session keeps its first ``discovered_at`` for as long as the
    group keeps showing up.
    """

    def __init__(self) -> None:
        self._known: dict[str, DiscoveredSession] = {}

    def reconcile(self, discovered: list[DiscoveredSession]) -> ReconcileResult:
        result = ReconcileResult()
        seen: dict[str, DiscoveredSession] = {}

        for session in discovered:
            if session.group in seen:
                continue
            previous = self._known.get(session.group)
            if previous is None:
                result.new.append(session)
                current = session
            else:
                # Keep first-seen time, refresh pid/cwd/command.
                current = dataclasses.replace(session, discovered_at=previous.discovered_at)
                if current != previous:
                    logger.debug("Session %s changed: %s -> %s", session.group, previous, current)
            seen[session.group] = current

        for group, previous in self._known.items():
            if group not in seen:
                result.gone.append(previous)

        self._known = seen
        result.active = list(seen.values())
        if result.changed:
            logger.info(
                "Reconciled sessions: %d new, %d gone, %d active",
                len(result.new), len(result.gone), len(result.active),
            )
        return result

    def known(self) -> list[DiscoveredSession]:
        return list(self._known.values())

    def get(self, group: str) -> DiscoveredSession | None:
        return self._known.get(group)

    def forget(self, group: str) -> None:
        self._known.pop(group, None)

    def __contains__(self, group: object) -> bool:
        return group in self._known

    def __len__(self) -> int:
        return len(self._known)
