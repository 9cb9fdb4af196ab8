"""One discovery pass: list groups, inspect each for an agent command."""

from __future__ import annotations

import logging
import time
from typing import Callable

from hivewatch.discovery.parser import parse_pane_line, split_lines
from hivewatch.discovery.sources import ProcessSource
from hivewatch.discovery.types import DiscoveredSession, PaneLine
from hivewatch.errors import DiscoveryError

logger = logging.getLogger(__name__)


def find_agent_pane(text: str) -> PaneLine | None:
    """Return the first pane line running a recognised agent command."""
    for line in split_lines(text):
        parsed = parse_pane_line(line)
        if not isinstance(parsed, PaneLine):
            logger.debug("Skipping pane line %r: %s", parsed.line, parsed.reason)
            continue
        if parsed.is_agent:
            return parsed
    return None


def discover_sessions(
    source: ProcessSource,
    *,
    clock: Callable[[], float] = time.time,
) -> list[DiscoveredSession]:
    """Run a discovery pass against *source*.

    Returns one :class:`DiscoveredSession` per group whose panes include a
    recognised agent, in the order the groups were listed.  A failing group
    listing yields ``[]``; a failing pane listing skips only that group.
    """
    try:
        groups = split_lines(source.list_groups())
    except DiscoveryError as exc:
        logger.debug("Group listing unavailable: %s", exc)
        return []

    discovered_at = clock()
    sessions: list[DiscoveredSession] = []
    for group in groups:
        try:
            text = source.list_processes(group)
        except DiscoveryError as exc:
            # Group may have closed between the two queries.
            logger.debug("Skipping group %s: %s", group, exc)
            continue

        pane = find_agent_pane(text)
        if pane is None:
            continue
        sessions.append(
            DiscoveredSession(
                group=group,
                command=pane.command,
                cwd=pane.cwd,
                pid=pane.pid,
                discovered_at=discovered_at,
            )
        )

    logger.debug("Discovery pass found %d session(s) in %d group(s)", len(sessions), len(groups))
    return sessions
