"""Discovery data types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

#: Agent commands recognised in a pane's current-command column.
AGENT_COMMANDS: frozenset[str] = frozenset({"claude", "codex"})


@dataclass(frozen=True, slots=True)
class DiscoveredSession:
    """An agent process found running inside a terminal-multiplexer group.

    Created fresh on every discovery pass and never mutated.
    """

    group: str
    command: str
    cwd: str
    pid: int | None = None
    discovered_at: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "tmuxSession": self.group,
            "command": self.command,
            "cwd": self.cwd,
            "pid": self.pid,
            "discoveredAt": int(self.discovered_at * 1000),
        }


@dataclass(frozen=True, slots=True)
class PaneLine:
    """A well-formed ``PID CWD COMMAND`` line."""

    pid: int
    cwd: str
    command: str

    @property
    def is_agent(self) -> bool:
        return self.command in AGENT_COMMANDS


@dataclass(frozen=True, slots=True)
class RejectedLine:
    """A line that could not be parsed, with the reason it was dropped."""

    line: str
    reason: str


ParsedLine = PaneLine | RejectedLine
