"""Hook event shapes consumed by :class:`~hivewatch.monitor.SessionMonitor`.

Claude Code and Codex hooks emit JSON objects with a ``type`` tag and a
``sessionId``.  Only the fields the monitor routes on are modelled; the raw
dict is kept on the event for anything else.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from hivewatch.errors import EventFormatError

#: Tool whose invocation spawns a subagent.
SPAWN_TOOL = "Task"


class HookEventType(StrEnum):
    PRE_TOOL_USE = "pre_tool_use"
    POST_TOOL_USE = "post_tool_use"
    STOP = "stop"
    SUBAGENT_STOP = "subagent_stop"
    SESSION_START = "session_start"
    SESSION_END = "session_end"
    SESSION_DISCOVERED = "session_discovered"
    USER_PROMPT_SUBMIT = "user_prompt_submit"
    NOTIFICATION = "notification"
    PRE_COMPACT = "pre_compact"
    AGENT_TURN_COMPLETE = "agent_turn_complete"
    APPROVAL_REQUESTED = "approval_requested"


@dataclass(slots=True)
class HookEvent:
    """A parsed hook event.  ``timestamp`` is in epoch milliseconds."""

    type: str
    session_id: str
    timestamp: float = 0.0
    cwd: str = ""
    tool: str = ""
    tool_use_id: str = ""
    tool_input: dict[str, Any] = field(default_factory=dict)
    tool_response: dict[str, Any] = field(default_factory=dict)
    success: bool = True
    duration_ms: float | None = None
    input_tokens: int | None = None
    output_tokens: int | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def is_spawn(self) -> bool:
        return self.tool == SPAWN_TOOL


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def parse_hook_event(raw: dict[str, Any]) -> HookEvent:
    """Build a :class:`HookEvent` from a decoded hook payload.

    Raises:
        EventFormatError: if ``type`` or ``sessionId`` is missing or empty.
    """
    if not isinstance(raw, dict):
        raise EventFormatError(f"Hook event must be an object, got {type(raw).__name__}")
    event_type = raw.get("type")
    if not isinstance(event_type, str) or not event_type:
        raise EventFormatError("Hook event has no type", field_name="type")
    session_id = raw.get("sessionId")
    if not isinstance(session_id, str) or not session_id:
        raise EventFormatError(f"{event_type} event has no sessionId", field_name="sessionId")

    usage = _mapping(raw.get("usage"))
    input_tokens = _number(raw.get("inputTokens"))
    if input_tokens is None:
        input_tokens = _number(usage.get("input_tokens"))
    output_tokens = _number(raw.get("outputTokens"))
    if output_tokens is None:
        output_tokens = _number(usage.get("output_tokens"))

    return HookEvent(
        type=event_type,
        session_id=session_id,
        timestamp=_number(raw.get("timestamp")) or 0.0,
        cwd=str(raw.get("cwd") or ""),
        tool=str(raw.get("tool") or ""),
        tool_use_id=str(raw.get("toolUseId") or ""),
        tool_input=_mapping(raw.get("toolInput")),
        tool_response=_mapping(raw.get("toolResponse")),
        success=raw.get("success", True) is not False,
        duration_ms=_number(raw.get("duration")),
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        raw=raw,
    )


def spawned_session_id(event: HookEvent) -> str:
    """Id given to the subagent a ``Task`` invocation spawned.

    Hooks do not report the child's own id, so it is derived from the parent
    session and the tool-use id, which the pre and post events both carry.
    """
    return f"{event.session_id}:{event.tool_use_id}"
