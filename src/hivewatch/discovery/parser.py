"""Parsing of line-oriented process listings."""

from __future__ import annotations

from hivewatch.discovery.types import PaneLine, ParsedLine, RejectedLine


def parse_pane_line(line: str) -> ParsedLine:
    """Parse ``PID CWD... COMMAND`` into a :class:`PaneLine`.

    The first token is the PID and the last token the command; everything in
    between is the working directory, which may itself contain spaces.
    Malformed input yields a :class:`RejectedLine` rather than raising.
    """
    parts = line.split()
    if len(parts) < 3:
        return RejectedLine(line=line, reason="expected at least 3 fields")

    try:
        pid = int(parts[0], 10)
    except ValueError:
        return RejectedLine(line=line, reason=f"invalid pid {parts[0]!r}")

    command = parts[-1]
    cwd = " ".join(parts[1:-1]).strip()
    if not cwd:
        return RejectedLine(line=line, reason="empty working directory")

    return PaneLine(pid=pid, cwd=cwd, command=command)


def split_lines(text: str) -> list[str]:
    """Split command output into non-empty, stripped lines."""
    return [ln.strip() for ln in text.splitlines() if ln.strip()]
