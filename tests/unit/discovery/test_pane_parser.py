"""Tests for pane line parsing."""

from __future__ import annotations

import pytest

from hivewatch.discovery.parser import parse_pane_line, split_lines
from hivewatch.discovery.types import PaneLine, RejectedLine


class TestParsePaneLine:
    def test_simple_line(self) -> None:
        parsed = parse_pane_line("12345 /Users/dev/project claude")
        assert parsed == PaneLine(pid=12345, cwd="/Users/dev/project", command="claude")
        assert parsed.is_agent

    def test_cwd_with_spaces_is_joined(self) -> None:
        parsed = parse_pane_line("42 /Users/dev/My Projects/app codex")
        assert isinstance(parsed, PaneLine)
        assert parsed.cwd == "/Users/dev/My Projects/app"
        assert parsed.command == "codex"

    def test_non_agent_command_parses_but_is_not_agent(self) -> None:
        parsed = parse_pane_line("200 /home/b zsh")
        assert isinstance(parsed, PaneLine)
        assert not parsed.is_agent

    def test_command_match_is_case_sensitive(self) -> None:
        parsed = parse_pane_line("1 /tmp Claude")
        assert isinstance(parsed, PaneLine)
        assert not parsed.is_agent

    @pytest.mark.parametrize(
        "line",
        [
            "",
            "12345",
            "12345 claude",
            "abc /home/a claude",
            "12.5 /home/a claude",
        ],
    )
    def test_malformed_lines_are_rejected(self, line: str) -> None:
        parsed = parse_pane_line(line)
        assert isinstance(parsed, RejectedLine)
        assert parsed.line == line
        assert parsed.reason

    def test_rejection_reason_names_bad_pid(self) -> None:
        parsed = parse_pane_line("pid /home/a claude")
        assert isinstance(parsed, RejectedLine)
        assert "pid" in parsed.reason


def test_split_lines_drops_blanks() -> None:
    assert split_lines("a\n\n  b  \n\n") == ["a", "b"]
    assert split_lines("") == []
