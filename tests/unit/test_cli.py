from __future__ import annotations

import json
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from hivewatch.cli import main


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("hivewatch.cli.setup_logging", lambda **_: None)


def _fake_tmux(cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess[bytes]:
    if cmd[1] == "list-sessions":
        out = "agent\nshell\n"
    elif cmd[3] == "agent":
        out = "321 /home/dev/app claude\n"
    else:
        out = "322 /home/dev zsh\n"
    return subprocess.CompletedProcess(args=cmd, returncode=0, stdout=out.encode(), stderr=b"")


def _write_events(path: Path) -> None:
    events = [
        {"type": "session_start", "sessionId": "s1", "source": "startup"},
        {"type": "pre_tool_use", "sessionId": "s1", "tool": "Task", "toolUseId": "t1",
         "timestamp": 1000, "toolInput": {"description": "explore", "subagent_type": "Explore"}},
        {"type": "post_tool_use", "sessionId": "s1", "tool": "Task", "toolUseId": "t1",
         "timestamp": 1600, "success": True, "inputTokens": 1000, "outputTokens": 100},
        {"type": "post_tool_use", "sessionId": "s1", "tool": "Read", "toolUseId": "t2",
         "duration": 200, "success": False},
    ]
    lines = [json.dumps(e) for e in events] + ["{not json", "", json.dumps({"type": "stop"})]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


@patch("hivewatch.discovery.sources.subprocess.run", side_effect=_fake_tmux)
def test_discover_json(mock_run: MagicMock) -> None:
    result = CliRunner().invoke(main, ["discover", "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert [d["tmuxSession"] for d in data] == ["agent"]
    assert data[0]["pid"] == 321
    assert data[0]["cwd"] == "/home/dev/app"


@patch("hivewatch.discovery.sources.subprocess.run", side_effect=FileNotFoundError("tmux"))
def test_discover_without_tmux(mock_run: MagicMock) -> None:
    result = CliRunner().invoke(main, ["discover"])
    assert result.exit_code == 0
    assert "No agent sessions found" in result.output


@patch("hivewatch.discovery.sources.subprocess.run", side_effect=_fake_tmux)
def test_discover_table(mock_run: MagicMock) -> None:
    result = CliRunner().invoke(main, ["discover"])
    assert result.exit_code == 0
    assert "agent" in result.output
    assert "shell" not in result.output


def test_replay_json(tmp_path: Path) -> None:
    events = tmp_path / "events.jsonl"
    _write_events(events)
    result = CliRunner().invoke(main, ["replay", str(events), "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)

    assert data["events"] == {"accepted": 4, "dropped": 2}
    m = data["metrics"]["s1"]
    assert m["toolCounts"] == {"Task": 1, "Read": 1}
    assert m["tokens"]["total"] == 1100
    assert m["latency"]["avg"] == pytest.approx(400)
    assert m["errorRate"] == pytest.approx(50)
    assert data["hierarchy"]["roots"] == ["s1"]
    child = data["hierarchy"]["nodes"]["s1:t1"]
    assert child["parentId"] == "s1"
    assert child["subagentType"] == "Explore"
    assert child["completedAt"] is not None


def test_replay_tables(tmp_path: Path) -> None:
    events = tmp_path / "events.jsonl"
    _write_events(events)
    result = CliRunner().invoke(main, ["replay", str(events)])
    assert result.exit_code == 0, result.output
    assert "4 event(s) ingested, 2 dropped" in result.output
    assert "Hierarchy" in result.output


@patch("hivewatch.discovery.sources.subprocess.run", side_effect=_fake_tmux)
def test_watch_reports_new_sessions(mock_run: MagicMock) -> None:
    result = CliRunner().invoke(main, ["watch", "--iterations", "2", "--interval", "0"])
    assert result.exit_code == 0, result.output
    assert result.output.count("+ agent") == 1


def test_bad_config_is_a_usage_error(tmp_path: Path) -> None:
    cfg = tmp_path / "hivewatch.yaml"
    cfg.write_text("discovery:\n  timeout_seconds: -5\n", encoding="utf-8")
    result = CliRunner().invoke(main, ["--config", str(cfg), "discover"])
    assert result.exit_code == 1
    assert "discovery.timeout_seconds" in result.output
