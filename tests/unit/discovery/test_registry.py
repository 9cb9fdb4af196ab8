"""Tests for SessionRegistry reconciliation."""

from __future__ import annotations

from hivewatch.discovery.registry import SessionRegistry
from hivewatch.discovery.types import DiscoveredSession


def _s(group: str, *, pid: int = 1, command: str = "claude", at: float = 100.0) -> DiscoveredSession:
    return DiscoveredSession(group=group, command=command, cwd=f"/w/{group}", pid=pid, discovered_at=at)


class TestReconcile:
    def test_first_pass_everything_is_new(self) -> None:
        registry = SessionRegistry()
        result = registry.reconcile([_s("a"), _s("b")])
        assert [s.group for s in result.new] == ["a", "b"]
        assert result.gone == []
        assert result.changed
        assert len(registry) == 2

    def test_repeated_pass_is_idempotent(self) -> None:
        registry = SessionRegistry()
        registry.reconcile([_s("a"), _s("b")])
        result = registry.reconcile([_s("a", at=200.0), _s("b", at=200.0)])
        assert result.new == []
        assert result.gone == []
        assert not result.changed
        assert [s.discovered_at for s in registry.known()] == [100.0, 100.0]

    def test_vanished_sessions_are_reported_gone(self) -> None:
        registry = SessionRegistry()
        registry.reconcile([_s("a"), _s("b")])
        result = registry.reconcile([_s("b")])
        assert [s.group for s in result.gone] == ["a"]
        assert "a" not in registry
        assert "b" in registry

    def test_changed_pid_keeps_identity(self) -> None:
        registry = SessionRegistry()
        registry.reconcile([_s("a", pid=1)])
        result = registry.reconcile([_s("a", pid=2, command="codex", at=300.0)])
        assert result.new == []
        current = registry.get("a")
        assert current is not None
        assert current.pid == 2
        assert current.command == "codex"
        assert current.discovered_at == 100.0

    def test_duplicate_groups_in_one_pass_collapse(self) -> None:
        registry = SessionRegistry()
        result = registry.reconcile([_s("a", pid=1), _s("a", pid=2)])
        assert len(result.new) == 1
        assert [s.pid for s in result.active] == [1]

    def test_reappearing_session_is_new_again(self) -> None:
        registry = SessionRegistry()
        registry.reconcile([_s("a")])
        registry.reconcile([])
        result = registry.reconcile([_s("a", at=500.0)])
        assert [s.discovered_at for s in result.new] == [500.0]

    def test_forget(self) -> None:
        registry = SessionRegistry()
        registry.reconcile([_s("a")])
        registry.forget("a")
        registry.forget("missing")
        assert len(registry) == 0
        assert registry.reconcile([_s("a")]).new
