"""Shared test helpers for the hivewatch test suite."""

from __future__ import annotations

from tests.helpers.fakes import FakeClock, FakeSource

__all__ = ["FakeClock", "FakeSource"]
