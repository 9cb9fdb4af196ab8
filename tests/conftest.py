"""Global test fixtures for hivewatch."""

from __future__ import annotations

import pytest

from tests.helpers import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    """Provide a manually advanced clock starting at t=1000s."""
    return FakeClock()
