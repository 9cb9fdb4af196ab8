"""Tests for nearest-rank percentile."""

from __future__ import annotations

import pytest

from hivewatch.metrics.stats import percentile


def test_empty_sample_is_zero() -> None:
    assert percentile([], 95) == 0.0


def test_input_order_does_not_matter() -> None:
    assert percentile([300, 100, 200], 50) == 200


@pytest.mark.parametrize(
    ("p", "expected"),
    [(0, 10), (20, 10), (21, 20), (50, 30), (95, 50), (100, 50)],
)
def test_nearest_rank(p: float, expected: float) -> None:
    assert percentile([10, 20, 30, 40, 50], p) == expected
