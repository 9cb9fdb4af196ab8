"""Small statistics helpers over latency samples."""

from __future__ import annotations

import math
from collections.abc import Iterable


def percentile(values: Iterable[float], p: float) -> float:
    """Nearest-rank percentile of *values* (0 for an empty sample).

    ``rank = ceil(p/100 * n)``; the result is the ``rank - 1``-th element of
    the ascending sample, clamped to the valid index range.  No
    interpolation.
    """
    ordered = sorted(values)
    n = len(ordered)
    if n == 0:
        return 0.0
    rank = math.ceil(p * n / 100)
    index = min(max(rank - 1, 0), n - 1)
    return ordered[index]
