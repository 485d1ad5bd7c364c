"""Small numeric helpers shared by the analyzers and the scoring engine."""

from __future__ import annotations

import math
import statistics
from typing import Sequence


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp *value* into ``[low, high]``."""
    return max(low, min(high, value))


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with ties going up (``2.5 -> 3``, ``-2.5 -> -2``).

    Python's :func:`round` uses banker's rounding, which would make scores at
    exact .5 boundaries drift downwards.
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Population standard deviation divided by the mean (0 for a zero mean)."""
    if not values:
        return 0.0
    mean = statistics.fmean(values)
    if mean == 0:
        return 0.0
    return statistics.pstdev(values) / mean
