"""Numeric helpers."""

from __future__ import annotations

import numpy as np


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, resolving .5 away from zero.

    Python's built-in ``round`` uses banker's rounding, so ``round(0.5) == 0``;
    published index values expect ``1``.
    """
    return int(np.sign(value) * np.floor(abs(value) + 0.5))
