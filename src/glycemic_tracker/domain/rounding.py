"""Rounding shared by goal and statistics calculations."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up (2.5 -> 3)."""
    return math.floor(value + 0.5)
