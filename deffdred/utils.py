"""
Utility functions for grid mechanics
"""

from __future__ import annotations
import math
from typing import Optional, Tuple

import numpy as np


def clamp(x: int, lo: int, hi: int) -> int:
    """Clamp value between low and high bounds"""
    return lo if x < lo else hi if x > hi else x


def sign(x: int) -> int:
    """Sign of x as -1, 0 or 1"""
    return (x > 0) - (x < 0)


def manhattan(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    """Manhattan distance between two cells"""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def frames_for_ms(ms: int, frame_ms: int) -> int:
    """Number of ticks covering a duration, rounded up"""
    return math.ceil(ms / frame_ms)


def shape_cells(shape, x: int, y: int):
    """Occupied cells of a character shape anchored at (x, y)"""
    for dy, row in enumerate(shape):
        for dx, ch in enumerate(row):
            if ch != " ":
                yield x + dx, y + dy


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create the random source for one run"""
    return np.random.default_rng(seed)
