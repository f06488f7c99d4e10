"""
Closed real intervals used for ray parameter ranges and color clamping.
"""

from __future__ import annotations
from dataclasses import dataclass
import math


@dataclass(frozen=True)
class Interval:
    """An ordered range [min, max]. An interval with min > max is empty."""
    min: float = math.inf
    max: float = -math.inf

    def size(self) -> float:
        return self.max - self.min

    def contains(self, x: float) -> bool:
        """True if min <= x <= max."""
        return self.min <= x <= self.max

    def surrounds(self, x: float) -> bool:
        """True if min < x < max."""
        return self.min < x < self.max

    def clamp(self, x: float) -> float:
        if x < self.min:
            return self.min
        if x > self.max:
            return self.max
        return x

    def with_max(self, new_max: float) -> Interval:
        """Return a copy of this interval with the upper bound replaced."""
        return Interval(self.min, new_max)

    def is_empty(self) -> bool:
        return self.min > self.max


EMPTY = Interval(math.inf, -math.inf)
UNIVERSE = Interval(-math.inf, math.inf)

# Range that linear color channels are clamped to before quantizing
INTENSITY = Interval(0.0, 0.999)
