"""Seedable random context and the integer dimension samplers built on it.

Every sampling call in the pipeline receives the context explicitly; nothing
reads the module-level ``random`` state once generation has started.
"""
from __future__ import annotations

import math
import random
from typing import List, Optional


class RandomContext(random.Random):
    """``random.Random`` that remembers its seed and can be cloned mid-stream."""

    def __init__(self, seed: Optional[int] = None):
        super().__init__(seed)
        self.seed_value = seed

    def clone(self) -> "RandomContext":
        twin = RandomContext(self.seed_value)
        twin.setstate(self.getstate())
        return twin


class UniformIntSampler:
    def __init__(self, low: int, high: int):
        self.low = low
        self.high = high

    def sample(self, rng: random.Random) -> int:
        if self.high <= self.low:
            return self.low
        return rng.randrange(self.low, self.high)


class NormalIntSampler:
    """Bounded discrete normal distribution over the integers in ``[low, high)``.

    The pdf is evaluated at each integer, accumulated into a cumulative table
    and inverted with a single uniform draw. Without explicit parameters the
    mean sits in the middle of the range and the stddev is half the population
    stddev of the range, which keeps most samples away from the extremes.
    """

    def __init__(self, low: int, high: int, mean: Optional[float] = None, stddev: Optional[float] = None):
        self.low = low
        self.high = high
        self.values: List[int] = list(range(low, high))
        if mean is None:
            mean = low + (high - low) // 2
        if stddev is None:
            squared = sum((i - mean) ** 2 for i in self.values)
            stddev = math.sqrt(squared / (high - low + 1)) * 0.5 if self.values else 0.0
        self.mean = float(mean)
        self.stddev = float(stddev)
        self.cumulative: List[float] = []
        total = 0.0
        if self.stddev > 0:
            for i in self.values:
                total += self._pdf(i)
                self.cumulative.append(total)

    def _pdf(self, x: int) -> float:
        variance = self.stddev * self.stddev
        return math.exp(-((x - self.mean) ** 2) / (2 * variance)) / math.sqrt(2 * math.pi * variance)

    def _clamped_mean(self) -> int:
        if not self.values:
            return self.low
        return min(max(int(round(self.mean)), self.low), self.high - 1)

    def sample(self, rng: random.Random) -> int:
        if not self.cumulative or self.cumulative[-1] <= 0:
            # degenerate range or every pdf value underflowed
            return self._clamped_mean()
        picked = rng.random() * self.cumulative[-1]
        for value, bound in zip(self.values, self.cumulative):
            if picked <= bound:
                return value
        return self.values[-1]


__all__ = ["RandomContext", "UniformIntSampler", "NormalIntSampler"]
