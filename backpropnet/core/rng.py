"""Seedable random source for weight initialisation and shuffling."""

from __future__ import annotations

import math
from typing import List

import numpy as np


class RandomSource:
    """Uniform and Gaussian draws backed by :class:`numpy.random.Generator`.

    Gaussian values come from the Box-Muller transform. Each transform yields
    two independent normals; the second is kept on this instance and returned
    by the next :meth:`gaussian` call, so two sources seeded alike always
    produce the same stream regardless of how other sources are used.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._rng = np.random.default_rng(seed)
        self.has_spare = False
        self.spare = 0.0

    @property
    def seed(self) -> int | None:
        return self._seed

    def uniform(self) -> float:
        """Return a float in ``[0, 1)``."""

        return float(self._rng.random())

    def gaussian(self, mean: float = 0.0, stddev: float = 1.0) -> float:
        if self.has_spare:
            self.has_spare = False
            return self.spare * stddev + mean

        u = self.uniform()
        while u == 0.0:
            u = self.uniform()
        v = self.uniform()
        mag = math.sqrt(-2.0 * math.log(u))
        self.spare = mag * math.cos(2.0 * math.pi * v)
        self.has_spare = True
        return mag * math.sin(2.0 * math.pi * v) * stddev + mean

    def permutation(self, n: int) -> List[int]:
        """Return a uniformly shuffled ordering of ``range(n)``."""

        return [int(i) for i in self._rng.permutation(n)]


__all__ = ["RandomSource"]
