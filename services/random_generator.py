"""Seedable random sampling used by both simulation engines.

The generator is a plain linear congruential generator so that a seed produces
the same stream on every platform. Each engine run owns its own instance;
nothing here is module-global.
"""

from __future__ import annotations

import logging
import math
import sys
import time
from typing import Optional

from models.decision import Distribution, GammaDistribution, TriangularDistribution

logger = logging.getLogger(__name__)

_MODULUS = 2**32
_MULTIPLIER = 1664525
_INCREMENT = 1013904223
# Knuth's multiplicative hash constant, used to spread child seeds.
_SPAWN_STRIDE = 2654435761
GAMMA_RETRY_WARNING = 10_000


class RandomGenerator:
    """Deterministic pseudo-random source with a few continuous distributions."""

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = int(time.time() * 1000)
        self.initial_seed = int(seed) % _MODULUS
        self._state = self.initial_seed

    def uniform(self) -> float:
        """Next value in [0, 1)."""
        self._state = (self._state * _MULTIPLIER + _INCREMENT) % _MODULUS
        return self._state / _MODULUS

    def normal(self, mean: float = 0.0, std_dev: float = 1.0) -> float:
        """Box-Muller transform. Only the cosine branch is returned."""
        u1 = max(sys.float_info.min, self.uniform())
        u2 = self.uniform()
        z0 = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
        return z0 * std_dev + mean

    def triangular(self, min: float, likely: float, max: float) -> float:
        """Inverse-CDF sample from a triangular distribution."""
        if max == min:
            return min
        u = self.uniform()
        f = (likely - min) / (max - min)
        if u < f:
            return min + math.sqrt(u * (max - min) * (likely - min))
        return max - math.sqrt((1.0 - u) * (max - min) * (max - likely))

    def beta(self, alpha: float, beta: float) -> float:
        x = self.gamma(alpha, 1.0)
        y = self.gamma(beta, 1.0)
        return x / (x + y)

    def gamma(self, shape: float, scale: float = 1.0) -> float:
        """Marsaglia-Tsang gamma sampler.

        Shapes below one are boosted to ``shape + 1`` and corrected with a
        ``U ** (1 / shape)`` factor. The rejection loop has no cap; if it runs
        unusually long a single warning is logged and sampling carries on.
        """
        if shape <= 0 or scale <= 0:
            raise ValueError("gamma requires shape > 0 and scale > 0")
        if shape < 1:
            return self.gamma(shape + 1.0, scale) * self.uniform() ** (1.0 / shape)

        d = shape - 1.0 / 3.0
        c = 1.0 / math.sqrt(9.0 * d)
        attempts = 0
        while True:
            attempts += 1
            if attempts == GAMMA_RETRY_WARNING:
                logger.warning(
                    "gamma(shape=%s, scale=%s) still rejecting after %d attempts", shape, scale, attempts
                )

            x = self.normal()
            v = 1.0 + c * x
            while v <= 0:
                x = self.normal()
                v = 1.0 + c * x

            v = v * v * v
            u = self.uniform()
            if u < 1.0 - 0.0331 * x * x * x * x:
                return d * v * scale
            if u == 0 or math.log(u) < 0.5 * x * x + d * (1.0 - v + math.log(v)):
                return d * v * scale

    def sample(self, distribution: Distribution) -> float:
        """Draw one value from a configured distribution."""
        if isinstance(distribution, TriangularDistribution):
            return self.triangular(distribution.min, distribution.likely, distribution.max)
        if isinstance(distribution, GammaDistribution):
            return self.gamma(distribution.shape, distribution.scale)
        raise TypeError(f"Unsupported distribution: {type(distribution).__name__}")

    def spawn(self, index: int) -> "RandomGenerator":
        """Independent child stream; seed is ``(seed + index * 2654435761) mod 2**32``."""
        return RandomGenerator((self.initial_seed + index * _SPAWN_STRIDE) % _MODULUS)
