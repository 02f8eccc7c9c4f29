"""Weight initialisation strategies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

import numpy as np

from .errors import ConfigurationError
from .types import Array


@dataclass
class RandomUniform:
    """Draw every weight and bias i.i.d. from ``U[low, high)``.

    Results are reproducible only when a seeded ``rng`` is injected.
    """

    low: float
    high: float
    rng: np.random.Generator = field(default_factory=np.random.default_rng, repr=False)

    def __post_init__(self) -> None:
        if not self.low < self.high:
            raise ConfigurationError(
                f"RandomUniform requires low < high, got [{self.low}, {self.high})"
            )

    def init(self, output_size: int, input_size: int) -> Tuple[Array, Array]:
        weights = self.rng.uniform(self.low, self.high, size=(output_size, input_size))
        bias = self.rng.uniform(self.low, self.high, size=output_size)
        return weights, bias


def make_initializer(
    name: str,
    low: float,
    high: float,
    rng: np.random.Generator | None = None,
) -> RandomUniform:
    if name != "random_uniform":
        raise ConfigurationError(f"Unknown initializer: {name}")
    return RandomUniform(low=float(low), high=float(high), rng=rng or np.random.default_rng())


__all__ = ["RandomUniform", "make_initializer"]
