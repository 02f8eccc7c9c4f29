"""Parameter update rules."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..core.errors import ConfigurationError, ShapeMismatch
from ..core.types import Array


@dataclass(frozen=True)
class GradientDescent:
    """Vanilla gradient descent with a fixed learning rate."""

    learning_rate: float
    name: str = "gradient_descent"

    def __post_init__(self) -> None:
        if not self.learning_rate > 0:
            raise ConfigurationError(
                f"Learning rate must be positive, got {self.learning_rate}"
            )

    def step(self, parameter: Array, gradient: Array) -> Array:
        parameter = np.asarray(parameter, dtype=np.float64)
        gradient = np.asarray(gradient, dtype=np.float64)
        if parameter.shape != gradient.shape:
            raise ShapeMismatch(
                f"Parameter shape {parameter.shape} does not match gradient shape {gradient.shape}"
            )
        return parameter - self.learning_rate * gradient


def make_optimizer(name: str, learning_rate: float) -> GradientDescent:
    if name not in {"gradient_descent", "sgd"}:
        raise ConfigurationError(
            "Only the 'gradient_descent' optimizer is currently supported"
        )
    return GradientDescent(learning_rate=float(learning_rate))


__all__ = ["GradientDescent", "make_optimizer"]
