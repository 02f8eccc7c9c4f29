"""Activation strategies for neuroship layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, Union

import numpy as np

from .errors import ConfigurationError, ShapeMismatch
from .types import Array


class ActivationKind(str, Enum):
    """Identifiers of the supported activations, as persisted in checkpoints."""

    LEAKY_RELU = "leaky_relu"
    SOFTMAX = "softmax"


class Activation(Protocol):
    """Protocol implemented by every activation."""

    kind: ActivationKind

    def forward(self, pre_activation: Array) -> Array:
        """Return the activated output for ``pre_activation``."""

    def backward(self, pre_activation: Array, activated: Array, upstream: Array) -> Array:
        """Return dCost/dPreActivation given dCost/dOutput."""


def leaky_relu(x: Array, alpha: float = 0.01) -> Array:
    """Return ``x`` where non-negative, ``alpha * x`` elsewhere."""

    return np.where(x >= 0.0, x, alpha * x)


def softmax(x: Array) -> Array:
    """Numerically stable softmax over a 1-D vector."""

    shifted = x - np.max(x)
    e = np.exp(shifted)
    return e / np.sum(e)


def _check(pre_activation: Array, activated: Array, upstream: Array) -> None:
    if not (pre_activation.shape == activated.shape == upstream.shape):
        raise ShapeMismatch(
            "Activation backward expects equal shapes, got "
            f"{pre_activation.shape}, {activated.shape}, {upstream.shape}"
        )


@dataclass(frozen=True)
class LeakyReLU:
    alpha: float = 0.01
    kind: ActivationKind = field(default=ActivationKind.LEAKY_RELU, init=False)

    def forward(self, pre_activation: Array) -> Array:
        return leaky_relu(pre_activation, self.alpha)

    def backward(self, pre_activation: Array, activated: Array, upstream: Array) -> Array:
        _check(pre_activation, activated, upstream)
        slope = np.where(pre_activation >= 0.0, 1.0, self.alpha)
        return upstream * slope


@dataclass(frozen=True)
class Softmax:
    """Joint normalisation across the whole vector.

    The backward pass is the Jacobian-vector product
    ``s_i * (g_i - sum_j g_j * s_j)``, which equals ``J^T g`` for the
    symmetric softmax Jacobian ``s_i * (delta_ij - s_j)`` in O(n).
    """

    kind: ActivationKind = field(default=ActivationKind.SOFTMAX, init=False)

    def forward(self, pre_activation: Array) -> Array:
        return softmax(pre_activation)

    def backward(self, pre_activation: Array, activated: Array, upstream: Array) -> Array:
        _check(pre_activation, activated, upstream)
        return activated * (upstream - np.dot(upstream, activated))


def get_activation(kind: Union[ActivationKind, str]) -> Activation:
    try:
        resolved = ActivationKind(kind)
    except ValueError as exc:
        available = ", ".join(k.value for k in ActivationKind)
        raise ConfigurationError(
            f"Unknown activation {kind!r}. Available activations: {available}"
        ) from exc
    if resolved is ActivationKind.LEAKY_RELU:
        return LeakyReLU()
    return Softmax()


__all__ = [
    "Activation",
    "ActivationKind",
    "LeakyReLU",
    "Softmax",
    "get_activation",
    "leaky_relu",
    "softmax",
]
