"""Affine layer followed by an activation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from .activations import Activation, ActivationKind, get_activation
from .errors import ConfigurationError, ShapeMismatch, StateError, check_length
from .types import Array, LayerContext, LayerGradients
from .vector import Vector


@dataclass(frozen=True)
class LayerSpec:
    """Output size and activation identifier of one layer."""

    size: int
    activation: Union[ActivationKind, str]

    def __post_init__(self) -> None:
        if int(self.size) <= 0:
            raise ConfigurationError(f"Layer size must be positive, got {self.size}")
        object.__setattr__(self, "size", int(self.size))
        object.__setattr__(self, "activation", get_activation(self.activation).kind)


class Layer:
    """``activation(W @ x + b)`` with ``W`` of shape (output_size, input_size).

    The layer keeps no forward-pass state: :meth:`forward` returns a
    :class:`LayerContext` that the caller hands back to :meth:`backward`.
    """

    def __init__(
        self,
        input_size: int,
        output_size: int,
        activation: Union[Activation, ActivationKind, str],
        weights: Array,
        bias: Array,
    ) -> None:
        if isinstance(activation, (ActivationKind, str)):
            activation = get_activation(activation)
        weights = np.array(weights, dtype=np.float64)
        bias = np.array(bias, dtype=np.float64)
        if weights.shape != (output_size, input_size):
            raise ShapeMismatch(
                f"Weight matrix must be {(output_size, input_size)}, got {weights.shape}"
            )
        if bias.shape != (output_size,):
            raise ShapeMismatch(f"Bias must have length {output_size}, got {bias.shape}")
        self.input_size = int(input_size)
        self.output_size = int(output_size)
        self.activation = activation
        self.weights = weights
        self.bias = bias

    def __repr__(self) -> str:
        return (
            f"Layer({self.input_size} -> {self.output_size}, "
            f"{self.activation.kind.value})"
        )

    def forward(self, inputs: Vector) -> Tuple[Vector, LayerContext]:
        x = Vector(inputs).data
        check_length(self.input_size, x.shape[0], "Layer input")
        z = self.weights @ x + self.bias
        a = self.activation.forward(z)
        return Vector(a), LayerContext(inputs=x, pre_activation=z, outputs=a)

    def backward(
        self, context: LayerContext | None, upstream: Array
    ) -> Tuple[LayerGradients, Array]:
        """Return parameter gradients and dCost/dInput for ``upstream`` = dCost/dOutput."""

        if context is None:
            raise StateError("Layer.backward called without a forward-pass context")
        upstream = np.asarray(upstream, dtype=np.float64)
        check_length(self.output_size, upstream.shape[0], "Layer upstream gradient")
        delta = self.activation.backward(context.pre_activation, context.outputs, upstream)
        grads = LayerGradients(weights=np.outer(delta, context.inputs), bias=delta.copy())
        return grads, self.weights.T @ delta


__all__ = ["Layer", "LayerSpec"]
