"""Feed-forward network: construction, evaluation and online training."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, MutableSequence, Sequence, Tuple

import numpy as np

from ..training.losses import REGISTRY as LOSS_REGISTRY
from ..training.losses import Loss
from ..training.optimizers import GradientDescent, make_optimizer
from .activations import ActivationKind
from .errors import ConfigurationError, ShapeMismatch, StateError, check_length
from .initializers import make_initializer
from .layers import Layer, LayerSpec
from .types import Array, ForwardTrace, LayerGradients
from .vector import Vector


@dataclass(frozen=True)
class NetworkConfig:
    """Immutable description of a network's topology and hyperparameters."""

    input_size: int
    layers: Tuple[LayerSpec, ...]
    output_size: int | None = None
    cost: str = "mse"
    optimizer: str = "gradient_descent"
    learning_rate: float = 0.03
    initializer: str = "random_uniform"
    init_low: float = 0.0
    init_high: float = 1e-6

    def to_dict(self) -> Dict[str, Any]:
        return {
            "input_size": int(self.input_size),
            "layers": [
                {"size": spec.size, "activation": ActivationKind(spec.activation).value}
                for spec in self.layers
            ],
            "output_size": self.output_size,
            "cost": self.cost,
            "optimizer": self.optimizer,
            "learning_rate": float(self.learning_rate),
            "initializer": self.initializer,
            "init_low": float(self.init_low),
            "init_high": float(self.init_high),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NetworkConfig":
        layers = tuple(
            LayerSpec(size=int(entry["size"]), activation=str(entry["activation"]))
            for entry in data["layers"]
        )
        output_size = data.get("output_size")
        return cls(
            input_size=int(data["input_size"]),
            layers=layers,
            output_size=int(output_size) if output_size is not None else None,
            cost=str(data.get("cost", "mse")),
            optimizer=str(data.get("optimizer", "gradient_descent")),
            learning_rate=float(data.get("learning_rate", 0.03)),
            initializer=str(data.get("initializer", "random_uniform")),
            init_low=float(data.get("init_low", 0.0)),
            init_high=float(data.get("init_high", 1e-6)),
        )


def _validate(config: NetworkConfig) -> None:
    if int(config.input_size) <= 0:
        raise ConfigurationError(f"Input size must be positive, got {config.input_size}")
    if not config.layers:
        raise ConfigurationError("A network needs at least one layer")
    for spec in config.layers:
        if spec.size <= 0:
            raise ConfigurationError(f"Layer size must be positive, got {spec.size}")
    if config.output_size is not None and config.output_size != config.layers[-1].size:
        raise ShapeMismatch(
            f"Declared output size {config.output_size} does not match "
            f"last layer size {config.layers[-1].size}"
        )


def build_network(
    config: NetworkConfig, rng: np.random.Generator | None = None
) -> "Network":
    """Validate ``config`` as a whole, then create and initialise every layer."""

    _validate(config)
    cost = LOSS_REGISTRY.get(config.cost)
    optimizer = make_optimizer(config.optimizer, config.learning_rate)
    initializer = make_initializer(config.initializer, config.init_low, config.init_high, rng)

    layers: List[Layer] = []
    in_size = int(config.input_size)
    for spec in config.layers:
        weights, bias = initializer.init(spec.size, in_size)
        layers.append(Layer(in_size, spec.size, spec.activation, weights, bias))
        in_size = spec.size
    return Network(layers, cost=cost, optimizer=optimizer, config=config)


@dataclass
class Network:
    """Ordered layers sharing one cost function and one optimizer.

    Training is two-phase: :meth:`learn_from` accumulates gradients for the
    last :meth:`evaluate` call, :meth:`update_from_learning` applies them.
    """

    layers: MutableSequence[Layer]
    cost: Loss
    optimizer: GradientDescent
    config: NetworkConfig | None = None
    _pending: ForwardTrace | None = field(default=None, init=False, repr=False)
    _accumulated: List[LayerGradients] | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.layers = list(self.layers)
        if not self.layers:
            raise ConfigurationError("A network needs at least one layer")
        for idx in range(len(self.layers) - 1):
            current, following = self.layers[idx], self.layers[idx + 1]
            if current.output_size != following.input_size:
                raise ShapeMismatch(
                    f"Layer {idx} outputs {current.output_size} values but "
                    f"layer {idx + 1} expects {following.input_size}"
                )

    @property
    def input_size(self) -> int:
        return self.layers[0].input_size

    @property
    def output_size(self) -> int:
        return self.layers[-1].output_size

    def topology(self) -> List[Tuple[int, ActivationKind]]:
        return [(layer.output_size, layer.activation.kind) for layer in self.layers]

    def parameter_count(self) -> int:
        return int(sum(layer.weights.size + layer.bias.size for layer in self.layers))

    # ------------------------------------------------------------------
    # Forward / backward

    def forward(self, inputs: Vector | Sequence[float] | Array) -> Tuple[Vector, ForwardTrace]:
        x = Vector(inputs)
        check_length(self.input_size, len(x), "Network input")
        contexts = []
        for layer in self.layers:
            x, context = layer.forward(x)
            contexts.append(context)
        return x, ForwardTrace(contexts=contexts)

    def evaluate(self, inputs: Vector | Sequence[float] | Array) -> Vector:
        """Run the forward pass and keep its trace for the next :meth:`learn_from`."""

        output, trace = self.forward(inputs)
        self._pending = trace
        return output

    def backward(self, trace: ForwardTrace, expected: Vector | Sequence[float] | Array) -> float:
        """Backpropagate the cost of ``trace`` against ``expected`` into the accumulators."""

        target = Vector(expected).data
        check_length(self.output_size, target.shape[0], "Expected output")
        if len(trace.contexts) != len(self.layers):
            raise StateError(
                f"Trace covers {len(trace.contexts)} layers, network has {len(self.layers)}"
            )
        loss_value, upstream = self.cost(trace.output, target)

        grads: List[LayerGradients] = [None] * len(self.layers)  # type: ignore[list-item]
        for idx in reversed(range(len(self.layers))):
            grads[idx], upstream = self.layers[idx].backward(trace.contexts[idx], upstream)

        if self._accumulated is None:
            self._accumulated = grads
        else:
            for acc, grad in zip(self._accumulated, grads):
                acc.weights += grad.weights
                acc.bias += grad.bias
        return loss_value

    def learn_from(self, expected: Vector | Sequence[float] | Array) -> float:
        """Accumulate gradients for the last evaluated input; returns the cost."""

        if self._pending is None:
            raise StateError("learn_from called without a preceding evaluate")
        target = Vector(expected)
        check_length(self.output_size, len(target), "Expected output")
        trace, self._pending = self._pending, None
        return self.backward(trace, target)

    def update_from_learning(self) -> None:
        """Apply the accumulated gradients with the optimizer and clear them."""

        if self._accumulated is None:
            raise StateError("update_from_learning called without accumulated gradients")
        for layer, grad in zip(self.layers, self._accumulated):
            layer.weights = self.optimizer.step(layer.weights, grad.weights)
            layer.bias = self.optimizer.step(layer.bias, grad.bias)
        self._accumulated = None

    def loss(
        self,
        inputs: Vector | Sequence[float] | Array,
        expected: Vector | Sequence[float] | Array,
    ) -> float:
        """Cost at the current weights; leaves training state untouched."""

        output, _ = self.forward(inputs)
        target = Vector(expected)
        check_length(self.output_size, len(target), "Expected output")
        value, _ = self.cost(output.data, target.data)
        return value

    # ------------------------------------------------------------------
    # Parameters

    def state_dict(self) -> Dict[str, Array]:
        state: Dict[str, Array] = {}
        for idx, layer in enumerate(self.layers):
            state[f"W{idx}"] = layer.weights.copy()
            state[f"b{idx}"] = layer.bias.copy()
        return state

    def load_state_dict(self, state: Mapping[str, Array]) -> None:
        for idx, layer in enumerate(self.layers):
            for key, expected in ((f"W{idx}", layer.weights.shape), (f"b{idx}", layer.bias.shape)):
                if key not in state:
                    raise KeyError(f"Missing parameter {key} in state dict")
                if np.shape(state[key]) != expected:
                    raise ShapeMismatch(
                        f"Parameter {key} has shape {np.shape(state[key])}, expected {expected}"
                    )
        for idx, layer in enumerate(self.layers):
            layer.weights = np.array(state[f"W{idx}"], dtype=np.float64)
            layer.bias = np.array(state[f"b{idx}"], dtype=np.float64)


__all__ = ["Network", "NetworkConfig", "build_network"]
