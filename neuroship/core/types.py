"""Core typing contracts for neuroship."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

Array = np.ndarray
Position = Tuple[int, int]


@dataclass(frozen=True)
class LayerContext:
    """Values captured by one layer's forward pass, consumed by its backward pass."""

    inputs: Array
    pre_activation: Array
    outputs: Array


@dataclass(frozen=True)
class ForwardTrace:
    """Per-layer contexts of a full forward pass, input layer first."""

    contexts: List[LayerContext]

    @property
    def output(self) -> Array:
        return self.contexts[-1].outputs


@dataclass
class LayerGradients:
    """Gradient of the cost with respect to one layer's parameters."""

    weights: Array
    bias: Array


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`neuroship.training.pipelines.run_pipeline`."""

    games: int
    metrics_path: str
    manifest_path: str
    summary_path: str
    checkpoint_path: str
