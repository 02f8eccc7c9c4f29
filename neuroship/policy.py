"""Neural targeting policy of the smart computer player."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol, Sequence

import numpy as np

from .core.errors import ShapeMismatch
from .core.layers import LayerSpec
from .core.network import Network, NetworkConfig, build_network
from .core.types import Array, Position
from .core.vector import Vector
from .game.board import ShotResult
from .training.checkpoints import DEFAULT_CHECKPOINT, load_network, save_network


class GridView(Protocol):
    """Read-only knowledge of the opponent grid, enumerated row-major."""

    rows: int
    columns: int

    def is_hit(self, row: int, column: int) -> bool:
        """Whether this cell was already shot at."""

    def is_free(self, row: int, column: int) -> bool:
        """False once the cell is known to hold a ship."""


def smart_network_config(rows: int, columns: int, **overrides: Any) -> NetworkConfig:
    """Default topology: ``2n`` inputs, ``n`` Leaky ReLU, ``n`` Softmax outputs."""

    cells = rows * columns
    params = {
        "input_size": 2 * cells,
        "layers": (LayerSpec(cells, "leaky_relu"), LayerSpec(cells, "softmax")),
        "output_size": cells,
        "cost": "mse",
        "optimizer": "gradient_descent",
        "learning_rate": 0.03,
        "initializer": "random_uniform",
        "init_low": 0.0,
        "init_high": 1e-6,
    }
    params.update(overrides)
    return NetworkConfig(**params)


class TargetingPolicy:
    """Pick shots with a network and, while training, learn from every outcome.

    Training can be switched off once per session with :meth:`stop_training`;
    it cannot be switched back on.
    """

    def __init__(self, rows: int, columns: int, network: Network, training: bool = True) -> None:
        self.rows = int(rows)
        self.columns = int(columns)
        cells = self.rows * self.columns
        if network.input_size != 2 * cells:
            raise ShapeMismatch(
                f"Network expects {network.input_size} inputs, a {rows}x{columns} grid "
                f"provides {2 * cells}"
            )
        if network.output_size != cells:
            raise ShapeMismatch(
                f"Network scores {network.output_size} cells, grid has {cells}"
            )
        self.network = network
        self._training = bool(training)

    @classmethod
    def create(
        cls,
        rows: int,
        columns: int,
        rng: np.random.Generator | None = None,
        **overrides: Any,
    ) -> "TargetingPolicy":
        """Fresh, near-zero initialised network in training mode."""

        network = build_network(smart_network_config(rows, columns, **overrides), rng=rng)
        return cls(rows, columns, network, training=True)

    @classmethod
    def load(
        cls, rows: int, columns: int, path: str | Path = DEFAULT_CHECKPOINT
    ) -> "TargetingPolicy":
        """Previously trained network in evaluating mode."""

        return cls(rows, columns, load_network(path), training=False)

    @property
    def training(self) -> bool:
        return self._training

    def stop_training(self) -> None:
        self._training = False

    def save(self, path: str | Path = DEFAULT_CHECKPOINT) -> Path:
        return save_network(self.network, path)

    @property
    def cell_count(self) -> int:
        return self.rows * self.columns

    def index_of(self, position: Sequence[int]) -> int:
        row, column = int(position[0]), int(position[1])
        if not (0 <= row < self.rows and 0 <= column < self.columns):
            raise IndexError(f"Position {(row, column)} is outside a {self.rows}x{self.columns} grid")
        return row * self.columns + column

    def build_input(self, grid: GridView) -> Vector:
        """Shot flags for every cell followed by known-occupied flags."""

        cells = self.cell_count
        values = np.zeros(2 * cells, dtype=np.float64)
        for row in range(self.rows):
            for column in range(self.columns):
                index = row * self.columns + column
                values[index] = 1.0 if grid.is_hit(row, column) else 0.0
                values[index + cells] = 0.0 if grid.is_free(row, column) else 1.0
        return Vector(values)

    def select_target(
        self, scores: Vector | Sequence[float] | Array, tried: Sequence[bool] | None = None
    ) -> Position:
        """First row-major cell whose score strictly beats every earlier one.

        The running maximum starts at 0, so all non-positive scores resolve
        to ``(0, 0)``. Cells flagged in ``tried`` are skipped.
        """

        scores = Vector(scores)
        if len(scores) != self.cell_count:
            raise ShapeMismatch(f"Expected {self.cell_count} scores, got {len(scores)}")
        if tried is not None and len(tried) != self.cell_count:
            raise ShapeMismatch(f"Expected {self.cell_count} tried flags, got {len(tried)}")
        best = 0.0
        target = (0, 0)
        for row in range(self.rows):
            for column in range(self.columns):
                index = row * self.columns + column
                if tried is not None and tried[index]:
                    continue
                if scores[index] > best:
                    best = scores[index]
                    target = (row, column)
        return target

    def next_shot(self, grid: GridView) -> Position:
        inputs = self.build_input(grid)
        scores = self.network.evaluate(inputs)
        tried = [value > 0.0 for value in inputs.data[: self.cell_count]]
        return self.select_target(scores, tried)

    def expected_for(self, result: ShotResult, position: Sequence[int]) -> Vector:
        expected = np.zeros(self.cell_count, dtype=np.float64)
        hit = result in (ShotResult.HIT, ShotResult.SUNK)
        expected[self.index_of(position)] = 1.0 if hit else -1.0
        return Vector(expected)

    def report_outcome(self, result: ShotResult, position: Sequence[int]) -> float | None:
        """Train on the resolved shot; returns the cost, or None when not training."""

        if not self._training:
            return None
        loss = self.network.learn_from(self.expected_for(ShotResult(result), position))
        self.network.update_from_learning()
        return loss


__all__ = ["GridView", "TargetingPolicy", "smart_network_config"]
