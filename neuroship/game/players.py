"""Players: a fleet, a board, and a way of choosing shots."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, List, Sequence

import numpy as np

from ..core.types import Position
from .board import Board, OpponentGrid, ShotResult

if TYPE_CHECKING:
    from ..policy import TargetingPolicy


class Player(ABC):
    """Everything common to all players."""

    def __init__(self, name: str, rows: int, columns: int, fleet: Sequence[int]) -> None:
        self.name = name
        self.rows = int(rows)
        self.columns = int(columns)
        self.fleet_sizes: List[int] = [int(size) for size in fleet]
        self.board = Board(self.rows, self.columns)
        self.opponent = OpponentGrid(self.rows, self.columns)

    def reset(self, rng: np.random.Generator) -> None:
        """Fresh grids and a new random ship placement for the next game."""

        self.board = Board(self.rows, self.columns)
        self.board.place_fleet(self.fleet_sizes, rng)
        self.opponent = OpponentGrid(self.rows, self.columns)

    @abstractmethod
    def next_shot(self) -> Position:
        """Where to shoot next on the opponent grid."""

    def receive_shot(self, position: Sequence[int]) -> ShotResult:
        return self.board.receive_shot(position)

    def record_result(self, result: ShotResult, position: Sequence[int]) -> float | None:
        self.opponent.record(result, position)
        return None

    def all_sunk(self) -> bool:
        return self.board.all_sunk()


class RandomPlayer(Player):
    """Shoots a uniformly random untried cell."""

    def __init__(
        self,
        name: str,
        rows: int,
        columns: int,
        fleet: Sequence[int],
        rng: np.random.Generator | None = None,
    ) -> None:
        super().__init__(name, rows, columns, fleet)
        self.rng = rng or np.random.default_rng()

    def next_shot(self) -> Position:
        candidates = self.opponent.untried()
        if not candidates:
            return 0, 0
        return candidates[int(self.rng.integers(len(candidates)))]


class SmartPlayer(Player):
    """Delegates targeting to a :class:`~neuroship.policy.TargetingPolicy`."""

    def __init__(
        self, name: str, fleet: Sequence[int], policy: "TargetingPolicy"
    ) -> None:
        super().__init__(name, policy.rows, policy.columns, fleet)
        self.policy = policy

    def next_shot(self) -> Position:
        return self.policy.next_shot(self.opponent)

    def record_result(self, result: ShotResult, position: Sequence[int]) -> float | None:
        super().record_result(result, position)
        return self.policy.report_outcome(result, position)

    def stop_training(self) -> None:
        self.policy.stop_training()

    def save(self, path: str | Path) -> Path:
        return self.policy.save(path)
