"""Grid model: squares, ships, a player's own board and its view of the opponent."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Sequence

import numpy as np

from ..core.errors import ConfigurationError
from ..core.types import Position


class ShotResult(str, Enum):
    MISS = "miss"
    HIT = "hit"
    SUNK = "sunk"


class Direction(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass
class Square:
    hit: bool = False
    busy: bool = False

    def is_hit(self) -> bool:
        return self.hit

    def is_free(self) -> bool:
        return not self.busy


@dataclass
class Ship:
    size: int
    row: int = 0
    column: int = 0
    direction: Direction = Direction.HORIZONTAL
    hits: int = 0

    def cells(self) -> List[Position]:
        if self.direction is Direction.HORIZONTAL:
            return [(self.row, self.column + offset) for offset in range(self.size)]
        return [(self.row + offset, self.column) for offset in range(self.size)]

    def contains(self, row: int, column: int) -> bool:
        return (row, column) in self.cells()

    def is_sunk(self) -> bool:
        return self.hits >= self.size


def _check_position(rows: int, columns: int, position: Sequence[int]) -> Position:
    row, column = int(position[0]), int(position[1])
    if not (0 <= row < rows and 0 <= column < columns):
        raise IndexError(f"Position {(row, column)} is outside a {rows}x{columns} grid")
    return row, column


class _Grid:
    def __init__(self, rows: int, columns: int) -> None:
        if rows <= 0 or columns <= 0:
            raise ConfigurationError(f"Grid dimensions must be positive, got {rows}x{columns}")
        self.rows = int(rows)
        self.columns = int(columns)
        self.squares = [[Square() for _ in range(self.columns)] for _ in range(self.rows)]

    @property
    def cell_count(self) -> int:
        return self.rows * self.columns

    def square(self, row: int, column: int) -> Square:
        row, column = _check_position(self.rows, self.columns, (row, column))
        return self.squares[row][column]

    def is_hit(self, row: int, column: int) -> bool:
        return self.square(row, column).is_hit()

    def is_free(self, row: int, column: int) -> bool:
        return self.square(row, column).is_free()


class Board(_Grid):
    """A player's own grid with its fleet."""

    def __init__(self, rows: int, columns: int) -> None:
        super().__init__(rows, columns)
        self.fleet: List[Ship] = []

    def place_fleet(self, sizes: Iterable[int], rng: np.random.Generator) -> None:
        """Place one ship per size at random, in bounds and without overlap."""

        self.squares = [[Square() for _ in range(self.columns)] for _ in range(self.rows)]
        self.fleet = []
        for size in sizes:
            size = int(size)
            if size <= 0 or size > max(self.rows, self.columns):
                raise ConfigurationError(
                    f"Ship of size {size} cannot fit a {self.rows}x{self.columns} grid"
                )
            for _ in range(10_000):
                ship = Ship(
                    size=size,
                    row=int(rng.integers(self.rows)),
                    column=int(rng.integers(self.columns)),
                    direction=Direction.HORIZONTAL if rng.random() > 0.5 else Direction.VERTICAL,
                )
                if self._fits(ship):
                    break
            else:
                raise ConfigurationError(f"Could not place a ship of size {size}")
            for row, column in ship.cells():
                self.squares[row][column].busy = True
            self.fleet.append(ship)

    def _fits(self, ship: Ship) -> bool:
        for row, column in ship.cells():
            if not (0 <= row < self.rows and 0 <= column < self.columns):
                return False
            if not self.squares[row][column].is_free():
                return False
        return True

    def ship_at(self, row: int, column: int) -> Ship | None:
        for ship in self.fleet:
            if ship.contains(row, column):
                return ship
        return None

    def receive_shot(self, position: Sequence[int]) -> ShotResult:
        row, column = _check_position(self.rows, self.columns, position)
        square = self.squares[row][column]
        result = ShotResult.MISS
        if not square.is_hit() and not square.is_free():
            ship = self.ship_at(row, column)
            if ship is not None:
                ship.hits += 1
                result = ShotResult.SUNK if ship.is_sunk() else ShotResult.HIT
        square.hit = True
        return result

    def all_sunk(self) -> bool:
        return all(ship.is_sunk() for ship in self.fleet)

    def hits_received(self) -> int:
        return sum(ship.hits for ship in self.fleet)


class OpponentGrid(_Grid):
    """What a player has learned about the opponent's grid from its own shots."""

    def record(self, result: ShotResult, position: Sequence[int]) -> None:
        row, column = _check_position(self.rows, self.columns, position)
        square = self.squares[row][column]
        square.hit = True
        if result in (ShotResult.HIT, ShotResult.SUNK):
            square.busy = True

    def untried(self) -> List[Position]:
        return [
            (row, column)
            for row in range(self.rows)
            for column in range(self.columns)
            if not self.squares[row][column].is_hit()
        ]


__all__ = ["Board", "Direction", "OpponentGrid", "Ship", "ShotResult", "Square"]
