"""Battleship boards and players driving the targeting policy."""

from .board import Board, OpponentGrid, Ship, ShotResult, Square
from .players import Player, RandomPlayer, SmartPlayer

__all__ = [
    "Board",
    "OpponentGrid",
    "Player",
    "RandomPlayer",
    "Ship",
    "ShotResult",
    "SmartPlayer",
    "Square",
]
