"""Self-play training loop for the smart player."""

from __future__ import annotations

from typing import Callable, Dict, List, Sequence

import numpy as np

from ..game.board import ShotResult
from ..game.players import Player, SmartPlayer


class SelfPlayTrainer:
    """Play full games between a smart player and an opponent, training on every shot.

    Each finished game is reported to the callbacks as
    ``on_epoch(game, metrics)`` with ``loss`` (mean training cost of the
    smart player's shots), ``shots``, ``hits`` and ``won``.
    """

    def __init__(
        self,
        smart: SmartPlayer,
        opponent_factory: Callable[[np.random.Generator], Player],
        callbacks: Sequence[object] | None = None,
    ) -> None:
        self.smart = smart
        self.opponent_factory = opponent_factory
        self.callbacks = list(callbacks or [])

    def run(self, games: int, seed: int) -> List[Dict[str, float]]:
        """Play ``games`` games from one seeded generator; returns per-game metrics."""

        rng = np.random.default_rng(seed)
        history: List[Dict[str, float]] = []
        for game in range(1, games + 1):
            opponent = self.opponent_factory(rng)
            metrics = self.play_game(opponent, rng)
            history.append(metrics)
            self._emit(game, metrics)
        return history

    def play_game(self, opponent: Player, rng: np.random.Generator) -> Dict[str, float]:
        """Alternate turns, smart player first, until a fleet is sunk or turns run out."""

        self.smart.reset(rng)
        opponent.reset(rng)
        max_turns = 2 * self.smart.rows * self.smart.columns
        losses: List[float] = []
        shots = hits = 0
        won = False
        for _ in range(max_turns):
            position = self.smart.next_shot()
            result = opponent.receive_shot(position)
            loss = self.smart.record_result(result, position)
            if loss is not None:
                losses.append(loss)
            shots += 1
            hits += int(result is not ShotResult.MISS)
            if opponent.all_sunk():
                won = True
                break

            reply = opponent.next_shot()
            opponent.record_result(self.smart.receive_shot(reply), reply)
            if self.smart.all_sunk():
                break

        return {
            "loss": float(np.mean(losses)) if losses else 0.0,
            "shots": float(shots),
            "hits": float(hits),
            "won": 1.0 if won else 0.0,
        }

    def _emit(self, game: int, metrics: Dict[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(game, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(game, metrics)


__all__ = ["SelfPlayTrainer"]
