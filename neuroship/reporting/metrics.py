"""Per-game record logs for self-play sessions."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Dict, List, Mapping

GAME_FIELDS = ("game", "won", "shots", "hits", "accuracy", "loss")


def game_record(game: int, metrics: Mapping[str, float]) -> Dict[str, object]:
    """Normalise trainer metrics into one row of the game log."""

    shots = int(metrics.get("shots", 0))
    hits = int(metrics.get("hits", 0))
    return {
        "game": int(game),
        "won": bool(metrics.get("won", 0.0)),
        "shots": shots,
        "hits": hits,
        "accuracy": hits / shots if shots else 0.0,
        "loss": float(metrics.get("loss", 0.0)),
    }


class GameLog:
    """One JSON line per finished game, mirrored to CSV when ``csv_path`` is set.

    Both files are truncated on construction so a rerun into the same
    directory starts a fresh log.
    """

    def __init__(self, path: str | Path, *, csv_path: str | Path | None = None) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.csv_path = Path(csv_path) if csv_path is not None else None
        if self.csv_path is not None:
            self.csv_path.parent.mkdir(parents=True, exist_ok=True)
            with self.csv_path.open("w", encoding="utf-8", newline="") as handle:
                csv.writer(handle).writerow(GAME_FIELDS)
        self.records: List[Dict[str, object]] = []

    def on_epoch(self, game: int, metrics: Mapping[str, float]) -> None:
        record = game_record(game, metrics)
        self.records.append(record)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")
        if self.csv_path is not None:
            with self.csv_path.open("a", encoding="utf-8", newline="") as handle:
                csv.DictWriter(handle, fieldnames=GAME_FIELDS).writerow(record)

    __call__ = on_epoch


def read_game_log(path: str | Path) -> List[Dict[str, object]]:
    path = Path(path)
    if not path.exists():
        return []
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]


__all__ = ["GAME_FIELDS", "GameLog", "game_record", "read_game_log"]
