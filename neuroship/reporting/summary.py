"""Session summaries: how often and how quickly the smart player wins."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping, Sequence

import numpy as np

from .metrics import read_game_log


def _mean(values: Sequence[float]) -> float | None:
    return float(np.mean(values)) if len(values) else None


def _window(records: Sequence[Mapping[str, object]]) -> dict[str, object]:
    won = [r for r in records if r["won"]]
    return {
        "games": len(records),
        "wins": len(won),
        "win_rate": len(won) / len(records) if records else 0.0,
        "shots_to_win": _mean([float(r["shots"]) for r in won]),  # type: ignore[arg-type]
        "accuracy": _mean([float(r["accuracy"]) for r in records]),  # type: ignore[arg-type]
        "loss": _mean([float(r["loss"]) for r in records]),  # type: ignore[arg-type]
    }


def summarize_games(records: Sequence[Mapping[str, object]], *, tail: int = 32) -> dict[str, object]:
    """Whole-session figures plus the same figures over the last ``tail`` games.

    ``shots_to_win`` averages only won games and is ``None`` when there
    are none; comparing it between the session and its tail shows whether
    training is making the player faster.
    """

    records = list(records)
    won_shots = [int(r["shots"]) for r in records if r["won"]]  # type: ignore[call-overload]
    tail_records = records[-tail:] if tail > 0 else []
    return {
        "version": 2,
        "session": _window(records),
        "tail": _window(tail_records),
        "fastest_win": min(won_shots) if won_shots else None,
        "first_loss": float(records[0]["loss"]) if records else None,  # type: ignore[arg-type]
        "last_loss": float(records[-1]["loss"]) if records else None,  # type: ignore[arg-type]
    }


def write_summary(game_log: str | Path, out_summary_json: str | Path, *, tail: int = 32) -> str:
    """Summarise the JSONL game log at ``game_log`` into ``out_summary_json``."""

    out_path = Path(out_summary_json)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    summary = summarize_games(read_game_log(game_log), tail=tail)
    out_path.write_text(json.dumps(summary, sort_keys=True, indent=2))
    return str(out_path)


__all__ = ["summarize_games", "write_summary"]
