import json
from pathlib import Path

import pytest

from neuroship.reporting.metrics import GameLog, game_record, read_game_log
from neuroship.reporting.summary import summarize_games, write_summary


def _metrics(won, shots, hits, loss):
    return {"won": float(won), "shots": float(shots), "hits": float(hits), "loss": loss}


def test_game_record_normalises_trainer_metrics():
    record = game_record(3, _metrics(True, 8, 2, 0.5))
    assert record == {
        "game": 3,
        "won": True,
        "shots": 8,
        "hits": 2,
        "accuracy": 0.25,
        "loss": 0.5,
    }
    assert game_record(1, _metrics(False, 0, 0, 0.0))["accuracy"] == 0.0


def test_game_log_writes_jsonl_and_csv_and_truncates(tmp_path):
    path = tmp_path / "games.jsonl"
    csv_path = tmp_path / "games.csv"
    path.write_text('{"stale": true}\n')

    log = GameLog(path, csv_path=csv_path)
    log.on_epoch(1, _metrics(False, 10, 3, 0.2))
    log(2, _metrics(True, 6, 4, 0.1))

    records = read_game_log(path)
    assert [r["game"] for r in records] == [1, 2]
    assert records == log.records
    lines = csv_path.read_text().splitlines()
    assert lines[0] == "game,won,shots,hits,accuracy,loss"
    assert len(lines) == 3
    assert read_game_log(tmp_path / "absent.jsonl") == []


def test_summary_reports_win_rate_and_shots_to_win():
    records = [
        game_record(1, _metrics(False, 16, 4, 0.4)),
        game_record(2, _metrics(True, 12, 4, 0.3)),
        game_record(3, _metrics(True, 8, 4, 0.2)),
    ]
    summary = summarize_games(records, tail=2)

    assert summary["session"]["games"] == 3
    assert summary["session"]["wins"] == 2
    assert summary["session"]["win_rate"] == pytest.approx(2 / 3)
    assert summary["session"]["shots_to_win"] == pytest.approx(10.0)
    assert summary["tail"]["games"] == 2
    assert summary["tail"]["win_rate"] == 1.0
    assert summary["tail"]["accuracy"] == pytest.approx((4 / 12 + 4 / 8) / 2)
    assert summary["fastest_win"] == 8
    assert summary["first_loss"] == pytest.approx(0.4)
    assert summary["last_loss"] == pytest.approx(0.2)


def test_summary_without_wins_or_games():
    lost = summarize_games([game_record(1, _metrics(False, 5, 0, 0.1))])
    assert lost["session"]["win_rate"] == 0.0
    assert lost["session"]["shots_to_win"] is None
    assert lost["fastest_win"] is None

    empty = summarize_games([])
    assert empty["session"]["games"] == 0
    assert empty["session"]["loss"] is None
    assert empty["first_loss"] is None


def test_write_summary_is_sorted_json(tmp_path):
    log = GameLog(tmp_path / "games.jsonl")
    log.on_epoch(1, _metrics(True, 9, 3, 0.25))
    out = write_summary(log.path, tmp_path / "out" / "summary.json", tail=4)
    data = json.loads(Path(out).read_text())
    assert data["session"]["wins"] == 1
    assert list(data) == sorted(data)
