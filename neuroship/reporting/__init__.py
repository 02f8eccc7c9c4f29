"""Reporting utilities for neuroship training sessions."""

from .artifacts import write_manifest
from .metrics import GameLog, read_game_log
from .plots import PlotAdapter
from .summary import summarize_games, write_summary

__all__ = [
    "write_manifest",
    "GameLog",
    "read_game_log",
    "PlotAdapter",
    "summarize_games",
    "write_summary",
]
