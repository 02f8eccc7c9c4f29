"""Training session assembly from configuration dictionaries."""

from __future__ import annotations

import json
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

import numpy as np

from ..core.layers import LayerSpec
from ..core.network import build_network
from ..core.types import RunResult
from ..game.players import RandomPlayer, SmartPlayer
from ..policy import TargetingPolicy, smart_network_config
from ..reporting.artifacts import write_manifest
from ..reporting.metrics import GameLog
from ..reporting.plots import PlotAdapter
from ..reporting.summary import write_summary
from .checkpoints import DEFAULT_CHECKPOINT
from .trainer import SelfPlayTrainer

_REQUIRED_SECTIONS = {"board", "model", "train"}

_PRESETS: Dict[str, Mapping[str, object]] = {
    "smart-training": {
        "board": {"rows": 10, "columns": 10, "fleet": [5, 4, 3, 3, 2]},
        "model": {
            "learning_rate": 0.03,
            "init_low": 0.0,
            "init_high": 1e-6,
        },
        "train": {
            "games": 50,
            "seed": 7,
            "opponent": "random",
            "run_dir": "runs/smart-training",
            "checkpoint": str(DEFAULT_CHECKPOINT),
            "enable_plots": False,
        },
    },
    "tiny-board": {
        "board": {"rows": 4, "columns": 4, "fleet": [2, 2]},
        "model": {
            "hidden": [16],
            "learning_rate": 0.03,
            "init_low": 0.0,
            "init_high": 1e-6,
        },
        "train": {
            "games": 5,
            "seed": 0,
            "opponent": "random",
            "run_dir": "runs/tiny-board",
            "enable_plots": False,
        },
    },
}


def _read_config_file(path: Path) -> Mapping[str, object]:
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load YAML configs") from exc
        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported config file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


def _check_sections(config: Mapping[str, object], origin: str) -> None:
    missing = _REQUIRED_SECTIONS - set(config)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise KeyError(f"Config {origin} is missing required sections: {missing_str}")


def load_config(path: str | Path) -> Dict[str, object]:
    """Read a JSON or YAML session config with ``board``/``model``/``train`` sections."""

    path = Path(path)
    data = _read_config_file(path)
    _check_sections(data, path.name)
    return json.loads(json.dumps(data))


def presets() -> Mapping[str, Mapping[str, object]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Dict[str, object]:
    try:
        return deepcopy(_PRESETS[name])  # type: ignore[return-value]
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def _build_policy(
    board_cfg: Mapping[str, object], model_cfg: Mapping[str, object], seed: int
) -> TargetingPolicy:
    rows = int(board_cfg["rows"])
    columns = int(board_cfg["columns"])
    cells = rows * columns
    hidden = [int(h) for h in model_cfg.get("hidden", [cells])]  # type: ignore[union-attr]
    layers = tuple(LayerSpec(size, "leaky_relu") for size in hidden) + (
        LayerSpec(cells, "softmax"),
    )
    config = smart_network_config(
        rows,
        columns,
        layers=layers,
        learning_rate=float(model_cfg.get("learning_rate", 0.03)),
        init_low=float(model_cfg.get("init_low", 0.0)),
        init_high=float(model_cfg.get("init_high", 1e-6)),
    )
    network = build_network(config, rng=np.random.default_rng(seed))
    return TargetingPolicy(rows, columns, network, training=True)


def _opponent_factory(name: str, rows: int, columns: int, fleet: Sequence[int]):
    if name != "random":
        raise ValueError(f"Unknown opponent: {name}")

    def factory(rng: np.random.Generator) -> RandomPlayer:
        return RandomPlayer("opponent", rows, columns, fleet, rng=rng)

    return factory


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    """Train a smart player by self-play and write metrics, summary and checkpoint."""

    _check_sections(config, "mapping")
    board_cfg = dict(config["board"])  # type: ignore[arg-type]
    model_cfg = dict(config["model"])  # type: ignore[arg-type]
    train_cfg = dict(config["train"])  # type: ignore[arg-type]

    rows = int(board_cfg["rows"])
    columns = int(board_cfg["columns"])
    fleet: List[int] = [int(size) for size in board_cfg.get("fleet", [2])]
    games = int(train_cfg.get("games", 1))
    seed = int(train_cfg.get("seed", 0))

    policy = _build_policy(board_cfg, model_cfg, seed)
    smart = SmartPlayer("smart", fleet, policy)
    factory = _opponent_factory(str(train_cfg.get("opponent", "random")), rows, columns, fleet)

    run_dir = _resolve_run_dir(train_cfg)
    run_dir.mkdir(parents=True, exist_ok=True)
    checkpoint = Path(train_cfg.get("checkpoint", run_dir / "smart_player.npz"))  # type: ignore[arg-type]

    _print_startup_summary(
        board=(rows, columns),
        fleet=fleet,
        topology=[policy.network.input_size] + [size for size, _ in policy.network.topology()],
        learning_rate=policy.network.optimizer.learning_rate,
        games=games,
        param_count=policy.network.parameter_count(),
    )

    game_log = GameLog(run_dir / "metrics_train.jsonl", csv_path=run_dir / "metrics_train.csv")
    plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))

    trainer = SelfPlayTrainer(smart, factory, callbacks=[game_log, plots])
    history = trainer.run(games, seed)
    plots.close()
    saved = smart.save(checkpoint)

    safe_config = json.loads(json.dumps(config))
    manifest = write_manifest(
        run_dir / "manifest.json",
        config=safe_config,
        network=policy.network.config.to_dict() if policy.network.config else {},
    )
    summary_tail = int(train_cfg.get("summary_tail", 32))
    summary_path = write_summary(game_log.path, run_dir / "summary.json", tail=summary_tail)
    (run_dir / "config.json").write_text(json.dumps(safe_config, indent=2))

    return RunResult(
        games=len(history),
        metrics_path=str(game_log.path),
        manifest_path=manifest,
        summary_path=str(summary_path),
        checkpoint_path=str(saved),
    )


def _resolve_run_dir(train_cfg: Mapping[str, object]) -> Path:
    if "run_dir" in train_cfg:
        return Path(train_cfg["run_dir"])  # type: ignore[arg-type]
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp


def _print_startup_summary(
    *,
    board: tuple[int, int],
    fleet: Sequence[int],
    topology: Sequence[int],
    learning_rate: float,
    games: int,
    param_count: int,
) -> None:
    print("=== neuroship session ===")
    print(f"Board         : {board[0]}x{board[1]}")
    print(f"Fleet         : {list(fleet)}")
    print(f"Topology      : {list(topology)}")
    print(f"Learning rate : {learning_rate}")
    print(f"Games         : {games}")
    print(f"Parameters    : {param_count}")
    print("=========================")


__all__ = ["load_config", "load_preset", "presets", "run_pipeline"]
