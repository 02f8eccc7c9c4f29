"""Save and load trained networks as compressed ``.npz`` archives."""

from __future__ import annotations

import json
import zipfile
from pathlib import Path
from typing import Dict

import numpy as np

from ..core.errors import NeuroshipError, ResourceError
from ..core.layers import LayerSpec
from ..core.network import Network, NetworkConfig, build_network
from ..core.types import Array

DEFAULT_CHECKPOINT = Path("models") / "smart_player.npz"

_TOPOLOGY_KEY = "topology"


def _network_config(network: Network) -> NetworkConfig:
    if network.config is not None:
        return network.config
    return NetworkConfig(
        input_size=network.input_size,
        layers=tuple(LayerSpec(size, kind) for size, kind in network.topology()),
        cost=network.cost.name,
        optimizer=network.optimizer.name,
        learning_rate=network.optimizer.learning_rate,
    )


def save_network(network: Network, path: str | Path = DEFAULT_CHECKPOINT) -> Path:
    """Write topology and per-layer weights of ``network`` to ``path``."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload: Dict[str, Array] = dict(network.state_dict())
    payload[_TOPOLOGY_KEY] = np.array(json.dumps(_network_config(network).to_dict()))
    with path.open("wb") as handle:
        np.savez_compressed(handle, **payload)
    return path


def load_network(path: str | Path = DEFAULT_CHECKPOINT) -> Network:
    """Rebuild the network stored at ``path``.

    Any missing, unreadable or inconsistent artifact raises
    :class:`ResourceError`.
    """

    path = Path(path)
    if not path.is_file():
        raise ResourceError(f"No trained network found at {path}")
    try:
        with np.load(path, allow_pickle=False) as archive:
            arrays = {name: archive[name] for name in archive.files}
    except (OSError, EOFError, ValueError, zipfile.BadZipFile) as exc:
        raise ResourceError(f"Unreadable network archive {path}: {exc}") from exc

    if _TOPOLOGY_KEY not in arrays:
        raise ResourceError(f"Network archive {path} has no topology entry")
    try:
        config = NetworkConfig.from_dict(json.loads(str(arrays.pop(_TOPOLOGY_KEY))))
        network = build_network(config, rng=np.random.default_rng(0))
        network.load_state_dict(arrays)
    except (KeyError, TypeError, ValueError, NeuroshipError) as exc:
        raise ResourceError(f"Malformed network archive {path}: {exc}") from exc
    return network


__all__ = ["DEFAULT_CHECKPOINT", "load_network", "save_network"]
