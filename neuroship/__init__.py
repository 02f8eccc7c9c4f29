"""neuroship public API."""

from .core import activations, errors, types  # noqa: F401
from .core.errors import ConfigurationError, ResourceError, ShapeMismatch, StateError
from .core.layers import Layer, LayerSpec
from .core.network import Network, NetworkConfig, build_network
from .core.vector import Vector
from .game.board import ShotResult
from .policy import TargetingPolicy
from .training.checkpoints import DEFAULT_CHECKPOINT, load_network, save_network
from .training.pipelines import load_config, load_preset, presets, run_pipeline
from .training.trainer import SelfPlayTrainer

__all__ = [
    "ConfigurationError",
    "DEFAULT_CHECKPOINT",
    "Layer",
    "LayerSpec",
    "Network",
    "NetworkConfig",
    "ResourceError",
    "SelfPlayTrainer",
    "ShapeMismatch",
    "ShotResult",
    "StateError",
    "TargetingPolicy",
    "Vector",
    "activations",
    "build_network",
    "errors",
    "load_config",
    "load_network",
    "load_preset",
    "presets",
    "run_pipeline",
    "save_network",
    "types",
]
