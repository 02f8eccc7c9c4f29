"""Error taxonomy for the neuroship engine."""

from __future__ import annotations


class NeuroshipError(Exception):
    """Base class for every error raised by neuroship."""


class ShapeMismatch(NeuroshipError, ValueError):
    """Vectors or matrices with incompatible dimensions."""


class StateError(NeuroshipError, RuntimeError):
    """An operation was invoked out of its required order."""


class ResourceError(NeuroshipError, RuntimeError):
    """A persisted network is missing, unreadable or structurally invalid."""


class ConfigurationError(NeuroshipError, ValueError):
    """Invalid topology or hyperparameters."""


def check_length(expected: int, actual: int, what: str) -> None:
    if expected != actual:
        raise ShapeMismatch(f"{what}: expected length {expected}, got {actual}")


__all__ = [
    "NeuroshipError",
    "ShapeMismatch",
    "StateError",
    "ResourceError",
    "ConfigurationError",
    "check_length",
]
