"""Core numerical primitives for neuroship."""

from . import activations, errors, initializers, layers, network, types, vector

__all__ = ["activations", "errors", "initializers", "layers", "network", "types", "vector"]
