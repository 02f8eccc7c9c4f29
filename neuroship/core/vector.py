"""Fixed-length numeric vector flowing between layers."""

from __future__ import annotations

from numbers import Real
from typing import Iterable, Iterator, List, Union

import numpy as np

from .errors import ShapeMismatch
from .types import Array


class Vector:
    """Read-only float64 vector whose length is fixed at construction.

    Binary operations require operands of equal length and always return a
    new ``Vector``; the underlying buffer is flagged non-writeable so no
    operation can mutate an operand in place.
    """

    __slots__ = ("_data",)

    def __init__(self, values: Union["Vector", Iterable[float], Array]) -> None:
        if isinstance(values, Vector):
            values = values._data
        data = np.array(values, dtype=np.float64)
        if data.ndim != 1:
            raise ShapeMismatch(f"Vector expects 1-D data, got shape {data.shape}")
        data.setflags(write=False)
        self._data = data

    @classmethod
    def zeros(cls, length: int) -> "Vector":
        return cls(np.zeros(length, dtype=np.float64))

    @property
    def data(self) -> Array:
        """Underlying read-only buffer."""

        return self._data

    def to_list(self) -> List[float]:
        return [float(v) for v in self._data]

    def __len__(self) -> int:
        return int(self._data.shape[0])

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __iter__(self) -> Iterator[float]:
        return (float(v) for v in self._data)

    def __repr__(self) -> str:
        return f"Vector({self.to_list()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return len(self) == len(other) and bool(np.array_equal(self._data, other._data))

    def _other(self, other: "Vector", op: str) -> Array:
        if not isinstance(other, Vector):
            other = Vector(other)
        if len(other) != len(self):
            raise ShapeMismatch(
                f"Cannot {op} vectors of length {len(self)} and {len(other)}"
            )
        return other._data

    def __add__(self, other: "Vector") -> "Vector":
        return Vector(self._data + self._other(other, "add"))

    def __sub__(self, other: "Vector") -> "Vector":
        return Vector(self._data - self._other(other, "subtract"))

    def __mul__(self, other: Union["Vector", float]) -> "Vector":
        if isinstance(other, Real):
            return Vector(self._data * float(other))
        return Vector(self._data * self._other(other, "multiply"))

    def __rmul__(self, other: float) -> "Vector":
        if isinstance(other, Real):
            return Vector(self._data * float(other))
        return NotImplemented

    def dot(self, other: "Vector") -> float:
        return float(np.dot(self._data, self._other(other, "dot")))


__all__ = ["Vector"]
