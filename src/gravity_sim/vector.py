# MIT License (see LICENSE)
"""
Small fixed-dimension vector value types.

Vector2, Vector3 and Vector4 are immutable value objects used at the edges of
the engine: orbital seeding, cursor/screen conversions, direction vectors and
packed (velocity, acceleration) derivatives. The per-body hot path works on
numpy arrays instead; every vector converts to one through ``__array__`` so
``f64(v)`` and ``np.asarray(v)`` accept them directly.

Equality is approximate: two vectors are equal when their distance is below
machine epsilon. Because of that the types are deliberately unhashable.

Screen transforms:
    left_up:  world → window pixels, y axis pointing down, origin at top-left.
    centered: window pixels → world, the inverse of left_up.
Both are parameterized by the window ``middle`` and a ``scale`` in px/unit.
"""
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np

from .constants import EPSILON


class _Vector:
    """Arithmetic shared by all vector dimensions."""

    __slots__ = ()
    __hash__ = None
    # numpy scalars on the left defer to our reflected operators
    __array_ufunc__ = None

    _FIELDS: tuple[str, ...] = ()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def zeros(cls):
        return cls(*([0.0] * len(cls._FIELDS)))

    @classmethod
    def ones(cls):
        return cls(*([1.0] * len(cls._FIELDS)))

    @classmethod
    def scalar(cls, s: float):
        """Vector with every component equal to s."""
        return cls(*([float(s)] * len(cls._FIELDS)))

    @classmethod
    def from_array(cls, arr: Sequence[float] | np.ndarray):
        if len(arr) != len(cls._FIELDS):
            raise ValueError(
                f"{cls.__name__} needs {len(cls._FIELDS)} components, got {len(arr)}"
            )
        return cls(*(float(c) for c in arr))

    @classmethod
    def barycenter(cls, vectors: Sequence["_Vector"], weights: Sequence[float]):
        """
        Weighted sum Σ wᵢ·vᵢ.

        Not normalized: divide by Σ wᵢ to obtain a centre of mass.
        """
        total = cls.zeros()
        for v, w in zip(vectors, weights):
            total = total + v * w
        return total

    # ------------------------------------------------------------------
    # Sequence / numpy protocol
    # ------------------------------------------------------------------

    def components(self) -> tuple[float, ...]:
        return tuple(getattr(self, name) for name in self._FIELDS)

    def as_array(self) -> np.ndarray:
        return np.array(self.components(), dtype=np.float64)

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        return np.array(self.components(), dtype=dtype or np.float64)

    def __iter__(self) -> Iterator[float]:
        return iter(self.components())

    def __len__(self) -> int:
        return len(self._FIELDS)

    def __getitem__(self, index: int) -> float:
        return self.components()[index]

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _combine(self, other, op):
        if isinstance(other, _Vector):
            if type(other) is not type(self):
                raise TypeError(
                    f"Cannot combine {type(self).__name__} with {type(other).__name__}"
                )
            return type(self)(*(op(a, b) for a, b in zip(self, other)))
        if isinstance(other, (int, float, np.floating, np.integer)):
            s = float(other)
            return type(self)(*(op(a, s) for a in self))
        return NotImplemented

    def __add__(self, other):
        if not isinstance(other, _Vector):
            return NotImplemented
        return self._combine(other, lambda a, b: a + b)

    def __sub__(self, other):
        if not isinstance(other, _Vector):
            return NotImplemented
        return self._combine(other, lambda a, b: a - b)

    def __mul__(self, other):
        """Scale by a scalar, or component-wise by a vector of the same type."""
        return self._combine(other, lambda a, b: a * b)

    __rmul__ = __mul__

    def __truediv__(self, other):
        """Divide by a scalar, or component-wise by a vector of the same type."""
        return self._combine(other, lambda a, b: a / b)

    def __neg__(self):
        return type(self)(*(-c for c in self))

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.distance(other) < EPSILON

    # ------------------------------------------------------------------
    # Metric
    # ------------------------------------------------------------------

    def dot(self, other: "_Vector") -> float:
        return sum(a * b for a, b in zip(self, other))

    def magnitude2(self) -> float:
        return sum(c * c for c in self)

    def magnitude(self) -> float:
        return math.sqrt(self.magnitude2())

    def distance2(self, other: "_Vector") -> float:
        return sum((a - b) * (a - b) for a, b in zip(self, other))

    def distance(self, other: "_Vector") -> float:
        return math.sqrt(self.distance2(other))

    def normalized(self):
        """
        Unit vector in the same direction.

        A zero vector yields NaN components; checking for it is the caller's job.
        """
        m = self.magnitude()
        if m == 0.0:
            return type(self).scalar(math.nan)
        return type(self)(*(c / m for c in self))


@dataclass(frozen=True, eq=False)
class Vector2(_Vector):
    """Two-dimensional vector; the working type of the planar simulation."""
    x: float = 0.0
    y: float = 0.0

    _FIELDS = ("x", "y")

    @classmethod
    def ex(cls) -> "Vector2":
        return cls(1.0, 0.0)

    @classmethod
    def ey(cls) -> "Vector2":
        return cls(0.0, 1.0)

    # Polar coordinates -------------------------------------------------

    @classmethod
    def polar(cls, mag: float, ang: float) -> "Vector2":
        """Vector of length ``mag`` at angle ``ang`` (radians from +x)."""
        return cls(mag * math.cos(ang), mag * math.sin(ang))

    @classmethod
    def radial(cls, ang: float) -> "Vector2":
        """Unit vector at angle ``ang``."""
        return cls(math.cos(ang), math.sin(ang))

    @classmethod
    def orthoradial(cls, ang: float) -> "Vector2":
        """Unit vector at angle ``ang + π/2``."""
        return cls(-math.sin(ang), math.cos(ang))

    def radius(self) -> float:
        return self.magnitude()

    def angle(self) -> float:
        return math.atan2(self.y, self.x)

    # Screen transforms -------------------------------------------------

    def left_up(self, middle: "Vector2", scale: float) -> "Vector2":
        """World coordinates → window pixels (origin top-left, y down)."""
        return Vector2(self.x * scale + middle.x, middle.y - self.y * scale)

    def centered(self, middle: "Vector2", scale: float) -> "Vector2":
        """Window pixels → world coordinates (origin at the window middle, y up)."""
        return Vector2((self.x - middle.x) / scale, (middle.y - self.y) / scale)

    def rotate(self, angle: float) -> "Vector2":
        c, s = math.cos(angle), math.sin(angle)
        return Vector2(self.x * c - self.y * s, self.x * s + self.y * c)

    def rotate_translate(self, angle: float, direction: "Vector2") -> "Vector2":
        return self.rotate(angle) + direction


@dataclass(frozen=True, eq=False)
class Vector3(_Vector):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    _FIELDS = ("x", "y", "z")


@dataclass(frozen=True, eq=False)
class Vector4(_Vector):
    """
    Four-component vector.

    Used to pack a planar state or derivative: the upper half (x, y) holds
    position/velocity and the lower half (z, w) velocity/acceleration.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0

    _FIELDS = ("x", "y", "z", "w")

    @classmethod
    def concat(cls, upper, lower) -> "Vector4":
        """Pack two 2D vectors (or length-2 sequences) into one Vector4."""
        return cls(float(upper[0]), float(upper[1]), float(lower[0]), float(lower[1]))

    def upper(self) -> Vector2:
        return Vector2(self.x, self.y)

    def lower(self) -> Vector2:
        return Vector2(self.z, self.w)

    def split(self) -> tuple[Vector2, Vector2]:
        return self.upper(), self.lower()

    def with_upper(self, vector: Vector2) -> "Vector4":
        return Vector4(vector.x, vector.y, self.z, self.w)

    def with_lower(self, vector: Vector2) -> "Vector4":
        return Vector4(self.x, self.y, vector.x, vector.y)
