"""Homogeneous 4-component tuples.

A single value type covers points, vectors and colors. The fourth component
``w`` carries the homogeneous coordinate: 1.0 for points, 0.0 for vectors.
Colors reuse the point encoding and are read through the ``red``, ``green``
and ``blue`` accessors; ``is_point`` and ``is_vector`` do not classify them.

Components are stored as float32. Reductions (magnitude, dot product) are
accumulated in double precision and rounded once, so a normalized tuple has
a magnitude within 2 ULPs of 1.0.
"""

from __future__ import annotations

import math
from typing import Iterator

import numpy as np

from raytracer.approx import DEFAULT_ULPS, approx_eq

EPSILON = float(np.finfo(np.float32).eps)


class Tuple:
    """Immutable (x, y, z, w) value with float32 components."""

    __slots__ = ("_v",)

    # Make numpy scalars defer to our reflected operators (np.float32(2) * t)
    __array_ufunc__ = None

    def __init__(self, x: float, y: float, z: float, w: float):
        v = np.array([x, y, z, w], dtype=np.float32)
        v.flags.writeable = False
        self._v = v

    @classmethod
    def point(cls, x: float, y: float, z: float) -> "Tuple":
        return cls(x, y, z, 1.0)

    @classmethod
    def vector(cls, x: float, y: float, z: float) -> "Tuple":
        return cls(x, y, z, 0.0)

    @classmethod
    def color(cls, red: float, green: float, blue: float) -> "Tuple":
        return cls(red, green, blue, 1.0)

    @property
    def x(self) -> float:
        return float(self._v[0])

    @property
    def y(self) -> float:
        return float(self._v[1])

    @property
    def z(self) -> float:
        return float(self._v[2])

    @property
    def w(self) -> float:
        return float(self._v[3])

    red = x
    green = y
    blue = z

    def is_point(self) -> bool:
        """True if ``w`` is within float32 epsilon of 1.0."""
        return abs(self.w - 1.0) < EPSILON

    def is_vector(self) -> bool:
        """True if ``w`` is exactly 0.0.

        Unlike ``is_point`` this is an exact comparison: adding vectors keeps
        ``w`` at 0.0, while ``w`` of a point may drift away from 1.0.
        """
        return self.w == 0.0

    def mag(self) -> float:
        """Euclidean length of (x, y, z). ``w`` is not included.

        Lengths beyond the float32 range come back as ``inf``.
        """
        x, y, z = (float(c) for c in self._v[:3])
        with np.errstate(over="ignore"):
            return float(np.float32(math.sqrt(x * x + y * y + z * z)))

    def normalize(self) -> "Tuple":
        """Scale (x, y, z) to unit length and return it as a vector.

        The magnitude is kept in double precision, so tuples whose length
        overflows float32 still normalize correctly.

        Returns:
            Vector with the same direction and magnitude 1

        Raises:
            ValueError: If the magnitude is zero or not finite
        """
        x, y, z = (float(c) for c in self._v[:3])
        mag = math.hypot(x, y, z)
        if mag == 0.0 or not math.isfinite(mag):
            raise ValueError(f"Cannot normalize tuple with magnitude {mag}: {self!r}")

        return Tuple.vector(x / mag, y / mag, z / mag)

    def dot(self, other: "Tuple") -> float:
        """Inner product over all four components, ``w`` included."""
        return float(np.float32(sum(float(a) * float(b) for a, b in zip(self._v, other._v))))

    def cross(self, other: "Tuple") -> "Tuple":
        """Cross product of the (x, y, z) parts, returned as a vector."""
        a, b = self._v, other._v
        return Tuple.vector(
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0],
        )

    def hadamard(self, other: "Tuple") -> "Tuple":
        """Component-wise product, used to blend colors channel by channel."""
        return Tuple(*(self._v * other._v))

    def approx_eq(self, other: "Tuple", ulps: int = DEFAULT_ULPS) -> bool:
        """Component-wise comparison within ``ulps`` float32 ULPs."""
        return approx_eq(self._v, other._v, ulps)

    def to_array(self) -> np.ndarray:
        """Writable float32 copy of the four components."""
        return self._v.copy()

    def __add__(self, other: "Tuple") -> "Tuple":
        if not isinstance(other, Tuple):
            return NotImplemented
        return Tuple(*(self._v + other._v))

    def __sub__(self, other: "Tuple") -> "Tuple":
        if not isinstance(other, Tuple):
            return NotImplemented
        return Tuple(*(self._v - other._v))

    def __neg__(self) -> "Tuple":
        return Tuple(*(-self._v))

    def __mul__(self, scalar: float) -> "Tuple":
        if isinstance(scalar, Tuple):
            return NotImplemented
        return Tuple(*(self._v * np.float32(scalar)))

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Tuple":
        if isinstance(scalar, Tuple):
            return NotImplemented
        return Tuple(*(self._v / np.float32(scalar)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tuple):
            return NotImplemented
        return bool(np.array_equal(self._v, other._v))

    def __hash__(self) -> int:
        # -0.0 and 0.0 compare equal, so they must hash equal
        return hash(tuple(float(c) + 0.0 for c in self._v))

    def __iter__(self) -> Iterator[float]:
        return (float(c) for c in self._v)

    def __getitem__(self, index: int) -> float:
        return float(self._v[index])

    def __len__(self) -> int:
        return 4

    def __repr__(self) -> str:
        return f"Tuple({self.x!r}, {self.y!r}, {self.z!r}, {self.w!r})"


def point(x: float, y: float, z: float) -> Tuple:
    """Create a point (w = 1.0)."""
    return Tuple.point(x, y, z)


def vector(x: float, y: float, z: float) -> Tuple:
    """Create a vector (w = 0.0)."""
    return Tuple.vector(x, y, z)


def color(red: float, green: float, blue: float) -> Tuple:
    """Create a color. Colors share the point encoding (w = 1.0)."""
    return Tuple.color(red, green, blue)
