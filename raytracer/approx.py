"""Floating-point comparison in units in the last place (ULPs).

Values are compared as float32. Each value is mapped onto a signed integer
line where adjacent representable floats differ by exactly one, so the
distance between two floats is the number of representable values between
them. This stays meaningful at any magnitude, unlike a fixed epsilon.
"""

from __future__ import annotations

from typing import Union

import numpy as np

DEFAULT_ULPS = 2

ArrayLike = Union[float, np.ndarray, list]


def _ordered_bits(values: ArrayLike) -> np.ndarray:
    """Map float32 values onto a monotonic int64 line.

    Args:
        values: Scalar or array of floats

    Returns:
        Array of int64 with the same shape as ``values``
    """
    floats = np.atleast_1d(np.asarray(values, dtype=np.float32))
    bits = floats.view(np.int32).astype(np.int64)
    # Negative floats are sign-magnitude; flip them so -0.0 and 0.0 meet at 0
    return np.where(bits < 0, np.int64(-(2**31)) - bits, bits)


def ulp_distance(a: ArrayLike, b: ArrayLike) -> np.ndarray:
    """Number of representable float32 values between ``a`` and ``b``.

    Args:
        a: Scalar or array of floats
        b: Scalar or array of floats, broadcastable against ``a``

    Returns:
        Array of non-negative int64 distances
    """
    return np.abs(_ordered_bits(a) - _ordered_bits(b))


def approx_eq(a: ArrayLike, b: ArrayLike, ulps: int = DEFAULT_ULPS) -> bool:
    """Check whether all values of ``a`` and ``b`` are within ``ulps`` of each other.

    NaN is never equal to anything, including itself.

    Args:
        a: Scalar or array of floats
        b: Scalar or array of floats, broadcastable against ``a``
        ulps: Maximum allowed distance in float32 ULPs

    Returns:
        True if every pair is within tolerance
    """
    if ulps < 0:
        raise ValueError(f"ulps must be non-negative, got {ulps}")

    a32 = np.asarray(a, dtype=np.float32)
    b32 = np.asarray(b, dtype=np.float32)

    if np.any(np.isnan(a32)) or np.any(np.isnan(b32)):
        return False

    return bool(np.all(ulp_distance(a32, b32) <= ulps))
