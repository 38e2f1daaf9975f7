"""Numeric kernel for a ray tracer.

Homogeneous tuples (points, vectors, colors), dense matrices with a lazy
transpose, and a pixel canvas that serializes to the plain-text PPM format.
"""

from __future__ import annotations

__version__ = "0.1.0"
