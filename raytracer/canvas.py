"""Pixel canvas and PPM serialization.

The canvas is a width x height grid of colors stored as a float32 array of
shape (height, width, 4). Pixels are addressed as (x, y) with x running
left-to-right and y top-to-bottom. Every access is bounds-checked.
"""

from __future__ import annotations

import logging

import numpy as np

from raytracer.tuples import Tuple

logger = logging.getLogger(__name__)

PPM_MAGIC = "P3"
MAX_COLOR_VALUE = 255


class PixelOutOfRangeError(IndexError):
    """Raised when a pixel coordinate lies outside the canvas."""

    def __init__(self, axis: str, value: int, limit: int):
        self.axis = axis
        self.value = value
        self.limit = limit
        super().__init__(f"{axis} {value} out of range (must be 0 <= {axis} < {limit})")


class Canvas:
    """Grid of colors, initialized to black."""

    def __init__(self, width: int, height: int):
        """Create a black canvas.

        Args:
            width: Number of pixel columns
            height: Number of pixel rows
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")

        self._width = width
        self._height = height
        self._pixels = np.zeros((height, width, 4), dtype=np.float32)
        self._pixels[..., 3] = 1.0

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def _check_bounds(self, x: int, y: int) -> None:
        for axis, value in (("x", x), ("y", y)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise TypeError(f"Pixel {axis} must be an integer, got {value!r}")

        if not 0 <= x < self._width:
            raise PixelOutOfRangeError("x", x, self._width)
        if not 0 <= y < self._height:
            raise PixelOutOfRangeError("y", y, self._height)

    def get_pixel_at(self, x: int, y: int) -> Tuple:
        """Read the color at (x, y).

        Raises:
            PixelOutOfRangeError: If x or y lies outside the canvas
            TypeError: If x or y is not an integer
        """
        self._check_bounds(x, y)
        return Tuple(*self._pixels[y, x])

    def write_pixel_at(self, x: int, y: int, pixel: Tuple) -> None:
        """Set the color at (x, y).

        Raises:
            PixelOutOfRangeError: If x or y lies outside the canvas
            TypeError: If x or y is not an integer, or ``pixel`` is not a Tuple
        """
        self._check_bounds(x, y)
        if not isinstance(pixel, Tuple):
            raise TypeError(f"Canvas pixels must be Tuple colors, got {type(pixel).__name__}")

        self._pixels[y, x] = pixel.to_array()

    def to_ppm(self, max_color_value: int = MAX_COLOR_VALUE) -> str:
        """Serialize the canvas as a plain-text PPM (P3) image.

        Each channel is scaled by ``max_color_value``, clamped to
        [0, max_color_value] and rounded half away from zero. Every row of
        pixels becomes one line of space-separated "r g b " triples.

        Args:
            max_color_value: Largest channel value in the output

        Returns:
            The PPM document
        """
        if not 0 < max_color_value <= 65535:
            raise ValueError(f"max_color_value must be in 1..65535, got {max_color_value}")

        if np.isnan(self._pixels[..., :3]).any():
            raise ValueError("Cannot serialize a canvas containing NaN color channels")

        scaled = self._pixels[..., :3] * np.float32(max_color_value)
        clamped = np.clip(scaled, 0, max_color_value).astype(np.float64)
        channels = np.floor(clamped + 0.5).astype(np.int64)

        lines = [PPM_MAGIC, f"{self._width} {self._height}", str(max_color_value)]
        for row in channels:
            lines.append("".join(f"{r} {g} {b} " for r, g, b in row))

        ppm = "\n".join(lines) + "\n"
        logger.debug(f"Serialized {self._width}x{self._height} canvas to PPM ({len(ppm)} bytes)")
        return ppm

    def __repr__(self) -> str:
        return f"Canvas({self._width}, {self._height})"
