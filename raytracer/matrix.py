"""Dense float32 matrices with O(1) transpose.

A matrix owns its raw row-major grid and an orientation flag. Transposing
flips the flag instead of moving data, so every indexed read must go through
``Matrix.get``, which applies the flag. Nothing else in this module indexes
the raw grid.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

import numpy as np

from raytracer.approx import DEFAULT_ULPS, approx_eq
from raytracer.tuples import Tuple

logger = logging.getLogger(__name__)


class Matrix:
    """Rows x cols grid of float32 values with a lazy transpose."""

    def __init__(self, rows: int, cols: int):
        """Create a zero-filled matrix.

        Args:
            rows: Number of rows
            cols: Number of columns
        """
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Matrix dimensions must be positive, got {rows}x{cols}")

        self._values = np.zeros((rows, cols), dtype=np.float32)
        self._transposed = False

    @classmethod
    def from_values(cls, values: Sequence[Sequence[float]]) -> "Matrix":
        """Create a matrix from a sequence of equally long rows.

        Args:
            values: Row sequences, e.g. ``[[1, 2], [3, 4]]``

        Returns:
            Matrix with ``len(values)`` rows and ``len(values[0])`` columns

        Raises:
            ValueError: If there are no rows, no columns, or rows differ in length
        """
        rows = [list(row) for row in values]
        if not rows or not rows[0]:
            raise ValueError("Matrix values must contain at least one row and one column")

        cols = len(rows[0])
        for i, row in enumerate(rows):
            if len(row) != cols:
                raise ValueError(
                    f"Ragged matrix values: row {i} has {len(row)} columns, expected {cols}"
                )

        m = cls(len(rows), cols)
        m._values = np.array(rows, dtype=np.float32)
        return m

    @classmethod
    def identity(cls, n: int) -> "Matrix":
        """Create an n x n matrix with ones on the main diagonal."""
        m = cls(n, n)
        m._values = np.eye(n, dtype=np.float32)
        return m

    @classmethod
    def from_tuple(cls, t: Tuple) -> "Matrix":
        """Pack a tuple into a 4x1 column matrix."""
        return cls.from_values([[c] for c in t])

    @property
    def rows(self) -> int:
        return self._values.shape[1] if self._transposed else self._values.shape[0]

    @property
    def cols(self) -> int:
        return self._values.shape[0] if self._transposed else self._values.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        """Logical (rows, cols), taking the transpose flag into account."""
        return self.rows, self.cols

    @property
    def transposed(self) -> bool:
        return self._transposed

    def get(self, row: int, col: int) -> float:
        """Read the element at logical position (row, col).

        Raises:
            IndexError: If row or col lies outside the logical shape
        """
        if not 0 <= row < self.rows:
            raise IndexError(f"row {row} out of range for {self.rows}x{self.cols} matrix")
        if not 0 <= col < self.cols:
            raise IndexError(f"col {col} out of range for {self.rows}x{self.cols} matrix")

        if self._transposed:
            return float(self._values[col, row])
        return float(self._values[row, col])

    def transpose(self) -> "Matrix":
        """Transpose in place by flipping the orientation flag.

        Returns:
            This matrix, to allow chaining
        """
        self._transposed = not self._transposed
        return self

    def dot(self, other: "Matrix | Tuple") -> "Matrix":
        """Matrix product ``self . other``.

        result[i][j] = sum over a of self.get(i, a) * other.get(a, j). Sums are
        accumulated in double precision and rounded to float32 on store.
        Neither operand is modified.

        Args:
            other: Matrix with ``self.cols`` rows, or a tuple (as a 4x1 column)

        Returns:
            New matrix of shape (self.rows, other.cols)

        Raises:
            ValueError: If the inner dimensions differ
        """
        if isinstance(other, Tuple):
            other = Matrix.from_tuple(other)

        if self.cols != other.rows:
            raise ValueError(
                f"Cannot multiply {self.rows}x{self.cols} matrix "
                f"by {other.rows}x{other.cols} matrix"
            )

        result: List[List[float]] = []
        for i in range(self.rows):
            row = []
            for j in range(other.cols):
                acc = 0.0
                for a in range(self.cols):
                    acc += self.get(i, a) * other.get(a, j)
                row.append(acc)
            result.append(row)

        logger.debug(
            f"Matrix product: {self.rows}x{self.cols} . {other.rows}x{other.cols} "
            f"-> {self.rows}x{other.cols}"
        )
        return Matrix.from_values(result)

    def __matmul__(self, other: "Matrix | Tuple") -> "Matrix":
        if not isinstance(other, (Matrix, Tuple)):
            return NotImplemented
        return self.dot(other)

    def approx_eq(self, other: "Matrix", ulps: int = DEFAULT_ULPS) -> bool:
        """Compare every (row, col) pair within ``ulps`` float32 ULPs.

        Matrices of different logical shape are never equal.
        """
        if self.shape != other.shape:
            return False
        return approx_eq(self.to_array(), other.to_array(), ulps)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.approx_eq(other)

    __hash__ = None

    def to_array(self) -> np.ndarray:
        """Float32 copy of the logical grid."""
        return np.array(
            [[self.get(r, c) for c in range(self.cols)] for r in range(self.rows)],
            dtype=np.float32,
        )

    def to_list(self) -> List[List[float]]:
        """Logical grid as nested lists of Python floats."""
        return [[self.get(r, c) for c in range(self.cols)] for r in range(self.rows)]

    def copy(self) -> "Matrix":
        """Independent matrix with the same logical content, not transposed."""
        return Matrix.from_values(self.to_list())

    def __repr__(self) -> str:
        return f"Matrix({self.to_list()!r})"
