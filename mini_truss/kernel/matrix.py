# mini_truss/kernel/matrix.py
"""
DENSE MATRIX: A Small Real-Valued Matrix Type
=============================================

PURPOSE:
--------
The stiffness method only needs a handful of matrix operations:
fill, copy, transpose, products, and a diagnostic "largest entry".
This module provides them on a fixed-size, mutable ``DenseMatrix``
backed by a numpy float64 array.

    K = DenseMatrix(6, 6)        # 6×6 zeros
    K[0, 3] += 1.0               # in-place edit
    Kt = transpose(K)
    y = multiply(K, x)           # matrix × vector → 1-D array
    C = multiply(K, Kt)          # matrix × matrix → DenseMatrix
    S = multiply(K, 2.0)         # scalar scale   → DenseMatrix

CONTRACT:
---------
Shape mismatches are programming errors, not analysis outcomes.
They raise ``DimensionError`` immediately instead of returning None.
"""

from numbers import Real
from typing import Iterable, Sequence, Tuple, Union

import numpy as np


class DimensionError(ValueError):
    """Raised when matrix/vector shapes are incompatible for an operation."""
    pass


class DenseMatrix:
    """
    A fixed-size ``rows × cols`` grid of floats, mutable in place.

    Parameters:
    -----------
    rows : int
        Number of rows (>= 0)
    cols : int
        Number of columns (>= 0)

    Examples:
    ---------
    >>> I = DenseMatrix(3, 3).identity()
    >>> I[1, 1]
    1.0
    >>> DenseMatrix.from_rows([[1, 2], [3, 4]]).abs_max()
    4.0
    """

    __slots__ = ('data',)

    def __init__(self, rows: int, cols: int):
        if rows < 0 or cols < 0:
            raise DimensionError(f"Matrix size must be non-negative, got {rows}x{cols}")
        self.data = np.zeros((rows, cols), dtype=float)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_array(cls, array) -> "DenseMatrix":
        """Build a matrix from any 2-D array-like (the input is copied)."""
        arr = np.array(array, dtype=float)
        if arr.ndim != 2:
            raise DimensionError(f"Expected a 2-D array, got shape {arr.shape}")
        m = cls(*arr.shape)
        m.data[:, :] = arr
        return m

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[float]]) -> "DenseMatrix":
        return cls.from_array([list(r) for r in rows])

    # ------------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self.data.shape[0]

    @property
    def cols(self) -> int:
        return self.data.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.data.shape

    def is_square(self) -> bool:
        return self.rows == self.cols

    # ------------------------------------------------------------------
    # In-place fills and copies
    # ------------------------------------------------------------------

    def zero(self) -> "DenseMatrix":
        """Set every entry to 0. Returns self for chaining."""
        self.data.fill(0.0)
        return self

    def identity(self) -> "DenseMatrix":
        """Ones on the first min(rows, cols) diagonal entries, zeros elsewhere."""
        self.zero()
        n = min(self.rows, self.cols)
        for i in range(n):
            self.data[i, i] = 1.0
        return self

    def clone(self) -> "DenseMatrix":
        """Deep copy (no shared storage)."""
        m = DenseMatrix(self.rows, self.cols)
        m.data[:, :] = self.data
        return m

    def to_array(self) -> np.ndarray:
        """Copy of the entries as a numpy array."""
        return self.data.copy()

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def abs_max(self) -> float:
        """
        Largest absolute entry.

        Always non-negative; an empty matrix returns 0.0.
        Used to normalise systems before elimination, not as a matrix norm.
        """
        if self.data.size == 0:
            return 0.0
        return float(np.max(np.abs(self.data)))

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------

    def __getitem__(self, key):
        return self.data[key]

    def __setitem__(self, key, value):
        self.data[key] = value

    def __eq__(self, other):
        if not isinstance(other, DenseMatrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self.data, other.data))

    __hash__ = None

    def __repr__(self):
        return f"DenseMatrix({self.rows}x{self.cols})"

    def __str__(self):
        lines = [f"Matrix ({self.rows}x{self.cols}):"]
        for i in range(self.rows):
            cells = ", ".join(f"{v:8.3f}" for v in self.data[i])
            lines.append(f"[ {cells} ]")
        return "\n".join(lines)


# ----------------------------------------------------------------------
# Free functions
# ----------------------------------------------------------------------

def transpose(A: DenseMatrix) -> DenseMatrix:
    """Return the ``cols × rows`` mirror of A."""
    result = DenseMatrix(A.cols, A.rows)
    result.data[:, :] = A.data.T
    return result


def multiply(
    A: DenseMatrix,
    other: Union[DenseMatrix, np.ndarray, Sequence[float], float],
) -> Union[DenseMatrix, np.ndarray]:
    """
    Multiply a matrix by a matrix, a vector, or a scalar.

    - DenseMatrix: requires A.cols == B.rows, returns A.rows × B.cols matrix
    - vector (1-D): requires A.cols == len(x), returns 1-D array of length A.rows
    - scalar: elementwise scale, returns a new matrix

    Raises:
    -------
    DimensionError
        If the inner dimensions do not agree.
    """
    if isinstance(other, DenseMatrix):
        if A.cols != other.rows:
            raise DimensionError(
                f"Matrix dimensions incompatible for multiplication: "
                f"{A.rows}x{A.cols} @ {other.rows}x{other.cols}"
            )
        result = DenseMatrix(A.rows, other.cols)
        result.data[:, :] = A.data @ other.data
        return result

    if isinstance(other, Real):
        result = DenseMatrix(A.rows, A.cols)
        result.data[:, :] = A.data * float(other)
        return result

    x = np.asarray(other, dtype=float)
    if x.ndim != 1:
        raise DimensionError(f"Expected a 1-D vector, got shape {x.shape}")
    if A.cols != x.shape[0]:
        raise DimensionError(
            f"Matrix-vector dimensions incompatible: {A.rows}x{A.cols} @ ({x.shape[0]},)"
        )
    return A.data @ x
