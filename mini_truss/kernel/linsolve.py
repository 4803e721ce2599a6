# mini_truss/kernel/linsolve.py
"""
LINEAR SOLVER: Pivoted Elimination on DenseMatrix
=================================================

Three routines share one numerical contract:

    - partial pivoting: the pivot for column k is the entry with the largest
      absolute value among rows k..n-1 of that column
    - pivot tolerance: a pivot with |p| < PIVOT_TOL means the matrix is singular
    - no fallback: elimination order never changes after a failure

    solve(A, b)        Gaussian elimination + back substitution  → x
    invert(A)          Gauss-Jordan on [A | I]                   → A⁻¹
    determinant(A)     pivoted elimination, swap parity tracked  → det(A)

A singular pivot is a legitimate answer for a structure (it means the truss
is a mechanism), so solve/invert raise SingularMatrixError and determinant
returns exactly 0.0 under the same condition.
"""

from typing import Sequence, Tuple, Union

import numpy as np

from .matrix import DenseMatrix, DimensionError

PIVOT_TOL = 1e-10


class SingularMatrixError(ArithmeticError):
    """Raised when a pivot falls below the tolerance during elimination."""

    def __init__(self, column: int, message: str = None):
        self.column = column
        super().__init__(message or f"Matrix is singular or near-singular at column {column}")


def _require_square(A: DenseMatrix, what: str) -> int:
    if not A.is_square():
        raise DimensionError(f"Matrix must be square to {what}, got {A.rows}x{A.cols}")
    return A.rows


def _select_pivot(work: np.ndarray, col: int, n: int) -> Tuple[int, float]:
    """Row index and magnitude of the largest |entry| in work[col:n, col]."""
    pivot_row = col
    max_val = abs(work[col, col])
    for row in range(col + 1, n):
        val = abs(work[row, col])
        if val > max_val:
            max_val = val
            pivot_row = row
    return pivot_row, max_val


def _swap_rows(work: np.ndarray, i: int, j: int) -> None:
    work[[i, j], :] = work[[j, i], :]


def solve(
    A: DenseMatrix,
    b: Union[np.ndarray, Sequence[float]],
    tol: float = PIVOT_TOL,
) -> np.ndarray:
    """
    Solve A·x = b by Gaussian elimination with partial pivoting.

    Parameters:
    -----------
    A : DenseMatrix
        Square coefficient matrix (not modified)
    b : array-like
        Right-hand side, length A.rows
    tol : float
        Pivot tolerance

    Returns:
    --------
    np.ndarray
        Solution vector x

    Raises:
    -------
    DimensionError
        If A is not square or len(b) != A.rows
    SingularMatrixError
        If any pivot magnitude is below tol (no partial result is returned)
    """
    n = _require_square(A, "solve")
    rhs = np.asarray(b, dtype=float)
    if rhs.ndim != 1 or rhs.shape[0] != n:
        raise DimensionError(f"Matrix and vector dimensions don't match: {n}x{n} vs {rhs.shape}")

    # Augmented matrix [A | b]
    aug = np.empty((n, n + 1), dtype=float)
    aug[:, :n] = A.data
    aug[:, n] = rhs

    # Forward elimination
    for col in range(n):
        pivot_row, max_val = _select_pivot(aug, col, n)
        if max_val < tol:
            raise SingularMatrixError(col)
        if pivot_row != col:
            _swap_rows(aug, col, pivot_row)

        for row in range(col + 1, n):
            factor = aug[row, col] / aug[col, col]
            if factor != 0.0:
                aug[row, col:] -= factor * aug[col, col:]

    # Back substitution
    x = np.zeros(n, dtype=float)
    for i in range(n - 1, -1, -1):
        s = aug[i, n] - np.dot(aug[i, i + 1:n], x[i + 1:n])
        x[i] = s / aug[i, i]

    return x


def invert(A: DenseMatrix, tol: float = PIVOT_TOL) -> DenseMatrix:
    """
    Invert A by Gauss-Jordan elimination on the augmented system [A | I].

    Raises:
    -------
    DimensionError
        If A is not square
    SingularMatrixError
        If any pivot magnitude is below tol
    """
    n = _require_square(A, "invert")

    aug = np.zeros((n, 2 * n), dtype=float)
    aug[:, :n] = A.data
    aug[:, n:] = np.eye(n)

    for col in range(n):
        pivot_row, max_val = _select_pivot(aug, col, n)
        if max_val < tol:
            raise SingularMatrixError(col, f"Matrix is singular, cannot invert (column {col})")
        if pivot_row != col:
            _swap_rows(aug, col, pivot_row)

        # Normalise the pivot row, then clear the column above and below
        aug[col, :] /= aug[col, col]
        for row in range(n):
            if row != col:
                factor = aug[row, col]
                if factor != 0.0:
                    aug[row, :] -= factor * aug[col, :]

    return DenseMatrix.from_array(aug[:, n:])


def determinant(A: DenseMatrix, tol: float = PIVOT_TOL) -> float:
    """
    Determinant via pivoted elimination on a private copy of A.

    The product of pivots is negated once per row interchange.
    Returns exactly 0.0 when a pivot magnitude falls below tol, which is
    the same condition under which solve() and invert() raise.

    Raises:
    -------
    DimensionError
        If A is not square
    """
    n = _require_square(A, "take a determinant")
    work = A.data.copy()

    det = 1.0
    swaps = 0
    for col in range(n):
        pivot_row, max_val = _select_pivot(work, col, n)
        if max_val < tol:
            return 0.0
        if pivot_row != col:
            swaps += 1
            _swap_rows(work, col, pivot_row)

        det *= work[col, col]

        for row in range(col + 1, n):
            factor = work[row, col] / work[col, col]
            if factor != 0.0:
                work[row, col:] -= factor * work[col, col:]

    if swaps % 2 == 1:
        det = -det
    return float(det)
