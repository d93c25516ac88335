"""
Dense linear system solver.

Gaussian elimination with partial pivoting. Near-singular systems do not
raise: columns without a usable pivot are skipped during elimination and the
matching unknowns are set to 0 during back-substitution.
"""

import logging
from typing import Sequence, Tuple, Union

import numpy as np

logger = logging.getLogger(__name__)

PIVOT_EPSILON = 1e-10

ArrayLike = Union[np.ndarray, Sequence[Sequence[float]]]


def gaussian_elimination(
    matrix: ArrayLike, vector: Union[np.ndarray, Sequence[float]]
) -> Tuple[np.ndarray, int]:
    """
    Solve ``matrix @ x = vector`` and report how many pivots were unusable.

    Args:
        matrix: Square coefficient matrix (n x n).
        vector: Right-hand side of length n.

    Returns:
        Tuple of (solution, skipped_pivots). ``solution`` is a finite float64
        array of length n. ``skipped_pivots`` counts columns whose pivot
        magnitude was below PIVOT_EPSILON; 0 means the system was solved
        normally.

    Raises:
        ValueError: If the matrix is not square or does not match the vector.
    """
    A = np.array(matrix, dtype=np.float64)
    b = np.array(vector, dtype=np.float64)

    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"Expected a square matrix, got shape {A.shape}")
    if b.shape != (A.shape[0],):
        raise ValueError(
            f"Vector length {b.shape} does not match matrix size {A.shape[0]}"
        )

    n = A.shape[0]
    skipped = 0

    # Forward elimination
    for col in range(n):
        # 1) Find pivot row (partial pivot)
        pivot = col + int(np.argmax(np.abs(A[col:, col])))

        # 2) Swap pivot row into position
        if pivot != col:
            A[[col, pivot]] = A[[pivot, col]]
            b[[col, pivot]] = b[[pivot, col]]

        # 3) No usable pivot: leave this column as is
        if abs(A[col, col]) < PIVOT_EPSILON:
            skipped += 1
            continue

        # 4) Eliminate below pivot
        for row in range(col + 1, n):
            factor = A[row, col] / A[col, col]
            A[row, col:] -= factor * A[col, col:]
            b[row] -= factor * b[col]

    # Back-substitution
    x = np.zeros(n, dtype=np.float64)
    for i in reversed(range(n)):
        if abs(A[i, i]) < PIVOT_EPSILON:
            x[i] = 0.0
            continue
        x[i] = (b[i] - A[i, i + 1 :] @ x[i + 1 :]) / A[i, i]

    if skipped:
        logger.debug(f"Linear system is singular: skipped {skipped} of {n} pivots")

    return x, skipped


def solve_linear_system(
    matrix: ArrayLike, vector: Union[np.ndarray, Sequence[float]]
) -> np.ndarray:
    """
    Solve a small dense linear system with partial pivoting.

    Never raises for singular or near-singular systems; the result is a
    best-effort solution with unresolvable unknowns set to 0.

    Args:
        matrix: Square coefficient matrix (n x n). Not modified.
        vector: Right-hand side of length n. Not modified.

    Returns:
        Solution as float64 array of length n.

    Example:
        >>> solve_linear_system([[2.0, 0.0], [0.0, 4.0]], [2.0, 2.0])
        array([1. , 0.5])
    """
    solution, _ = gaussian_elimination(matrix, vector)
    return solution
