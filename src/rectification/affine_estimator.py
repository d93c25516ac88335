"""
Affine estimation from three point correspondences.

Each source -> destination pair gives 2 linear equations:

    a*sx + b*sy + c = dx
    d*sx + e*sy + f = dy

so three pairs give a 6x6 system for (a, b, c, d, e, f).
"""

import logging
from typing import Sequence, Tuple

import numpy as np

from src.common.types import Point
from src.rectification.linear_solver import gaussian_elimination
from src.rectification.types import AffineCoefficients, AffineEstimate, EstimateStatus

logger = logging.getLogger(__name__)

# Triangles with a smaller doubled area than this are treated as collinear
COLLINEAR_EPSILON = 1e-6
DETERMINANT_EPSILON = 1e-12


def _as_points(points: Sequence[Point], name: str) -> Tuple[Point, Point, Point]:
    points = tuple(points)
    if len(points) != 3:
        raise ValueError(f"Expected exactly 3 {name} points, got {len(points)}")
    return points


def triangle_area2(p0: Point, p1: Point, p2: Point) -> float:
    """Signed doubled area of a triangle (2D cross product)."""
    return (p1.x - p0.x) * (p2.y - p0.y) - (p2.x - p0.x) * (p1.y - p0.y)


def build_affine_system(
    src: Sequence[Point], dst: Sequence[Point]
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Build the 6x6 coefficient matrix and right-hand side.

    Args:
        src: 3 source points.
        dst: 3 destination points.

    Returns:
        Tuple of (matrix, vector) with shapes (6, 6) and (6,).

    Raises:
        ValueError: If either triangle does not have exactly 3 points.
    """
    src = _as_points(src, "source")
    dst = _as_points(dst, "destination")

    matrix = np.zeros((6, 6), dtype=np.float64)
    vector = np.zeros(6, dtype=np.float64)
    for i, (s, d) in enumerate(zip(src, dst)):
        matrix[2 * i] = [s.x, s.y, 1.0, 0.0, 0.0, 0.0]
        vector[2 * i] = d.x
        matrix[2 * i + 1] = [0.0, 0.0, 0.0, s.x, s.y, 1.0]
        vector[2 * i + 1] = d.y

    return matrix, vector


def estimate_affine(src: Sequence[Point], dst: Sequence[Point]) -> AffineEstimate:
    """
    Estimate the affine map taking the source triangle onto the destination.

    Collinear source points make the system singular. The solver still
    returns a best-effort set of coefficients, and the estimate is tagged
    DEGENERATE so the caller can pick a fallback. A map whose linear part
    cannot be inverted is tagged DEGENERATE as well.

    Args:
        src: 3 source points.
        dst: 3 destination points.

    Returns:
        AffineEstimate with status and coefficients.

    Example:
        >>> src = [Point(x=0, y=0), Point(x=10, y=0), Point(x=0, y=10)]
        >>> dst = [Point(x=5, y=5), Point(x=25, y=5), Point(x=5, y=25)]
        >>> est = estimate_affine(src, dst)
        >>> est.is_ok(), est.coefficients.a, est.coefficients.c
        (True, 2.0, 5.0)
    """
    src = _as_points(src, "source")
    dst = _as_points(dst, "destination")

    matrix, vector = build_affine_system(src, dst)
    solution, skipped = gaussian_elimination(matrix, vector)
    coefficients = AffineCoefficients(*(float(v) for v in solution))

    logger.debug(f"Affine coefficients: {coefficients}")

    collinear = abs(triangle_area2(*src)) < COLLINEAR_EPSILON
    singular = abs(coefficients.determinant) < DETERMINANT_EPSILON

    if skipped or collinear or singular:
        logger.warning(
            f"Degenerate affine estimate (skipped_pivots={skipped}, "
            f"collinear={collinear}, singular_map={singular})"
        )
        return AffineEstimate(status=EstimateStatus.DEGENERATE, coefficients=coefficients)

    return AffineEstimate(status=EstimateStatus.OK, coefficients=coefficients)
