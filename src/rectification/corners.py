"""
Corner utilities.

Provides the default inset quadrilateral used when no corner estimate
exists, plus helpers to sanitize user-supplied corners: clamping to the
image bounds, ordering 4 loose points, and convexity checking.
"""

import logging
from typing import Union

import numpy as np

from src.common.types import Corners, Point

logger = logging.getLogger(__name__)


def default_corners(width: int, height: int, padding: float = 0.1) -> Corners:
    """
    Rectangle inset by ``width * padding`` and ``height * padding``.

    Args:
        width: Image width in pixels (> 0).
        height: Image height in pixels (> 0).
        padding: Fractional inset applied on every edge, in [0, 0.5).

    Returns:
        Axis-aligned Corners.

    Raises:
        ValueError: If dimensions are not positive or padding is out of range.

    Example:
        >>> c = default_corners(1000, 2000, padding=0.1)
        >>> c.top_left, c.bottom_right
        (Point(x=100.0, y=200.0), Point(x=900.0, y=1800.0))
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if not 0 <= padding < 0.5:
        raise ValueError(f"padding must be in [0, 0.5), got {padding}")

    pad_x = width * padding
    pad_y = height * padding

    return Corners(
        top_left=Point(x=pad_x, y=pad_y),
        top_right=Point(x=width - pad_x, y=pad_y),
        bottom_left=Point(x=pad_x, y=height - pad_y),
        bottom_right=Point(x=width - pad_x, y=height - pad_y),
    )


def clamp_corners(corners: Corners, width: int, height: int) -> Corners:
    """
    Clamp every corner into [0, width] x [0, height].

    Example:
        >>> c = Corners.from_points([[-5, 10], [120, 10], [120, 90], [0, 90]])
        >>> clamp_corners(c, 100, 100).top_left
        Point(x=0.0, y=10.0)
    """

    def _clamp(p: Point) -> Point:
        return Point(x=min(max(p.x, 0.0), width), y=min(max(p.y, 0.0), height))

    clamped = Corners(
        top_left=_clamp(corners.top_left),
        top_right=_clamp(corners.top_right),
        bottom_left=_clamp(corners.bottom_left),
        bottom_right=_clamp(corners.bottom_right),
    )

    if clamped != corners:
        logger.warning(f"Corners clamped to image bounds {width}x{height}")

    return clamped


def order_corners(points: Union[np.ndarray, list]) -> Corners:
    """
    Order 4 loose points as Top-Left, Top-Right, Bottom-Right, Bottom-Left.

    The algorithm uses geometric properties:
    - Top-Left: smallest sum (x + y)
    - Bottom-Right: largest sum (x + y)
    - Top-Right: smallest difference (y - x)
    - Bottom-Left: largest difference (y - x)

    Args:
        points: Array of 4 points with shape (4, 2), any order.

    Returns:
        Ordered Corners.

    Raises:
        ValueError: If input does not contain exactly 4 points.
    """
    pts = np.array(points, dtype=np.float64)

    if pts.shape != (4, 2):
        raise ValueError(
            f"Expected exactly 4 points with shape (4, 2), got shape {pts.shape}"
        )

    s = pts.sum(axis=1)
    diff = np.diff(pts, axis=1).ravel()

    rect = np.array(
        [
            pts[np.argmin(s)],
            pts[np.argmin(diff)],
            pts[np.argmax(s)],
            pts[np.argmax(diff)],
        ]
    )

    logger.debug(
        f"Ordered points: TL={rect[0]}, TR={rect[1]}, BR={rect[2]}, BL={rect[3]}"
    )

    return Corners.from_points(rect)


def is_convex_quadrilateral(corners: Corners) -> bool:
    """
    Check if the clockwise quad TL -> TR -> BR -> BL is strictly convex.

    For each consecutive edge pair (P1->P2, P2->P3) the 2D cross product
    (P2 - P1) x (P3 - P2) is computed; the quad is convex when all four
    have the same sign. Collinear or coincident corners are not convex.
    """
    rect = corners.to_array()

    cross_products = []
    for i in range(4):
        p1 = rect[i]
        p2 = rect[(i + 1) % 4]
        p3 = rect[(i + 2) % 4]

        v1 = p2 - p1
        v2 = p3 - p2
        cross_products.append(v1[0] * v2[1] - v1[1] * v2[0])

    is_convex = all(cp > 1e-6 for cp in cross_products) or all(
        cp < -1e-6 for cp in cross_products
    )

    if not is_convex:
        logger.debug(
            f"Non-convex quadrilateral detected. Cross products: {cross_products}"
        )

    return is_convex
