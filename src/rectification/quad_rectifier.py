"""
Quadrilateral rectification.

Maps a source quadrilateral onto an axis-aligned output rectangle of fixed
size by splitting both into two triangles along the top-left/bottom-right
diagonal and warping each triangle with its own affine map.

A true perspective warp is not affine, so near the shared diagonal the two
halves may not line up exactly when the source quad is strongly
foreshortened. For near-planar document photographs the seam is negligible.
"""

import logging
import math
import numbers
from typing import List, Tuple

from src.common.types import Corners, Point, RasterImage
from src.rectification.drawing_context import DrawingContext
from src.rectification.affine_estimator import estimate_affine
from src.rectification.triangle_rasterizer import draw_triangle
from src.rectification.types import AffineEstimate

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_WIDTH = 1200
DEFAULT_OUTPUT_HEIGHT = 1600


def _validate_output_size(output_width: int, output_height: int) -> None:
    for name, value in (("output_width", output_width), ("output_height", output_height)):
        if (
            isinstance(value, bool)
            or not isinstance(value, numbers.Real)
            or not math.isfinite(value)
            or int(value) != value
        ):
            raise ValueError(f"{name} must be an integer, got {value!r}")
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")


def destination_corners(output_width: int, output_height: int) -> Corners:
    """Corners of the output rectangle [0, 0]..[width, height]."""
    return Corners(
        top_left=Point(x=0, y=0),
        top_right=Point(x=output_width, y=0),
        bottom_right=Point(x=output_width, y=output_height),
        bottom_left=Point(x=0, y=output_height),
    )


def split_triangles(
    corners: Corners,
) -> Tuple[Tuple[Point, Point, Point], Tuple[Point, Point, Point]]:
    """
    Split a quad into (TL, TR, BR) and (TL, BR, BL) along the TL-BR diagonal.
    """
    tl, tr, br, bl = corners.clockwise()
    return (tl, tr, br), (tl, br, bl)


def rectify_with_estimates(
    source: RasterImage,
    corners: Corners,
    output_width: int = DEFAULT_OUTPUT_WIDTH,
    output_height: int = DEFAULT_OUTPUT_HEIGHT,
    interpolation: str = "linear",
) -> Tuple[RasterImage, List[AffineEstimate]]:
    """
    Rectify a quadrilateral and return the per-triangle affine estimates.

    Args:
        source: Source photograph. Not modified.
        corners: Source quadrilateral.
        output_width: Output width in pixels (> 0).
        output_height: Output height in pixels (> 0).
        interpolation: Resampling method name.

    Returns:
        Tuple of (rectified image, [estimate for triangle A, triangle B]).

    Raises:
        ValueError: If output dimensions are not positive integers.
    """
    _validate_output_size(output_width, output_height)
    output_width, output_height = int(output_width), int(output_height)

    canvas = RasterImage.blank(output_width, output_height)
    ctx = DrawingContext(canvas, interpolation=interpolation)

    src_triangles = split_triangles(corners)
    dst_triangles = split_triangles(destination_corners(output_width, output_height))

    estimates = []
    for src_tri, dst_tri in zip(src_triangles, dst_triangles):
        estimate = estimate_affine(src_tri, dst_tri)
        estimates.append(draw_triangle(ctx, source, dst_tri, estimate))

    degenerate = sum(not e.is_ok() for e in estimates)
    if degenerate:
        logger.warning(
            f"Rectified with {degenerate} degenerate triangle(s); "
            "output may be distorted"
        )

    logger.info(
        f"Rectified {source.width}x{source.height} source to "
        f"{output_width}x{output_height}"
    )

    return canvas, estimates


def rectify(
    source: RasterImage,
    corners: Corners,
    output_width: int = DEFAULT_OUTPUT_WIDTH,
    output_height: int = DEFAULT_OUTPUT_HEIGHT,
    interpolation: str = "linear",
) -> RasterImage:
    """
    Straighten and crop the document delimited by ``corners``.

    The output always has exactly ``output_width`` x ``output_height``
    pixels, on a freshly allocated canvas. Degenerate corners never raise;
    the affected triangle is drawn with an untransformed fallback.

    Example:
        >>> corners = Corners.from_points([[100, 150], [1900, 180], [1920, 2800], [90, 2850]])
        >>> document = rectify(photo, corners)
        >>> document.size
        (1200, 1600)
    """
    canvas, _ = rectify_with_estimates(
        source, corners, output_width, output_height, interpolation
    )
    return canvas
