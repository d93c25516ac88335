"""
Triangle warping.

Draws the part of a source image that falls inside a source triangle onto
the matching destination triangle, using the affine map between the two
triangles as the drawing transform and the destination triangle as the
clip region.
"""

import logging
from typing import Sequence

from src.common.types import Point, RasterImage
from src.rectification.affine_estimator import estimate_affine
from src.rectification.drawing_context import DrawingContext
from src.rectification.types import AffineEstimate

logger = logging.getLogger(__name__)


def warp_triangle(
    dest: RasterImage,
    source: RasterImage,
    src_tri: Sequence[Point],
    dst_tri: Sequence[Point],
    interpolation: str = "linear",
) -> AffineEstimate:
    """
    Warp one triangle of ``source`` into ``dest`` in place.

    Pixels of ``dest`` outside ``dst_tri`` are not modified. If the affine
    estimate is degenerate (e.g. collinear source points), the source is
    drawn untransformed inside the destination triangle instead.

    Args:
        dest: Destination canvas, modified in place.
        source: Source image, read only.
        src_tri: 3 source points.
        dst_tri: 3 destination points.
        interpolation: Resampling method name (see INTERPOLATION_FLAGS).

    Returns:
        The affine estimate used, so callers can detect the fallback.

    Raises:
        ValueError: If a triangle does not have exactly 3 points.
    """
    estimate = estimate_affine(src_tri, dst_tri)
    return draw_triangle(
        DrawingContext(dest, interpolation=interpolation), source, dst_tri, estimate
    )


def draw_triangle(
    ctx: DrawingContext,
    source: RasterImage,
    dst_tri: Sequence[Point],
    estimate: AffineEstimate,
) -> AffineEstimate:
    """Draw ``source`` through ``estimate`` clipped to ``dst_tri`` on ``ctx``."""
    with ctx.saved_state():
        ctx.clip_polygon(dst_tri)

        if estimate.is_ok():
            ctx.set_transform(estimate.coefficients)
        else:
            logger.warning(
                "Degenerate triangle: drawing untransformed source inside the clip"
            )

        ctx.draw_image(source)

    return estimate
