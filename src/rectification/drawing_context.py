"""
Drawing context over a RasterImage.

Mirrors the clip/transform/draw model of a 2D canvas:
- a clip region (intersection of the polygons clipped so far),
- an active affine transform from source pixels to canvas pixels,
- a state stack saved and restored with ``saved_state()``.

Coordinates are continuous canvas coordinates: pixel (i, j) covers
[i, i+1) x [j, j+1) and its center sits at (i + 0.5, j + 0.5).
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence, Tuple

import cv2
import numpy as np

from src.common.types import Point, RasterImage
from src.rectification.types import AffineCoefficients

logger = logging.getLogger(__name__)

INTERPOLATION_FLAGS = {
    "linear": cv2.INTER_LINEAR,
    "cubic": cv2.INTER_CUBIC,
    "nearest": cv2.INTER_NEAREST,
    "area": cv2.INTER_AREA,
    "lanczos": cv2.INTER_LANCZOS4,
}

# Fixed-point bits for sub-pixel polygon vertices
_CLIP_SHIFT = 4


class DrawingContext:
    """
    Clip/transform state bound to a destination canvas.

    Example:
        >>> ctx = DrawingContext(canvas)
        >>> with ctx.saved_state():
        ...     ctx.clip_polygon(triangle)
        ...     ctx.set_transform(coefficients)
        ...     ctx.draw_image(source)
    """

    def __init__(self, canvas: RasterImage, interpolation: str = "linear"):
        if interpolation not in INTERPOLATION_FLAGS:
            raise ValueError(
                f"Invalid interpolation: {interpolation}. "
                f"Must be one of {list(INTERPOLATION_FLAGS)}"
            )
        self.canvas = canvas
        self.interpolation = interpolation
        self._clip: Optional[np.ndarray] = None  # None means unclipped
        self._transform = AffineCoefficients.identity()
        self._stack: List[Tuple[Optional[np.ndarray], AffineCoefficients]] = []

    @property
    def transform(self) -> AffineCoefficients:
        return self._transform

    @property
    def clip_mask(self) -> Optional[np.ndarray]:
        return self._clip

    @property
    def depth(self) -> int:
        """Number of saved states."""
        return len(self._stack)

    def save(self) -> None:
        self._stack.append((self._clip, self._transform))

    def restore(self) -> None:
        if not self._stack:
            raise RuntimeError("restore() called without a matching save()")
        self._clip, self._transform = self._stack.pop()

    @contextmanager
    def saved_state(self) -> Iterator["DrawingContext"]:
        """Save clip and transform, restoring them on every exit path."""
        self.save()
        try:
            yield self
        finally:
            self.restore()

    def set_transform(self, coefficients: AffineCoefficients) -> None:
        self._transform = coefficients

    def clip_polygon(self, points: Sequence[Point]) -> None:
        """Intersect the clip region with a convex polygon."""
        mask = np.zeros((self.canvas.height, self.canvas.width), dtype=np.uint8)
        # Canvas coordinates -> pixel-center coordinates, in fixed point
        scale = 1 << _CLIP_SHIFT
        vertices = np.array(
            [[(p.x - 0.5) * scale, (p.y - 0.5) * scale] for p in points],
            dtype=np.float64,
        )
        cv2.fillConvexPoly(
            mask, np.round(vertices).astype(np.int32), 255, cv2.LINE_8, _CLIP_SHIFT
        )

        clip = mask > 0
        # New arrays on every clip so saved states are never mutated
        self._clip = clip if self._clip is None else (self._clip & clip)

    def draw_image(self, source: RasterImage) -> None:
        """
        Draw ``source`` through the active transform, inside the clip.

        Pixels are composited source-over; pixels outside the clip region
        are left untouched. Samples near the source edge are clamped to the
        edge pixels, and canvas pixels whose center maps outside the source
        are not drawn.
        """
        height, width = self.canvas.height, self.canvas.width
        if self._clip is None:
            region = np.ones((height, width), dtype=bool)
        else:
            region = self._clip

        x0, y0, w, h = cv2.boundingRect(region.astype(np.uint8))
        if w == 0 or h == 0:
            logger.debug("Clip region is empty, nothing drawn")
            return

        inverse = self._transform.inverse()
        matrix = _pixel_center_matrix(inverse, x0, y0)

        warped = cv2.warpAffine(
            source.data,
            matrix,
            (w, h),
            flags=INTERPOLATION_FLAGS[self.interpolation] | cv2.WARP_INVERSE_MAP,
            borderMode=cv2.BORDER_REPLICATE,
        )
        coverage = _source_coverage(source, matrix, w, h)

        target = self.canvas.data[y0 : y0 + h, x0 : x0 + w]
        mask = region[y0 : y0 + h, x0 : x0 + w] & coverage
        _composite_source_over(target, warped, mask)


def _source_coverage(
    source: RasterImage, matrix: np.ndarray, width: int, height: int
) -> np.ndarray:
    """Boolean mask of output pixels whose center lands on a source pixel."""
    plane = np.full((source.height, source.width), 255, dtype=np.uint8)
    covered = cv2.warpAffine(
        plane,
        matrix,
        (width, height),
        flags=cv2.INTER_NEAREST | cv2.WARP_INVERSE_MAP,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=0,
    )
    return covered > 0


def _pixel_center_matrix(
    inverse: AffineCoefficients, x0: int, y0: int
) -> np.ndarray:
    """
    OpenCV inverse map for a canvas sub-rectangle starting at (x0, y0).

    Maps output pixel indices (u, v) to source pixel indices, accounting for
    the half-pixel offset between canvas coordinates and pixel indices.
    """
    a, b, c, d, e, f = (
        inverse.a,
        inverse.b,
        inverse.c,
        inverse.d,
        inverse.e,
        inverse.f,
    )
    cx = x0 + 0.5
    cy = y0 + 0.5
    return np.array(
        [
            [a, b, a * cx + b * cy + c - 0.5],
            [d, e, d * cx + e * cy + f - 0.5],
        ],
        dtype=np.float64,
    )


def _composite_source_over(
    target: np.ndarray, source: np.ndarray, mask: np.ndarray
) -> None:
    """Blend ``source`` over ``target`` in place where ``mask`` is set."""
    src = source[mask].astype(np.float32)
    dst = target[mask].astype(np.float32)

    src_alpha = src[:, 3:4] / 255.0
    dst_alpha = dst[:, 3:4] / 255.0
    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)

    weighted = src[:, :3] * src_alpha + dst[:, :3] * dst_alpha * (1.0 - src_alpha)
    out_rgb = np.divide(
        weighted,
        out_alpha,
        out=np.zeros_like(weighted),
        where=out_alpha > 0,
    )

    blended = np.concatenate([out_rgb, out_alpha * 255.0], axis=1)
    target[mask] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)
