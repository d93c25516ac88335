"""
Main processor for the document scanner.

Orchestrates the complete pipeline:
1. Orientation (quarter-turn rotation of the photo)
2. Corner seeding (default inset quad when no corners are given)
3. Corner sanitizing (clamp to image, optional reordering)
4. Rectification (two-triangle piecewise-affine warp)
5. Enhancement (contrast + brightness)

Geometry problems never abort the pipeline: a degenerate quad still yields
an image of the configured size, and the result reports how many triangles
used the untransformed fallback.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np

from src.common.types import Corners, RasterImage
from src.enhancement.enhancer import enhance_document
from src.enhancement.types import EnhancementOptions
from src.rectification.config_loader import load_config
from src.rectification.corners import (
    clamp_corners,
    default_corners,
    is_convex_quadrilateral,
    order_corners,
)
from src.rectification.orientation import rotate_image
from src.rectification.quad_rectifier import rectify_with_estimates
from src.rectification.types import ScannerConfig, ScanResult

logger = logging.getLogger(__name__)


class DocumentScanner:
    """
    Rectify and enhance photographed documents.

    Example:
        >>> scanner = DocumentScanner()
        >>> photo = RasterImage.from_array(rgb_array)
        >>> corners = [[100, 150], [1900, 180], [1920, 2800], [90, 2850]]
        >>> result = scanner.scan(photo, corners)
        >>> result.image.size
        (1200, 1600)
    """

    def __init__(
        self,
        config: Optional[ScannerConfig] = None,
        config_path: Optional[Path] = None,
    ):
        """
        Initialize the document scanner.

        Args:
            config: Pre-loaded configuration object. If None, will load from file.
            config_path: Path to config file. If None, uses default location.
        """
        if config is not None:
            self.config = config
            logger.info("Using provided configuration")
        else:
            self.config = load_config(config_path) if config_path else load_config()
            logger.info("Loaded configuration from file")

    def resolve_corners(
        self,
        image: RasterImage,
        corners: Optional[Union[Corners, np.ndarray, list]] = None,
    ) -> Corners:
        """
        Turn caller input into the corners used for rectification.

        Args:
            image: Source image (already rotated).
            corners: Corners, a (4, 2) array ordered [TL, TR, BR, BL], or None
                     for the default inset quad.

        Returns:
            Corners after defaulting, reordering and clamping as configured.
        """
        corner_config = self.config.corners

        if corners is None:
            resolved = default_corners(
                image.width, image.height, corner_config.default_padding
            )
            logger.info(
                f"No corners supplied, using default inset "
                f"(padding={corner_config.default_padding})"
            )
        elif isinstance(corners, Corners):
            resolved = corners
        else:
            resolved = Corners.from_points(corners)

        if corner_config.reorder:
            resolved = order_corners(resolved.to_array())

        if corner_config.clamp_to_image:
            resolved = clamp_corners(resolved, image.width, image.height)

        if not is_convex_quadrilateral(resolved):
            logger.warning(
                "Corners do not form a convex quadrilateral; "
                "rectifying anyway, output may be distorted"
            )

        return resolved

    def scan(
        self,
        image: RasterImage,
        corners: Optional[Union[Corners, np.ndarray, list]] = None,
        rotation: int = 0,
        enhancement: Optional[EnhancementOptions] = None,
    ) -> ScanResult:
        """
        Execute the complete scan pipeline.

        Args:
            image: Decoded source photograph. Not modified.
            corners: Document corners in the coordinates of the rotated
                     image, or None to use the default inset quad.
            rotation: Clockwise rotation in multiples of 90 degrees, applied
                      before everything else.
            enhancement: Enhancement options. Uses the configured ones if None.

        Returns:
            ScanResult with the enhanced and the plain rectified image.

        Raises:
            ValueError: If rotation is not a multiple of 90 or the corners
                        are malformed.
        """
        logger.info("[Stage 1/4] Orientation")
        working = rotate_image(image, rotation)
        rotation = rotation % 360

        logger.info("[Stage 2/4] Corner Resolution")
        resolved = self.resolve_corners(working, corners)

        logger.info("[Stage 3/4] Rectification")
        rect_config = self.config.rectification
        rectified, estimates = rectify_with_estimates(
            working,
            resolved,
            output_width=rect_config.output_width,
            output_height=rect_config.output_height,
            interpolation=rect_config.interpolation,
        )
        degenerate = sum(not e.is_ok() for e in estimates)

        logger.info("[Stage 4/4] Enhancement")
        options = enhancement if enhancement is not None else self.config.enhancement
        enhanced = enhance_document(rectified, options)

        logger.info(
            f"Scan complete: {enhanced.width}x{enhanced.height}, "
            f"degenerate triangles: {degenerate}"
        )

        return ScanResult(
            image=enhanced,
            rectified_image=rectified,
            corners=resolved,
            rotation=rotation,
            degenerate_triangles=degenerate,
            enhancement=options,
        )


def scan_document(
    image: RasterImage,
    corners: Optional[Union[Corners, np.ndarray, list]] = None,
    rotation: int = 0,
    config: Optional[ScannerConfig] = None,
) -> ScanResult:
    """
    Convenience function for one-shot document scanning.

    Args:
        image: Decoded source photograph.
        corners: Document corners, or None for the default inset quad.
        rotation: Clockwise rotation in multiples of 90 degrees.
        config: Optional custom configuration. Uses default if None.

    Returns:
        ScanResult object.

    Example:
        >>> result = scan_document(photo, corners, rotation=90)
        >>> if result.is_degenerate():
        ...     print("Corners look wrong, please adjust")
    """
    scanner = DocumentScanner(config=config)
    return scanner.scan(image, corners, rotation=rotation)
