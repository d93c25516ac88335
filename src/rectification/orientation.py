"""
Quarter-turn rotation of source photographs.
"""

import logging

import cv2

from src.common.types import RasterImage

logger = logging.getLogger(__name__)

_ROTATE_CODES = {
    90: cv2.ROTATE_90_CLOCKWISE,
    180: cv2.ROTATE_180,
    270: cv2.ROTATE_90_COUNTERCLOCKWISE,
}


def normalize_rotation(degrees: int) -> int:
    """
    Reduce a rotation to 0, 90, 180 or 270.

    Raises:
        ValueError: If ``degrees`` is not a multiple of 90.
    """
    if isinstance(degrees, bool) or int(degrees) != degrees or degrees % 90 != 0:
        raise ValueError(f"Rotation must be a multiple of 90 degrees, got {degrees}")
    return int(degrees) % 360


def rotate_image(image: RasterImage, degrees: int) -> RasterImage:
    """
    Rotate clockwise by a multiple of 90 degrees into a new buffer.

    Width and height are swapped for 90 and 270 degrees.

    Example:
        >>> rotated = rotate_image(RasterImage.blank(300, 200), 90)
        >>> rotated.size
        (200, 300)
    """
    degrees = normalize_rotation(degrees)
    if degrees == 0:
        return image.copy()

    rotated = cv2.rotate(image.data, _ROTATE_CODES[degrees])
    logger.debug(f"Rotated {image.width}x{image.height} image by {degrees} degrees")
    return RasterImage(data=rotated)
