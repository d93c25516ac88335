"""
Document Enhancement - Linear Contrast and Brightness.

Applies the per-channel transform

    out = clamp(((v - 128) * contrast + 128) * brightness, 0, 255)

to the R, G and B channels of a rectified document. Alpha is preserved.
"""

import logging
from typing import Optional

import numpy as np

from src.common.types import RasterImage
from src.enhancement.types import MID_GRAY, EnhancementOptions

logger = logging.getLogger(__name__)


def build_lookup_table(options: EnhancementOptions) -> np.ndarray:
    """
    Precompute the enhancement transform for every byte value.

    Args:
        options: Contrast and brightness parameters.

    Returns:
        uint8 array of shape (256,) where ``lut[v]`` is the enhanced value of v.

    Example:
        >>> lut = build_lookup_table(EnhancementOptions(contrast=1.0, brightness=1.0))
        >>> bool((lut == np.arange(256)).all())
        True
    """
    values = np.arange(256, dtype=np.float64)
    adjusted = ((values - MID_GRAY) * options.contrast + MID_GRAY) * options.brightness
    # Round half to even, then clamp into the byte range
    return np.clip(np.rint(adjusted), 0, 255).astype(np.uint8)


def enhance_document(
    image: RasterImage, options: Optional[EnhancementOptions] = None
) -> RasterImage:
    """
    Apply contrast/brightness enhancement to an RGBA image.

    The result is written to a new buffer; the input is not modified.

    Args:
        image: Rectified document.
        options: Enhancement parameters. Defaults to contrast 1.2,
                 brightness 1.05.

    Returns:
        Enhanced RasterImage with the same dimensions.

    Example:
        >>> enhanced = enhance_document(rectified, EnhancementOptions(contrast=1.15))
    """
    if options is None:
        options = EnhancementOptions()

    lut = build_lookup_table(options)

    enhanced = image.data.copy()
    enhanced[..., :3] = lut[image.data[..., :3]]

    logger.debug(
        f"Enhanced {image.width}x{image.height} image "
        f"(contrast={options.contrast}, brightness={options.brightness})"
    )

    return RasterImage(data=enhanced)
