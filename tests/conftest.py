"""
Pytest Configuration and Shared Fixtures

This file contains pytest configuration and fixtures that are available
to all test modules.
"""

import numpy as np
import pytest

GREEN = (0, 255, 0, 255)
RED = (255, 0, 0, 255)


def make_marker_image(width, height, corner_points, half_size=4):
    """
    Create an opaque green RGBA image with red squares around given points.

    Args:
        width: Image width.
        height: Image height.
        corner_points: Iterable of (x, y) marker centers.
        half_size: Half side length of each marker square.
    """
    from src.common.types import RasterImage

    data = np.zeros((height, width, 4), dtype=np.uint8)
    data[:] = GREEN
    for x, y in corner_points:
        x, y = int(x), int(y)
        data[
            max(y - half_size, 0) : y + half_size + 1,
            max(x - half_size, 0) : x + half_size + 1,
        ] = RED
    return RasterImage(data=data)


@pytest.fixture
def marker_image_factory():
    """Fixture providing make_marker_image for custom sizes."""
    return make_marker_image


@pytest.fixture
def sample_corner_points():
    """Fixture providing a skewed document quad ordered [TL, TR, BR, BL]."""
    return np.array(
        [
            [40, 50],  # Top-left
            [360, 60],  # Top-right
            [370, 560],  # Bottom-right
            [30, 550],  # Bottom-left
        ],
        dtype=np.float64,
    )


@pytest.fixture
def sample_corners(sample_corner_points):
    """Fixture providing the sample quad as Corners."""
    from src.common.types import Corners

    return Corners.from_points(sample_corner_points)


@pytest.fixture
def marker_source(sample_corner_points):
    """Fixture providing a 400x600 photo with red markers on each corner."""
    return make_marker_image(400, 600, sample_corner_points)


@pytest.fixture
def green_source():
    """Fixture providing a plain opaque green 400x600 image."""
    return make_marker_image(400, 600, [])


@pytest.fixture
def small_scanner_config():
    """Fixture providing a scanner configuration with a small output canvas."""
    from src.enhancement.types import EnhancementOptions
    from src.rectification.types import (
        CornerConfig,
        RectificationConfig,
        ScannerConfig,
    )

    return ScannerConfig(
        rectification=RectificationConfig(
            output_width=120, output_height=160, interpolation="linear"
        ),
        corners=CornerConfig(default_padding=0.1, clamp_to_image=True, reorder=False),
        enhancement=EnhancementOptions(),
    )
