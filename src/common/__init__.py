"""
Common types shared across the rectification and enhancement modules.
"""

from src.common.types import Corners, Point, RasterImage

__all__ = ["Point", "Corners", "RasterImage"]
