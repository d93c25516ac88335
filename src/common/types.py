"""
Common type definitions for the document rectification engine.

This module provides Pydantic-based type definitions for the core data
structures exchanged with callers: points, corner quadrilaterals and RGBA
raster images.

These types provide:
- Type validation and conversion
- Consistent interfaces across modules
- Helper methods for common operations
- Integration with numpy arrays and OpenCV
"""

from typing import Tuple, Union

import cv2
import numpy as np
from pydantic import BaseModel, Field, field_validator


class Point(BaseModel):
    """
    Immutable 2D coordinate (x, y) in source-image or canvas pixel space.

    Attributes:
        x: X-coordinate (horizontal).
        y: Y-coordinate (vertical).

    Example:
        >>> point = Point(x=100.5, y=200)
        >>> point.to_tuple()
        (100.5, 200.0)
        >>> Point.from_numpy(np.array([150, 250]))
        Point(x=150.0, y=250.0)
    """

    x: float = Field(..., description="X-coordinate (horizontal)")
    y: float = Field(..., description="Y-coordinate (vertical)")

    model_config = {"frozen": True}

    @field_validator("x", "y", mode="before")
    @classmethod
    def _convert_to_float(cls, v: Union[int, float]) -> float:
        """
        Convert coordinate to float, accepting numpy scalars.

        Args:
            v: Coordinate value.

        Returns:
            Float coordinate.
        """
        if isinstance(v, (int, float, np.integer, np.floating)) and not isinstance(
            v, bool
        ):
            value = float(v)
            if not np.isfinite(value):
                raise ValueError(f"Coordinate must be finite, got {value}")
            return value
        raise ValueError(f"Coordinate must be numeric, got {type(v)}")

    @classmethod
    def from_numpy(cls, arr: np.ndarray) -> "Point":
        """
        Create Point from numpy array of shape (2,).

        Raises:
            ValueError: If array shape is not (2,).
        """
        arr = np.asarray(arr)
        if arr.shape != (2,):
            raise ValueError(f"Expected array of shape (2,), got {arr.shape}")
        return cls(x=float(arr[0]), y=float(arr[1]))

    def to_numpy(self, dtype: type = np.float64) -> np.ndarray:
        """Convert Point to numpy array [x, y]."""
        return np.array([self.x, self.y], dtype=dtype)

    def to_tuple(self) -> Tuple[float, float]:
        """Convert Point to tuple (x, y)."""
        return (self.x, self.y)

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return float(np.hypot(self.x - other.x, self.y - other.y))

    def __repr__(self) -> str:
        return f"Point(x={self.x}, y={self.y})"


class Corners(BaseModel):
    """
    The four corners of the source quadrilateral to be rectified.

    Corners are expected in a consistent clockwise arrangement (top-left,
    top-right, bottom-right, bottom-left). Degenerate arrangements are
    accepted; rectification degrades instead of failing.

    Example:
        >>> corners = Corners.from_points([[10, 10], [90, 12], [95, 120], [8, 118]])
        >>> corners.top_right
        Point(x=90.0, y=12.0)
    """

    top_left: Point
    top_right: Point
    bottom_left: Point
    bottom_right: Point

    model_config = {"frozen": True}

    @classmethod
    def from_points(cls, points: Union[np.ndarray, list]) -> "Corners":
        """
        Create Corners from 4 points ordered [TL, TR, BR, BL].

        Args:
            points: Array-like of shape (4, 2).

        Raises:
            ValueError: If input does not have shape (4, 2).
        """
        pts = np.asarray(points, dtype=np.float64)
        if pts.shape != (4, 2):
            raise ValueError(
                f"Expected exactly 4 points with shape (4, 2), got shape {pts.shape}"
            )
        tl, tr, br, bl = (Point.from_numpy(p) for p in pts)
        return cls(top_left=tl, top_right=tr, bottom_right=br, bottom_left=bl)

    def clockwise(self) -> Tuple[Point, Point, Point, Point]:
        """Return corners in clockwise order (TL, TR, BR, BL)."""
        return (self.top_left, self.top_right, self.bottom_right, self.bottom_left)

    def to_array(self) -> np.ndarray:
        """Convert to float64 array of shape (4, 2) ordered [TL, TR, BR, BL]."""
        return np.array([p.to_tuple() for p in self.clockwise()], dtype=np.float64)


class RasterImage(BaseModel):
    """
    Owned RGBA raster image (H x W x 4, uint8).

    This is the unit of input and output for rectification and
    enhancement. Operations that produce a new image always allocate a new
    buffer; a RasterImage never aliases another image's pixels.

    Attributes:
        data: Pixel buffer with shape (height, width, 4), dtype uint8.

    Example:
        >>> canvas = RasterImage.blank(1200, 1600)
        >>> canvas.width, canvas.height
        (1200, 1600)
        >>> photo = RasterImage.from_array(cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB))
    """

    data: np.ndarray = Field(..., description="RGBA pixel buffer (H, W, 4)")

    model_config = {"arbitrary_types_allowed": True}

    @field_validator("data")
    @classmethod
    def _validate_rgba(cls, v: np.ndarray) -> np.ndarray:
        """
        Validate that the array is a non-empty RGBA uint8 image.

        Raises:
            ValueError: If array is not an (H, W, 4) uint8 buffer.
        """
        if not isinstance(v, np.ndarray):
            raise ValueError(f"Expected numpy.ndarray, got {type(v)}")

        if v.size == 0:
            raise ValueError("Image array is empty")

        if v.ndim != 3 or v.shape[2] != 4:
            raise ValueError(f"Expected RGBA image with shape (H, W, 4), got {v.shape}")

        if v.dtype != np.uint8:
            raise ValueError(
                f"Expected uint8 dtype for image, got {v.dtype}. "
                "Images should be in range [0, 255]"
            )

        return v

    @classmethod
    def blank(cls, width: int, height: int) -> "RasterImage":
        """
        Allocate a fully transparent (zeroed) canvas.

        Raises:
            ValueError: If width or height is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(
                f"Canvas dimensions must be positive, got {width}x{height}"
            )
        return cls(data=np.zeros((int(height), int(width), 4), dtype=np.uint8))

    @classmethod
    def from_array(cls, array: np.ndarray) -> "RasterImage":
        """
        Wrap a decoded image, copying it into a new RGBA buffer.

        Accepts RGBA (H, W, 4), RGB (H, W, 3) and grayscale (H, W) uint8
        arrays. RGB and grayscale inputs become fully opaque.

        Raises:
            ValueError: If the array has an unsupported shape or dtype.
        """
        array = np.asarray(array)
        if array.dtype != np.uint8:
            raise ValueError(f"Expected uint8 dtype for image, got {array.dtype}")

        if array.ndim == 2:
            rgba = cv2.cvtColor(array, cv2.COLOR_GRAY2RGBA)
        elif array.ndim == 3 and array.shape[2] == 3:
            rgba = cv2.cvtColor(array, cv2.COLOR_RGB2RGBA)
        elif array.ndim == 3 and array.shape[2] == 4:
            rgba = array.copy()
        else:
            raise ValueError(
                f"Expected grayscale, RGB or RGBA image, got shape {array.shape}"
            )
        return cls(data=np.ascontiguousarray(rgba))

    @property
    def width(self) -> int:
        """Image width in pixels."""
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        """Image height in pixels."""
        return int(self.data.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height) tuple."""
        return (self.width, self.height)

    def to_numpy(self) -> np.ndarray:
        """Return the underlying RGBA array."""
        return self.data

    def copy(self) -> "RasterImage":
        """Deep copy with a freshly allocated buffer."""
        return RasterImage(data=self.data.copy())

    def __repr__(self) -> str:
        return f"RasterImage(width={self.width}, height={self.height})"
