"""
Data types and structures for the Rectification module.

Provides type-safe containers for affine estimates, configuration and
scan results.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from src.common.types import Corners, RasterImage
from src.enhancement.types import EnhancementOptions


class EstimateStatus(Enum):
    """Outcome of an affine estimate."""

    OK = "OK"
    DEGENERATE = "Degenerate"  # Collinear points or singular system


@dataclass(frozen=True)
class AffineCoefficients:
    """
    2D affine map (x, y) -> (a*x + b*y + c, d*x + e*y + f).
    """

    a: float
    b: float
    c: float
    d: float
    e: float
    f: float

    @classmethod
    def identity(cls) -> "AffineCoefficients":
        return cls(1.0, 0.0, 0.0, 0.0, 1.0, 0.0)

    @property
    def determinant(self) -> float:
        """Determinant of the linear part (a*e - b*d)."""
        return self.a * self.e - self.b * self.d

    def apply(self, x: float, y: float) -> Tuple[float, float]:
        """Map a single point."""
        return (
            self.a * x + self.b * y + self.c,
            self.d * x + self.e * y + self.f,
        )

    def inverse(self) -> "AffineCoefficients":
        """
        Invert the map.

        Raises:
            ValueError: If the linear part is singular.
        """
        det = self.determinant
        if abs(det) < 1e-14:
            raise ValueError("Singular transform cannot be inverted.")
        return AffineCoefficients(
            a=self.e / det,
            b=-self.b / det,
            c=(self.b * self.f - self.c * self.e) / det,
            d=-self.d / det,
            e=self.a / det,
            f=(self.c * self.d - self.a * self.f) / det,
        )

    def to_matrix(self) -> np.ndarray:
        """2x3 float64 matrix in OpenCV layout."""
        return np.array(
            [[self.a, self.b, self.c], [self.d, self.e, self.f]], dtype=np.float64
        )


@dataclass(frozen=True)
class AffineEstimate:
    """
    Tagged result of estimating an affine map from 3 correspondences.

    The coefficients are always populated (best-effort for degenerate
    input); callers branch on ``status`` before trusting them.
    """

    status: EstimateStatus
    coefficients: AffineCoefficients

    def is_ok(self) -> bool:
        return self.status == EstimateStatus.OK


@dataclass
class RectificationConfig:
    """Configuration for the quad rectifier."""

    output_width: int
    output_height: int
    interpolation: str  # linear | cubic | nearest | area | lanczos


@dataclass
class CornerConfig:
    """Configuration for corner seeding and sanitizing."""

    default_padding: float  # Fractional inset used when no corners are given
    clamp_to_image: bool  # Clamp corners into the source image bounds
    reorder: bool  # Re-derive TL/TR/BR/BL from the 4 points before warping


@dataclass
class ScannerConfig:
    """Complete document scanner configuration."""

    rectification: RectificationConfig
    corners: CornerConfig
    enhancement: EnhancementOptions


@dataclass
class ScanResult:
    """
    Output from the document scan pipeline.

    Attributes:
        image: Rectified and enhanced document.
        rectified_image: Rectified document before enhancement.
        corners: Source corners actually used (after defaulting/clamping).
        rotation: Clockwise rotation applied to the source, in degrees.
        degenerate_triangles: Number of triangles (0-2) drawn with the
            untransformed fallback.
    """

    image: RasterImage
    rectified_image: RasterImage
    corners: Corners
    rotation: int
    degenerate_triangles: int
    enhancement: Optional[EnhancementOptions] = None

    def is_degenerate(self) -> bool:
        """Check if any triangle fell back to the untransformed draw."""
        return self.degenerate_triangles > 0
