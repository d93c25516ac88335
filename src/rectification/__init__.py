"""
Document Rectification

Straightens a photographed document delimited by four corner points into a
fixed-size rectangular image.

Pipeline stages:
1. Orientation (quarter-turn rotation)
2. Corner resolution (default inset, clamping, ordering)
3. Piecewise-affine rectification (two triangles sharing the TL-BR diagonal)
4. Enhancement (contrast + brightness)
"""

from src.rectification.affine_estimator import estimate_affine
from src.rectification.config_loader import load_config
from src.rectification.corners import (
    clamp_corners,
    default_corners,
    is_convex_quadrilateral,
    order_corners,
)
from src.rectification.linear_solver import solve_linear_system
from src.rectification.orientation import rotate_image
from src.rectification.processor import DocumentScanner, scan_document
from src.rectification.quad_rectifier import rectify, rectify_with_estimates
from src.rectification.triangle_rasterizer import warp_triangle
from src.rectification.types import (
    AffineCoefficients,
    AffineEstimate,
    EstimateStatus,
    ScannerConfig,
    ScanResult,
)

__all__ = [
    "DocumentScanner",
    "scan_document",
    "load_config",
    "rectify",
    "rectify_with_estimates",
    "warp_triangle",
    "estimate_affine",
    "solve_linear_system",
    "default_corners",
    "clamp_corners",
    "order_corners",
    "is_convex_quadrilateral",
    "rotate_image",
    "AffineCoefficients",
    "AffineEstimate",
    "EstimateStatus",
    "ScannerConfig",
    "ScanResult",
]
