"""
Data types for the Enhancement module.
"""

import math
from dataclasses import dataclass

MID_GRAY = 128.0


@dataclass(frozen=True)
class EnhancementOptions:
    """
    Linear contrast/brightness adjustment.

    Attributes:
        contrast: Scale applied to the deviation from mid-gray (128).
        brightness: Multiplicative post-scale applied after contrast.
    """

    contrast: float = 1.2
    brightness: float = 1.05

    def __post_init__(self):
        for name in ("contrast", "brightness"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
            if value < 0:
                raise ValueError(f"{name} cannot be negative, got {value}")

    def is_identity(self) -> bool:
        """Check if the options leave every channel unchanged."""
        return self.contrast == 1.0 and self.brightness == 1.0
