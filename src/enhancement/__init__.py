"""
Enhancement: linear contrast/brightness correction for rectified documents.
"""

from src.enhancement.enhancer import build_lookup_table, enhance_document
from src.enhancement.types import EnhancementOptions

__all__ = ["EnhancementOptions", "build_lookup_table", "enhance_document"]
