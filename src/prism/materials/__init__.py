"""Materials module for procedural patterns and Phong shading.

Components:
    pattern: Solid, stripe, checkerboard, gradient and ring patterns
    phong: Material parameters and the Phong lighting model
"""

from .pattern import Pattern, PatternKind, pattern_at, solid
from .phong import Material, lighting

__all__ = [
    "Pattern",
    "PatternKind",
    "pattern_at",
    "solid",
    "Material",
    "lighting",
]
