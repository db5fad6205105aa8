"""Core math and rendering module.

Components:
    constants: Shared tolerance and rendering limits
    tuples: Points, vectors and colors
    matrix: 4x4 matrices and primitive transforms
    transform: Ordered transform pipelines with exact inverses
    ray: Rays and kernel-side vector helpers
    integrator: The per-pixel render kernel
    progressive: Band-by-band rendering with progress and cancellation

Everything except integrator and progressive is plain host code. Those two
declare Taichi fields and must be imported after prism.init_backend().
"""

from .constants import BACKGROUND, EPSILON, MAX_REFLECTION_DEPTH, REFLECTION_LIMIT
from .matrix import IDENTITY, Matrix4
from .ray import Ray
from .transform import IDENTITY_TRANSFORM, Transform, TransformOp
from .tuples import BLACK, WHITE, Color, Tuple4, approx_eq, point, vector

# Note: integrator and progressive are NOT imported here because they declare
# Taichi fields. Import them directly after initializing the backend:
#   from prism.core.progressive import ProgressiveRenderer

__all__ = [
    "EPSILON",
    "REFLECTION_LIMIT",
    "MAX_REFLECTION_DEPTH",
    "BACKGROUND",
    "Tuple4",
    "Color",
    "point",
    "vector",
    "approx_eq",
    "BLACK",
    "WHITE",
    "Matrix4",
    "IDENTITY",
    "Transform",
    "TransformOp",
    "IDENTITY_TRANSFORM",
    "Ray",
]
