"""Geometry module for shape primitives and intersection records.

Components:
    shape: The Shape value, its kind tag and world/object space handling
    sphere: Unit sphere intersection and normal
    plane: xz-plane intersection and normal
    intersection: Intersection lists, hit selection and shading precomputation

Each primitive provides a host function and a Taichi function for the same
object-space intersection, so the reference tracer and the render kernel
share one definition per kind.
"""

from .intersection import HitComputations, Intersection, Intersections, prepare_computations
from .shape import Shape, ShapeKind, plane, sphere

__all__ = [
    "Shape",
    "ShapeKind",
    "sphere",
    "plane",
    "Intersection",
    "Intersections",
    "HitComputations",
    "prepare_computations",
]
