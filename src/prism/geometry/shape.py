"""Shapes: a geometry kind placed in the world by a transform.

A Shape is a tagged value. Its kind selects the object-space intersection
and normal functions (prism.geometry.sphere, prism.geometry.plane); the
shape itself only handles moving rays and points between world and object
space. Host dispatch here and kernel dispatch in prism.scene.intersection
both branch on ShapeKind, so a new primitive adds a kind and a module.

Shapes compare by identity. Every shape gets a unique, increasing id.

Example:
    >>> from prism.core.transform import Transform
    >>> from prism.geometry.shape import sphere
    >>> s = sphere(Transform().scale(2, 2, 2))
    >>> s.kind.name
    'SPHERE'
"""

import itertools
from dataclasses import dataclass, field
from enum import IntEnum

from prism.core.ray import Ray
from prism.core.transform import IDENTITY_TRANSFORM, Transform
from prism.core.tuples import Tuple4
from prism.geometry import plane as _plane
from prism.geometry import sphere as _sphere
from prism.materials.phong import Material

_shape_ids = itertools.count(1)


class ShapeKind(IntEnum):
    """Geometry type identifiers, shared by host and kernel dispatch."""

    SPHERE = 0
    PLANE = 1


@dataclass(frozen=True, eq=False)
class Shape:
    """A primitive with a placement transform and a material.

    Attributes:
        kind: The primitive geometry.
        transform: Object-to-world transform (with its inverse).
        material: Surface material.
        id: Unique identifier assigned at construction.
    """

    kind: ShapeKind
    transform: Transform = IDENTITY_TRANSFORM
    material: Material = field(default_factory=Material)
    id: int = field(init=False, default_factory=lambda: next(_shape_ids))

    def local_intersect(self, local_ray: Ray) -> tuple[float, ...]:
        if self.kind == ShapeKind.SPHERE:
            return _sphere.local_intersect(local_ray)
        elif self.kind == ShapeKind.PLANE:
            return _plane.local_intersect(local_ray)
        raise ValueError(f"Unknown shape kind: {self.kind!r}")

    def local_normal_at(self, local_point: Tuple4) -> Tuple4:
        if self.kind == ShapeKind.SPHERE:
            return _sphere.local_normal_at(local_point)
        elif self.kind == ShapeKind.PLANE:
            return _plane.local_normal_at(local_point)
        raise ValueError(f"Unknown shape kind: {self.kind!r}")

    def intersect(self, ray: Ray) -> tuple[float, ...]:
        """Intersect a world-space ray with this shape.

        The ray is carried into object space by the inverse transform; the
        returned t values are still distances along the original ray.

        Returns:
            The t values in the order the primitive reports them.
        """
        return self.local_intersect(ray.transform(self.transform.inverse))

    def normal_at(self, world_point: Tuple4) -> Tuple4:
        """Unit surface normal at a world-space point.

        Raises:
            NumericDegeneracy: If the transformed normal has zero length.
        """
        local_point = self.transform.inverse @ world_point
        local_normal = self.local_normal_at(local_point)
        world_normal = self.transform.inverse_transpose @ local_normal
        return Tuple4(world_normal.x, world_normal.y, world_normal.z, 0.0).normalize()

    def __repr__(self) -> str:
        return f"Shape(id={self.id}, kind={self.kind.name})"


def sphere(transform: Transform = IDENTITY_TRANSFORM, material: Material | None = None) -> Shape:
    """Create a unit sphere placed by transform."""
    return Shape(ShapeKind.SPHERE, transform, material if material is not None else Material())


def plane(transform: Transform = IDENTITY_TRANSFORM, material: Material | None = None) -> Shape:
    """Create an xz-plane placed by transform."""
    return Shape(ShapeKind.PLANE, transform, material if material is not None else Material())
