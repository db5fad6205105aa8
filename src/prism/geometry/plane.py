"""Infinite xz-plane primitive.

The plane is y = 0 in object space with normal +y everywhere. A ray whose
direction has |y| below EPSILON is treated as parallel and never hits,
including rays lying inside the plane.
"""

import taichi as ti

from prism.core.constants import EPSILON
from prism.core.ray import Ray, vec3
from prism.core.tuples import Tuple4, vector


def local_intersect(ray: Ray) -> tuple[float, ...]:
    """Intersect an object-space ray with the y=0 plane.

    Returns:
        A single t value, or an empty tuple when the ray is parallel.
    """
    if abs(ray.direction.y) < EPSILON:
        return ()
    return (-ray.origin.y / ray.direction.y,)


def local_normal_at(object_point: Tuple4) -> Tuple4:
    return vector(0.0, 1.0, 0.0)


@ti.func
def intersect_xz_plane(origin: vec3, direction: vec3):
    """Kernel counterpart of local_intersect.

    Returns:
        Tuple of (hit, t).
    """
    hit = 0
    t = 0.0
    if ti.abs(direction[1]) >= EPSILON:
        hit = 1
        t = -origin[1] / direction[1]
    return hit, t
