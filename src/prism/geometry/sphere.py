"""Unit sphere primitive.

Every sphere is the unit sphere centred at the object-space origin; size and
placement come from the owning shape's transform. Intersection solves
|O + tD|^2 = 1 for a ray already carried into object space:

    a = D.D
    b = 2 * D.O
    c = O.O - 1

A negative discriminant is a miss. Otherwise both roots are reported, even
when one or both are negative; choosing the visible one is left to the hit
query.

Example:
    >>> from prism.core.ray import Ray
    >>> from prism.core.tuples import point, vector
    >>> from prism.geometry.sphere import local_intersect
    >>> local_intersect(Ray(point(0, 0, -5), vector(0, 0, 1)))
    (4.0, 6.0)
"""

import math

import taichi as ti

from prism.core.ray import Ray, vec3
from prism.core.tuples import Tuple4, vector


def local_intersect(ray: Ray) -> tuple[float, ...]:
    """Intersect an object-space ray with the unit sphere.

    Args:
        ray: The ray in object space.

    Returns:
        The two roots in ascending order, or an empty tuple on a miss.
        A tangent ray reports the same t twice.
    """
    # Vector from the sphere center (object-space origin) to the ray origin
    sphere_to_ray = ray.origin - Tuple4(0.0, 0.0, 0.0, 1.0)
    a = ray.direction.dot(ray.direction)
    b = 2.0 * ray.direction.dot(sphere_to_ray)
    c = sphere_to_ray.dot(sphere_to_ray) - 1.0

    discriminant = b * b - 4.0 * a * c
    if discriminant < 0.0:
        return ()

    sqrt_d = math.sqrt(discriminant)
    t0 = (-b - sqrt_d) / (2.0 * a)
    t1 = (-b + sqrt_d) / (2.0 * a)
    return (t0, t1)


def local_normal_at(object_point: Tuple4) -> Tuple4:
    """Outward normal of the unit sphere at an object-space point."""
    return vector(object_point.x, object_point.y, object_point.z)


@ti.func
def intersect_unit_sphere(origin: vec3, direction: vec3):
    """Kernel counterpart of local_intersect.

    Args:
        origin: Object-space ray origin.
        direction: Object-space ray direction.

    Returns:
        Tuple of (hit, t0, t1). hit is 1 when the discriminant is
        non-negative; t0 <= t1 are only meaningful in that case.
    """
    a = direction.dot(direction)
    b = 2.0 * direction.dot(origin)
    c = origin.dot(origin) - 1.0
    discriminant = b * b - 4.0 * a * c

    hit = 0
    t0 = 0.0
    t1 = 0.0
    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        hit = 1
        t0 = (-b - sqrt_d) / (2.0 * a)
        t1 = (-b + sqrt_d) / (2.0 * a)

    return hit, t0, t1


@ti.func
def unit_sphere_normal(object_point: vec3) -> vec3:
    return object_point
