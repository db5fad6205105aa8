"""Rays and the vector helpers used inside Taichi kernels.

The host Ray is an immutable (origin point, direction vector) pair used by the
reference math in prism.geometry and prism.scene.world. The Taichi functions
below mirror the same operations on float64 vectors for the render kernel.

Example:
    >>> from prism.core.ray import Ray
    >>> from prism.core.tuples import point, vector
    >>> ray = Ray(point(2.0, 3.0, 4.0), vector(1.0, 0.0, 0.0))
    >>> ray.position(2.5)
    Tuple4(x=4.5, y=3.0, z=4.0, w=1.0)
"""

from dataclasses import dataclass

import taichi as ti

from prism.core.matrix import Matrix4
from prism.core.tuples import Tuple4

# Float64 vector/matrix types for kernel code
vec3 = ti.types.vector(3, ti.f64)
vec4 = ti.types.vector(4, ti.f64)
mat4 = ti.types.matrix(4, 4, ti.f64)


@dataclass(frozen=True)
class Ray:
    """A ray with an origin point and a direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction vector. Not required to be unit length;
            t values are measured in multiples of it.
    """

    origin: Tuple4
    direction: Tuple4

    def position(self, t: float) -> Tuple4:
        """Compute the point origin + t * direction."""
        return self.origin + self.direction * t

    def transform(self, matrix: Matrix4) -> "Ray":
        """Return the ray carried through matrix (origin as point, direction as vector)."""
        return Ray(matrix @ self.origin, matrix @ self.direction)


# =============================================================================
# Kernel-side helpers
# =============================================================================


@ti.func
def transform_point(m: mat4, p: vec3) -> vec3:
    """Apply a 4x4 matrix to a point (w=1)."""
    r = m @ vec4(p[0], p[1], p[2], 1.0)
    return vec3(r[0], r[1], r[2])


@ti.func
def transform_vector(m: mat4, v: vec3) -> vec3:
    """Apply a 4x4 matrix to a vector (w=0), dropping the resulting w."""
    r = m @ vec4(v[0], v[1], v[2], 0.0)
    return vec3(r[0], r[1], r[2])


@ti.func
def ray_at(origin: vec3, direction: vec3, t: ti.f64) -> vec3:
    return origin + t * direction


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a unit normal."""
    return incident - 2.0 * incident.dot(normal) * normal
