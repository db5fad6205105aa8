"""Device-side scene storage and ray-scene queries.

This module uploads a World into Taichi fields and provides the Taichi
functions the render kernel uses to intersect and shade against it. It
mirrors the host pipeline in prism.scene.world step by step.

Storage is Structure-of-Arrays with fixed capacity. Each shape slot holds its
kind, its world-to-object matrix, the inverse-transpose used for normals, the
combined world-to-pattern matrix, and its material parameters.

Declaring the fields requires an initialized Taichi runtime, so import this
module only after prism.init_backend().

Example:
    >>> import prism
    >>> prism.init_backend()
    >>> from prism.scene.intersection import load_world, get_shape_count
    >>> load_world(world)
    >>> get_shape_count()
    3
"""

import logging

import taichi as ti
import taichi.math as tm

from prism.core.constants import EPSILON, MAX_REFLECTION_DEPTH
from prism.core.ray import transform_point, transform_vector, vec3
from prism.geometry.plane import intersect_xz_plane
from prism.geometry.shape import Shape, ShapeKind
from prism.geometry.sphere import intersect_unit_sphere, unit_sphere_normal
from prism.materials.pattern import sample_pattern
from prism.materials.phong import phong
from prism.scene.light import PointLight
from prism.scene.world import World

logger = logging.getLogger(__name__)


@ti.dataclass
class SceneHit:
    """Result of a nearest-hit query.

    Attributes:
        hit: 1 if some intersection with t >= 0 exists, 0 otherwise.
        t: Ray parameter of the hit. Only valid if hit == 1.
        shape: Slot index of the hit shape. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f64
    shape: ti.i32


# Maximum number of shapes and lights supported in the scene
MAX_SHAPES = 1024
MAX_LIGHTS = 64

# Shape storage
shape_kinds = ti.field(dtype=ti.i32, shape=MAX_SHAPES)
shape_inverse = ti.Matrix.field(4, 4, dtype=ti.f64, shape=MAX_SHAPES)
shape_inverse_transpose = ti.Matrix.field(4, 4, dtype=ti.f64, shape=MAX_SHAPES)
num_shapes = ti.field(dtype=ti.i32, shape=())

# Material storage, indexed by shape slot
pattern_kinds = ti.field(dtype=ti.i32, shape=MAX_SHAPES)
pattern_color_a = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SHAPES)
pattern_color_b = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SHAPES)
pattern_three_d = ti.field(dtype=ti.i32, shape=MAX_SHAPES)
# world -> pattern space (pattern inverse @ shape inverse)
pattern_inverse = ti.Matrix.field(4, 4, dtype=ti.f64, shape=MAX_SHAPES)
material_ambient = ti.field(dtype=ti.f64, shape=MAX_SHAPES)
material_diffuse = ti.field(dtype=ti.f64, shape=MAX_SHAPES)
material_specular = ti.field(dtype=ti.f64, shape=MAX_SHAPES)
material_shininess = ti.field(dtype=ti.f64, shape=MAX_SHAPES)
material_reflective = ti.field(dtype=ti.f64, shape=MAX_SHAPES)

# Light storage
light_positions = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LIGHTS)
light_intensities = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())

reflection_limit = ti.field(dtype=ti.i32, shape=())


# =============================================================================
# Upload (Python-side)
# =============================================================================


def clear_scene() -> None:
    """Remove all shapes and lights.

    Resets the counts to zero. The field data is overwritten when new
    shapes and lights are added.
    """
    num_shapes[None] = 0
    num_lights[None] = 0
    reflection_limit[None] = 0


def add_shape(shape: Shape) -> int:
    """Add a shape and its material to the scene.

    Args:
        shape: The shape to upload.

    Returns:
        The slot index of the added shape.

    Raises:
        RuntimeError: If the maximum number of shapes is exceeded.
    """
    idx = num_shapes[None]
    if idx >= MAX_SHAPES:
        raise RuntimeError(f"Maximum number of shapes ({MAX_SHAPES}) exceeded")

    material = shape.material
    pattern = material.pattern

    shape_kinds[idx] = int(shape.kind)
    shape_inverse[idx] = shape.transform.inverse.tolist()
    shape_inverse_transpose[idx] = shape.transform.inverse_transpose.tolist()

    pattern_kinds[idx] = int(pattern.kind)
    pattern_color_a[idx] = list(pattern.color_a.to_tuple())
    pattern_color_b[idx] = list(pattern.color_b.to_tuple())
    pattern_three_d[idx] = 1 if pattern.three_d else 0
    pattern_inverse[idx] = (pattern.transform.inverse @ shape.transform.inverse).tolist()

    material_ambient[idx] = material.ambient
    material_diffuse[idx] = material.diffuse
    material_specular[idx] = material.specular
    material_shininess[idx] = material.shininess
    material_reflective[idx] = material.reflective

    num_shapes[None] = idx + 1
    return idx


def add_light(light: PointLight) -> int:
    """Add a point light to the scene.

    Returns:
        The slot index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    position = light.position
    light_positions[idx] = [position.x, position.y, position.z]
    light_intensities[idx] = list(light.intensity.to_tuple())
    num_lights[None] = idx + 1
    return idx


def load_world(world: World) -> None:
    """Replace the device scene with a snapshot of world.

    Raises:
        RuntimeError: If the world has more shapes or lights than the
            device storage holds.
        ValueError: If the world's reflection limit exceeds
            MAX_REFLECTION_DEPTH.
    """
    if len(world.shapes) > MAX_SHAPES:
        raise RuntimeError(f"Maximum number of shapes ({MAX_SHAPES}) exceeded")
    if len(world.lights) > MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    if world.reflection_limit > MAX_REFLECTION_DEPTH:
        raise ValueError(
            f"reflection_limit {world.reflection_limit} exceeds the kernel maximum "
            f"({MAX_REFLECTION_DEPTH})"
        )

    clear_scene()
    for shape in world.shapes:
        add_shape(shape)
    for light in world.lights:
        add_light(light)
    reflection_limit[None] = world.reflection_limit

    logger.debug(
        "Uploaded world: %d shapes, %d lights, reflection limit %d",
        len(world.shapes),
        len(world.lights),
        world.reflection_limit,
    )


def get_shape_count() -> int:
    """Get the number of shapes in the scene."""
    return int(num_shapes[None])


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


def get_reflection_limit() -> int:
    return int(reflection_limit[None])


# =============================================================================
# Intersection (Taichi-side)
# =============================================================================


@ti.func
def _local_roots(kind: ti.i32, origin: vec3, direction: vec3):
    """Intersect an object-space ray with a primitive.

    Returns:
        Tuple of (count, t0, t1); count is 0, 1 or 2.
    """
    count = 0
    t0 = 0.0
    t1 = 0.0
    if kind == int(ShapeKind.SPHERE):
        hit, s0, s1 = intersect_unit_sphere(origin, direction)
        if hit == 1:
            count = 2
            t0 = s0
            t1 = s1
    elif kind == int(ShapeKind.PLANE):
        hit, s0 = intersect_xz_plane(origin, direction)
        if hit == 1:
            count = 1
            t0 = s0
    return count, t0, t1


@ti.func
def nearest_hit(origin: vec3, direction: vec3) -> SceneHit:
    """Find the intersection with the smallest t >= 0.

    Shapes are visited in slot order and a candidate only replaces the
    current best when strictly closer, so ties go to the first shape.

    Args:
        origin: World-space ray origin.
        direction: World-space ray direction.

    Returns:
        A SceneHit; hit == 0 if nothing lies ahead of the origin.
    """
    best_t = tm.inf
    best_shape = -1

    for i in range(num_shapes[None]):
        local_origin = transform_point(shape_inverse[i], origin)
        local_direction = transform_vector(shape_inverse[i], direction)
        count, t0, t1 = _local_roots(shape_kinds[i], local_origin, local_direction)
        if count >= 1:
            if t0 >= 0.0 and t0 < best_t:
                best_t = t0
                best_shape = i
        if count >= 2:
            if t1 >= 0.0 and t1 < best_t:
                best_t = t1
                best_shape = i

    result = SceneHit(hit=0, t=0.0, shape=-1)
    if best_shape >= 0:
        result = SceneHit(hit=1, t=best_t, shape=best_shape)
    return result


@ti.func
def any_hit_between(origin: vec3, direction: vec3, t_min: ti.f64, t_max: ti.f64) -> ti.i32:
    """Test whether any intersection has t_min < t < t_max (shadow query)."""
    blocked = 0

    for i in range(num_shapes[None]):
        if blocked == 0:
            local_origin = transform_point(shape_inverse[i], origin)
            local_direction = transform_vector(shape_inverse[i], direction)
            count, t0, t1 = _local_roots(shape_kinds[i], local_origin, local_direction)
            if count >= 1 and t0 > t_min and t0 < t_max:
                blocked = 1
            if count >= 2 and t1 > t_min and t1 < t_max:
                blocked = 1

    return blocked


@ti.func
def world_normal_at(i: ti.i32, world_point: vec3) -> vec3:
    """Unit world-space normal of shape slot i at a point on its surface."""
    local_point = transform_point(shape_inverse[i], world_point)
    local_normal = vec3(0.0, 1.0, 0.0)
    if shape_kinds[i] == int(ShapeKind.SPHERE):
        local_normal = unit_sphere_normal(local_point)
    # Vector transform drops w, which is the same as forcing it to zero
    return transform_vector(shape_inverse_transpose[i], local_normal).normalized()


@ti.func
def surface_color(i: ti.i32, world_point: vec3) -> vec3:
    """Pattern color of shape slot i at a world-space point."""
    pattern_point = transform_point(pattern_inverse[i], world_point)
    return sample_pattern(
        pattern_kinds[i],
        pattern_color_a[i],
        pattern_color_b[i],
        pattern_three_d[i],
        pattern_point,
    )


@ti.func
def shade_surface(i: ti.i32, over_point: vec3, eyev: vec3, normalv: vec3) -> vec3:
    """Sum the Phong contribution of every light, each with its own shadow test.

    Args:
        i: Slot index of the shape being shaded.
        over_point: Hit point pushed EPSILON along the normal.
        eyev: Unit vector toward the eye.
        normalv: Unit normal facing the eye.

    Returns:
        The unclamped surface color.
    """
    color = surface_color(i, over_point)
    result = vec3(0.0, 0.0, 0.0)

    for j in range(num_lights[None]):
        to_light = light_positions[j] - over_point
        distance = to_light.norm()
        shadowed = any_hit_between(over_point, to_light / distance, EPSILON, distance)
        result += phong(
            color,
            material_ambient[i],
            material_diffuse[i],
            material_specular[i],
            material_shininess[i],
            light_positions[j],
            light_intensities[j],
            over_point,
            eyev,
            normalv,
            shadowed,
        )

    return result
