"""Whitted-style integrator: the per-pixel render kernel.

This module evaluates, for every pixel, the same pipeline as
World.color_at on the host: generate the camera ray, find the nearest hit,
shade it with every light (each with a shadow ray) and follow mirror
reflections up to the world's reflection limit. The final color is clamped
to [0, 1] when written to the output image.

Recursion is not available inside Taichi functions, so reflections are
unrolled into a loop of MAX_REFLECTION_DEPTH + 1 passes that carries the
product of reflective weights along the mirror path.

Output images are NumPy float64 arrays of shape (height, width, 3), indexed
image[y, x] with the origin at the top-left corner.

Example:
    >>> import prism
    >>> prism.init_backend()
    >>> from prism.core.integrator import render
    >>> from prism.scene.loader import load_scene_file
    >>> scene = load_scene_file("examples/scenes/boing.yaml")
    >>> image = render(scene.camera("main_camera"), scene.world)
"""

import logging

import numpy as np
import numpy.typing as npt
import taichi as ti

from prism.camera.pinhole import Camera
from prism.core.constants import BACKGROUND, EPSILON, MAX_REFLECTION_DEPTH
from prism.core.ray import reflect, transform_point, vec3
from prism.core.tuples import Color, Tuple4
from prism.scene.intersection import (
    load_world,
    material_reflective,
    nearest_hit,
    reflection_limit,
    shade_surface,
    world_normal_at,
)
from prism.scene.world import World

logger = logging.getLogger(__name__)

BACKGROUND_COLOR = vec3(*BACKGROUND)

# =============================================================================
# Camera State
# =============================================================================

_camera_inverse = ti.Matrix.field(4, 4, dtype=ti.f64, shape=())
_camera_half_width = ti.field(dtype=ti.f64, shape=())
_camera_half_height = ti.field(dtype=ti.f64, shape=())
_camera_pixel_size = ti.field(dtype=ti.f64, shape=())
_camera_width = ti.field(dtype=ti.i32, shape=())
_camera_height = ti.field(dtype=ti.i32, shape=())


def setup_camera(camera: Camera) -> None:
    """Upload a camera's derived geometry for ray generation.

    Args:
        camera: The camera to render through.
    """
    _camera_inverse[None] = camera.inverse.tolist()
    _camera_half_width[None] = camera.half_width
    _camera_half_height[None] = camera.half_height
    _camera_pixel_size[None] = camera.pixel_size
    _camera_width[None] = camera.width
    _camera_height[None] = camera.height


def get_camera_dimensions() -> tuple[int, int]:
    """Get the (width, height) of the uploaded camera."""
    return int(_camera_width[None]), int(_camera_height[None])


def setup_scene(camera: Camera, world: World) -> None:
    """Upload both the world and the camera before rendering."""
    load_world(world)
    setup_camera(camera)


# =============================================================================
# Ray Generation and Tracing (Taichi-side)
# =============================================================================


@ti.func
def pixel_ray(px: ti.i32, py: ti.i32):
    """Kernel counterpart of Camera.ray_for_pixel.

    Returns:
        Tuple of (origin, direction) in world space.
    """
    pixel_size = _camera_pixel_size[None]
    world_x = _camera_half_width[None] - (ti.cast(px, ti.f64) + 0.5) * pixel_size
    world_y = _camera_half_height[None] - (ti.cast(py, ti.f64) + 0.5) * pixel_size

    inverse = _camera_inverse[None]
    pixel = transform_point(inverse, vec3(world_x, world_y, -1.0))
    origin = transform_point(inverse, vec3(0.0, 0.0, 0.0))
    return origin, (pixel - origin).normalized()


@ti.func
def trace(ray_origin: vec3, ray_direction: vec3) -> vec3:
    """Trace a ray through the scene, following mirror reflections.

    Args:
        ray_origin: World-space origin.
        ray_direction: World-space direction.

    Returns:
        The unclamped color seen along the ray.
    """
    origin = ray_origin
    direction = ray_direction
    color = vec3(0.0, 0.0, 0.0)
    weight = 1.0
    remaining = reflection_limit[None]

    # Active flag for path continuation (no break inside ti.func loops)
    active = 1

    for bounce in range(MAX_REFLECTION_DEPTH + 1):
        if active == 1:
            rec = nearest_hit(origin, direction)

            if rec.hit == 0:
                color += weight * BACKGROUND_COLOR
                active = 0
            else:
                i = rec.shape
                point = origin + rec.t * direction
                eyev = -direction
                normalv = world_normal_at(i, point)
                if normalv.dot(eyev) < 0.0:
                    normalv = -normalv
                over_point = point + normalv * EPSILON

                color += weight * shade_surface(i, over_point, eyev, normalv)

                reflective = material_reflective[i]
                if reflective == 0.0 or remaining <= 0:
                    active = 0
                else:
                    weight *= reflective
                    direction = reflect(direction, normalv)
                    origin = over_point
                    remaining -= 1

    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(
    image: ti.types.ndarray(dtype=ti.f64, ndim=3),
    row_start: ti.i32,
    row_stop: ti.i32,
    width: ti.i32,
):
    """Render rows [row_start, row_stop) into image, clamping each channel."""
    for y, x in ti.ndrange((row_start, row_stop), width):
        origin, direction = pixel_ray(x, y)
        color = trace(origin, direction)
        for c in ti.static(range(3)):
            image[y, x, c] = ti.min(ti.max(color[c], 0.0), 1.0)


@ti.kernel
def _trace_single_ray(
    ox: ti.f64, oy: ti.f64, oz: ti.f64, dx: ti.f64, dy: ti.f64, dz: ti.f64
) -> vec3:
    return trace(vec3(ox, oy, oz), vec3(dx, dy, dz))


@ti.kernel
def _render_single_pixel(px: ti.i32, py: ti.i32) -> vec3:
    origin, direction = pixel_ray(px, py)
    return trace(origin, direction)


# =============================================================================
# Public Rendering API
# =============================================================================


def new_image(width: int, height: int) -> npt.NDArray[np.float64]:
    """Allocate an output image filled with the background color."""
    image = np.empty((height, width, 3), dtype=np.float64)
    image[:, :] = BACKGROUND
    return image


def render_rows(image: npt.NDArray[np.float64], row_start: int, row_stop: int) -> None:
    """Render a band of rows with the uploaded camera and world.

    Only rows in [row_start, row_stop) are written.

    Args:
        image: Output array of shape (height, width, 3), float64.
        row_start: First row to render.
        row_stop: One past the last row to render.

    Raises:
        ValueError: If the image does not match the uploaded camera or the
            row range is out of bounds.
    """
    width, height = get_camera_dimensions()
    if image.shape != (height, width, 3) or image.dtype != np.float64:
        raise ValueError(
            f"Image must be float64 with shape {(height, width, 3)}, "
            f"got {image.dtype} {image.shape}"
        )
    if not 0 <= row_start <= row_stop <= height:
        raise ValueError(f"Invalid row range [{row_start}, {row_stop}) for height {height}")
    if row_start == row_stop:
        return
    _render_rows(image, row_start, row_stop, width)


def render(camera: Camera, world: World) -> npt.NDArray[np.float64]:
    """Render a world through a camera in a single kernel launch.

    Args:
        camera: The camera to render through.
        world: The scene to render.

    Returns:
        Float64 array of shape (camera.height, camera.width, 3) with values
        in [0, 1].
    """
    setup_scene(camera, world)
    logger.info("Rendering %dx%d", camera.width, camera.height)

    image = new_image(camera.width, camera.height)
    render_rows(image, 0, camera.height)
    return image


def trace_ray(origin: Tuple4, direction: Tuple4) -> Color:
    """Trace one world-space ray against the uploaded world on the device.

    The result is not clamped, which makes it directly comparable to
    World.color_at.
    """
    color = _trace_single_ray(
        origin.x, origin.y, origin.z, direction.x, direction.y, direction.z
    )
    return Color(float(color[0]), float(color[1]), float(color[2]))


def render_pixel(px: int, py: int) -> Color:
    """Trace the camera ray of one pixel on the device, without clamping."""
    color = _render_single_pixel(px, py)
    return Color(float(color[0]), float(color[1]), float(color[2]))
