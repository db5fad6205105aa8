"""Phong ray tracer with a Taichi pixel kernel.

This package turns a declarative scene (point lights, transformed spheres and
planes with Phong materials, a look-at camera) into a grid of pixel colors.

Subpackages:
    core: Tuples, matrices, transforms, rays, the render kernel and banded rendering
    geometry: Shape kinds, local intersection math and hit records
    materials: Procedural patterns and Phong lighting
    scene: Lights, the World, the scene loader and device-side scene storage
    camera: Pinhole camera and view transform
    preview: Image conversion and export (uint8, PNG, PPM)

Modules that declare Taichi fields (core.integrator, core.progressive and
scene.intersection) are not imported here; initialize Taichi first with
init_backend() and import them afterwards.
"""

import taichi as ti

__version__ = "0.1.0"


def init_backend(arch=None, **kwargs) -> None:
    """Initialize the Taichi runtime used by the render kernel.

    The kernel works in float64 so that device results match the host
    reference math, therefore the default real type is forced to ti.f64.

    Args:
        arch: Taichi arch (defaults to ti.cpu).
        **kwargs: Extra keyword arguments forwarded to ti.init().
    """
    ti.init(arch=arch if arch is not None else ti.cpu, default_fp=ti.f64, **kwargs)
