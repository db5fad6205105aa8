"""Integration tests for the end-to-end rendering pipeline.

This module tests the complete pipeline from a YAML scene file through the
device renderer to a saved image. Tests use the small preview camera so
they stay fast while still exercising every stage.

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run.
"""

import math
from pathlib import Path

import numpy as np
import pytest

from prism.camera.pinhole import Camera
from prism.core.transform import Transform
from prism.core.tuples import Color, point, vector
from prism.geometry.shape import sphere
from prism.materials.pattern import solid
from prism.materials.phong import Material
from prism.scene.light import PointLight
from prism.scene.loader import load_scene_file
from prism.scene.world import World

SCENES_DIR = Path(__file__).resolve().parent.parent / "examples" / "scenes"


class TestBoingScene:
    """Integration tests for the example scene."""

    def test_preview_renders(self):
        """The preview camera renders a non-empty image of the right size."""
        from prism.core.integrator import render

        scene = load_scene_file(SCENES_DIR / "boing.yaml")
        camera = scene.camera("preview")
        image = render(camera, scene.world)

        assert image.shape == (120, 160, 3)
        assert np.isfinite(image).all()
        assert image.min() >= 0.0
        assert image.max() <= 1.0
        # Floor and wall fill the frame, so no pixel is pure background
        assert (image.sum(axis=2) > 0.0).all()

    def test_device_matches_host_at_sampled_pixels(self):
        """Rendered pixels equal the clamped host color on the same camera rays."""
        from prism.core.integrator import render

        scene = load_scene_file(SCENES_DIR / "boing.yaml")
        camera = scene.camera("preview")
        image = render(camera, scene.world)

        for px, py in [(10, 10), (40, 60), (55, 45), (80, 60), (120, 100), (150, 115)]:
            host = scene.world.color_at(camera.ray_for_pixel(px, py)).clamp()
            assert tuple(image[py, px]) == pytest.approx(host.to_tuple(), abs=1e-6)


class TestSingleSphere:
    """Integration tests for a minimal scene."""

    def test_center_is_lit_sphere(self):
        """The sphere's visible center shows ambient plus diffuse, not background."""
        from prism.core.integrator import render

        world = World(
            [sphere(material=Material(pattern=solid(Color(1, 0.2, 1))))],
            [PointLight(point(-10, 10, -10), Color(1, 1, 1))],
        )
        camera = Camera.look_at(
            21, 21, math.pi / 3, point(0, 0, -5), point(0, 0, 0), vector(0, 1, 0)
        )
        image = render(camera, world)
        center = image[10, 10]
        assert center[0] > 0.1
        assert center[0] == pytest.approx(center[2])
        assert center[1] < center[0]
        assert tuple(image[0, 0]) == (0.0, 0.0, 0.0)

    def test_shadow_on_floor(self):
        """A sphere above a plane casts a shadow directly beneath it."""
        from prism.core.integrator import trace_ray
        from prism.geometry.shape import plane
        from prism.scene.intersection import load_world

        floor = plane()
        ball = sphere(Transform().translate(0, 2, 0))
        world = World([floor, ball], [PointLight(point(0, 10, 0), Color(1, 1, 1))])
        load_world(world)

        shadowed = trace_ray(point(0, 5, -5), (point(0, 0, 0) - point(0, 5, -5)).normalize())
        lit = trace_ray(point(0, 5, -5), (point(0, 0, -3) - point(0, 5, -5)).normalize())
        assert shadowed.approx_eq(Color(0.1, 0.1, 0.1))
        assert lit.red > 0.5


class TestRenderScript:
    """Tests for the example render script."""

    def test_render_scene_writes_png(self, tmp_path):
        """render_scene loads, renders and saves the named camera."""
        from PIL import Image

        from examples.render_scene import render_scene

        output = render_scene(
            str(SCENES_DIR / "boing.yaml"),
            camera_name="preview",
            output_path=str(tmp_path / "boing.png"),
            band_height=40,
            quiet=True,
        )
        with Image.open(output) as img:
            assert img.size == (160, 120)

    def test_render_scene_writes_ppm(self, tmp_path):
        """A .ppm output path writes plain PPM."""
        from examples.render_scene import render_scene

        output = render_scene(
            str(SCENES_DIR / "boing.yaml"),
            camera_name="preview",
            output_path=str(tmp_path / "boing.ppm"),
            quiet=True,
        )
        assert output.read_text().startswith("P3\n160 120\n255\n")

    def test_unknown_camera(self):
        """Asking for a camera the scene does not have fails."""
        from examples.render_scene import render_scene

        with pytest.raises(KeyError):
            render_scene(str(SCENES_DIR / "boing.yaml"), camera_name="missing", quiet=True)
