"""Unit tests for Phong materials and lighting.

Tests cover:
- Default material values
- The eye/light geometry cases for a single light
- Shadowed surfaces receiving ambient only
- Patterned materials
- Kernel phong agreeing with the host
"""

import math

import pytest
import taichi as ti

from prism.core.tuples import BLACK, WHITE, Color, point, vector
from prism.geometry.shape import sphere
from prism.materials.pattern import Pattern, PatternKind
from prism.materials.phong import Material, lighting
from prism.scene.light import PointLight

H = math.sqrt(2) / 2


class TestMaterial:
    """Tests for Material defaults."""

    def test_defaults(self):
        """The default material is white, fairly shiny and not reflective."""
        m = Material()
        assert m.pattern.sample(point(0, 0, 0)) == WHITE
        assert m.ambient == 0.1
        assert m.diffuse == 0.9
        assert m.specular == 0.9
        assert m.shininess == 200.0
        assert m.reflective == 0.0


class TestLighting:
    """Tests for the host lighting function at the origin."""

    @pytest.mark.parametrize(
        "eyev, light_position, expected",
        [
            # Eye between light and surface
            (vector(0, 0, -1), point(0, 0, -10), 1.9),
            # Eye offset 45 degrees
            (vector(0, H, -H), point(0, 0, -10), 1.0),
            # Light offset 45 degrees
            (vector(0, 0, -1), point(0, 10, -10), 0.7364),
            # Eye in the path of the reflection
            (vector(0, -H, -H), point(0, 10, -10), 1.6364),
            # Light behind the surface
            (vector(0, 0, -1), point(0, 0, 10), 0.1),
        ],
    )
    def test_geometry_cases(self, eyev, light_position, expected):
        """Ambient, diffuse and specular combine by geometry."""
        light = PointLight(light_position, WHITE)
        result = lighting(Material(), sphere(), light, point(0, 0, 0), eyev, vector(0, 0, -1))
        assert result.to_tuple() == pytest.approx((expected,) * 3, abs=1e-4)

    def test_in_shadow(self):
        """A shadowed surface gets ambient only."""
        light = PointLight(point(0, 0, -10), WHITE)
        result = lighting(
            Material(), sphere(), light, point(0, 0, 0), vector(0, 0, -1), vector(0, 0, -1), True
        )
        assert result.approx_eq(Color(0.1, 0.1, 0.1))

    def test_light_color(self):
        """Light intensity tints the result."""
        light = PointLight(point(0, 0, -10), Color(1, 0, 0))
        result = lighting(
            Material(), sphere(), light, point(0, 0, 0), vector(0, 0, -1), vector(0, 0, -1)
        )
        assert result.approx_eq(Color(1.9, 0, 0))

    def test_pattern(self):
        """Lighting samples the material pattern at the point."""
        m = Material(
            pattern=Pattern(PatternKind.STRIPE, WHITE, BLACK), ambient=1, diffuse=0, specular=0
        )
        light = PointLight(point(0, 0, -10), WHITE)
        eyev = vector(0, 0, -1)
        normalv = vector(0, 0, -1)
        s = sphere()
        assert lighting(m, s, light, point(0.9, 0, 0), eyev, normalv) == WHITE
        assert lighting(m, s, light, point(1.1, 0, 0), eyev, normalv) == BLACK


class TestKernelPhong:
    """Tests for the Taichi phong function."""

    @pytest.mark.parametrize(
        "eyev, light_position, in_shadow",
        [
            ((0.0, 0.0, -1.0), (0.0, 0.0, -10.0), 0),
            ((0.0, H, -H), (0.0, 0.0, -10.0), 0),
            ((0.0, 0.0, -1.0), (0.0, 10.0, -10.0), 0),
            ((0.0, -H, -H), (0.0, 10.0, -10.0), 0),
            ((0.0, 0.0, -1.0), (0.0, 0.0, 10.0), 0),
            ((0.0, 0.0, -1.0), (0.0, 0.0, -10.0), 1),
        ],
    )
    def test_matches_host(self, eyev, light_position, in_shadow):
        """Kernel phong equals host lighting."""
        from prism.core.ray import vec3
        from prism.materials.phong import phong

        result = ti.Vector.field(3, dtype=ti.f64, shape=())
        m = Material()

        @ti.kernel
        def test_kernel(
            ex: ti.f64, ey: ti.f64, ez: ti.f64, lx: ti.f64, ly: ti.f64, lz: ti.f64, shadow: ti.i32
        ):
            result[None] = phong(
                vec3(1.0, 1.0, 1.0),
                0.1,
                0.9,
                0.9,
                200.0,
                vec3(lx, ly, lz),
                vec3(1.0, 1.0, 1.0),
                vec3(0.0, 0.0, 0.0),
                vec3(ex, ey, ez),
                vec3(0.0, 0.0, -1.0),
                shadow,
            )

        test_kernel(*eyev, *light_position, in_shadow)
        expected = lighting(
            m,
            sphere(),
            PointLight(point(*light_position), WHITE),
            point(0, 0, 0),
            vector(*eyev),
            vector(0, 0, -1),
            bool(in_shadow),
        )
        assert tuple(result[None]) == pytest.approx(expected.to_tuple(), abs=1e-9)
