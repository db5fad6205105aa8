"""Unit tests for the host-side World.

Tests cover:
- Intersecting a ray with every shape
- Shading hits from outside and inside
- Shadows from other shapes
- Reflection, including the bounce limit
- Ties between coincident shapes
"""

import math

import pytest

from prism.core.ray import Ray
from prism.core.transform import Transform
from prism.core.tuples import BLACK, WHITE, Color, point, vector
from prism.geometry.intersection import Intersection, prepare_computations
from prism.geometry.shape import plane, sphere
from prism.materials.pattern import solid
from prism.materials.phong import Material
from prism.scene.light import PointLight
from prism.scene.world import BACKGROUND_COLOR, World

H = math.sqrt(2) / 2


class TestWorldBasics:
    """Tests for construction and intersection."""

    def test_empty_world(self):
        """An empty world sees only background."""
        w = World()
        assert w.shapes == ()
        assert w.lights == ()
        assert w.color_at(Ray(point(0, 0, -5), vector(0, 0, 1))) == BACKGROUND_COLOR

    def test_negative_reflection_limit(self):
        """The reflection limit cannot be negative."""
        with pytest.raises(ValueError):
            World(reflection_limit=-1)

    def test_intersect(self, default_world):
        """Every shape contributes its roots, sorted by t."""
        xs = default_world.intersect(Ray(point(0, 0, -5), vector(0, 0, 1)))
        assert [i.t for i in xs] == pytest.approx([4.0, 4.5, 5.5, 6.0])


class TestShading:
    """Tests for shade_hit and color_at."""

    def test_shade_from_outside(self, default_world):
        """Shading the outer sphere from in front."""
        r = Ray(point(0, 0, -5), vector(0, 0, 1))
        c = default_world.shade_hit(Intersection(4.0, default_world.shapes[0]), r)
        assert c.to_tuple() == pytest.approx((0.38066, 0.47583, 0.2855), abs=1e-4)

    def test_shade_from_inside(self, default_world):
        """Shading the inner sphere from its center with a light inside it."""
        w = World(default_world.shapes, [PointLight(point(0, 0.25, 0), WHITE)])
        r = Ray(point(0, 0, 0), vector(0, 0, 1))
        c = w.shade_hit(Intersection(0.5, w.shapes[1]), r)
        assert c.to_tuple() == pytest.approx((0.90498, 0.90498, 0.90498), abs=1e-4)

    def test_color_when_ray_misses(self, default_world):
        """A miss returns the background."""
        assert default_world.color_at(Ray(point(0, 0, -5), vector(0, 1, 0))) == BLACK

    def test_color_when_ray_hits(self, default_world):
        """A hit returns the shaded nearest surface."""
        c = default_world.color_at(Ray(point(0, 0, -5), vector(0, 0, 1)))
        assert c.to_tuple() == pytest.approx((0.38066, 0.47583, 0.2855), abs=1e-4)

    def test_intersection_behind_ray(self):
        """From between the spheres, the inner sphere is the visible one."""
        light = PointLight(point(-10, 10, -10), WHITE)
        outer = sphere(material=Material(pattern=solid(Color(0.8, 1.0, 0.6)), ambient=1.0))
        inner = sphere(
            Transform().scale(0.5, 0.5, 0.5),
            Material(pattern=solid(Color(0.3, 0.2, 0.1)), ambient=1.0),
        )
        w = World([outer, inner], [light])
        c = w.color_at(Ray(point(0, 0, 0.75), vector(0, 0, -1)))
        # The outer sphere shadows the inner one, leaving ambient only
        assert c.approx_eq(Color(0.3, 0.2, 0.1))

    def test_multiple_lights_add(self):
        """Two identical lights double the contribution."""
        s = sphere()
        light = PointLight(point(0, 0, -10), WHITE)
        r = Ray(point(0, 0, -5), vector(0, 0, 1))
        one = World([s], [light]).color_at(r)
        two = World([s], [light, light]).color_at(r)
        assert two.approx_eq(one * 2)

    def test_coincident_shapes_first_wins(self):
        """Equal t values resolve to the shape added first."""
        flat = {"ambient": 1, "diffuse": 0, "specular": 0}
        red = sphere(material=Material(pattern=solid(Color(1, 0, 0)), **flat))
        blue = sphere(material=Material(pattern=solid(Color(0, 0, 1)), **flat))
        light = PointLight(point(0, 0, -10), WHITE)
        r = Ray(point(0, 0, -5), vector(0, 0, 1))
        assert World([red, blue], [light]).color_at(r) == Color(1, 0, 0)
        assert World([blue, red], [light]).color_at(r) == Color(0, 0, 1)


class TestShadows:
    """Tests for is_shadowed and shadowed shading."""

    @pytest.mark.parametrize(
        "p, expected",
        [
            (point(0, 10, 0), False),
            (point(10, -10, 10), True),
            (point(-20, 20, -20), False),
            (point(-2, 2, -2), False),
        ],
    )
    def test_is_shadowed(self, default_world, p, expected):
        """Only points with an object between them and the light are shadowed."""
        assert default_world.is_shadowed(p, default_world.lights[0]) is expected

    def test_shade_hit_in_shadow(self):
        """A point behind another sphere gets ambient only."""
        s1 = sphere()
        s2 = sphere(Transform().translate(0, 0, 10))
        w = World([s1, s2], [PointLight(point(0, 0, -10), WHITE)])
        r = Ray(point(0, 0, 5), vector(0, 0, 1))
        c = w.shade_hit(Intersection(4.0, s2), r)
        assert c.approx_eq(Color(0.1, 0.1, 0.1))


class TestReflection:
    """Tests for reflected_color and mirror bounces."""

    def _with_mirror_floor(self, world, reflective=0.5):
        floor = plane(Transform().translate(0, -1, 0), Material(reflective=reflective))
        return World(world.shapes + (floor,), world.lights), floor

    def test_non_reflective_surface(self, default_world):
        """A non-reflective material reflects black."""
        r = Ray(point(0, 0, 0), vector(0, 0, 1))
        inner = default_world.shapes[1]
        comps = prepare_computations(Intersection(1.0, inner), r)
        assert default_world.reflected_color(comps) == BLACK

    def test_reflective_surface(self, default_world):
        """A reflective floor picks up the spheres."""
        w, floor = self._with_mirror_floor(default_world)
        r = Ray(point(0, 0, -3), vector(0, -H, H))
        comps = prepare_computations(Intersection(math.sqrt(2), floor), r)
        c = w.reflected_color(comps)
        assert c.to_tuple() == pytest.approx((0.19032, 0.2379, 0.14274), abs=1e-4)

    def test_shade_hit_includes_reflection(self, default_world):
        """shade_hit adds the reflected color to the surface color."""
        w, floor = self._with_mirror_floor(default_world)
        r = Ray(point(0, 0, -3), vector(0, -H, H))
        i = Intersection(math.sqrt(2), floor)
        comps = prepare_computations(i, r)
        c = w.shade_hit(i, r)
        no_bounce = w.shade_hit(i, r, remaining=0)
        assert c.approx_eq(no_bounce + w.reflected_color(comps))
        assert c.to_tuple() == pytest.approx((0.87677, 0.92436, 0.82918), abs=1e-4)

    def test_no_bounces_left(self, default_world):
        """With no bounces remaining the reflection is black."""
        w, floor = self._with_mirror_floor(default_world)
        r = Ray(point(0, 0, -3), vector(0, -H, H))
        comps = prepare_computations(Intersection(math.sqrt(2), floor), r)
        assert w.reflected_color(comps, 0) == BLACK

    def test_zero_reflection_limit(self, default_world):
        """A world with reflection_limit 0 never bounces."""
        w, floor = self._with_mirror_floor(default_world)
        flat = World(w.shapes, w.lights, reflection_limit=0)
        r = Ray(point(0, 0, -3), vector(0, -H, H))
        i = Intersection(math.sqrt(2), floor)
        assert flat.shade_hit(i, r) == w.shade_hit(i, r, remaining=0)

    def test_mutually_reflective_surfaces_terminate(self):
        """Two facing mirrors stop after the bounce limit."""
        lower = plane(Transform().translate(0, -1, 0), Material(reflective=1))
        upper = plane(Transform().translate(0, 1, 0), Material(reflective=1))
        w = World([lower, upper], [PointLight(point(0, 0, 0), WHITE)])
        c = w.color_at(Ray(point(0, 0, 0), vector(0, 1, 0)))
        assert all(math.isfinite(v) for v in c.to_tuple())
        assert c.red > 0
