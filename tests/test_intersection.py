"""Unit tests for intersection records and hit preparation.

Tests cover:
- Hit selection over positive, negative and mixed t
- Stable ordering of equal t values
- prepare_computations for outside and inside hits
- over_point offset along the normal
- Reflection vector
"""

import math

from prism.core.constants import EPSILON
from prism.core.ray import Ray
from prism.core.transform import Transform
from prism.core.tuples import point, vector
from prism.geometry.intersection import Intersection, Intersections, prepare_computations
from prism.geometry.shape import plane, sphere


class TestHit:
    """Tests for Intersections.hit."""

    def test_all_positive(self):
        """The hit is the lowest non-negative t."""
        s = sphere()
        i1 = Intersection(1.0, s)
        i2 = Intersection(2.0, s)
        assert Intersections([i2, i1]).hit() is i1

    def test_some_negative(self):
        """Negative t values are skipped."""
        s = sphere()
        i1 = Intersection(-1.0, s)
        i2 = Intersection(1.0, s)
        assert Intersections([i2, i1]).hit() is i2

    def test_all_negative(self):
        """No hit when everything is behind the ray."""
        s = sphere()
        assert Intersections([Intersection(-2.0, s), Intersection(-1.0, s)]).hit() is None

    def test_lowest_non_negative(self):
        """The hit is the lowest non-negative t regardless of input order."""
        s = sphere()
        i4 = Intersection(2.0, s)
        xs = Intersections(
            [Intersection(5.0, s), Intersection(7.0, s), Intersection(-3.0, s), i4]
        )
        assert xs.hit() is i4

    def test_zero_counts_as_hit(self):
        """t = 0 is a valid hit."""
        s = sphere()
        i0 = Intersection(0.0, s)
        assert Intersections([Intersection(-1.0, s), i0]).hit() is i0

    def test_sorted(self):
        """Intersections are exposed in ascending t."""
        s = sphere()
        xs = Intersections([Intersection(3.0, s), Intersection(-1.0, s), Intersection(2.0, s)])
        assert [i.t for i in xs] == [-1.0, 2.0, 3.0]
        assert len(xs) == 3
        assert xs[0].t == -1.0

    def test_ties_keep_input_order(self):
        """Equal t values keep the order they were supplied in."""
        a = sphere()
        b = sphere()
        xs = Intersections([Intersection(1.0, a), Intersection(1.0, b)])
        assert xs.hit().shape is a

    def test_empty(self):
        """An empty collection has no hit."""
        assert Intersections().hit() is None


class TestPrepareComputations:
    """Tests for prepare_computations."""

    def test_outside(self):
        """A hit from outside keeps the outward normal."""
        r = Ray(point(0, 0, -5), vector(0, 0, 1))
        s = sphere()
        comps = prepare_computations(Intersection(4.0, s), r)
        assert comps.t == 4.0
        assert comps.shape is s
        assert comps.point == point(0, 0, -1)
        assert comps.eyev == vector(0, 0, -1)
        assert comps.normalv == vector(0, 0, -1)
        assert comps.inside is False

    def test_inside(self):
        """A hit from inside flips the normal toward the eye."""
        r = Ray(point(0, 0, 0), vector(0, 0, 1))
        comps = prepare_computations(Intersection(1.0, sphere()), r)
        assert comps.point == point(0, 0, 1)
        assert comps.eyev == vector(0, 0, -1)
        assert comps.inside is True
        assert comps.normalv == vector(0, 0, -1)

    def test_over_point(self):
        """over_point sits just above the surface."""
        r = Ray(point(0, 0, -5), vector(0, 0, 1))
        s = sphere(Transform().translate(0, 0, 1))
        comps = prepare_computations(Intersection(5.0, s), r)
        assert comps.over_point.z < -EPSILON / 2
        assert comps.point.z > comps.over_point.z
        assert comps.over_point.approx_eq(comps.point + comps.normalv * EPSILON, 1e-12)

    def test_reflectv(self):
        """The reflection vector bounces off the normal."""
        h = math.sqrt(2) / 2
        r = Ray(point(0, 1, -1), vector(0, -h, h))
        comps = prepare_computations(Intersection(math.sqrt(2), plane()), r)
        assert comps.reflectv.approx_eq(vector(0, h, h))
