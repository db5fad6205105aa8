"""The World: every shape and light of a scene, and the host-side tracer.

World is a frozen snapshot. Its methods implement the reference shading
pipeline that the Taichi renderer in prism.core.integrator reproduces per
pixel:

    color_at(ray) -> intersect -> hit -> prepare_computations -> shade_hit
    shade_hit    -> sum over lights of lighting(..., is_shadowed(...))
                    + reflected_color (recursing into color_at)

Example:
    >>> from prism.core.ray import Ray
    >>> from prism.core.tuples import Color, point, vector
    >>> from prism.geometry.shape import sphere
    >>> from prism.scene.light import PointLight
    >>> from prism.scene.world import World
    >>> world = World([sphere()], [PointLight(point(-10, 10, -10), Color(1, 1, 1))])
    >>> world.color_at(Ray(point(0, 0, -5), vector(0, 1, 0)))
    Color(red=0.0, green=0.0, blue=0.0)
"""

from dataclasses import dataclass

from prism.core.constants import BACKGROUND, EPSILON, REFLECTION_LIMIT
from prism.core.ray import Ray
from prism.core.tuples import BLACK, Color, Tuple4
from prism.geometry.intersection import (
    HitComputations,
    Intersection,
    Intersections,
    prepare_computations,
)
from prism.geometry.shape import Shape
from prism.materials.phong import lighting
from prism.scene.light import PointLight

BACKGROUND_COLOR = Color.from_sequence(BACKGROUND)


@dataclass(frozen=True)
class World:
    """An immutable collection of shapes and lights.

    Attributes:
        shapes: The shapes, in the order they were added. Ties between equal
            t values resolve in favour of earlier shapes.
        lights: The point lights. Contributions are summed.
        reflection_limit: Maximum number of mirror bounces followed.
    """

    shapes: tuple[Shape, ...] = ()
    lights: tuple[PointLight, ...] = ()
    reflection_limit: int = REFLECTION_LIMIT

    def __post_init__(self) -> None:
        object.__setattr__(self, "shapes", tuple(self.shapes))
        object.__setattr__(self, "lights", tuple(self.lights))
        if self.reflection_limit < 0:
            raise ValueError(f"reflection_limit must be >= 0, got {self.reflection_limit}")

    def intersect(self, ray: Ray) -> Intersections:
        """Intersect a ray with every shape, sorted by ascending t."""
        return Intersections(
            Intersection(t, shape) for shape in self.shapes for t in shape.intersect(ray)
        )

    @staticmethod
    def hit(intersections: Intersections) -> Intersection | None:
        return intersections.hit()

    def is_shadowed(self, point: Tuple4, light: PointLight) -> bool:
        """Check whether anything lies between a point and a light.

        Args:
            point: The shadow ray origin, already offset along the surface
                normal (an over_point).
            light: The light to test against.

        Returns:
            True if some intersection has EPSILON < t < distance to the light.
        """
        to_light = light.position - point
        distance = to_light.magnitude()
        shadow_ray = Ray(point, to_light.normalize())
        return any(EPSILON < i.t < distance for i in self.intersect(shadow_ray))

    def shade_hit(self, intersection: Intersection, ray: Ray, remaining: int | None = None) -> Color:
        """Shade an intersection with every light plus reflection.

        Args:
            intersection: The visible intersection.
            ray: The ray that produced it.
            remaining: Reflection bounces left; defaults to reflection_limit.

        Returns:
            The unclamped color.
        """
        if remaining is None:
            remaining = self.reflection_limit
        comps = prepare_computations(intersection, ray)

        surface = BLACK
        for light in self.lights:
            shadowed = self.is_shadowed(comps.over_point, light)
            surface = surface + lighting(
                comps.shape.material,
                comps.shape,
                light,
                comps.over_point,
                comps.eyev,
                comps.normalv,
                shadowed,
            )

        return surface + self.reflected_color(comps, remaining)

    def reflected_color(self, comps: HitComputations, remaining: int | None = None) -> Color:
        """Color seen in the mirror direction, weighted by the material's reflective."""
        if remaining is None:
            remaining = self.reflection_limit
        reflective = comps.shape.material.reflective
        if reflective == 0.0 or remaining <= 0:
            return BLACK
        reflect_ray = Ray(comps.over_point, comps.reflectv)
        return self.color_at(reflect_ray, remaining - 1) * reflective

    def color_at(self, ray: Ray, remaining: int | None = None) -> Color:
        """Trace a ray and return the color it sees.

        Returns:
            BACKGROUND_COLOR when nothing is hit, otherwise the shaded hit.
        """
        hit = self.intersect(ray).hit()
        if hit is None:
            return BACKGROUND_COLOR
        return self.shade_hit(hit, ray, remaining)
