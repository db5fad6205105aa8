"""Intersection records, hit selection and shading precomputation.

Example:
    >>> from prism.geometry.intersection import Intersection, Intersections
    >>> from prism.geometry.shape import sphere
    >>> s = sphere()
    >>> xs = Intersections([Intersection(5.0, s), Intersection(-1.0, s), Intersection(2.0, s)])
    >>> xs.hit().t
    2.0
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from prism.core.constants import EPSILON
from prism.core.ray import Ray
from prism.core.tuples import Tuple4
from prism.geometry.shape import Shape


@dataclass(frozen=True)
class Intersection:
    """A ray parameter t at which a ray meets a shape."""

    t: float
    shape: Shape


class Intersections:
    """An immutable sequence of intersections sorted by ascending t.

    Sorting is stable: intersections with equal t keep the order they were
    supplied in, so the first shape encountered wins a tie.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[Intersection] = ()) -> None:
        self._items = tuple(sorted(items, key=lambda i: i.t))

    def hit(self) -> Intersection | None:
        """Return the first intersection with t >= 0, or None."""
        for intersection in self._items:
            if intersection.t >= 0.0:
                return intersection
        return None

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> Intersection:
        return self._items[index]

    def __iter__(self) -> Iterator[Intersection]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"Intersections({list(self._items)!r})"


@dataclass(frozen=True)
class HitComputations:
    """Shading state derived from one intersection.

    Attributes:
        t: Ray parameter of the hit.
        shape: The shape that was hit.
        point: World-space hit point.
        over_point: point pushed EPSILON along the normal, used for
            shadow and reflection rays.
        eyev: Unit vector toward the eye (the negated ray direction).
        normalv: Unit normal, flipped to face the eye when inside.
        inside: True if the eye is inside the shape.
        reflectv: The ray direction reflected about the normal.
    """

    t: float
    shape: Shape
    point: Tuple4
    over_point: Tuple4
    eyev: Tuple4
    normalv: Tuple4
    inside: bool
    reflectv: Tuple4


def prepare_computations(intersection: Intersection, ray: Ray) -> HitComputations:
    """Precompute the vectors needed to shade an intersection.

    Args:
        intersection: The intersection being shaded (normally the hit).
        ray: The ray that produced it.

    Returns:
        The derived HitComputations.
    """
    point = ray.position(intersection.t)
    eyev = -ray.direction
    normalv = intersection.shape.normal_at(point)

    inside = normalv.dot(eyev) < 0.0
    if inside:
        normalv = -normalv

    return HitComputations(
        t=intersection.t,
        shape=intersection.shape,
        point=point,
        over_point=point + normalv * EPSILON,
        eyev=eyev,
        normalv=normalv,
        inside=inside,
        reflectv=ray.direction.reflect(normalv),
    )
