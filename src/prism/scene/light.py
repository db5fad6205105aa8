"""Point light sources."""

from dataclasses import dataclass

from prism.core.tuples import Color, Tuple4


@dataclass(frozen=True)
class PointLight:
    """A light with no size emitting equally in every direction.

    Attributes:
        position: World-space position (a point).
        intensity: Emitted color.
    """

    position: Tuple4
    intensity: Color
