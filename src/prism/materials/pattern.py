"""Procedural color patterns.

A Pattern is sampled in its own space: the world point is first carried into
the shape's object space (shape inverse), then into pattern space (pattern
inverse). Spatial patterns alternate between color_a and color_b on unit
cells; the parity of a cell index s is s - 2 * floor(s / 2), which stays in
{0, 1} for negative cells too.

Pattern kinds:
    SOLID: color_a everywhere.
    STRIPE: alternates on floor(x).
    CHECKERBOARD: alternates on floor(x) + floor(y) + floor(z), or
        floor(x) + floor(z) when three_d is False.
    GRADIENT: color_a + (color_b - color_a) * frac(x).
    RING: alternates on floor(sqrt(x^2 + z^2)).

Example:
    >>> from prism.core.tuples import BLACK, WHITE, point
    >>> from prism.materials.pattern import Pattern, PatternKind
    >>> checker = Pattern(PatternKind.CHECKERBOARD, WHITE, BLACK)
    >>> checker.sample(point(1.0, 0.0, 0.0)) == BLACK
    True
"""

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING

import taichi as ti

from prism.core.ray import vec3
from prism.core.transform import IDENTITY_TRANSFORM, Transform
from prism.core.tuples import BLACK, WHITE, Color, Tuple4

if TYPE_CHECKING:
    from prism.geometry.shape import Shape


class PatternKind(IntEnum):
    """Pattern type identifiers, shared by host and kernel dispatch."""

    SOLID = 0
    STRIPE = 1
    CHECKERBOARD = 2
    GRADIENT = 3
    RING = 4


def _parity(cell: float) -> int:
    return int(math.floor(cell)) % 2


@dataclass(frozen=True)
class Pattern:
    """A procedural color source.

    Attributes:
        kind: Which pattern function to evaluate.
        color_a: First color (the only color for SOLID).
        color_b: Second color.
        three_d: For CHECKERBOARD, whether y takes part in the cell index.
        transform: Pattern-to-object transform.
    """

    kind: PatternKind = PatternKind.SOLID
    color_a: Color = WHITE
    color_b: Color = BLACK
    three_d: bool = True
    transform: Transform = IDENTITY_TRANSFORM

    def sample(self, pattern_point: Tuple4) -> Color:
        """Evaluate the pattern at a point already in pattern space."""
        x, y, z = pattern_point.x, pattern_point.y, pattern_point.z

        if self.kind == PatternKind.SOLID:
            return self.color_a
        elif self.kind == PatternKind.STRIPE:
            cell = math.floor(x)
        elif self.kind == PatternKind.CHECKERBOARD:
            cell = math.floor(x) + math.floor(z)
            if self.three_d:
                cell += math.floor(y)
        elif self.kind == PatternKind.GRADIENT:
            fraction = x - math.floor(x)
            return self.color_a + (self.color_b - self.color_a) * fraction
        elif self.kind == PatternKind.RING:
            cell = math.floor(math.sqrt(x * x + z * z))
        else:
            raise ValueError(f"Unknown pattern kind: {self.kind!r}")

        return self.color_a if _parity(cell) == 0 else self.color_b


def solid(color: Color) -> Pattern:
    return Pattern(PatternKind.SOLID, color_a=color)


def pattern_at(pattern: Pattern, shape: "Shape", world_point: Tuple4) -> Color:
    """Sample a pattern on a shape at a world-space point.

    Args:
        pattern: The pattern to evaluate.
        shape: The shape the pattern is attached to.
        world_point: The point in world space.

    Returns:
        The pattern color at that point.
    """
    object_point = shape.transform.inverse @ world_point
    pattern_point = pattern.transform.inverse @ object_point
    return pattern.sample(pattern_point)


# =============================================================================
# Kernel-side sampling
# =============================================================================


@ti.func
def _cell_parity(cell: ti.f64) -> ti.f64:
    return cell - 2.0 * ti.floor(cell / 2.0)


@ti.func
def sample_pattern(kind: ti.i32, color_a: vec3, color_b: vec3, three_d: ti.i32, p: vec3) -> vec3:
    """Kernel counterpart of Pattern.sample.

    Args:
        kind: A PatternKind value.
        color_a: First color.
        color_b: Second color.
        three_d: 1 if the checkerboard includes y.
        p: The point in pattern space.

    Returns:
        The sampled color.
    """
    result = color_a
    if kind == int(PatternKind.GRADIENT):
        result = color_a + (color_b - color_a) * (p[0] - ti.floor(p[0]))
    elif kind != int(PatternKind.SOLID):
        cell = 0.0
        if kind == int(PatternKind.STRIPE):
            cell = ti.floor(p[0])
        elif kind == int(PatternKind.CHECKERBOARD):
            cell = ti.floor(p[0]) + ti.floor(p[2])
            if three_d == 1:
                cell += ti.floor(p[1])
        elif kind == int(PatternKind.RING):
            cell = ti.floor(ti.sqrt(p[0] * p[0] + p[2] * p[2]))
        if _cell_parity(cell) > 0.5:
            result = color_b
    return result
