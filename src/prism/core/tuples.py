"""Points, vectors and colors.

A Tuple4 carries a w component that tells points (w=1) from vectors (w=0).
The arithmetic keeps that distinction honest: point - point is a vector,
point + vector is a point and point + point is rejected.

Example:
    >>> from prism.core.tuples import point, vector
    >>> p = point(1.0, 2.0, 3.0)
    >>> v = vector(0.0, 1.0, 0.0)
    >>> (p + v).y
    3.0
"""

import math
from dataclasses import dataclass

from prism.core.constants import EPSILON
from prism.errors import NumericDegeneracy


def approx_eq(a: float, b: float, epsilon: float = EPSILON) -> bool:
    """Return True when two reals differ by less than epsilon."""
    return abs(a - b) < epsilon


@dataclass(frozen=True)
class Tuple4:
    """An immutable homogeneous 4-tuple.

    Attributes:
        x: X component.
        y: Y component.
        z: Z component.
        w: 1.0 for points, 0.0 for vectors.
    """

    x: float
    y: float
    z: float
    w: float

    def is_point(self) -> bool:
        return self.w == 1.0

    def is_vector(self) -> bool:
        return self.w == 0.0

    def __add__(self, other: "Tuple4") -> "Tuple4":
        if self.is_point() and other.is_point():
            raise ValueError("Cannot add two points")
        return Tuple4(self.x + other.x, self.y + other.y, self.z + other.z, self.w + other.w)

    def __sub__(self, other: "Tuple4") -> "Tuple4":
        return Tuple4(self.x - other.x, self.y - other.y, self.z - other.z, self.w - other.w)

    def __neg__(self) -> "Tuple4":
        return Tuple4(-self.x, -self.y, -self.z, -self.w)

    def __mul__(self, scalar: float) -> "Tuple4":
        return Tuple4(self.x * scalar, self.y * scalar, self.z * scalar, self.w * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Tuple4":
        return Tuple4(self.x / scalar, self.y / scalar, self.z / scalar, self.w / scalar)

    def magnitude(self) -> float:
        return math.sqrt(self.x**2 + self.y**2 + self.z**2 + self.w**2)

    def normalize(self) -> "Tuple4":
        """Scale the tuple to unit length.

        Raises:
            NumericDegeneracy: If the tuple has zero length.
        """
        length = self.magnitude()
        if length == 0.0:
            raise NumericDegeneracy(f"Cannot normalize zero-length tuple {self}")
        return self / length

    def dot(self, other: "Tuple4") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z + self.w * other.w

    def cross(self, other: "Tuple4") -> "Tuple4":
        """Cross product of two vectors (the w components are ignored)."""
        return vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def reflect(self, normal: "Tuple4") -> "Tuple4":
        """Reflect this vector about a unit normal."""
        return self - normal * (2.0 * self.dot(normal))

    def approx_eq(self, other: "Tuple4", epsilon: float = EPSILON) -> bool:
        return (
            approx_eq(self.x, other.x, epsilon)
            and approx_eq(self.y, other.y, epsilon)
            and approx_eq(self.z, other.z, epsilon)
            and approx_eq(self.w, other.w, epsilon)
        )

    def to_tuple(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.z, self.w)


def point(x: float, y: float, z: float) -> Tuple4:
    """Create a point (w=1)."""
    return Tuple4(float(x), float(y), float(z), 1.0)


def vector(x: float, y: float, z: float) -> Tuple4:
    """Create a vector (w=0)."""
    return Tuple4(float(x), float(y), float(z), 0.0)


@dataclass(frozen=True)
class Color:
    """An immutable linear RGB color.

    Channels are not clamped; light contributions are summed freely and only
    the final pixel write clamps to [0, 1].
    """

    red: float
    green: float
    blue: float

    def __add__(self, other: "Color") -> "Color":
        return Color(self.red + other.red, self.green + other.green, self.blue + other.blue)

    def __sub__(self, other: "Color") -> "Color":
        return Color(self.red - other.red, self.green - other.green, self.blue - other.blue)

    def __mul__(self, other):
        # Color * Color is the Hadamard product, Color * float scales.
        if isinstance(other, Color):
            return Color(self.red * other.red, self.green * other.green, self.blue * other.blue)
        return Color(self.red * other, self.green * other, self.blue * other)

    def __rmul__(self, scalar: float) -> "Color":
        return Color(self.red * scalar, self.green * scalar, self.blue * scalar)

    def clamp(self, lower: float = 0.0, upper: float = 1.0) -> "Color":
        return Color(
            min(max(self.red, lower), upper),
            min(max(self.green, lower), upper),
            min(max(self.blue, lower), upper),
        )

    def approx_eq(self, other: "Color", epsilon: float = EPSILON) -> bool:
        return (
            approx_eq(self.red, other.red, epsilon)
            and approx_eq(self.green, other.green, epsilon)
            and approx_eq(self.blue, other.blue, epsilon)
        )

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.red, self.green, self.blue)

    @classmethod
    def from_sequence(cls, values) -> "Color":
        r, g, b = values
        return cls(float(r), float(g), float(b))


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
