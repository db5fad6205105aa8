"""Ordered transform pipelines with exact inverses.

A Transform is a sequence of primitive operations. The first operation is the
one applied first to object-local coordinates, so for operations T1..Tn the
compiled matrix is Tn @ ... @ T1 and its inverse is T1^-1 @ ... @ Tn^-1.
The inverse is built from the primitive inverses rather than by inverting the
product, and the inverse-transpose used for normals is derived from it.

Consecutive operations of the same kind are kept as separate steps; two
translations in a row accumulate.

Example:
    >>> from prism.core.transform import Transform
    >>> t = Transform().rotate_z(-0.35).translate(0, 1, 0.5).translate(-1.2, 1.2, 0)
    >>> len(t.ops)
    3
"""

from dataclasses import dataclass, field

from prism.core.matrix import IDENTITY, Matrix4
from prism.errors import InvalidSceneEntry

# Operation kind -> number of parameters
TRANSFORM_KINDS = {
    "translate": 3,
    "scale": 3,
    "rotate_x": 1,
    "rotate_y": 1,
    "rotate_z": 1,
    "shear": 6,
}


@dataclass(frozen=True)
class TransformOp:
    """A single primitive transform.

    Attributes:
        kind: One of TRANSFORM_KINDS. Rotations take radians.
        params: The operation parameters.
    """

    kind: str
    params: tuple[float, ...]

    def __post_init__(self) -> None:
        if self.kind not in TRANSFORM_KINDS:
            raise InvalidSceneEntry(f"Unknown transform type {self.kind!r}")
        expected = TRANSFORM_KINDS[self.kind]
        if len(self.params) != expected:
            raise InvalidSceneEntry(
                f"Transform {self.kind!r} takes {expected} values, got {len(self.params)}"
            )

    def matrix(self) -> Matrix4:
        p = self.params
        if self.kind == "translate":
            return Matrix4.translation(*p)
        elif self.kind == "scale":
            return Matrix4.scaling(*p)
        elif self.kind == "rotate_x":
            return Matrix4.rotation_x(p[0])
        elif self.kind == "rotate_y":
            return Matrix4.rotation_y(p[0])
        elif self.kind == "rotate_z":
            return Matrix4.rotation_z(p[0])
        return Matrix4.shearing(*p)


@dataclass(frozen=True)
class Transform:
    """An immutable object-to-world transform with its inverse.

    Attributes:
        ops: The primitive operations in application order.
        matrix: The compiled object-to-world matrix.
        inverse: The world-to-object matrix.
        inverse_transpose: Transpose of inverse, used to carry normals to world space.

    Raises:
        DegenerateTransform: If any operation is not invertible (e.g. a zero scale).
    """

    ops: tuple[TransformOp, ...] = ()
    matrix: Matrix4 = field(init=False, repr=False, compare=False)
    inverse: Matrix4 = field(init=False, repr=False, compare=False)
    inverse_transpose: Matrix4 = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        matrix = IDENTITY
        inverse = IDENTITY
        for op in self.ops:
            step = op.matrix()
            matrix = step @ matrix
            inverse = inverse @ step.inverse()
        object.__setattr__(self, "ops", tuple(self.ops))
        object.__setattr__(self, "matrix", matrix)
        object.__setattr__(self, "inverse", inverse)
        object.__setattr__(self, "inverse_transpose", inverse.transpose())

    def then(self, op: TransformOp) -> "Transform":
        """Return a new transform with op applied after the existing steps."""
        return Transform(self.ops + (op,))

    def translate(self, x: float, y: float, z: float) -> "Transform":
        return self.then(TransformOp("translate", (float(x), float(y), float(z))))

    def scale(self, x: float, y: float, z: float) -> "Transform":
        return self.then(TransformOp("scale", (float(x), float(y), float(z))))

    def rotate_x(self, radians: float) -> "Transform":
        return self.then(TransformOp("rotate_x", (float(radians),)))

    def rotate_y(self, radians: float) -> "Transform":
        return self.then(TransformOp("rotate_y", (float(radians),)))

    def rotate_z(self, radians: float) -> "Transform":
        return self.then(TransformOp("rotate_z", (float(radians),)))

    def shear(self, xy: float, xz: float, yx: float, yz: float, zx: float, zy: float) -> "Transform":
        return self.then(TransformOp("shear", tuple(float(v) for v in (xy, xz, yx, yz, zx, zy))))


IDENTITY_TRANSFORM = Transform()
