"""4x4 matrices for affine transforms.

Matrix4 wraps a read-only NumPy float64 array. Products are written with the
@ operator: matrix @ matrix composes (the right operand is applied first) and
matrix @ Tuple4 transforms a point or vector.

Example:
    >>> from prism.core.matrix import Matrix4
    >>> from prism.core.tuples import point
    >>> m = Matrix4.translation(5.0, -3.0, 2.0)
    >>> m @ point(-3.0, 4.0, 5.0)
    Tuple4(x=2.0, y=1.0, z=7.0, w=1.0)
"""

import math

import numpy as np
import numpy.typing as npt

from prism.core.constants import EPSILON
from prism.core.tuples import Tuple4
from prism.errors import DegenerateTransform


class Matrix4:
    """An immutable 4x4 real matrix."""

    __slots__ = ("_m",)

    def __init__(self, rows) -> None:
        m = np.array(rows, dtype=np.float64)
        if m.shape != (4, 4):
            raise ValueError(f"Matrix4 needs a 4x4 array, got shape {m.shape}")
        m.setflags(write=False)
        self._m = m

    @classmethod
    def identity(cls) -> "Matrix4":
        return cls(np.eye(4))

    # =========================================================================
    # Primitive transforms
    # =========================================================================

    @classmethod
    def translation(cls, x: float, y: float, z: float) -> "Matrix4":
        m = np.eye(4)
        m[0:3, 3] = (x, y, z)
        return cls(m)

    @classmethod
    def scaling(cls, x: float, y: float, z: float) -> "Matrix4":
        return cls(np.diag((x, y, z, 1.0)))

    @classmethod
    def rotation_x(cls, radians: float) -> "Matrix4":
        c, s = math.cos(radians), math.sin(radians)
        return cls([[1, 0, 0, 0], [0, c, -s, 0], [0, s, c, 0], [0, 0, 0, 1]])

    @classmethod
    def rotation_y(cls, radians: float) -> "Matrix4":
        c, s = math.cos(radians), math.sin(radians)
        return cls([[c, 0, s, 0], [0, 1, 0, 0], [-s, 0, c, 0], [0, 0, 0, 1]])

    @classmethod
    def rotation_z(cls, radians: float) -> "Matrix4":
        c, s = math.cos(radians), math.sin(radians)
        return cls([[c, -s, 0, 0], [s, c, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]])

    @classmethod
    def shearing(
        cls, xy: float, xz: float, yx: float, yz: float, zx: float, zy: float
    ) -> "Matrix4":
        """Shear matrix; xy moves x in proportion to y, and so on."""
        return cls([[1, xy, xz, 0], [yx, 1, yz, 0], [zx, zy, 1, 0], [0, 0, 0, 1]])

    # =========================================================================
    # Algebra
    # =========================================================================

    def __getitem__(self, index: tuple[int, int]) -> float:
        return float(self._m[index])

    def __matmul__(self, other):
        if isinstance(other, Matrix4):
            return Matrix4(self._m @ other._m)
        if isinstance(other, Tuple4):
            x, y, z, w = self._m @ np.array(other.to_tuple(), dtype=np.float64)
            return Tuple4(float(x), float(y), float(z), float(w))
        return NotImplemented

    def transpose(self) -> "Matrix4":
        return Matrix4(self._m.T)

    def determinant(self) -> float:
        return float(np.linalg.det(self._m))

    def is_invertible(self) -> bool:
        return abs(self.determinant()) >= EPSILON

    def inverse(self) -> "Matrix4":
        """Return the algebraic inverse.

        Raises:
            DegenerateTransform: If |determinant| < EPSILON.
        """
        det = self.determinant()
        if abs(det) < EPSILON:
            raise DegenerateTransform(f"Matrix is not invertible (determinant={det!r})")
        return Matrix4(np.linalg.inv(self._m))

    def approx_eq(self, other: "Matrix4", epsilon: float = EPSILON) -> bool:
        return bool(np.all(np.abs(self._m - other._m) < epsilon))

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Return a writable copy of the underlying array."""
        return self._m.copy()

    def tolist(self) -> list[list[float]]:
        return self._m.tolist()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix4):
            return NotImplemented
        return bool(np.array_equal(self._m, other._m))

    __hash__ = None

    def __repr__(self) -> str:
        return f"Matrix4({self._m.tolist()!r})"


IDENTITY = Matrix4.identity()
