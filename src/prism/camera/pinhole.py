"""Pinhole camera model for perspective projection ray generation.

The camera looks down -z in its own space, with the image plane at z = -1.
A view transform built by view_transform() maps world space to camera space;
the camera keeps its inverse to carry generated rays back into the world.

The canvas covers the image plane symmetrically. The longer image side spans
2 * tan(field_of_view / 2) and the shorter side is scaled by the aspect ratio,
so field_of_view is the horizontal angle for landscape images and the
vertical angle for portrait ones. Pixel (0, 0) is the top-left corner.

Example:
    >>> import math
    >>> from prism.camera.pinhole import Camera
    >>> from prism.core.tuples import point, vector
    >>> camera = Camera.look_at(
    ...     201, 101, math.pi / 2,
    ...     point(0, 0, 0), point(0, 0, -1), vector(0, 1, 0),
    ... )
    >>> ray = camera.ray_for_pixel(100, 50)
    >>> ray.direction.approx_eq(vector(0, 0, -1))
    True
"""

import math
from dataclasses import dataclass, field

from prism.core.matrix import Matrix4
from prism.core.ray import Ray
from prism.core.tuples import Tuple4, point

# =============================================================================
# View Transform
# =============================================================================


def view_transform(from_point: Tuple4, to_point: Tuple4, up: Tuple4) -> Matrix4:
    """Build the world-to-camera matrix for an eye at from_point looking at to_point.

    The orientation rows are (-side, true_up, -forward) where

        forward = normalize(to - from)
        side    = normalize(cross(normalize(up), forward))
        true_up = cross(forward, side)

    followed by a translation that moves the eye to the origin.

    Args:
        from_point: Eye position.
        to_point: Point the camera looks at.
        up: Approximate up direction.

    Returns:
        The view transform matrix.

    Raises:
        NumericDegeneracy: If from_point equals to_point, or up is parallel
            to the viewing direction.
    """
    forward = (to_point - from_point).normalize()
    side = up.normalize().cross(forward).normalize()
    true_up = forward.cross(side)

    orientation = Matrix4(
        [
            [-side.x, -side.y, -side.z, 0.0],
            [true_up.x, true_up.y, true_up.z, 0.0],
            [-forward.x, -forward.y, -forward.z, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )
    return orientation @ Matrix4.translation(-from_point.x, -from_point.y, -from_point.z)


# =============================================================================
# Camera
# =============================================================================


@dataclass(frozen=True)
class Camera:
    """A pinhole camera with derived image-plane geometry.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        field_of_view: Angle covered by the longer image side, in radians.
        transform: World-to-camera matrix (see view_transform).
        half_width: Half the canvas width on the image plane (derived).
        half_height: Half the canvas height on the image plane (derived).
        pixel_size: Edge length of one pixel on the image plane (derived).
        inverse: Camera-to-world matrix (derived).

    Raises:
        ValueError: If width or height is not positive, or field_of_view is
            outside (0, pi).
        DegenerateTransform: If transform is not invertible.
    """

    width: int
    height: int
    field_of_view: float
    transform: Matrix4 = field(default_factory=Matrix4.identity)
    half_width: float = field(init=False)
    half_height: float = field(init=False)
    pixel_size: float = field(init=False)
    inverse: Matrix4 = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Camera size must be positive, got {self.width}x{self.height}")
        if not 0.0 < self.field_of_view < math.pi:
            raise ValueError(f"field_of_view must be in (0, pi), got {self.field_of_view!r}")

        half_view = math.tan(self.field_of_view / 2.0)
        aspect = self.width / self.height
        if aspect >= 1.0:
            half_width = half_view
            half_height = half_view / aspect
        else:
            half_width = half_view * aspect
            half_height = half_view

        object.__setattr__(self, "half_width", half_width)
        object.__setattr__(self, "half_height", half_height)
        object.__setattr__(self, "pixel_size", half_width * 2.0 / self.width)
        object.__setattr__(self, "inverse", self.transform.inverse())

    @classmethod
    def look_at(
        cls,
        width: int,
        height: int,
        field_of_view: float,
        from_point: Tuple4,
        to_point: Tuple4,
        up: Tuple4,
    ) -> "Camera":
        """Create a camera positioned with view_transform(from_point, to_point, up)."""
        return cls(width, height, field_of_view, view_transform(from_point, to_point, up))

    def ray_for_pixel(self, px: float, py: float) -> Ray:
        """Return the world-space ray through the center of pixel (px, py).

        Args:
            px: Column index, 0 at the left edge.
            py: Row index, 0 at the top edge.

        Returns:
            A ray starting at the eye with a unit direction.
        """
        xoffset = (px + 0.5) * self.pixel_size
        yoffset = (py + 0.5) * self.pixel_size

        # The camera looks down -z, so +x on the canvas is to the left
        world_x = self.half_width - xoffset
        world_y = self.half_height - yoffset

        pixel = self.inverse @ point(world_x, world_y, -1.0)
        origin = self.inverse @ point(0.0, 0.0, 0.0)
        direction = (pixel - origin).normalize()
        return Ray(origin, direction)
