"""Progressive renderer that fills the image band by band.

The image is partitioned into disjoint bands of rows and one kernel launch
renders each band. Bands are delivered in increasing row order, which lets a
caller show partial results, report progress, or stop early:

- render_bands() is a generator yielding (row_start, row_stop) after each
  band; closing it (or simply not resuming it) cancels the render. Rows
  already written stay valid and the rest keep the background color.
- render(callback) runs every band and reports (rows_done, total_rows).

Example:
    >>> import prism
    >>> prism.init_backend()
    >>> from prism.core.progressive import ProgressiveRenderer
    >>> from prism.scene.loader import load_scene_file
    >>>
    >>> scene = load_scene_file("examples/scenes/boing.yaml")
    >>> renderer = ProgressiveRenderer(scene.camera("main_camera"), scene.world, band_height=32)
    >>> for row_start, row_stop in renderer.render_bands():
    ...     print(f"rows {row_start}-{row_stop} done")
    >>> renderer.save_image("boing.png")
"""

import logging
from collections.abc import Callable, Generator
from pathlib import Path

import numpy as np
import numpy.typing as npt

from prism.camera.pinhole import Camera
from prism.core.integrator import new_image, render_rows, setup_scene
from prism.preview.export import image_to_uint8, save_png, save_ppm
from prism.scene.world import World

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]

DEFAULT_BAND_HEIGHT = 16


class ProgressiveRenderer:
    """Renders a world through a camera one band of rows at a time.

    The renderer owns its output image. The device scene is shared module
    state, so it is uploaded again at the start of every render pass; two
    renderers can be used alternately but not interleaved within one pass.

    Attributes:
        camera: The camera to render through.
        world: The scene to render.
        band_height: Number of rows per kernel launch.
    """

    def __init__(self, camera: Camera, world: World, band_height: int = DEFAULT_BAND_HEIGHT) -> None:
        """Initialize the progressive renderer.

        Args:
            camera: The camera to render through.
            world: The scene to render.
            band_height: Rows per band (positive).

        Raises:
            ValueError: If band_height is not positive.
        """
        if band_height <= 0:
            raise ValueError(f"band_height must be positive, got {band_height}")
        self.camera = camera
        self.world = world
        self.band_height = band_height
        self._image = new_image(camera.width, camera.height)
        self._rows_done = 0

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.camera.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.camera.height

    @property
    def rows_done(self) -> int:
        """Number of rows rendered so far in the current pass."""
        return self._rows_done

    @property
    def is_complete(self) -> bool:
        return self._rows_done == self.height

    def reset(self) -> None:
        """Clear the image back to the background color."""
        self._image = new_image(self.width, self.height)
        self._rows_done = 0

    def bands(self) -> list[tuple[int, int]]:
        """Return the (row_start, row_stop) partition of the image, top to bottom."""
        return [
            (start, min(start + self.band_height, self.height))
            for start in range(0, self.height, self.band_height)
        ]

    def render_bands(self) -> Generator[tuple[int, int], None, None]:
        """Render the image band by band, yielding after each band.

        The image is reset first, so each pass starts from the background.

        Yields:
            Tuple of (row_start, row_stop) for the band just written.
        """
        self.reset()
        setup_scene(self.camera, self.world)
        logger.info(
            "Rendering %dx%d in bands of %d rows", self.width, self.height, self.band_height
        )

        for row_start, row_stop in self.bands():
            render_rows(self._image, row_start, row_stop)
            self._rows_done = row_stop
            logger.debug("Rendered rows %d-%d", row_start, row_stop)
            yield (row_start, row_stop)

    def render(self, callback: ProgressCallback | None = None) -> npt.NDArray[np.float64]:
        """Render the whole image with optional progress callback.

        Args:
            callback: Optional callback function called after each band.
                Receives (rows_done, total_rows).

        Returns:
            The finished image (see get_image_numpy).

        Example:
            >>> def progress(done, total):
            ...     print(f"Progress: {done}/{total} rows")
            >>> renderer.render(callback=progress)
        """
        for _, row_stop in self.render_bands():
            if callback is not None:
                callback(row_stop, self.height)
        return self.get_image_numpy()

    def get_image_numpy(self) -> npt.NDArray[np.float64]:
        """Get a copy of the image as a float64 array of shape (height, width, 3)."""
        return self._image.copy()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the image as an 8-bit array of shape (height, width, 3)."""
        return image_to_uint8(self._image)

    def save_image(self, filepath: str | Path) -> None:
        """Save the image, as PPM if the path ends in .ppm and PNG otherwise."""
        if Path(filepath).suffix.lower() == ".ppm":
            save_ppm(self._image, filepath)
        else:
            save_png(self._image, filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"band_height={self.band_height}, rows_done={self.rows_done})"
        )
