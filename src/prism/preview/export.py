"""Image export utilities for rendered images.

Rendered images are linear float arrays of shape (height, width, 3). Export
clamps every channel to [0, 1] and quantizes with round-half-up of
value * 255; no tone mapping or gamma is applied.

Supported formats:
    - PNG (8-bit RGB via Pillow)
    - PPM (plain-text P3, at most 70 characters per line)

Example:
    >>> import numpy as np
    >>> from prism.preview.export import save_png, to_ppm
    >>> image = np.zeros((2, 3, 3))
    >>> image[0, 0] = (1.5, 0.5, -0.5)
    >>> to_ppm(image).splitlines()[:4]
    ['P3', '3 2', '255', '255 128 0 0 0 0 0 0 0']
    >>> save_png(image, "output.png")
"""

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

# Maximum line length of PPM pixel data
PPM_MAX_LINE_LENGTH = 70


def _check_image(image: npt.NDArray[np.floating]) -> None:
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {image.shape}")


def image_to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to 8-bit.

    Args:
        image: Image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.

    Raises:
        ValueError: If the array is not (H, W, 3).
    """
    _check_image(image)
    clamped = np.clip(image.astype(np.float64), 0.0, 1.0)
    return np.floor(clamped * 255.0 + 0.5).astype(np.uint8)


def save_png(image: npt.NDArray[np.floating], filepath: str | Path) -> None:
    """Save a float image as an 8-bit RGB PNG file.

    Args:
        image: Image array of shape (H, W, 3).
        filepath: Output file path (should end in .png).
    """
    image_uint8 = image_to_uint8(image)

    # Save using Pillow
    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(filepath)


def to_ppm(image: npt.NDArray[np.floating]) -> str:
    """Encode a float image as plain-text PPM (P3).

    Each image row starts on a new line, and rows are wrapped so that no
    line exceeds PPM_MAX_LINE_LENGTH characters. The text ends with a
    newline.

    Args:
        image: Image array of shape (H, W, 3).

    Returns:
        The PPM document.
    """
    image_uint8 = image_to_uint8(image)
    height, width, _ = image_uint8.shape

    lines = ["P3", f"{width} {height}", "255"]
    for row in image_uint8:
        line = ""
        for value in row.reshape(-1):
            token = str(int(value))
            if not line:
                line = token
            elif len(line) + 1 + len(token) > PPM_MAX_LINE_LENGTH:
                lines.append(line)
                line = token
            else:
                line = f"{line} {token}"
        lines.append(line)

    return "\n".join(lines) + "\n"


def save_ppm(image: npt.NDArray[np.floating], filepath: str | Path) -> None:
    """Save a float image as a plain-text PPM file."""
    Path(filepath).write_text(to_ppm(image), encoding="ascii")
