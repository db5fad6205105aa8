"""Preview module for image output.

Components:
    export: 8-bit conversion, PNG (Pillow) and plain PPM export
"""

from .export import image_to_uint8, save_png, save_ppm, to_ppm

__all__ = [
    "image_to_uint8",
    "save_png",
    "to_ppm",
    "save_ppm",
]
