"""Camera module for view and ray generation.

Components:
    pinhole: Pinhole (perspective) camera and the look-at view transform

Pixel coordinates start at the top-left corner: px grows to the right and
py grows downward.
"""

from .pinhole import Camera, view_transform

__all__ = [
    "Camera",
    "view_transform",
]
