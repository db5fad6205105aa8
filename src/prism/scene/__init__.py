"""Scene module for lights, worlds and scene loading.

Components:
    light: Point lights
    world: The World snapshot and the host reference tracer
    loader: Scene entries and YAML files to World plus named cameras
    intersection: Device-side scene storage and ray-scene queries

The intersection module declares Taichi fields and is not imported here;
import it after prism.init_backend().
"""

from .light import PointLight
from .loader import Scene, load_scene, load_scene_file, load_scene_yaml
from .world import World

__all__ = [
    "PointLight",
    "World",
    "Scene",
    "load_scene",
    "load_scene_yaml",
    "load_scene_file",
]
