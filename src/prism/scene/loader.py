"""Scene loading from declarative entries and YAML.

A scene description is a sequence of entries, each a mapping with exactly one
of the keys ``light``, ``body`` or ``camera``:

    - light:
        type: point_light
        at: [-10, 10, -10]
        intensity: [1, 1, 1]
    - body:
        type: sphere
        material:
          type: phong
          pattern:
            type: checkerboard
            3d: false
            colorA: [1, 0.1, 0]
            colorB: [0.9, 0.9, 0.9]
            transforms:
              - type: scale
                to: [0.3, 0.3, 0.3]
          specular: 1.8
        transforms:
          - type: rotate_z
            degrees: -20
          - type: translate
            to: [0, 1, 0.5]
    - camera:
        name: main_camera
        width: 640
        height: 480
        field_of_view: 1.047
        from: [0, 2, -5]
        to: [0, 2, 0]
        up: [0, 1, 0]

Transform lists are applied in file order, the first entry first. Every
error is raised as InvalidSceneEntry carrying the path of the offending
value, e.g. ``[2].body.transforms[1]``.

Example:
    >>> from prism.scene.loader import load_scene_file
    >>> scene = load_scene_file("examples/scenes/boing.yaml")
    >>> camera = scene.camera("main_camera")
"""

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from prism.camera.pinhole import Camera
from prism.core.constants import REFLECTION_LIMIT
from prism.core.transform import Transform, TransformOp
from prism.core.tuples import BLACK, WHITE, Color, Tuple4, point, vector
from prism.errors import DegenerateTransform, InvalidSceneEntry, NumericDegeneracy
from prism.geometry.shape import Shape, ShapeKind
from prism.materials.pattern import Pattern, PatternKind, solid
from prism.materials.phong import Material
from prism.scene.light import PointLight
from prism.scene.world import World

logger = logging.getLogger(__name__)

SHAPE_TYPES = {"sphere": ShapeKind.SPHERE, "plane": ShapeKind.PLANE}

PATTERN_TYPES = {
    "solid": PatternKind.SOLID,
    "stripe": PatternKind.STRIPE,
    "checkerboard": PatternKind.CHECKERBOARD,
    "gradient": PatternKind.GRADIENT,
    "ring": PatternKind.RING,
}

MATERIAL_COEFFICIENTS = ("ambient", "diffuse", "specular", "shininess", "reflective")


@dataclass(frozen=True)
class Scene:
    """The result of loading a scene description.

    Attributes:
        world: The shapes and lights.
        cameras: Cameras by name, in file order.
    """

    world: World
    cameras: dict[str, Camera] = field(default_factory=dict)

    def camera(self, name: str) -> Camera:
        """Look up a camera by name.

        Raises:
            KeyError: If no camera has that name.
        """
        try:
            return self.cameras[name]
        except KeyError:
            known = ", ".join(sorted(self.cameras)) or "none"
            raise KeyError(f"No camera named {name!r} (available: {known})") from None


# =============================================================================
# Value helpers
# =============================================================================


def _join(path: str, key: str | int) -> str:
    if isinstance(key, int):
        return f"{path}[{key}]"
    return f"{path}.{key}" if path else key


def _mapping(value: Any, path: str) -> Mapping:
    if not isinstance(value, Mapping):
        raise InvalidSceneEntry(f"Expected a mapping, found {value!r}", path)
    return value


def _require(mapping: Mapping, key: str, path: str) -> Any:
    if key not in mapping:
        raise InvalidSceneEntry(f"Missing required key {key!r}", path)
    return mapping[key]


def _number(value: Any, path: str) -> float:
    # bool is an int subclass; YAML true/false is never a valid number here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidSceneEntry(f"Expected a number, found {value!r}", path)
    return float(value)


def _integer(value: Any, path: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidSceneEntry(f"Expected an integer, found {value!r}", path)
    return value


def _numbers(value: Any, count: int, path: str) -> tuple[float, ...]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise InvalidSceneEntry(f"Expected a list of {count} numbers, found {value!r}", path)
    if len(value) != count:
        raise InvalidSceneEntry(f"Expected {count} numbers, found {len(value)}", path)
    return tuple(_number(v, _join(path, i)) for i, v in enumerate(value))


def _point(value: Any, path: str) -> Tuple4:
    return point(*_numbers(value, 3, path))


def _vector(value: Any, path: str) -> Tuple4:
    return vector(*_numbers(value, 3, path))


def _color(value: Any, path: str) -> Color:
    return Color(*_numbers(value, 3, path))


def _string(mapping: Mapping, key: str, path: str) -> str:
    value = _require(mapping, key, path)
    if not isinstance(value, str):
        raise InvalidSceneEntry(f"Expected a string, found {value!r}", _join(path, key))
    return value


# =============================================================================
# Entry parsers
# =============================================================================


def _parse_transform_op(value: Any, path: str) -> TransformOp:
    entry = _mapping(value, path)
    kind = _string(entry, "type", path)

    if kind in ("translate", "scale"):
        params = _numbers(_require(entry, "to", path), 3, _join(path, "to"))
    elif kind == "shear":
        params = _numbers(_require(entry, "to", path), 6, _join(path, "to"))
    elif kind in ("rotate_x", "rotate_y", "rotate_z"):
        if ("degrees" in entry) == ("radians" in entry):
            raise InvalidSceneEntry("Rotation needs exactly one of 'degrees' or 'radians'", path)
        if "degrees" in entry:
            params = (math.radians(_number(entry["degrees"], _join(path, "degrees"))),)
        else:
            params = (_number(entry["radians"], _join(path, "radians")),)
    else:
        raise InvalidSceneEntry(f"Unknown transform type {kind!r}", _join(path, "type"))

    return TransformOp(kind, params)


def _parse_transforms(value: Any, path: str) -> Transform:
    if value is None:
        return Transform()
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
        raise InvalidSceneEntry(f"Expected a list of transforms, found {value!r}", path)

    ops = tuple(_parse_transform_op(item, _join(path, i)) for i, item in enumerate(value))
    try:
        return Transform(ops)
    except DegenerateTransform as e:
        raise InvalidSceneEntry(str(e), path) from e


def _parse_pattern(value: Any, path: str) -> Pattern:
    entry = _mapping(value, path)
    type_name = _string(entry, "type", path)
    if type_name not in PATTERN_TYPES:
        raise InvalidSceneEntry(f"Unknown pattern type {type_name!r}", _join(path, "type"))

    three_d = entry.get("3d", True)
    if not isinstance(three_d, bool):
        raise InvalidSceneEntry(f"Expected true or false, found {three_d!r}", _join(path, "3d"))

    color_a = _color(entry["colorA"], _join(path, "colorA")) if "colorA" in entry else WHITE
    color_b = _color(entry["colorB"], _join(path, "colorB")) if "colorB" in entry else BLACK

    return Pattern(
        kind=PATTERN_TYPES[type_name],
        color_a=color_a,
        color_b=color_b,
        three_d=three_d,
        transform=_parse_transforms(entry.get("transforms"), _join(path, "transforms")),
    )


def _parse_material(value: Any, path: str) -> Material:
    if value is None:
        return Material()
    entry = _mapping(value, path)

    material_type = entry.get("type", "phong")
    if material_type != "phong":
        raise InvalidSceneEntry(f"Unknown material type {material_type!r}", _join(path, "type"))

    kwargs = {}
    # An explicit pattern wins over the color shorthand
    if "pattern" in entry:
        kwargs["pattern"] = _parse_pattern(entry["pattern"], _join(path, "pattern"))
    elif "color" in entry:
        kwargs["pattern"] = solid(_color(entry["color"], _join(path, "color")))

    for key in MATERIAL_COEFFICIENTS:
        if key in entry:
            kwargs[key] = _number(entry[key], _join(path, key))

    return Material(**kwargs)


def _parse_light(value: Any, path: str) -> PointLight:
    entry = _mapping(value, path)
    light_type = _string(entry, "type", path)
    if light_type != "point_light":
        raise InvalidSceneEntry(f"Unknown light type {light_type!r}", _join(path, "type"))
    return PointLight(
        _point(_require(entry, "at", path), _join(path, "at")),
        _color(_require(entry, "intensity", path), _join(path, "intensity")),
    )


def _parse_body(value: Any, path: str) -> Shape:
    entry = _mapping(value, path)
    type_name = _string(entry, "type", path)
    if type_name not in SHAPE_TYPES:
        raise InvalidSceneEntry(f"Unknown body type {type_name!r}", _join(path, "type"))

    material = _parse_material(entry.get("material"), _join(path, "material"))
    transform = _parse_transforms(entry.get("transforms"), _join(path, "transforms"))
    return Shape(SHAPE_TYPES[type_name], transform, material)


def _parse_camera(value: Any, path: str) -> tuple[str, Camera]:
    entry = _mapping(value, path)
    name = _string(entry, "name", path)
    width = _integer(_require(entry, "width", path), _join(path, "width"))
    height = _integer(_require(entry, "height", path), _join(path, "height"))
    fov = _number(_require(entry, "field_of_view", path), _join(path, "field_of_view"))
    from_point = _point(_require(entry, "from", path), _join(path, "from"))
    to_point = _point(_require(entry, "to", path), _join(path, "to"))
    up = _vector(_require(entry, "up", path), _join(path, "up"))

    try:
        camera = Camera.look_at(width, height, fov, from_point, to_point, up)
    except (ValueError, NumericDegeneracy) as e:
        raise InvalidSceneEntry(str(e), path) from e
    return name, camera


# =============================================================================
# Public API
# =============================================================================


def load_scene(
    entries: Sequence[Any], reflection_limit: int = REFLECTION_LIMIT, path: str = ""
) -> Scene:
    """Build a Scene from a sequence of entry mappings.

    Args:
        entries: The scene entries, in order.
        reflection_limit: Mirror bounce limit for the resulting World.
        path: Prefix for error paths.

    Returns:
        The loaded Scene. Later cameras with a repeated name replace
        earlier ones.

    Raises:
        InvalidSceneEntry: On any malformed or unrecognized entry.
    """
    if isinstance(entries, (str, bytes, Mapping)) or not isinstance(entries, Sequence):
        raise InvalidSceneEntry(f"Expected a list of scene entries, found {entries!r}", path)

    shapes: list[Shape] = []
    lights: list[PointLight] = []
    cameras: dict[str, Camera] = {}

    for index, item in enumerate(entries):
        item_path = _join(path, index)
        entry = _mapping(item, item_path)
        keys = [key for key in ("light", "body", "camera") if key in entry]
        if len(keys) != 1:
            raise InvalidSceneEntry(
                "Entry must have exactly one of 'light', 'body' or 'camera'", item_path
            )

        key = keys[0]
        value_path = _join(item_path, key)
        if key == "light":
            lights.append(_parse_light(entry[key], value_path))
        elif key == "body":
            shapes.append(_parse_body(entry[key], value_path))
        else:
            name, camera = _parse_camera(entry[key], value_path)
            cameras[name] = camera

    logger.debug(
        "Loaded %d shapes, %d lights, %d cameras", len(shapes), len(lights), len(cameras)
    )
    return Scene(World(shapes, lights, reflection_limit), cameras)


def load_scene_yaml(text: str, reflection_limit: int = REFLECTION_LIMIT) -> Scene:
    """Build a Scene from YAML text.

    The text may hold a single list of entries or several ``---``
    documents, each a list; the documents are concatenated. With more than
    one document, error paths start with the document index.

    Raises:
        InvalidSceneEntry: If the YAML is malformed or any entry is invalid.
    """
    try:
        documents = [doc for doc in yaml.safe_load_all(text) if doc is not None]
    except yaml.YAMLError as e:
        raise InvalidSceneEntry(f"Malformed YAML: {e}") from e

    if len(documents) == 1:
        return load_scene(documents[0], reflection_limit)

    shapes: list[Shape] = []
    lights: list[PointLight] = []
    cameras: dict[str, Camera] = {}
    for index, document in enumerate(documents):
        part = load_scene(document, reflection_limit, path=f"[{index}]")
        shapes.extend(part.world.shapes)
        lights.extend(part.world.lights)
        cameras.update(part.cameras)
    return Scene(World(shapes, lights, reflection_limit), cameras)


def load_scene_file(path: str | Path, reflection_limit: int = REFLECTION_LIMIT) -> Scene:
    """Load a Scene from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        InvalidSceneEntry: If the contents are invalid.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        scene = load_scene_yaml(f.read(), reflection_limit)
    logger.info(
        "Loaded scene %s: %d shapes, %d lights, cameras: %s",
        path,
        len(scene.world.shapes),
        len(scene.world.lights),
        ", ".join(scene.cameras) or "none",
    )
    return scene
