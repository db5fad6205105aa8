"""Phong surface material and local illumination.

The lighting model is the classic additive Phong split:

    effective = pattern color * light intensity
    ambient   = effective * ambient
    diffuse   = effective * diffuse * (L . N)              if L . N > 0
    specular  = intensity * specular * (R . E)^shininess   if L . N > 0 and R . E > 0

where L points from the surface to the light, N is the surface normal, E the
eye vector and R the reflection of -L about N. A shadowed point receives the
ambient term only. Results are not clamped; callers sum contributions from
every light and the final pixel write clamps.

Example:
    >>> from prism.core.tuples import Color, point, vector
    >>> from prism.geometry.shape import sphere
    >>> from prism.materials.phong import Material, lighting
    >>> from prism.scene.light import PointLight
    >>> light = PointLight(point(0, 0, -10), Color(1, 1, 1))
    >>> lighting(Material(), sphere(), light, point(0, 0, 0),
    ...          vector(0, 0, -1), vector(0, 0, -1)).approx_eq(Color(1.9, 1.9, 1.9))
    True
"""

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import taichi as ti

from prism.core.ray import reflect, vec3
from prism.core.tuples import BLACK, Color, Tuple4
from prism.materials.pattern import Pattern, pattern_at

if TYPE_CHECKING:
    from prism.geometry.shape import Shape
    from prism.scene.light import PointLight


@dataclass(frozen=True)
class Material:
    """Phong material parameters.

    Attributes:
        pattern: Color source; a solid white pattern by default.
        ambient: Ambient reflection coefficient.
        diffuse: Diffuse reflection coefficient.
        specular: Specular reflection coefficient.
        shininess: Specular exponent.
        reflective: Mirror reflection weight in [0, 1]; 0 disables reflection.
    """

    pattern: Pattern = field(default_factory=Pattern)
    ambient: float = 0.1
    diffuse: float = 0.9
    specular: float = 0.9
    shininess: float = 200.0
    reflective: float = 0.0


def lighting(
    material: Material,
    shape: "Shape",
    light: "PointLight",
    point: Tuple4,
    eyev: Tuple4,
    normalv: Tuple4,
    in_shadow: bool = False,
) -> Color:
    """Compute the Phong contribution of a single light.

    Args:
        material: Surface material.
        shape: The shape being lit, used to place the pattern.
        light: The light source.
        point: World-space surface point.
        eyev: Unit vector from the point toward the eye.
        normalv: Unit surface normal at the point.
        in_shadow: If True only the ambient term is returned.

    Returns:
        The unclamped color contribution.
    """
    effective_color = pattern_at(material.pattern, shape, point) * light.intensity
    ambient = effective_color * material.ambient
    if in_shadow:
        return ambient

    lightv = (light.position - point).normalize()
    light_dot_normal = lightv.dot(normalv)

    diffuse = BLACK
    specular = BLACK
    if light_dot_normal > 0.0:
        diffuse = effective_color * material.diffuse * light_dot_normal
        reflectv = (-lightv).reflect(normalv)
        reflect_dot_eye = reflectv.dot(eyev)
        if reflect_dot_eye > 0.0:
            factor = math.pow(reflect_dot_eye, material.shininess)
            specular = light.intensity * material.specular * factor

    return ambient + diffuse + specular


@ti.func
def phong(
    surface_color: vec3,
    ambient: ti.f64,
    diffuse: ti.f64,
    specular: ti.f64,
    shininess: ti.f64,
    light_position: vec3,
    light_intensity: vec3,
    point: vec3,
    eyev: vec3,
    normalv: vec3,
    in_shadow: ti.i32,
) -> vec3:
    """Kernel counterpart of lighting.

    surface_color is the already-sampled pattern color at the point.
    """
    effective_color = surface_color * light_intensity
    result = effective_color * ambient

    if in_shadow == 0:
        lightv = (light_position - point).normalized()
        light_dot_normal = lightv.dot(normalv)
        if light_dot_normal > 0.0:
            result += effective_color * diffuse * light_dot_normal
            reflect_dot_eye = reflect(-lightv, normalv).dot(eyev)
            if reflect_dot_eye > 0.0:
                result += light_intensity * specular * ti.pow(reflect_dot_eye, shininess)

    return result
