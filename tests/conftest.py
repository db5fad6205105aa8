"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti

from prism.core.transform import Transform
from prism.core.tuples import Color, point
from prism.geometry.shape import sphere
from prism.materials.pattern import solid
from prism.materials.phong import Material
from prism.scene.light import PointLight
from prism.scene.world import World


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. Rendering works in
    float64 so that device results can be compared with the host math.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_device_scene():
    """Clear the device scene before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here to ensure Taichi is initialized first
    from prism.scene.intersection import clear_scene

    clear_scene()
    yield
    clear_scene()


@pytest.fixture
def default_world() -> World:
    """Two concentric spheres lit from the upper left front.

    The outer unit sphere is greenish with reduced diffuse and specular;
    the inner sphere is scaled by 0.5 with the default material.
    """
    light = PointLight(point(-10, 10, -10), Color(1, 1, 1))
    outer = sphere(
        material=Material(pattern=solid(Color(0.8, 1.0, 0.6)), diffuse=0.7, specular=0.2)
    )
    inner = sphere(Transform().scale(0.5, 0.5, 0.5))
    return World([outer, inner], [light])
