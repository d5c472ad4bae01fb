"""Pytest configuration for tinytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. All vector math
    runs in 64-bit floats, matching the renderer's requirements.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64)
    yield
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene data before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here so Taichi is initialized before any field is created
    from tinytracer.core.integrator import reset_render_target
    from tinytracer.materials.material import clear_materials
    from tinytracer.scene.intersection import clear_scene
    from tinytracer.scene.lights import clear_lights

    def _clear_all():
        clear_scene()
        clear_materials()
        clear_lights()
        reset_render_target()

    _clear_all()

    yield

    _clear_all()
