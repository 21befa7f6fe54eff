"""Pytest configuration for skytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate the module-level fields.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene, material and render target data around each test."""
    # Import here so Taichi is initialized before any field is declared
    from skytracer.core.integrator import clear_render_target
    from skytracer.materials.matte import clear_matte_materials
    from skytracer.materials.metal import clear_metal_materials
    from skytracer.scene.intersection import clear_scene
    from skytracer.scene.world import _clear_material_tracking, _retire_worlds

    def _clear_all():
        clear_scene()
        clear_matte_materials()
        clear_metal_materials()
        _clear_material_tracking()
        _retire_worlds()
        clear_render_target()

    _clear_all()

    yield

    _clear_all()
