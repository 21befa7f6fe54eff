"""Scene module: sphere storage, the World builder and preset scenes.

Scene data lives in preallocated Taichi fields (Structure-of-Arrays) so the
kernels can read it directly; the World class is the Python-side builder.
"""

from .intersection import (
    MAX_SPHERES,
    SceneHitRecord,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
)
from .presets import create_default_scene, create_two_sphere_scene
from .world import (
    MAX_MATERIALS,
    MaterialInfo,
    MaterialType,
    SphereInfo,
    World,
    get_material_type,
    get_material_type_index,
)

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "MAX_SPHERES",
    # World module
    "World",
    "MaterialType",
    "MaterialInfo",
    "SphereInfo",
    "MAX_MATERIALS",
    "get_material_type",
    "get_material_type_index",
    # Presets
    "create_default_scene",
    "create_two_sphere_scene",
]
