"""World: the scene builder coordinating spheres and materials.

Materials live in per-type registries (matte, metal). The World hands out a
single material ID space on top of them and records, in Taichi fields, which
type and registry slot each ID refers to. The integrator reads those fields
to dispatch to the right scattering function.

Spheres reference materials by ID, so one material can be shared by any
number of spheres. Nothing is mutated once rendering starts.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from skytracer.scene.world import World
    >>> world = World()
    >>> red = world.add_matte_material(albedo=(0.8, 0.3, 0.3))
    >>> world.add_sphere(center=(0, 0, -1), radius=0.5, material_id=red)
    >>> # Use get_material_type(material_id) in kernels for dispatch
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

import taichi as ti
import taichi.math as tm

from skytracer.materials.matte import add_matte_material, clear_matte_materials
from skytracer.materials.metal import add_metal_material, clear_metal_materials
from skytracer.scene.intersection import (
    add_sphere,
    clear_scene,
    get_sphere_count,
)

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3


class MaterialType(IntEnum):
    """Closed set of material variants, used for dispatch in kernels."""

    MATTE = 0
    METAL = 1


# Maximum number of materials across all types
MAX_MATERIALS = 512  # 256 per type * 2 types

# material_types[i] stores the MaterialType for material_id i
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
# material_type_indices[i] stores the type-local registry index for material_id i
material_type_indices = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def _clear_material_tracking() -> None:
    """Clear the material tracking fields."""
    num_materials[None] = 0


# Bumped whenever the global scene storage is wiped; a World owns the storage
# only while its generation matches.
_live_generation = 0


def _retire_worlds() -> int:
    """Invalidate every existing World and return the new live generation."""
    global _live_generation
    _live_generation += 1
    return _live_generation


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the material type for a material ID inside a kernel.

    Returns:
        The MaterialType as an integer, or -1 for invalid IDs.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def get_material_type_index(material_id: ti.i32) -> ti.i32:
    """Get the type-local registry index for a material ID inside a kernel.

    Returns:
        The index into the type-specific registry, or -1 for invalid IDs.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_type_indices[material_id]
    return result


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The unified material ID.
        material_type: The material variant.
        type_index: The index within the type-specific registry.
        params: The material parameters as provided during creation.
    """

    material_id: int
    material_type: MaterialType
    type_index: int
    params: dict[str, Any]


@dataclass
class SphereInfo:
    """Information about a sphere in the world.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material_id: The material ID assigned to the sphere.
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    material_id: int


class World:
    """An ordered collection of spheres plus the materials they share.

    Creating a World clears any previously stored scene: the sphere and
    material storage is global, so only one World is live at a time. Using
    a World after a newer one was created raises RuntimeError; calling
    clear() on it makes it the live World again.

    Attributes:
        materials: MaterialInfo for every registered material, by ID.
        spheres: SphereInfo for every sphere, in insertion order.
    """

    def __init__(self) -> None:
        """Initialize an empty world."""
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self._generation = 0
        self._clear_all()

    @property
    def is_live(self) -> bool:
        """Whether this World still owns the global scene storage."""
        return self._generation == _live_generation

    def check_live(self) -> None:
        """Raise RuntimeError if a newer World has replaced this one."""
        if not self.is_live:
            raise RuntimeError("World is no longer live: a newer World cleared the scene")

    def _clear_all(self) -> None:
        self._generation = _retire_worlds()
        clear_scene()
        clear_matte_materials()
        clear_metal_materials()
        _clear_material_tracking()
        self.materials.clear()
        self.spheres.clear()

    def clear(self) -> None:
        """Remove every sphere and material."""
        self._clear_all()

    # =========================================================================
    # Material Management
    # =========================================================================

    def _register_material(
        self,
        material_type: MaterialType,
        type_index: int,
        params: dict[str, Any],
    ) -> int:
        material_id = num_materials[None]
        if material_id >= MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

        material_types[material_id] = int(material_type)
        material_type_indices[material_id] = type_index
        num_materials[None] = material_id + 1

        self.materials.append(
            MaterialInfo(
                material_id=material_id,
                material_type=material_type,
                type_index=type_index,
                params=params,
            )
        )
        logger.debug("Registered %s material %d: %s", material_type.name, material_id, params)
        return material_id

    def add_matte_material(self, albedo: tuple[float, float, float]) -> int:
        """Add a matte (diffuse) material.

        Args:
            albedo: The diffuse reflectance color as (R, G, B) in [0, 1].

        Returns:
            The unified material ID for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any albedo component is outside [0, 1].
        """
        self.check_live()
        type_index = add_matte_material(albedo)
        return self._register_material(MaterialType.MATTE, type_index, {"albedo": albedo})

    def add_metal_material(
        self,
        albedo: tuple[float, float, float],
        fuzziness: float = 0.0,
    ) -> int:
        """Add a metal (specular) material.

        Args:
            albedo: The reflective color as (R, G, B) in [0, 1].
            fuzziness: The reflection perturbation in [0, 1]. Default is 0.

        Returns:
            The unified material ID for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any albedo component or the fuzziness is outside [0, 1].
        """
        self.check_live()
        type_index = add_metal_material(albedo, fuzziness)
        return self._register_material(
            MaterialType.METAL,
            type_index,
            {"albedo": albedo, "fuzziness": fuzziness},
        )

    def get_material_count(self) -> int:
        """Get the total number of materials."""
        self.check_live()
        return int(num_materials[None])

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by ID, or None if unknown."""
        self.check_live()
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    # =========================================================================
    # Sphere Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere that uses an existing material.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (must be positive).
            material_id: The unified material ID to assign to the sphere.

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If material_id is invalid or the radius is not positive.
        """
        self.check_live()
        if material_id < 0 or material_id >= num_materials[None]:
            raise ValueError(f"Invalid material_id: {material_id}")

        center_vec = vec3(center[0], center[1], center[2])
        sphere_index = add_sphere(center_vec, radius, material_id)

        self.spheres.append(
            SphereInfo(
                sphere_index=sphere_index,
                center=center,
                radius=radius,
                material_id=material_id,
            )
        )
        return sphere_index

    def add_matte_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        albedo: tuple[float, float, float],
    ) -> tuple[int, int]:
        """Add a sphere with a new matte material.

        Returns:
            Tuple of (sphere_index, material_id).
        """
        material_id = self.add_matte_material(albedo)
        sphere_index = self.add_sphere(center, radius, material_id)
        return sphere_index, material_id

    def add_metal_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        albedo: tuple[float, float, float],
        fuzziness: float = 0.0,
    ) -> tuple[int, int]:
        """Add a sphere with a new metal material.

        Returns:
            Tuple of (sphere_index, material_id).
        """
        material_id = self.add_metal_material(albedo, fuzziness)
        sphere_index = self.add_sphere(center, radius, material_id)
        return sphere_index, material_id

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the world."""
        self.check_live()
        return get_sphere_count()

    def __repr__(self) -> str:
        if not self.is_live:
            return "World(<no longer live>)"
        return f"World(spheres={self.get_sphere_count()}, materials={self.get_material_count()})"
