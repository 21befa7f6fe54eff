"""Matte (diffuse) material implementation.

A matte surface scatters every incoming ray: the outgoing direction is the
surface normal plus a random unit vector, which biases bounces toward the
normal the way a Lambertian reflector does. The incoming direction plays no
part, and the attenuation is simply the albedo.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from skytracer.materials.matte import scatter_matte
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, state = scatter_matte(albedo, normal, state)
"""

import taichi as ti
import taichi.math as tm

from skytracer.core.ray import near_zero
from skytracer.core.sampler import random_unit_vector

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_matte(albedo: vec3, normal: vec3, state: ti.u32):
    """Scatter a ray off a matte surface.

    Matte surfaces never absorb a ray outright; they only attenuate it.

    Args:
        albedo: The diffuse reflectance color (RGB).
        normal: The outward unit surface normal at the hit point.
        state: The pixel's random stream state.

    Returns:
        A tuple of (scattered_direction, attenuation, new_state) where:
        - scattered_direction: normal + random unit vector (not normalized).
        - attenuation: The albedo.
        - new_state: The advanced random stream state.
    """
    offset, new_state = random_unit_vector(state)
    scattered_direction = normal + offset

    # The random vector can cancel the normal almost exactly
    if near_zero(scattered_direction):
        scattered_direction = normal

    return scattered_direction, albedo, new_state


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of matte materials in the scene
MAX_MATTE_MATERIALS = 256

# Storage for matte material properties
matte_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATTE_MATERIALS)
num_matte_materials = ti.field(dtype=ti.i32, shape=())


def clear_matte_materials() -> None:
    """Clear all matte materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_matte_materials[None] = 0


def add_matte_material(albedo: tuple[float, float, float]) -> int:
    """Add a matte material to the material registry.

    Args:
        albedo: The diffuse reflectance color as (R, G, B) tuple.
            Each component must be in [0, 1].

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any albedo component is outside [0, 1].
    """
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "A surface cannot reflect more light than it receives."
            )

    idx = num_matte_materials[None]
    if idx >= MAX_MATTE_MATERIALS:
        raise RuntimeError(f"Maximum number of matte materials ({MAX_MATTE_MATERIALS}) exceeded")

    matte_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    num_matte_materials[None] = idx + 1
    return idx


def get_matte_material_count() -> int:
    """Get the number of matte materials in the registry."""
    return int(num_matte_materials[None])


@ti.func
def get_matte_albedo(material_idx: ti.i32) -> vec3:
    """Get the albedo for a matte material by registry index."""
    return matte_albedos[material_idx]


@ti.func
def scatter_matte_by_id(material_idx: ti.i32, normal: vec3, state: ti.u32):
    """Scatter off a matte material looked up by registry index.

    Returns:
        A tuple of (scattered_direction, attenuation, new_state).
    """
    albedo = get_matte_albedo(material_idx)
    return scatter_matte(albedo, normal, state)
