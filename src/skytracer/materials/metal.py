"""Metal (specular reflective) material implementation.

Metal reflects the incoming direction about the surface normal and perturbs
the result by a random unit vector scaled by the fuzziness. Fuzziness 0 is a
perfect mirror.

The reflection formula is:
    R = I - 2(I . N)N

with I the normalized incoming direction. A perturbed reflection that ends
up pointing into the surface (R . N <= 0) is absorbed.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from skytracer.materials.metal import scatter_metal
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter, state = scatter_metal(
    >>> #     albedo, fuzziness, incident_dir, normal, state
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from skytracer.core.ray import normalize, reflect
from skytracer.core.sampler import random_unit_vector

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_metal(
    albedo: vec3,
    fuzziness: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    state: ti.u32,
):
    """Compute the scattered ray direction for a metal surface.

    Args:
        albedo: The reflective color (RGB).
        fuzziness: The reflection perturbation in [0, 1].
        incident_direction: The incoming ray direction (any non-zero length).
        normal: The outward unit surface normal.
        state: The pixel's random stream state.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter, new_state):
        - scattered_direction: The perturbed reflection (not normalized).
        - attenuation: The albedo.
        - did_scatter: 1 if the ray leaves the surface, 0 if absorbed.
        - new_state: The advanced random stream state.
    """
    reflected = reflect(normalize(incident_direction), normal)

    offset, new_state = random_unit_vector(state)
    scattered_direction = reflected + fuzziness * offset

    did_scatter = 1
    if tm.dot(scattered_direction, normal) <= 0.0:
        did_scatter = 0

    return scattered_direction, albedo, did_scatter, new_state


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of metal materials in the scene
MAX_METAL_MATERIALS = 256

# Storage for metal material properties
metal_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_METAL_MATERIALS)
metal_fuzzinesses = ti.field(dtype=ti.f32, shape=MAX_METAL_MATERIALS)
num_metal_materials = ti.field(dtype=ti.i32, shape=())


def clear_metal_materials() -> None:
    """Clear all metal materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_metal_materials[None] = 0


def add_metal_material(
    albedo: tuple[float, float, float],
    fuzziness: float = 0.0,
) -> int:
    """Add a metal material to the material registry.

    Args:
        albedo: The reflective color as (R, G, B) tuple.
            Each component must be in [0, 1].
        fuzziness: The reflection perturbation in [0, 1]. Default is 0
            (perfect mirror).

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any albedo component is outside [0, 1].
        ValueError: If fuzziness is outside [0, 1].
    """
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "A surface cannot reflect more light than it receives."
            )

    if fuzziness < 0.0 or fuzziness > 1.0:
        raise ValueError(
            f"Fuzziness = {fuzziness} is outside [0, 1]. "
            "Fuzziness must be between 0 (perfect mirror) and 1 (maximum fuzz)."
        )

    idx = num_metal_materials[None]
    if idx >= MAX_METAL_MATERIALS:
        raise RuntimeError(f"Maximum number of metal materials ({MAX_METAL_MATERIALS}) exceeded")

    metal_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    metal_fuzzinesses[idx] = fuzziness
    num_metal_materials[None] = idx + 1
    return idx


def get_metal_material_count() -> int:
    """Get the number of metal materials in the registry."""
    return int(num_metal_materials[None])


@ti.func
def get_metal_albedo(material_idx: ti.i32) -> vec3:
    """Get the albedo for a metal material by registry index."""
    return metal_albedos[material_idx]


@ti.func
def get_metal_fuzziness(material_idx: ti.i32) -> ti.f32:
    """Get the fuzziness for a metal material by registry index."""
    return metal_fuzzinesses[material_idx]


@ti.func
def scatter_metal_by_id(
    material_idx: ti.i32,
    incident_direction: vec3,
    normal: vec3,
    state: ti.u32,
):
    """Scatter off a metal material looked up by registry index.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter, new_state).
    """
    albedo = get_metal_albedo(material_idx)
    fuzziness = get_metal_fuzziness(material_idx)
    return scatter_metal(albedo, fuzziness, incident_direction, normal, state)
