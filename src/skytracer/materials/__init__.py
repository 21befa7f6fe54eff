"""Materials module.

Components:
    matte: Diffuse scattering around the surface normal
    metal: Mirror reflection perturbed by a fuzziness term

Each material stores its parameters in a registry of Taichi fields and
exposes a scatter function returning the scattered direction, the
attenuation and the advanced random stream state.
"""

from .matte import (
    add_matte_material,
    clear_matte_materials,
    get_matte_albedo,
    get_matte_material_count,
    scatter_matte,
    scatter_matte_by_id,
)
from .metal import (
    add_metal_material,
    clear_metal_materials,
    get_metal_albedo,
    get_metal_fuzziness,
    get_metal_material_count,
    scatter_metal,
    scatter_metal_by_id,
)

__all__ = [
    # Matte
    "scatter_matte",
    "scatter_matte_by_id",
    "add_matte_material",
    "clear_matte_materials",
    "get_matte_material_count",
    "get_matte_albedo",
    # Metal
    "scatter_metal",
    "scatter_metal_by_id",
    "add_metal_material",
    "clear_metal_materials",
    "get_metal_material_count",
    "get_metal_albedo",
    "get_metal_fuzziness",
]
