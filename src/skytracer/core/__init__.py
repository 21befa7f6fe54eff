"""Core rendering module.

Components:
    ray: Ray data structure and vector utilities
    sampler: Per-pixel random streams and unit-sphere sampling
    color: Sky gradient, color blending and channel encoding
    integrator: Bounded-bounce color resolution and pixel sampling kernels
    renderer: RenderConfig and the Renderer driving the kernels
    pixel_buffer: Immutable container for a finished render
"""

from .color import (
    BLACK,
    CHANNEL_MAX,
    SKY_BLUE,
    WHITE,
    blend,
    encode_channels,
    sky_color,
    sky_color_numpy,
)
from .ray import (
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    near_zero,
    normalize,
    ray_at,
    reflect,
    vec3,
)
from .sampler import (
    hash_pcg,
    next_float,
    random_in_unit_sphere,
    random_unit_vector,
    seed_stream,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from skytracer.core.integrator or skytracer.core.renderer.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "near_zero",
    "hash_pcg",
    "seed_stream",
    "next_float",
    "random_in_unit_sphere",
    "random_unit_vector",
    "WHITE",
    "BLACK",
    "SKY_BLUE",
    "CHANNEL_MAX",
    "blend",
    "sky_color",
    "sky_color_numpy",
    "encode_channels",
]
