"""Per-pixel random streams for Monte Carlo sampling.

Every pixel draws its random numbers from its own 32-bit state, seeded from
the render seed and the pixel coordinates and advanced with the PCG output
permutation. Nothing is shared between pixels, so a render is reproducible
for a given seed no matter how Taichi schedules the pixel loop.

The state is threaded explicitly: every sampling function takes the current
state and returns the advanced one alongside its result.

Example:
    >>> @ti.kernel
    ... def draw() -> ti.f32:
    ...     state = seed_stream(42, 3, 7)
    ...     value, state = next_float(state)
    ...     return value
"""

import taichi as ti
import taichi.math as tm

from skytracer.core.ray import length_squared, normalize

# Type alias for 3D vectors
vec3 = tm.vec3

# Rejection sampling gives up after this many draws
MAX_REJECTION_TRIES = 100


@ti.func
def hash_pcg(value: ti.u32) -> ti.u32:
    """PCG output permutation hash on 32-bit unsigned integers."""
    state = value * ti.cast(747796405, ti.u32) + ti.cast(1013904223, ti.u32)
    word = ((state >> ((state >> ti.cast(28, ti.u32)) + ti.cast(4, ti.u32))) ^ state) * ti.cast(
        277803737, ti.u32
    )
    return (word >> ti.cast(22, ti.u32)) ^ word


@ti.func
def seed_stream(seed: ti.i32, pixel_i: ti.i32, pixel_j: ti.i32) -> ti.u32:
    """Derive the initial stream state for a pixel.

    Cascaded hash: hash(i ^ hash(j ^ hash(seed))).

    Args:
        seed: The render seed.
        pixel_i: Pixel x-coordinate.
        pixel_j: Pixel y-coordinate.

    Returns:
        The initial 32-bit state for the pixel.
    """
    h = hash_pcg(ti.cast(seed, ti.u32))
    h = hash_pcg(ti.cast(pixel_j, ti.u32) ^ h)
    return hash_pcg(ti.cast(pixel_i, ti.u32) ^ h)


@ti.func
def next_float(state: ti.u32):
    """Draw a uniform float in [0, 1).

    Args:
        state: The current stream state.

    Returns:
        A tuple (value, new_state).
    """
    new_state = hash_pcg(state)
    # Top 24 bits map exactly onto the f32 mantissa
    value = ti.cast(new_state >> ti.cast(8, ti.u32), ti.f32) * (1.0 / 16777216.0)
    return value, new_state


@ti.func
def random_in_unit_sphere(state: ti.u32):
    """Generate a random point inside or on the unit sphere.

    Rejection sampling over the cube [-1, 1)^3: draws are retried until the
    squared length is at most 1. The origin itself is rejected so the point
    can always be normalized.

    Args:
        state: The current stream state.

    Returns:
        A tuple (point, new_state).
    """
    rng = state
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_TRIES):
        if not found:
            x, rng = next_float(rng)
            y, rng = next_float(rng)
            z, rng = next_float(rng)
            p = vec3(x * 2.0 - 1.0, y * 2.0 - 1.0, z * 2.0 - 1.0)
            len_sq = length_squared(p)
            if len_sq <= 1.0 and len_sq > 1e-20:
                found = True
    return p, rng


@ti.func
def random_unit_vector(state: ti.u32):
    """Generate a random unit vector uniformly distributed on the sphere.

    Args:
        state: The current stream state.

    Returns:
        A tuple (unit_vector, new_state).
    """
    p, new_state = random_in_unit_sphere(state)
    return normalize(p), new_state
