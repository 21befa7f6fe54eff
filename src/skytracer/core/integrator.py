"""Recursive color resolution and the pixel sampling kernels.

A camera ray is followed through the world bounce by bounce:

    resolve(ray, depth):
        depth == 0        -> black
        ray misses        -> sky gradient
        material absorbs  -> black
        otherwise         -> attenuation * resolve(scattered, depth - 1)

The recursion is unrolled into a bounded loop that carries the product of
attenuations (the throughput). When the ray finally escapes, the sky color is
multiplied by the throughput; running out of bounces or being absorbed leaves
the result black.

Each pixel averages ``samples_per_pixel`` jittered estimates. Random numbers
come from a per-pixel stream (see :mod:`skytracer.core.sampler`), so pixels
never share state and the parallel pixel loop is reproducible.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from skytracer.core.integrator import setup_render_target, render_rows
    >>> from skytracer.camera.pinhole import PinholeCamera, setup_camera
    >>> from skytracer.scene.presets import create_default_scene
    >>>
    >>> world, camera = create_default_scene()
    >>> setup_camera(camera)
    >>> setup_render_target(400, 225)
    >>> render_rows(0, 225, samples_per_pixel=10, max_depth=10, seed=1)
"""

import taichi as ti
import taichi.math as tm

from skytracer.camera.pinhole import get_ray_jittered
from skytracer.core.color import sky_color
from skytracer.core.sampler import next_float, seed_stream
from skytracer.materials.matte import scatter_matte_by_id
from skytracer.materials.metal import scatter_metal_by_id
from skytracer.scene.intersection import intersect_scene
from skytracer.scene.world import (
    MaterialType,
    get_material_type,
    get_material_type_index,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Lower bound of the accepted hit interval. Rays leaving a surface start
# exactly on it; rounding can place the origin a hair inside, and without
# this skin the ray would hit its own surface again at t ~ 0.
T_MIN = 0.001

# Upper bound of the accepted hit interval (effectively infinite)
T_MAX = 1e10

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Final pixel colors, indexed [x, y] with y = 0 the bottom scanline
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Set the active image dimensions and clear the color buffer.

    Args:
        width: Image width in pixels (1..MAX_IMAGE_WIDTH).
        height: Image height in pixels (1..MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If a dimension is not positive or exceeds the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the color buffer to black."""
    _color_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def _check_sampling_args(samples_per_pixel: int, max_depth: int) -> None:
    if samples_per_pixel < 1:
        raise ValueError(f"samples_per_pixel must be at least 1, got {samples_per_pixel}")
    if max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {max_depth}")


# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def _scatter_material(
    material_id: ti.i32,
    incident_direction: vec3,
    normal: vec3,
    state: ti.u32,
):
    """Dispatch to the scattering function of the hit material.

    Args:
        material_id: The unified material ID.
        incident_direction: The incoming ray direction.
        normal: The outward unit surface normal.
        state: The pixel's random stream state.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter, new_state).
        Unknown material IDs absorb the ray.
    """
    mat_type = get_material_type(material_id)
    type_index = get_material_type_index(material_id)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0
    new_state = state

    if mat_type == int(MaterialType.MATTE):
        scattered_direction, attenuation, new_state = scatter_matte_by_id(
            type_index, normal, state
        )
        did_scatter = 1

    elif mat_type == int(MaterialType.METAL):
        scattered_direction, attenuation, did_scatter, new_state = scatter_metal_by_id(
            type_index, incident_direction, normal, state
        )

    return scattered_direction, attenuation, did_scatter, new_state


# =============================================================================
# Color Resolution
# =============================================================================


@ti.func
def resolve_color(origin: vec3, direction: vec3, max_depth: ti.i32, state: ti.u32):
    """Resolve the color seen along a ray.

    Args:
        origin: The ray origin.
        direction: The ray direction (non-zero).
        max_depth: Bounce budget; 0 always yields black.
        state: The pixel's random stream state.

    Returns:
        A tuple of (color, new_state).
    """
    ray_origin = origin
    ray_direction = direction
    rng = state

    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)

    # Active flag for path continuation (no break inside ti.func loops)
    active = 1

    for _ in range(max_depth):
        if active == 1:
            hit_record = intersect_scene(ray_origin, ray_direction, T_MIN, T_MAX)

            if hit_record.hit == 0:
                color = throughput * sky_color(ray_direction)
                active = 0
            else:
                scattered_direction, attenuation, did_scatter, rng = _scatter_material(
                    hit_record.material_id, ray_direction, hit_record.normal, rng
                )

                if did_scatter == 0:
                    active = 0
                else:
                    throughput *= attenuation
                    ray_origin = hit_record.point
                    ray_direction = scattered_direction

    return color, rng


@ti.func
def sample_pixel(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    samples_per_pixel: ti.i32,
    max_depth: ti.i32,
    seed: ti.i32,
) -> vec3:
    """Average ``samples_per_pixel`` jittered estimates for one pixel.

    Non-finite samples (from degenerate geometry) count as black.

    Returns:
        The final pixel color.
    """
    rng = seed_stream(seed, pixel_i, pixel_j)
    total = vec3(0.0, 0.0, 0.0)

    for _ in range(samples_per_pixel):
        jitter_u, rng = next_float(rng)
        jitter_v, rng = next_float(rng)
        ray = get_ray_jittered(pixel_i, pixel_j, width, height, jitter_u, jitter_v)
        sample, rng = resolve_color(ray.origin, ray.direction, max_depth, rng)

        for c in ti.static(range(3)):
            if tm.isnan(sample[c]) or tm.isinf(sample[c]):
                sample[c] = 0.0

        total += sample

    return total * (1.0 / ti.cast(samples_per_pixel, ti.f32))


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(
    row_start: ti.i32,
    row_end: ti.i32,
    width: ti.i32,
    height: ti.i32,
    samples_per_pixel: ti.i32,
    max_depth: ti.i32,
    seed: ti.i32,
):
    """Render every pixel of the scanlines row_start <= j < row_end."""
    for i, j in ti.ndrange(width, (row_start, row_end)):
        _color_buffer[i, j] = sample_pixel(
            i, j, width, height, samples_per_pixel, max_depth, seed
        )


@ti.kernel
def _render_single_pixel(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    samples_per_pixel: ti.i32,
    max_depth: ti.i32,
    seed: ti.i32,
) -> vec3:
    return sample_pixel(pixel_i, pixel_j, width, height, samples_per_pixel, max_depth, seed)


@ti.kernel
def _trace_single_ray(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    max_depth: ti.i32,
    seed: ti.i32,
) -> vec3:
    rng = seed_stream(seed, 0, 0)
    color, rng = resolve_color(vec3(ox, oy, oz), vec3(dx, dy, dz), max_depth, rng)
    return color


# =============================================================================
# Public Rendering API
# =============================================================================


def _to_seed(seed: int) -> int:
    """Fold an arbitrary Python int into the non-negative i32 kernel range."""
    return seed & 0x7FFFFFFF


def render_rows(
    row_start: int,
    row_end: int,
    samples_per_pixel: int,
    max_depth: int,
    seed: int = 0,
) -> None:
    """Render a band of scanlines into the color buffer.

    Args:
        row_start: First scanline to render (0 = bottom).
        row_end: One past the last scanline to render.
        samples_per_pixel: Number of jittered estimates per pixel.
        max_depth: Bounce budget per camera ray.
        seed: Render seed; equal seeds give identical pixels.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If samples_per_pixel < 1 or max_depth < 0.
    """
    _check_render_target_initialized()
    _check_sampling_args(samples_per_pixel, max_depth)

    width, height = get_image_dimensions()
    row_end = min(row_end, height)
    if row_start >= row_end:
        return

    _render_rows(row_start, row_end, width, height, samples_per_pixel, max_depth, _to_seed(seed))


def render_pixel(
    pixel_i: int,
    pixel_j: int,
    samples_per_pixel: int = 1,
    max_depth: int = 50,
    seed: int = 0,
) -> tuple[float, float, float]:
    """Render one pixel of the current render target without storing it.

    Produces the same value :func:`render_rows` stores for that pixel with
    the same arguments.

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If samples_per_pixel < 1 or max_depth < 0.
    """
    _check_render_target_initialized()
    _check_sampling_args(samples_per_pixel, max_depth)

    width, height = get_image_dimensions()
    color = _render_single_pixel(
        pixel_i, pixel_j, width, height, samples_per_pixel, max_depth, _to_seed(seed)
    )
    return (float(color[0]), float(color[1]), float(color[2]))


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_depth: int = 50,
    seed: int = 0,
) -> tuple[float, float, float]:
    """Resolve the color seen along an arbitrary ray through the current world.

    Args:
        origin: Ray origin as (x, y, z).
        direction: Ray direction as (x, y, z), non-zero.
        max_depth: Bounce budget; 0 always yields black.
        seed: Seed of the random stream used for scattering.

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        ValueError: If max_depth < 0.
    """
    if max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {max_depth}")

    color = _trace_single_ray(
        origin[0],
        origin[1],
        origin[2],
        direction[0],
        direction[1],
        direction[2],
        max_depth,
        _to_seed(seed),
    )
    return (float(color[0]), float(color[1]), float(color[2]))


def get_image_numpy():
    """Get the active region of the color buffer as a NumPy array.

    Returns:
        Float32 array of shape (height, width, 3); row 0 is the bottom scanline.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    import numpy as np

    _check_render_target_initialized()

    width, height = get_image_dimensions()
    full_image = _color_buffer.to_numpy()

    # (width, height, 3) -> (height, width, 3)
    image = np.transpose(full_image[:width, :height, :], (1, 0, 2))
    return np.ascontiguousarray(image, dtype=np.float32)
