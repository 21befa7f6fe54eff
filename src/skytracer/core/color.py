"""Color model: RGB constants, blending, the sky gradient, and output encoding.

Colors are ``vec3`` values (red, green, blue) inside kernels and NumPy arrays
on the host. During accumulation channels may leave [0, 1]; the only clamp
happens in :func:`encode_channels`, which also applies the fixed gamma-2
curve (square root) used for output.
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from skytracer.core.ray import normalize

# Type alias for 3D vectors
vec3 = tm.vec3

# Host-side color constants as (R, G, B)
WHITE_RGB = (1.0, 1.0, 1.0)
BLACK_RGB = (0.0, 0.0, 0.0)
SKY_BLUE_RGB = (0.5, 0.7, 1.0)
COPPER_RGB = (0.722, 0.451, 0.20)

# Kernel-side constants
WHITE = vec3(*WHITE_RGB)
BLACK = vec3(*BLACK_RGB)
SKY_BLUE = vec3(*SKY_BLUE_RGB)

# Maximum value of an encoded channel
CHANNEL_MAX = 255


@ti.func
def blend(color_a: vec3, color_b: vec3, ratio: ti.f32) -> vec3:
    """Linear blend: color_a * ratio + color_b * (1 - ratio)."""
    return color_a * ratio + color_b * (1.0 - ratio)


@ti.func
def sky_color(direction: vec3) -> vec3:
    """Color of a ray that escapes the scene.

    A vertical gradient from white at the horizon (looking straight down) to
    sky blue at the zenith, driven by the y component of the unit direction.
    This is the only light source in the scene.

    Args:
        direction: The ray direction (any non-zero length).

    Returns:
        The sky color seen along the direction.
    """
    ratio = 0.5 * (normalize(direction).y + 1.0)
    return blend(SKY_BLUE, WHITE, ratio)


def sky_color_numpy(direction: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Host-side sky gradient, matching :func:`sky_color`.

    Args:
        direction: Ray direction as a length-3 sequence.

    Returns:
        RGB array of shape (3,).
    """
    d = np.asarray(direction, dtype=np.float64)
    ratio = 0.5 * (d[1] / np.linalg.norm(d) + 1.0)
    return np.asarray(SKY_BLUE_RGB) * ratio + np.asarray(WHITE_RGB) * (1.0 - ratio)


def encode_channels(colors: npt.ArrayLike) -> npt.NDArray[np.uint8]:
    """Convert linear color channels to 8-bit output values.

    encode(c) = floor(sqrt(clamp(c, 0, 1)) * 255)

    Works element-wise on any array shape.

    Args:
        colors: Linear channel values.

    Returns:
        Encoded channels with dtype uint8, each in [0, 255].
    """
    values = np.clip(np.asarray(colors, dtype=np.float64), 0.0, 1.0)
    # NaN survives clip; treat it as black
    values = np.nan_to_num(values, nan=0.0)
    return np.floor(np.sqrt(values) * CHANNEL_MAX).astype(np.uint8)
