"""Pinhole camera model for perspective ray generation.

The camera sits at the world origin looking down -z. Its image plane is a
viewport of height ``viewport_height`` and width
``aspect_ratio * viewport_height`` placed ``focal_length`` in front of the
pinhole. Normalized image coordinates (u, v) in [0, 1] map across the
viewport from its lower-left corner:

    direction(u, v) = lower_left_corner + u * horizontal + v * vertical - origin

Ray directions are left unnormalized.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from skytracer.camera.pinhole import PinholeCamera, setup_camera, get_ray
    >>>
    >>> camera = PinholeCamera(aspect_ratio=16.0 / 9.0)
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0.5, 0.5)  # Ray through image center
"""

import logging
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti

from skytracer.core.ray import Ray, make_ray

logger = logging.getLogger(__name__)

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class PinholeCamera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        aspect_ratio: Viewport width divided by height.
        viewport_height: Height of the image plane in world units.
        focal_length: Distance from the pinhole to the image plane.
    """

    aspect_ratio: float = 16.0 / 9.0
    viewport_height: float = 2.0
    focal_length: float = 1.0

    def __post_init__(self) -> None:
        for name in ("aspect_ratio", "viewport_height", "focal_length"):
            value = getattr(self, name)
            if not value > 0.0:
                raise ValueError(f"Camera {name} must be positive, got {value}")

    @property
    def viewport_width(self) -> float:
        """Width of the image plane in world units."""
        return self.aspect_ratio * self.viewport_height

    @property
    def origin(self) -> npt.NDArray[np.float64]:
        """The pinhole position (world origin)."""
        return np.zeros(3)

    @property
    def horizontal(self) -> npt.NDArray[np.float64]:
        """Vector spanning the full viewport width."""
        return np.array([self.viewport_width, 0.0, 0.0])

    @property
    def vertical(self) -> npt.NDArray[np.float64]:
        """Vector spanning the full viewport height."""
        return np.array([0.0, self.viewport_height, 0.0])

    @property
    def lower_left_corner(self) -> npt.NDArray[np.float64]:
        """Lower-left corner of the viewport in world space."""
        return (
            self.origin
            - self.horizontal / 2.0
            - self.vertical / 2.0
            - np.array([0.0, 0.0, self.focal_length])
        )


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())  # Full width
_viewport_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())  # Full height
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())


def setup_camera(camera: PinholeCamera) -> None:
    """Upload the camera geometry to the kernel-side fields.

    Must be called (from Python, not from a kernel) before rendering.

    Args:
        camera: Camera configuration.
    """
    _camera_origin[None] = camera.origin.tolist()
    _viewport_horizontal[None] = camera.horizontal.tolist()
    _viewport_vertical[None] = camera.vertical.tolist()
    _lower_left_corner[None] = camera.lower_left_corner.tolist()
    logger.debug("Camera set up: %s", camera)


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_ray(u: ti.f32, v: ti.f32) -> Ray:
    """Generate a ray through normalized image coordinates (u, v).

    - u = 0: left edge, u = 1: right edge
    - v = 0: bottom edge, v = 1: top edge

    Args:
        u: Horizontal coordinate in [0, 1].
        v: Vertical coordinate in [0, 1].

    Returns:
        A Ray from the pinhole toward the viewport point (unnormalized).
    """
    origin = _camera_origin[None]
    direction = (
        _lower_left_corner[None]
        + u * _viewport_horizontal[None]
        + v * _viewport_vertical[None]
        - origin
    )
    return make_ray(origin, direction)


@ti.func
def get_ray_jittered(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    jitter_u: ti.f32,
    jitter_v: ti.f32,
) -> Ray:
    """Generate a ray through a jittered position inside a pixel.

    u = (i + jitter_u) / (width - 1) and v = (j + jitter_v) / (height - 1):
    column 0 starts on the left viewport edge and column width - 1 starts on
    the right edge, with samples of the last column/row landing just past it.
    A one-pixel dimension uses a divisor of 1.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.
        jitter_u: Sub-pixel offset in [0, 1) along x.
        jitter_v: Sub-pixel offset in [0, 1) along y.

    Returns:
        A Ray through the jittered sample position.
    """
    u = (ti.cast(pixel_i, ti.f32) + jitter_u) / ti.cast(ti.max(width - 1, 1), ti.f32)
    v = (ti.cast(pixel_j, ti.f32) + jitter_v) / ti.cast(ti.max(height - 1, 1), ti.f32)
    return get_ray(u, v)


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get the current kernel-side camera state for inspection.

    Returns:
        Dictionary with origin, horizontal, vertical, lower_left.
    """
    origin_vec = _camera_origin[None]
    h_vec = _viewport_horizontal[None]
    vert_vec = _viewport_vertical[None]
    ll_vec = _lower_left_corner[None]

    return {
        "origin": (float(origin_vec[0]), float(origin_vec[1]), float(origin_vec[2])),
        "horizontal": (float(h_vec[0]), float(h_vec[1]), float(h_vec[2])),
        "vertical": (float(vert_vec[0]), float(vert_vec[1]), float(vert_vec[2])),
        "lower_left": (float(ll_vec[0]), float(ll_vec[1]), float(ll_vec[2])),
    }
