"""Renderer: drives the pixel sampling kernel over a whole image.

The Renderer owns a validated RenderConfig, uploads the camera, and renders
the image in bands of scanlines so progress can be reported between kernel
launches. The result is a PixelBuffer of final colors.

Band size only affects how often progress is reported; each pixel's random
stream depends on the seed and its coordinates alone, so the image is the
same for any band size.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from skytracer.core.renderer import RenderConfig, Renderer
    >>> from skytracer.scene.presets import create_default_scene
    >>>
    >>> world, camera = create_default_scene()
    >>> renderer = Renderer(RenderConfig(width=400, height=225, samples_per_pixel=10))
    >>> buffer = renderer.render(world, camera)
"""

import logging
import time
from collections.abc import Callable, Generator
from dataclasses import dataclass

from skytracer.camera.pinhole import PinholeCamera, setup_camera
from skytracer.core.integrator import (
    MAX_IMAGE_HEIGHT,
    MAX_IMAGE_WIDTH,
    get_image_numpy,
    render_rows,
    setup_render_target,
)
from skytracer.core.pixel_buffer import PixelBuffer
from skytracer.scene.world import World

logger = logging.getLogger(__name__)

# Callback receives (rows_done, rows_total)
ProgressCallback = Callable[[int, int], None]

DEFAULT_ROWS_PER_BATCH = 16


class ConfigurationError(ValueError):
    """Raised when a render configuration is invalid."""


@dataclass(frozen=True)
class RenderConfig:
    """Settings for one render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Number of jittered estimates averaged per pixel.
        max_bounce_depth: Bounce budget per camera ray; 0 renders black.
        seed: Seed of the per-pixel random streams.
    """

    width: int
    height: int
    samples_per_pixel: int = 100
    max_bounce_depth: int = 50
    seed: int = 0

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.width > MAX_IMAGE_WIDTH or self.height > MAX_IMAGE_HEIGHT:
            raise ConfigurationError(
                f"Image dimensions ({self.width}x{self.height}) exceed maximum supported "
                f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )
        if self.samples_per_pixel < 1:
            raise ConfigurationError(
                f"samples_per_pixel must be at least 1, got {self.samples_per_pixel}"
            )
        if self.max_bounce_depth < 0:
            raise ConfigurationError(
                f"max_bounce_depth must be non-negative, got {self.max_bounce_depth}"
            )


class Renderer:
    """Renders a World through a PinholeCamera into a PixelBuffer.

    Attributes:
        config: The render configuration.
    """

    def __init__(self, config: RenderConfig) -> None:
        self._config = config

    @property
    def config(self) -> RenderConfig:
        """Get the render configuration."""
        return self._config

    def render(
        self,
        world: World,
        camera: PinholeCamera,
        rows_per_batch: int = DEFAULT_ROWS_PER_BATCH,
        callback: ProgressCallback | None = None,
    ) -> PixelBuffer:
        """Render the full image.

        Args:
            world: The scene to render; must be the live World. Its spheres
                and materials must not change until this returns.
            camera: The camera to render through.
            rows_per_batch: Scanlines rendered per kernel launch.
            callback: Optional callback called after each batch with
                (rows_done, rows_total).

        Returns:
            The finished PixelBuffer.

        Example:
            >>> def progress(done, total):
            ...     print(f"Rendered {done}/{total} rows")
            >>> buffer = renderer.render(world, camera, callback=progress)
        """
        for rows_done, rows_total in self.render_progressive(world, camera, rows_per_batch):
            if callback is not None:
                callback(rows_done, rows_total)

        return self.get_pixel_buffer()

    def render_progressive(
        self,
        world: World,
        camera: PinholeCamera,
        rows_per_batch: int = DEFAULT_ROWS_PER_BATCH,
    ) -> Generator[tuple[int, int], None, None]:
        """Render the image band by band, yielding progress after each band.

        Call get_pixel_buffer() once the generator is exhausted.

        Yields:
            Tuple of (rows_done, rows_total).

        Raises:
            ValueError: If rows_per_batch is not positive.
            RuntimeError: If a newer World has replaced ``world``.
        """
        world.check_live()
        if rows_per_batch <= 0:
            raise ValueError(f"rows_per_batch must be positive, got {rows_per_batch}")

        config = self._config
        setup_camera(camera)
        setup_render_target(config.width, config.height)

        logger.info(
            "Rendering %dx%d, %d samples/pixel, depth %d, seed %d (%r)",
            config.width,
            config.height,
            config.samples_per_pixel,
            config.max_bounce_depth,
            config.seed,
            world,
        )
        start = time.perf_counter()

        for row_start in range(0, config.height, rows_per_batch):
            row_end = min(row_start + rows_per_batch, config.height)
            render_rows(
                row_start,
                row_end,
                config.samples_per_pixel,
                config.max_bounce_depth,
                config.seed,
            )
            logger.debug("Rendered rows %d..%d", row_start, row_end - 1)
            yield (row_end, config.height)

        logger.info("Render finished in %.2fs", time.perf_counter() - start)

    def get_pixel_buffer(self) -> PixelBuffer:
        """Snapshot the render target into a PixelBuffer."""
        return PixelBuffer(
            width=self._config.width,
            height=self._config.height,
            pixels=get_image_numpy(),
        )

    def __repr__(self) -> str:
        return f"Renderer({self._config!r})"
