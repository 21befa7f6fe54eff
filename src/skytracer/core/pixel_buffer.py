"""Immutable container for a finished render."""

from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from skytracer.core.color import encode_channels


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Final colors of a render, one per pixel.

    ``pixels[y, x]`` is the color of pixel (x, y), with y = 0 the bottom
    scanline. The array is made read-only on construction.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        pixels: Float32 array of shape (height, width, 3).
    """

    width: int
    height: int
    pixels: npt.NDArray[np.float32]

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Buffer dimensions must be positive, got {self.width}x{self.height}")

        pixels = np.array(self.pixels, dtype=np.float32)
        if pixels.shape != (self.height, self.width, 3):
            raise ValueError(
                f"Expected pixel array of shape {(self.height, self.width, 3)}, got {pixels.shape}"
            )
        pixels.setflags(write=False)
        object.__setattr__(self, "pixels", pixels)

    def pixel(self, x: int, y: int) -> tuple[float, float, float]:
        """Get the color of pixel (x, y) as (R, G, B)."""
        r, g, b = self.pixels[y, x]
        return (float(r), float(g), float(b))

    @property
    def rows(self) -> Iterator[npt.NDArray[np.float32]]:
        """Iterate over scanlines in index order (bottom first)."""
        return iter(self.pixels)

    def encoded(self) -> npt.NDArray[np.uint8]:
        """Get the 8-bit encoded channels, same layout as ``pixels``."""
        return encode_channels(self.pixels)
