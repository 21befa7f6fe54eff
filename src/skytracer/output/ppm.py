"""Plain-text PPM (P3) export for rendered images.

The file starts with the header

    P3
    <width> <height>
    255

followed by one ``"<r> <g> <b>"`` line per pixel. Channels are gamma-2
encoded to integers in [0, 255]. Rows are written from the highest row
index down, so the top scanline of the picture comes first.

Example:
    >>> from skytracer.output.ppm import save_ppm
    >>> buffer = renderer.render(world, camera)
    >>> save_ppm(buffer, "spheres.ppm")
"""

import io
import logging
from pathlib import Path
from typing import TextIO

import numpy as np

from skytracer.core.color import CHANNEL_MAX
from skytracer.core.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

PPM_MAGIC = "P3"


def ppm_header(width: int, height: int) -> str:
    """Build the three-line P3 header."""
    return f"{PPM_MAGIC}\n{width} {height}\n{CHANNEL_MAX}\n"


def format_ppm(buffer: PixelBuffer) -> str:
    """Render a PixelBuffer as the complete text of a P3 file."""
    stream = io.StringIO()
    write_ppm(buffer, stream)
    return stream.getvalue()


def write_ppm(buffer: PixelBuffer, stream: TextIO) -> None:
    """Write a PixelBuffer to a text stream as P3.

    Raises:
        OSError: If the stream cannot be written.
    """
    stream.write(ppm_header(buffer.width, buffer.height))
    for row in np.flip(buffer.encoded(), axis=0):
        stream.write("".join(f"{r} {g} {b}\n" for r, g, b in row.tolist()))


def save_ppm(buffer: PixelBuffer, filepath: str | Path) -> Path:
    """Save a PixelBuffer as a P3 file.

    Args:
        buffer: The rendered image.
        filepath: Output file path (conventionally ending in .ppm).

    Returns:
        The path written.

    Raises:
        OSError: If the file cannot be created or written.
    """
    path = Path(filepath)
    with path.open("w", encoding="ascii", newline="\n") as stream:
        write_ppm(buffer, stream)
    logger.info("Wrote %dx%d PPM to %s", buffer.width, buffer.height, path)
    return path
