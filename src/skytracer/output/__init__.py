"""Image output."""

from .ppm import format_ppm, ppm_header, save_ppm, write_ppm

__all__ = [
    "ppm_header",
    "format_ppm",
    "write_ppm",
    "save_ppm",
]
