#!/usr/bin/env python3
"""Render the three-sphere scene to a PPM file.

A matte sphere and a fuzzy copper sphere sit on a huge matte ground sphere,
lit only by the sky gradient.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH       Image width in pixels (default: 1920)
    --height HEIGHT     Image height in pixels (default: 1080)
    --samples SAMPLES   Number of samples per pixel (default: 100)
    --depth DEPTH       Maximum bounce depth (default: 50)
    --seed SEED         Random seed (default: 0)
    --output OUTPUT     Output file path (default: spheres.ppm)
    --arch {gpu,cpu}    Taichi backend (default: gpu, falling back to cpu)
    --quiet             Suppress progress output

Example:
    python -m examples.render_spheres --width 400 --height 225 --samples 20
"""

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the three-sphere scene to a PPM file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1920,
        help="Image width in pixels (default: 1920)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=1080,
        help="Image height in pixels (default: 1080)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=100,
        help="Number of samples per pixel (default: 100)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=50,
        help="Maximum bounce depth (default: 50)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed (default: 0)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.ppm",
        help="Output file path (default: spheres.ppm)",
    )
    parser.add_argument(
        "--arch",
        choices=("gpu", "cpu"),
        default="gpu",
        help="Taichi backend; gpu falls back to cpu when unavailable (default: gpu)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_spheres(
    width: int = 1920,
    height: int = 1080,
    num_samples: int = 100,
    max_depth: int = 50,
    seed: int = 0,
    output_path: str = "spheres.ppm",
    quiet: bool = False,
) -> Path:
    """Render the three-sphere scene and save it as PPM.

    Taichi must already be initialized.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        num_samples: Number of samples per pixel.
        max_depth: Maximum bounce depth per camera ray.
        seed: Random seed.
        output_path: Output file path (PPM).
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from skytracer.core.renderer import RenderConfig, Renderer
    from skytracer.output.ppm import save_ppm
    from skytracer.scene.presets import create_default_scene

    config = RenderConfig(
        width=width,
        height=height,
        samples_per_pixel=num_samples,
        max_bounce_depth=max_depth,
        seed=seed,
    )

    if not quiet:
        print(f"Creating sphere scene ({width}x{height})...")

    world, camera = create_default_scene()
    renderer = Renderer(config)

    if not quiet:
        print(f"Rendering {num_samples} samples per pixel, depth {max_depth}...")

    start_time = time.time()

    def progress_callback(rows_done: int, rows_total: int) -> None:
        if not quiet:
            progress_pct = (rows_done / rows_total) * 100 if rows_total > 0 else 0
            print(
                f"\r  Rendered line {rows_done} of {rows_total} ({progress_pct:.1f}%)",
                end="",
                flush=True,
            )

    buffer = renderer.render(world, camera, callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = save_ppm(buffer, output_path)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def describe_backend() -> str:
    """Name of the backend Taichi actually initialized (e.g. x64, cuda, vulkan)."""
    return ti.lang.impl.current_cfg().arch.name


def init_taichi(arch: str, quiet: bool = False) -> None:
    """Initialize Taichi on the requested backend.

    Taichi itself falls back to the CPU when no GPU backend is available;
    the backend actually in use is printed.
    """
    ti.init(arch=ti.gpu if arch == "gpu" else ti.cpu)
    if not quiet:
        print(f"Using {describe_backend()} backend")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    init_taichi(args.arch, quiet=args.quiet)

    try:
        render_spheres(
            width=args.width,
            height=args.height,
            num_samples=args.samples,
            max_depth=args.depth,
            seed=args.seed,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
