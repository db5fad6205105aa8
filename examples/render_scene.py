#!/usr/bin/env python3
"""Render a YAML scene file.

This script loads a scene description, picks one of its cameras and renders
it band by band with the Taichi kernel, printing progress as rows complete.

Usage:
    python -m examples.render_scene [options] SCENE

Options:
    --camera NAME       Camera to render (default: the first camera in the file)
    --output OUTPUT     Output file path, .png or .ppm (default: render.png)
    --band-height ROWS  Rows per kernel launch (default: 16)
    --arch {cpu,gpu}    Taichi backend (default: cpu)
    --quiet             Suppress progress output

Example:
    python -m examples.render_scene examples/scenes/boing.yaml --camera preview
"""

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

import prism
from prism.errors import PrismError


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a YAML scene file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "scene",
        type=str,
        help="Path to the YAML scene file",
    )
    parser.add_argument(
        "--camera",
        type=str,
        default=None,
        help="Camera to render (default: the first camera in the file)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="render.png",
        help="Output file path, .png or .ppm (default: render.png)",
    )
    parser.add_argument(
        "--band-height",
        type=int,
        default=16,
        help="Rows per kernel launch (default: 16)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_scene(
    scene_path: str,
    camera_name: str | None = None,
    output_path: str = "render.png",
    band_height: int = 16,
    quiet: bool = False,
) -> Path:
    """Render one camera of a scene file and save the image.

    Args:
        scene_path: YAML scene file.
        camera_name: Camera to render; the first camera when None.
        output_path: Output file path (PNG, or PPM for a .ppm suffix).
        band_height: Number of rows to render between progress updates.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.

    Raises:
        KeyError: If the scene has no camera of that name, or no camera at all.
    """
    # Lazy imports to allow Taichi initialization first
    from prism.core.progressive import ProgressiveRenderer
    from prism.scene.loader import load_scene_file

    scene = load_scene_file(scene_path)
    if camera_name is None:
        if not scene.cameras:
            raise KeyError(f"Scene {scene_path} defines no camera")
        camera_name = next(iter(scene.cameras))
    camera = scene.camera(camera_name)

    if not quiet:
        print(
            f"Loaded {scene_path}: {len(scene.world.shapes)} shapes, "
            f"{len(scene.world.lights)} lights"
        )
        print(f"Rendering camera '{camera_name}' ({camera.width}x{camera.height})...")

    renderer = ProgressiveRenderer(camera, scene.world, band_height=band_height)

    start_time = time.time()

    def progress_callback(rows_done: int, total_rows: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (rows_done / total_rows) * 100 if total_rows > 0 else 0
            rows_per_sec = rows_done / elapsed if elapsed > 0 else 0
            print(
                f"\r  Progress: {rows_done}/{total_rows} rows "
                f"({progress_pct:.1f}%) - {rows_per_sec:.1f} rows/s",
                end="",
                flush=True,
            )

    renderer.render(callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    renderer.save_image(output_file)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()
    logging.basicConfig(level=logging.WARNING)

    # Rendering needs float64; fall back to CPU if the GPU backend is unavailable
    if args.arch == "gpu":
        try:
            prism.init_backend(ti.gpu)
            if not args.quiet:
                print("Using GPU backend")
        except Exception:
            prism.init_backend(ti.cpu)
            if not args.quiet:
                print("Using CPU backend")
    else:
        prism.init_backend(ti.cpu)

    try:
        render_scene(
            args.scene,
            camera_name=args.camera,
            output_path=args.output,
            band_height=args.band_height,
            quiet=args.quiet,
        )
        return 0
    except (OSError, KeyError, PrismError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
