#!/usr/bin/env python3
"""Render one of the built-in scenes, or a JSON scene file, to a PNG.

The default scene is the classic layout: ivory, glass, red rubber and mirror
spheres over a checkerboard floor, lit by three point lights. Every pixel
gets one primary ray through its center.

Usage:
    python examples/render_scene.py [options]

Options:
    --width WIDTH             Image width in pixels (default: 1024)
    --height HEIGHT           Image height in pixels (default: 768)
    --fov DEGREES             Vertical field of view (default: 60)
    --scene NAME              Built-in scene: classic, matte, single (default: classic)
    --scene-file PATH         Load the scene from a JSON file instead
    --output OUTPUT           Output file path (default: render.png)
    --rows-per-batch ROWS     Rows per progress update (default: 64)
    --preview                 Show the result in a Matplotlib window
    --quiet                   Suppress progress output
    --arch {cpu,gpu}          Taichi backend (default: cpu)

Example:
    python examples/render_scene.py --scene matte --width 512 --height 384
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a ray traced sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1024,
        help="Image width in pixels (default: 1024)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=768,
        help="Image height in pixels (default: 768)",
    )
    parser.add_argument(
        "--fov",
        type=float,
        default=60.0,
        help="Vertical field of view in degrees (default: 60)",
    )
    parser.add_argument(
        "--scene",
        choices=["classic", "matte", "single"],
        default="classic",
        help="Built-in scene to render (default: classic)",
    )
    parser.add_argument(
        "--scene-file",
        type=str,
        default=None,
        help="JSON scene file to render instead of a built-in scene",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="render.png",
        help="Output file path (default: render.png)",
    )
    parser.add_argument(
        "--rows-per-batch",
        type=int,
        default=64,
        help="Rows rendered between progress updates (default: 64)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the rendered image in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--arch",
        choices=["cpu", "gpu"],
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    return parser.parse_args(argv)


def init_taichi(arch: str, quiet: bool = False) -> None:
    """Initialize Taichi with 64-bit floats, falling back to the CPU."""
    if arch == "gpu":
        try:
            ti.init(arch=ti.gpu, default_fp=ti.f64)
            if not quiet:
                print("Using GPU backend")
            return
        except Exception:
            if not quiet:
                print("GPU backend unavailable, falling back to CPU")

    ti.init(arch=ti.cpu, default_fp=ti.f64)
    if not quiet:
        print("Using CPU backend")


def render_scene(
    width: int = 1024,
    height: int = 768,
    vfov: float = 60.0,
    scene_name: str = "classic",
    scene_file: str | None = None,
    output_path: str = "render.png",
    rows_per_batch: int = 64,
    preview: bool = False,
    quiet: bool = False,
) -> Path:
    """Build a scene, render it and save the PNG.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        vfov: Vertical field of view in degrees.
        scene_name: Name of the built-in scene (ignored with scene_file).
        scene_file: Optional JSON scene file.
        output_path: Output file path (PNG).
        rows_per_batch: Number of rows to render between progress updates.
        preview: If True, show the image in a Matplotlib window.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports so Taichi is initialized before any field is created
    from tinytracer.camera.pinhole import PinholeCamera, setup_camera
    from tinytracer.core.renderer import Renderer
    from tinytracer.preview.display import show_preview
    from tinytracer.preview.export import save_png
    from tinytracer.scene.manager import SceneManager
    from tinytracer.scene.presets import create_scene

    if scene_file is not None:
        if not quiet:
            print(f"Loading scene from {scene_file} ({width}x{height})...")
        scene = SceneManager()
        scene.load_json(scene_file)
        camera = PinholeCamera(vfov=vfov)
        label = Path(scene_file).stem
    else:
        if not quiet:
            print(f"Creating {scene_name} scene ({width}x{height})...")
        scene, camera = create_scene(scene_name, vfov=vfov)
        label = scene_name

    if not quiet:
        print(
            f"  {scene.get_sphere_count()} spheres, {scene.get_light_count()} lights, "
            f"floor {'on' if scene.checkerboard else 'off'}"
        )

    setup_camera(camera)
    renderer = Renderer(width, height)

    if not quiet:
        print("Rendering...")

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

    renderer.render(rows_per_batch=rows_per_batch, callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    save_png(renderer, output_file)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    if preview:
        show_preview(renderer.get_image_numpy(), title=label)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        init_taichi(args.arch, quiet=args.quiet)
        render_scene(
            width=args.width,
            height=args.height,
            vfov=args.fov,
            scene_name=args.scene,
            scene_file=args.scene_file,
            output_path=args.output,
            rows_per_batch=args.rows_per_batch,
            preview=args.preview,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
