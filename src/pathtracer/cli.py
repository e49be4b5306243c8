"""Command-line entry point.

Usage:
    pathtracer [options]
    python -m pathtracer [options]

Example:
    pathtracer --width 200 --samples 20 --seed 1 --output spheres.png
    pathtracer --scene scenes/three_spheres.json --backend taichi --preview
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

import numpy as np

from pathtracer.camera import Sensor
from pathtracer.config import DEFAULT_WORKERS, WORK_UNITS, RenderSettings
from pathtracer.core.render import render_image
from pathtracer.core.thread_pool import PoolCreationError
from pathtracer.preview import save_png, show_preview
from pathtracer.scene import Scene, create_default_scene, load_scene

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Exit status for invalid settings or scene files
EXIT_USAGE = 2


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    defaults = RenderSettings()
    parser = argparse.ArgumentParser(
        prog="pathtracer",
        description="Render a scene of spheres with a recursive path tracer.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--width", type=int, default=defaults.image_width, help="Image width in pixels"
    )
    parser.add_argument(
        "--aspect-ratio",
        type=float,
        default=defaults.aspect_ratio,
        help="Image width divided by height",
    )
    parser.add_argument(
        "--viewport-height",
        type=float,
        default=defaults.viewport_height,
        help="Viewport height in world units",
    )
    parser.add_argument(
        "--focal-length",
        type=float,
        default=defaults.focal_length,
        help="Distance from the eye to the viewport",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=defaults.samples_per_pixel,
        help="Samples per pixel",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=defaults.max_depth,
        help="Maximum bounces per sample",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=DEFAULT_WORKERS,
        help="Worker threads (threads backend)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Root random seed; omit for a different image each run",
    )
    parser.add_argument(
        "--work-unit",
        choices=WORK_UNITS,
        default=defaults.work_unit,
        help="Unit of work handed to a worker (threads backend)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: built-in four-sphere scene)",
    )
    parser.add_argument(
        "--output", type=str, default="image.png", help="Output file path"
    )
    parser.add_argument(
        "--backend",
        choices=("threads", "taichi"),
        default="threads",
        help="Render on a thread pool or in a Taichi kernel",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi architecture (taichi backend)",
    )
    parser.add_argument(
        "--preview", action="store_true", help="Show the result in a Matplotlib window"
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="INFO",
        help="Diagnostic verbosity (written to stderr)",
    )
    return parser.parse_args(argv)


def settings_from_args(args: argparse.Namespace) -> RenderSettings:
    return RenderSettings(
        image_width=args.width,
        aspect_ratio=args.aspect_ratio,
        viewport_height=args.viewport_height,
        focal_length=args.focal_length,
        samples_per_pixel=args.samples,
        max_depth=args.max_depth,
        workers=args.workers,
        seed=args.seed,
        work_unit=args.work_unit,
    )


def render_with_taichi(
    scene: Scene, sensor: Sensor, settings: RenderSettings, arch: str
) -> np.ndarray:
    """Initialize Taichi and render with the kernel backend."""
    import taichi as ti

    seed = settings.seed
    if seed is None:
        seed = int(np.random.default_rng().integers(2**31 - 1))
    ti.init(arch=ti.gpu if arch == "gpu" else ti.cpu, random_seed=seed)

    # Lazy import: the kernel module allocates fields on import
    from pathtracer.core.kernels import render_kernel_image

    return render_kernel_image(scene, sensor, settings)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format=LOG_FORMAT, stream=sys.stderr)

    settings = settings_from_args(args)
    try:
        settings.validate()
        scene = load_scene(args.scene) if args.scene else create_default_scene()
        sensor = Sensor.from_settings(settings)
    except (ValueError, OSError) as e:
        # Bad settings or an unreadable scene file
        logger.error("%s", e)
        return EXIT_USAGE

    if args.backend == "taichi":
        try:
            pixels = render_with_taichi(scene, sensor, settings, args.arch)
        except ValueError as e:
            # Only the image size check raises before the kernel launches
            logger.error("%s", e)
            return EXIT_USAGE
    else:
        try:
            pixels = render_image(scene, sensor, settings)
        except PoolCreationError as e:
            # Errors raised by workers propagate
            logger.error("%s", e)
            return EXIT_USAGE

    save_png(pixels, args.output)

    if args.preview:
        show_preview(pixels, title=args.output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
