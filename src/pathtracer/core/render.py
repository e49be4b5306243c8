"""Parallel render driver.

The image is split into independent work units (whole scanlines by default,
single pixels optionally) and fanned out over a ThreadPool. Each worker reads
the shared scene, sensor and settings, none of which change during a render,
and returns the finished pixels together with their coordinates. The calling
thread is the only writer of the image buffer: it drains finished jobs with
as_completed() and copies every pixel into place exactly once.

Reproducibility:
    With settings.seed set, every pixel draws from its own generator seeded
    by (seed, y, x). The image is then identical for any worker count, work
    unit or scheduling order. With seed=None each pixel gets fresh entropy.

Example:
    >>> from pathtracer.camera import Sensor
    >>> from pathtracer.config import RenderSettings
    >>> from pathtracer.scene import create_default_scene
    >>> settings = RenderSettings(image_width=100, samples_per_pixel=4, seed=1)
    >>> pixels = render_image(create_default_scene(), Sensor.from_settings(settings), settings)
    >>> pixels.shape
    (56, 100, 3)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from concurrent.futures import as_completed

import numpy as np
import numpy.typing as npt

from pathtracer.camera.sensor import Sensor
from pathtracer.config import RenderSettings
from pathtracer.core.integrator import sample_pixel
from pathtracer.core.thread_pool import ThreadPool
from pathtracer.scene.manager import Scene

logger = logging.getLogger(__name__)

# Callback receives (completed_rows, total_rows)
ProgressCallback = Callable[[int, int], None]


def pixel_rng(seed: int | None, x: int, y: int) -> np.random.Generator:
    """Random stream for one pixel.

    Seeded streams depend only on (seed, y, x), never on which worker runs
    the pixel or when.
    """
    if seed is None:
        return np.random.default_rng()
    return np.random.default_rng([seed, y, x])


def _render_span(
    y: int,
    x_start: int,
    x_end: int,
    scene: Scene,
    sensor: Sensor,
    settings: RenderSettings,
) -> tuple[int, int, npt.NDArray[np.uint8]]:
    """Render pixels [x_start, x_end) of row y.

    Returns:
        (y, x_start, pixels) with pixels of shape (x_end - x_start, 3).
    """
    width = settings.image_width
    height = settings.image_height
    pixels = np.empty((x_end - x_start, 3), dtype=np.uint8)

    for i, x in enumerate(range(x_start, x_end)):
        pixels[i] = sample_pixel(
            x,
            y,
            width,
            height,
            scene,
            sensor,
            settings.samples_per_pixel,
            settings.max_depth,
            pixel_rng(settings.seed, x, y),
        )

    return y, x_start, pixels


def _work_units(settings: RenderSettings) -> list[tuple[int, int, int]]:
    """(y, x_start, x_end) spans covering the image once."""
    width = settings.image_width
    height = settings.image_height

    if settings.work_unit == "pixel":
        return [(y, x, x + 1) for y in range(height) for x in range(width)]
    return [(y, 0, width) for y in range(height)]


def render_image(
    scene: Scene,
    sensor: Sensor,
    settings: RenderSettings,
    callback: ProgressCallback | None = None,
) -> npt.NDArray[np.uint8]:
    """Render the scene on a pool of worker threads.

    Args:
        scene: The objects to render. Read-only for the whole render.
        sensor: Camera geometry. Read-only for the whole render.
        settings: Image size, sampling and pool parameters.
        callback: Optional function called with (completed_rows, total_rows)
            each time a scanline is finished.

    Returns:
        Array of shape (height, width, 3), dtype uint8, row 0 at the top.

    Raises:
        ValueError: If the settings are invalid.
        PoolCreationError: If settings.workers is less than 1.
        Exception: Whatever a worker raised. The render is abandoned and no
            partial image is returned.
    """
    settings.validate()

    width = settings.image_width
    height = settings.image_height
    image = np.zeros((height, width, 3), dtype=np.uint8)

    # Pixels still missing per row, so progress is reported per scanline
    remaining = np.full(height, width, dtype=np.int64)
    rows_done = 0

    logger.info(
        "Rendering %dx%d, %d spp, depth %d, %d objects, %d workers, unit=%s",
        width,
        height,
        settings.samples_per_pixel,
        settings.max_depth,
        len(scene),
        settings.workers,
        settings.work_unit,
    )
    t0 = time.perf_counter()

    with ThreadPool(settings.workers) as pool:
        futures = [
            pool.submit(_render_span, y, x_start, x_end, scene, sensor, settings)
            for y, x_start, x_end in _work_units(settings)
        ]

        for future in as_completed(futures):
            y, x_start, pixels = future.result()
            image[y, x_start : x_start + len(pixels)] = pixels

            remaining[y] -= len(pixels)
            if remaining[y] == 0:
                rows_done += 1
                logger.info("Scanline %d done (%d/%d)", y, rows_done, height)
                if callback is not None:
                    callback(rows_done, height)

    logger.info("Render finished in %.2fs", time.perf_counter() - t0)
    return image
