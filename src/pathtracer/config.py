"""Render settings.

All parameters are fixed at construction time and shared read-only by the
render workers for the whole render.

Example:
    >>> settings = RenderSettings(image_width=200, samples_per_pixel=10, seed=7)
    >>> settings.image_height
    112
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_WORKERS = 8

WORK_UNITS = ("row", "pixel")


@dataclass(frozen=True)
class RenderSettings:
    """Parameters for one render.

    Attributes:
        image_width: Output width in pixels.
        aspect_ratio: Width divided by height.
        viewport_height: Height of the virtual viewport in world units.
        focal_length: Distance from the eye to the viewport.
        samples_per_pixel: Jittered samples averaged per pixel.
        max_depth: Maximum number of bounces per sample.
        workers: Number of worker threads (at least 1, checked by the pool).
        seed: Root seed for per-pixel random streams. None draws fresh
            entropy, so repeated renders differ.
        work_unit: "row" to hand whole scanlines to workers, "pixel" for
            single pixels.
    """

    image_width: int = 400
    aspect_ratio: float = 16.0 / 9.0
    viewport_height: float = 2.0
    focal_length: float = 1.0
    samples_per_pixel: int = 100
    max_depth: int = 50
    workers: int = DEFAULT_WORKERS
    seed: int | None = None
    work_unit: str = "row"

    @property
    def image_height(self) -> int:
        """round(width / aspect_ratio), never below one row."""
        return max(1, round(self.image_width / self.aspect_ratio))

    def validate(self) -> None:
        """Check every field except the worker count.

        Raises:
            ValueError: If a size, count or ratio is not positive, the depth
                is negative, the seed is negative or the work unit is unknown.
        """
        if self.image_width < 1:
            raise ValueError(f"image_width must be at least 1, got {self.image_width}")
        if not self.aspect_ratio > 0.0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if not self.viewport_height > 0.0:
            raise ValueError(
                f"viewport_height must be positive, got {self.viewport_height}"
            )
        if not self.focal_length > 0.0:
            raise ValueError(f"focal_length must be positive, got {self.focal_length}")
        if self.samples_per_pixel < 1:
            raise ValueError(
                f"samples_per_pixel must be at least 1, got {self.samples_per_pixel}"
            )
        if self.max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {self.max_depth}")
        if self.seed is not None and self.seed < 0:
            raise ValueError(f"seed must not be negative, got {self.seed}")
        if self.work_unit not in WORK_UNITS:
            raise ValueError(
                f"work_unit must be one of {', '.join(WORK_UNITS)}, got {self.work_unit!r}"
            )
