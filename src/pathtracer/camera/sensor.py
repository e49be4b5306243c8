"""Fixed-eye sensor model for primary ray generation.

The sensor sits at the world origin looking down -z. A viewport of the given
height (and width = height * aspect ratio) is placed focal_length in front of
the eye, and rays are fired from the eye through points on that viewport:

    direction = lower_left_corner + u * horizontal + v * vertical - origin

with u in [0, 1] running left to right and v in [0, 1] running bottom to top.

Example:
    >>> sensor = Sensor.from_viewport(2.0, 16.0 / 9.0, 1.0)
    >>> ray = sensor.get_ray(0.5, 0.5)  # Through the viewport center
    >>> ray.direction
    Vec3(x=0.0, y=0.0, z=-1.0)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pathtracer.core.ray import Ray
from pathtracer.core.vec3 import Vec3

if TYPE_CHECKING:
    from pathtracer.config import RenderSettings


@dataclass(frozen=True, slots=True)
class Sensor:
    """Immutable camera geometry shared read-only by every render worker.

    Attributes:
        origin: Eye position.
        horizontal: Full-width viewport edge vector.
        vertical: Full-height viewport edge vector.
        lower_left_corner: Viewport corner that (u, v) = (0, 0) maps to.
    """

    origin: Vec3
    horizontal: Vec3
    vertical: Vec3
    lower_left_corner: Vec3

    @classmethod
    def from_viewport(
        cls,
        viewport_height: float,
        aspect_ratio: float,
        focal_length: float,
    ) -> Sensor:
        """Derive the sensor from viewport height, aspect ratio and focal length.

        Raises:
            ValueError: If any argument is not positive.
        """
        for name, value in (
            ("viewport_height", viewport_height),
            ("aspect_ratio", aspect_ratio),
            ("focal_length", focal_length),
        ):
            if not value > 0.0:
                raise ValueError(f"{name} must be positive, got {value}")

        viewport_width = aspect_ratio * viewport_height

        origin = Vec3.zero()
        horizontal = Vec3(viewport_width, 0.0, 0.0)
        vertical = Vec3(0.0, viewport_height, 0.0)
        lower_left_corner = (
            origin - horizontal / 2.0 - vertical / 2.0 - Vec3(0.0, 0.0, focal_length)
        )
        return cls(origin, horizontal, vertical, lower_left_corner)

    @classmethod
    def from_settings(cls, settings: RenderSettings) -> Sensor:
        """Sensor for the viewport described by a RenderSettings."""
        return cls.from_viewport(
            settings.viewport_height, settings.aspect_ratio, settings.focal_length
        )

    def get_ray(self, u: float, v: float) -> Ray:
        """Ray from the eye through viewport coordinates (u, v)."""
        direction = (
            self.lower_left_corner
            + u * self.horizontal
            + v * self.vertical
            - self.origin
        )
        return Ray(self.origin, direction)
