"""Material tags and the scatter result shared by every material model."""

from __future__ import annotations

from enum import IntEnum
from typing import NamedTuple

from pathtracer.core.color import Color
from pathtracer.core.ray import Ray


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used for material dispatch in the path tracer and as the material tag in
    the Taichi field storage.
    """

    LAMBERTIAN = 0
    METAL = 1


class ScatterResult(NamedTuple):
    """Outcome of a successful scatter.

    Attributes:
        ray: The outgoing ray leaving the hit point.
        attenuation: The color multiplier applied to light returning along it.
    """

    ray: Ray
    attenuation: Color


def validate_albedo(albedo: Color) -> None:
    """Reject albedo channels outside [0, 1].

    Raises:
        ValueError: If any channel would reflect more light than it receives
            or a negative amount.
    """
    for i, component in enumerate(albedo.to_tuple()):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )
