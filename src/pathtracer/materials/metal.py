"""Metal (specular reflective) material implementation.

Metals mirror the incoming ray about the surface normal:

    R = I - 2(I . N)N

where I is the unit incident direction. Fuzzy metals perturb R by a random
unit vector scaled by the fuzz factor, which blurs the reflection. When the
perturbed direction ends up pointing into the surface the ray is absorbed.

Example:
    >>> gold = Metal(Color(0.8, 0.6, 0.2), fuzz=0.3)
    >>> mirror = Metal.shiny(Color(0.9, 0.9, 0.9))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

import numpy as np

from pathtracer.core.color import Color, clamp
from pathtracer.core.ray import Ray, reflect
from pathtracer.core.vec3 import dot, random_unit_vector
from pathtracer.materials.base import MaterialType, ScatterResult, validate_albedo

if TYPE_CHECKING:
    from pathtracer.geometry.hit_record import HitRecord


def scatter_metal(
    albedo: Color,
    fuzz: float,
    ray_in: Ray,
    rec: HitRecord,
    rng: np.random.Generator,
) -> ScatterResult | None:
    """Compute the scattered ray for a metal surface.

    Args:
        albedo: The reflective color.
        fuzz: The perturbation radius in [0, 1]. 0 = perfect mirror.
        ray_in: The incoming ray.
        rec: The hit being shaded.
        rng: Generator for the fuzz perturbation.

    Returns:
        The scattered ray and the albedo, or None if the perturbed
        reflection does not leave the surface (absorbed).
    """
    reflected = reflect(ray_in.unit_vector(), rec.normal)
    direction = reflected + fuzz * random_unit_vector(rng)

    if dot(direction, rec.normal) <= 0.0:
        return None

    return ScatterResult(Ray(rec.point, direction), albedo)


@dataclass(frozen=True, slots=True)
class Metal:
    """Metal (specular reflective) material properties.

    Attributes:
        albedo: The reflective color (RGB, each component in [0, 1]).
        fuzz: Perturbation radius of the reflection in [0, 1].
            0 = perfect mirror, 1 = maximum fuzziness. Values outside the
            range are clamped on construction, not rejected.
    """

    albedo: Color
    fuzz: float = 0.0

    material_type: ClassVar[MaterialType] = MaterialType.METAL

    def __post_init__(self) -> None:
        validate_albedo(self.albedo)
        object.__setattr__(self, "fuzz", clamp(float(self.fuzz), 0.0, 1.0))

    @classmethod
    def shiny(cls, albedo: Color) -> Metal:
        """A perfect mirror."""
        return cls(albedo, 0.0)

    def scatter(
        self,
        rec: HitRecord,
        ray_in: Ray,
        rng: np.random.Generator,
    ) -> ScatterResult | None:
        return scatter_metal(self.albedo, self.fuzz, ray_in, rec, rng)

    def attenuation(self) -> Color:
        return self.albedo
