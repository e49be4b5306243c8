"""Lambertian (ideal diffuse) material implementation.

A diffuse bounce picks the outgoing direction as the surface normal plus a
random unit vector. Offsetting a uniformly distributed unit vector by the
normal yields a cosine-weighted distribution over the hemisphere, so no
explicit pdf weighting is needed and the attenuation is simply the albedo.

Example:
    >>> import numpy as np
    >>> matte = Lambertian(Color(0.7, 0.3, 0.3))
    >>> # result = matte.scatter(hit_record, ray_in, np.random.default_rng(0))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

import numpy as np

from pathtracer.core.color import Color
from pathtracer.core.ray import Ray
from pathtracer.core.vec3 import random_unit_vector
from pathtracer.materials.base import MaterialType, ScatterResult, validate_albedo

if TYPE_CHECKING:
    from pathtracer.geometry.hit_record import HitRecord


def scatter_lambertian(
    albedo: Color,
    rec: HitRecord,
    rng: np.random.Generator,
) -> ScatterResult:
    """Sample a diffuse bounce. Never absorbs.

    Args:
        albedo: The diffuse reflectance color.
        rec: The hit being shaded.
        rng: Generator for the random direction.

    Returns:
        The scattered ray from the hit point and the albedo as attenuation.
    """
    direction = rec.normal + random_unit_vector(rng)

    # The random vector can cancel the normal almost exactly
    if direction.near_zero():
        direction = rec.normal

    return ScatterResult(Ray(rec.point, direction), albedo)


@dataclass(frozen=True, slots=True)
class Lambertian:
    """Lambertian (ideal diffuse) material properties.

    Attributes:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).
    """

    albedo: Color

    material_type: ClassVar[MaterialType] = MaterialType.LAMBERTIAN

    def __post_init__(self) -> None:
        validate_albedo(self.albedo)

    def scatter(
        self,
        rec: HitRecord,
        ray_in: Ray,
        rng: np.random.Generator,
    ) -> ScatterResult:
        """Scatter diffusely; the incoming direction does not matter."""
        return scatter_lambertian(self.albedo, rec, rng)

    def attenuation(self) -> Color:
        return self.albedo
