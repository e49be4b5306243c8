"""Sphere primitive and ray-sphere intersection.

The intersection solves

    |origin + t * direction - center|^2 = radius^2

which expands to the quadratic a*t^2 + b*t + c = 0 with:

    a = dot(direction, direction)
    b = 2 * dot(direction, oc)
    c = dot(oc, oc) - radius^2
    oc = origin - center

The near root is tried first so the visible surface wins over the far side of
the same sphere. Tangent rays (zero discriminant) yield a single root and are
accepted like any other hit.

Example:
    >>> from pathtracer.core.color import Color
    >>> from pathtracer.materials import Lambertian
    >>> ball = Sphere(Vec3(0.0, 0.0, -1.0), 0.5, Lambertian(Color(0.7, 0.3, 0.3)))
    >>> rec = HitRecord()
    >>> ball.hit(Ray(Vec3.zero(), Vec3(0.0, 0.0, -1.0)), 0.001, math.inf, rec)
    True
    >>> rec.t
    0.5
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pathtracer.core.ray import Ray
from pathtracer.core.vec3 import Vec3, dot
from pathtracer.geometry.hit_record import HitRecord

if TYPE_CHECKING:
    from pathtracer.materials import Material


@dataclass(frozen=True, slots=True)
class Sphere:
    """A sphere defined by center point, radius and surface material.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive float).
        material: The material shading every point of the surface.
    """

    center: Vec3
    radius: float
    material: Material

    def __post_init__(self) -> None:
        if not self.radius > 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")

    def hit(self, ray: Ray, t_min: float, t_max: float, rec: HitRecord) -> bool:
        """Test the ray against this sphere.

        Args:
            ray: The ray to test. The direction need not be normalized.
            t_min: Lower bound (exclusive) of the accepted ray parameter.
            t_max: Upper bound (exclusive) of the accepted ray parameter.
            rec: Record overwritten on a hit. Left untouched on a miss.

        Returns:
            True if a root lies strictly inside (t_min, t_max).
        """
        oc = ray.origin - self.center
        a = ray.direction.length_squared()
        b = 2.0 * dot(ray.direction, oc)
        c = oc.length_squared() - self.radius * self.radius

        discriminant = b * b - 4.0 * a * c
        if discriminant < 0.0:
            return False

        sqrt_d = math.sqrt(discriminant)

        root = (-b - sqrt_d) / (2.0 * a)
        if not t_min < root < t_max:
            root = (-b + sqrt_d) / (2.0 * a)
            if not t_min < root < t_max:
                return False

        point = ray.at(root)
        outward_normal = (point - self.center) / self.radius

        rec.t = root
        rec.point = point
        rec.normal = outward_normal
        rec.front_face = dot(ray.direction, outward_normal) < 0.0
        rec.material = self.material
        return True

    def to_dict(self, material_id: int) -> dict:
        """Export to the scene file form, referencing a material by index."""
        return {
            "center": list(self.center.to_tuple()),
            "radius": self.radius,
            "material_id": material_id,
        }
