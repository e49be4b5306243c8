"""Ray data structure.

A ray is the parametric line P(t) = origin + t * direction. The direction is
not normalized on construction; code that needs a unit direction asks for it
explicitly with unit_vector().

Example:
    >>> ray = Ray(Vec3(0.0, 0.0, 0.0), Vec3(0.0, 0.0, -2.0))
    >>> ray.at(0.5)
    Vec3(x=0.0, y=0.0, z=-1.0)
"""

from __future__ import annotations

from dataclasses import dataclass

from pathtracer.core.vec3 import Vec3, dot


@dataclass(frozen=True, slots=True)
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction vector of the ray. Not required to be
            normalized.
    """

    origin: Vec3
    direction: Vec3

    def at(self, t: float) -> Vec3:
        """Compute the point along the ray at parameter t.

        Args:
            t: The parameter value. Positive values are in front of the origin.

        Returns:
            The point origin + t * direction.
        """
        return self.origin + t * self.direction

    def unit_vector(self) -> Vec3:
        """Return the ray direction scaled to unit length."""
        return self.direction.unit_vector()


def reflect(incident: Vec3, normal: Vec3) -> Vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        incident - 2 * dot(incident, normal) * normal.
    """
    return incident - 2.0 * dot(incident, normal) * normal
