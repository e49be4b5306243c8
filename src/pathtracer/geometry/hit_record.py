"""Intersection record shared by primitives, scene traversal and materials."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pathtracer.core.vec3 import Vec3

if TYPE_CHECKING:
    from pathtracer.materials import Material


@dataclass(slots=True)
class HitRecord:
    """Record of a ray-surface intersection.

    The record is mutable scratch space: scene traversal hands the same record
    to every primitive and only an accepted hit overwrites it.

    Attributes:
        point: The 3D point where the ray intersected the surface.
        normal: The outward unit normal at the intersection point. For a ray
            that struck the exterior this points back against the ray.
        t: The parameter value along the ray where intersection occurred.
        front_face: True if the ray arrived from outside the surface.
        material: The material of the surface that was hit.
    """

    point: Vec3 = field(default_factory=Vec3.zero)
    normal: Vec3 = field(default_factory=Vec3.zero)
    t: float = 0.0
    front_face: bool = True
    material: Material | None = None
