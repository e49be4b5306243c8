"""Geometry module for scene primitives.

Components:
    hit_record: Mutable intersection record shared by primitives and materials
    sphere: Sphere primitive with closest-root ray intersection

Spheres are the only primitive. Each carries its own material, and the scene
module scans them linearly for the closest hit.
"""

from .hit_record import HitRecord
from .sphere import Sphere

__all__ = [
    "HitRecord",
    "Sphere",
]
