"""Scene-level closest-hit query.

Scenes are scanned linearly (no acceleration structure). Every accepted hit
narrows the upper bound of the search interval, so the surviving record is
always the nearest surface regardless of the order objects were added in.

Example:
    >>> from pathtracer.scene import create_single_sphere_scene
    >>> scene = create_single_sphere_scene()
    >>> rec = hit_scene(scene, Ray(Vec3.zero(), Vec3(0.0, 0.0, -1.0)), 0.001, math.inf)
    >>> rec.t
    0.5
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from pathtracer.core.ray import Ray
from pathtracer.geometry.hit_record import HitRecord

if TYPE_CHECKING:
    from pathtracer.geometry.sphere import Sphere


def hit_scene(
    scene: Iterable[Sphere],
    ray: Ray,
    t_min: float,
    t_max: float,
) -> HitRecord | None:
    """Find the closest intersection of a ray with any object in the scene.

    Args:
        scene: The objects to test, in any order.
        ray: The ray to trace.
        t_min: Lower bound (exclusive) of the accepted ray parameter.
        t_max: Upper bound (exclusive) of the accepted ray parameter.

    Returns:
        The record of the nearest hit, or None if nothing was hit.
    """
    rec = HitRecord()
    hit_anything = False
    closest_so_far = t_max

    for obj in scene:
        if obj.hit(ray, t_min, closest_so_far, rec):
            hit_anything = True
            closest_so_far = rec.t

    return rec if hit_anything else None
