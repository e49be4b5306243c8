"""Materials module for surface scattering models.

This module implements the closed set of material models:

Components:
    base: MaterialType tags, ScatterResult and albedo validation
    lambertian: Ideal diffuse (Lambertian) reflection
    metal: Mirror reflection with optional fuzz

Each material provides:
    - scatter(): produce an outgoing ray and attenuation, or None if the
      ray is absorbed
    - attenuation(): the albedo tint applied to returning light

The path tracer dispatches on MaterialType through scatter_material(). Adding
a variant means adding a tag, a class with the two operations above and a
branch in scatter_material(), material_from_dict() and material_to_dict().
"""

from __future__ import annotations

from typing import Any, Union

import numpy as np

from pathtracer.core.color import Color
from pathtracer.core.ray import Ray
from pathtracer.geometry.hit_record import HitRecord
from pathtracer.materials.base import MaterialType, ScatterResult, validate_albedo
from pathtracer.materials.lambertian import Lambertian, scatter_lambertian
from pathtracer.materials.metal import Metal, scatter_metal

Material = Union[Lambertian, Metal]


def scatter_material(
    material: Material,
    rec: HitRecord,
    ray_in: Ray,
    rng: np.random.Generator,
) -> ScatterResult | None:
    """Dispatch to the appropriate material scattering function.

    Args:
        material: The material of the hit surface.
        rec: The hit record describing the intersection.
        ray_in: The incoming ray.
        rng: Generator for the stochastic part of the scatter.

    Returns:
        The scatter result, or None if the ray was absorbed.

    Raises:
        TypeError: If the material is not one of the known variants.
    """
    mat_type = material.material_type

    if mat_type == MaterialType.LAMBERTIAN:
        return scatter_lambertian(material.albedo, rec, rng)
    elif mat_type == MaterialType.METAL:
        return scatter_metal(material.albedo, material.fuzz, ray_in, rec, rng)

    raise TypeError(f"Unsupported material type: {mat_type!r}")


def material_to_dict(material: Material) -> dict[str, Any]:
    """Export a material to a JSON-friendly dictionary."""
    if material.material_type == MaterialType.LAMBERTIAN:
        return {"type": "lambertian", "albedo": list(material.albedo.to_tuple())}
    elif material.material_type == MaterialType.METAL:
        return {
            "type": "metal",
            "albedo": list(material.albedo.to_tuple()),
            "fuzz": material.fuzz,
        }
    raise TypeError(f"Unsupported material type: {material.material_type!r}")


def material_from_dict(data: dict[str, Any]) -> Material:
    """Build a material from its dictionary form.

    Args:
        data: Mapping with a "type" key ("lambertian" or "metal"), an
            "albedo" triple and, for metals, an optional "fuzz".

    Returns:
        The constructed material.

    Raises:
        ValueError: If the type is unknown or a parameter is invalid.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Material must be an object, got {type(data).__name__}")

    mat_type = str(data.get("type", "")).lower()
    try:
        if mat_type == "lambertian":
            albedo = Color.from_sequence(data.get("albedo", [0.5, 0.5, 0.5]))
            return Lambertian(albedo)
        elif mat_type == "metal":
            albedo = Color.from_sequence(data.get("albedo", [0.8, 0.8, 0.8]))
            return Metal(albedo, float(data.get("fuzz", 0.0)))
    except TypeError as e:
        raise ValueError(f"Invalid {mat_type} material: {e}") from e
    raise ValueError(f"Unknown material type: {mat_type}")


__all__ = [
    "Material",
    "MaterialType",
    "ScatterResult",
    "Lambertian",
    "Metal",
    "scatter_material",
    "scatter_lambertian",
    "scatter_metal",
    "material_from_dict",
    "material_to_dict",
    "validate_albedo",
]
