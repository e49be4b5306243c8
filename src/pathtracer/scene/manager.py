"""Scene container and scene file serialization.

A Scene is an immutable, ordered tuple of spheres. It is built once before a
render and shared read-only by every worker.

Scene files are JSON documents with a shared material table that spheres
reference by index:

    {
        "materials": [
            {"type": "lambertian", "albedo": [0.7, 0.3, 0.3]},
            {"type": "metal", "albedo": [0.8, 0.6, 0.2], "fuzz": 1.0}
        ],
        "spheres": [
            {"center": [0, 0, -1], "radius": 0.5, "material_id": 0},
            {"center": [1, 0, -1], "radius": 0.5, "material_id": 1}
        ]
    }

Example:
    >>> scene = load_scene("scenes/three_spheres.json")
    >>> len(scene)
    4
    >>> Scene.from_dict(scene.to_dict()) == scene
    True
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pathtracer.core.vec3 import Vec3
from pathtracer.geometry.sphere import Sphere
from pathtracer.materials import Material, material_from_dict, material_to_dict

logger = logging.getLogger(__name__)


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        materials: List of material configurations.
        spheres: List of sphere configurations.
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class Scene:
    """Ordered, immutable collection of scene objects.

    Attributes:
        objects: The spheres making up the scene.
    """

    objects: tuple[Sphere, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "objects", tuple(self.objects))

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[Sphere]:
        return iter(self.objects)

    def materials(self) -> list[Material]:
        """Distinct materials in first-use order."""
        seen: dict[Material, None] = {}
        for sphere in self.objects:
            seen.setdefault(sphere.material, None)
        return list(seen)

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object.

        Equal materials are written once and shared by index.
        """
        config = SceneConfig()
        material_ids: dict[Material, int] = {}

        for material in self.materials():
            material_ids[material] = len(config.materials)
            config.materials.append(material_to_dict(material))

        for sphere in self.objects:
            config.spheres.append(sphere.to_dict(material_ids[sphere.material]))

        return config

    @classmethod
    def from_config(cls, config: SceneConfig) -> Scene:
        """Build a scene from a configuration object.

        Raises:
            ValueError: If a material or sphere entry is invalid.
        """
        materials = []
        for i, material_config in enumerate(config.materials):
            try:
                materials.append(material_from_dict(material_config))
            except ValueError as e:
                raise ValueError(f"Material {i}: {e}") from e

        spheres = []
        for i, sphere_config in enumerate(config.spheres):
            if not isinstance(sphere_config, dict):
                raise ValueError(
                    f"Sphere {i}: must be an object, got {type(sphere_config).__name__}"
                )

            material_id = sphere_config.get("material_id", 0)
            if not isinstance(material_id, int) or not 0 <= material_id < len(materials):
                raise ValueError(f"Sphere {i}: invalid material_id: {material_id}")

            try:
                center = Vec3.from_sequence(sphere_config.get("center", [0.0, 0.0, 0.0]))
                radius = float(sphere_config.get("radius", 1.0))
                spheres.append(Sphere(center, radius, materials[material_id]))
            except (TypeError, ValueError) as e:
                raise ValueError(f"Sphere {i}: {e}") from e

        return cls(tuple(spheres))

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        config = self.to_config()
        return {
            "materials": config.materials,
            "spheres": config.spheres,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Scene:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'materials' and 'spheres' keys.

        Raises:
            ValueError: If the dictionary does not describe a valid scene.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Scene data must be an object, got {type(data).__name__}")
        materials = data.get("materials", [])
        spheres = data.get("spheres", [])
        for key, value in (("materials", materials), ("spheres", spheres)):
            if not isinstance(value, list):
                raise ValueError(f"'{key}' must be a list, got {type(value).__name__}")

        config = SceneConfig(materials=list(materials), spheres=list(spheres))
        return cls.from_config(config)


def load_scene(path: str | Path) -> Scene:
    """Read a scene from a JSON file.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not valid JSON or not a valid scene.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    scene = Scene.from_dict(data)
    logger.info("Loaded scene %s: %d objects", path, len(scene))
    return scene


def save_scene(scene: Scene, path: str | Path) -> None:
    """Write a scene to a JSON file."""
    path = Path(path)
    with path.open("w", encoding="utf-8") as f:
        json.dump(scene.to_dict(), f, indent=2)
    logger.info("Saved scene %s: %d objects", path, len(scene))
