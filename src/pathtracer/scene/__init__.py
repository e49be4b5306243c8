"""Scene module for scene management and ray-scene queries.

Components:
    manager: Immutable Scene container and JSON scene files
    intersection: Closest-hit query over a scene
    presets: Built-in scenes

Scenes are constructed once before rendering and shared read-only by every
render worker. Traversal is a brute-force linear scan.
"""

from .intersection import hit_scene
from .manager import Scene, SceneConfig, load_scene, save_scene
from .presets import create_default_scene, create_single_sphere_scene

__all__ = [
    # Manager module
    "Scene",
    "SceneConfig",
    "load_scene",
    "save_scene",
    # Intersection module
    "hit_scene",
    # Presets module
    "create_default_scene",
    "create_single_sphere_scene",
]
