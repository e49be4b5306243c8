"""Built-in scenes.

The default scene is the classic four-sphere setup: a large yellowish ground
sphere, a matte red sphere in the center flanked by a fuzzy silver metal
sphere on the left and a rough gold metal sphere on the right.

Example:
    >>> from pathtracer.camera import Sensor
    >>> scene = create_default_scene()
    >>> sensor = Sensor.from_viewport(2.0, 16.0 / 9.0, 1.0)
    >>> # Now render using the scene and sensor
"""

from pathtracer.core.color import Color
from pathtracer.core.vec3 import Vec3
from pathtracer.geometry.sphere import Sphere
from pathtracer.materials import Lambertian, Metal
from pathtracer.scene.manager import Scene

GROUND_RADIUS = 100.0
SPHERE_RADIUS = 0.5


def create_default_scene() -> Scene:
    """Ground, diffuse center, fuzzy-metal left and rough-metal right."""
    ground = Lambertian(Color(0.8, 0.8, 0.0))
    center = Lambertian(Color(0.7, 0.3, 0.3))
    left = Metal(Color(0.8, 0.8, 0.8), fuzz=0.3)
    right = Metal(Color(0.8, 0.6, 0.2), fuzz=1.0)

    return Scene(
        (
            Sphere(Vec3(0.0, -100.5, -1.0), GROUND_RADIUS, ground),
            Sphere(Vec3(0.0, 0.0, -1.0), SPHERE_RADIUS, center),
            Sphere(Vec3(-1.0, 0.0, -1.0), SPHERE_RADIUS, left),
            Sphere(Vec3(1.0, 0.0, -1.0), SPHERE_RADIUS, right),
        )
    )


def create_single_sphere_scene(material=None) -> Scene:
    """One sphere of radius 0.5 at (0, 0, -1) and nothing else.

    Args:
        material: Surface material. Defaults to the matte red used in the
            center of the default scene.
    """
    if material is None:
        material = Lambertian(Color(0.7, 0.3, 0.3))
    return Scene((Sphere(Vec3(0.0, 0.0, -1.0), SPHERE_RADIUS, material),))
