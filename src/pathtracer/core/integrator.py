"""Recursive path tracing integrator.

A camera ray is followed through the scene: at each surface the material
either scatters the ray (the returned light is tinted by the attenuation) or
absorbs it. Rays that escape the scene pick up the sky gradient. The depth
counter is the only bound on the bounce chain.

Key features:
    - Closest-hit scene traversal with a small t_min against shadow acne
    - Material dispatch (Lambertian, Metal)
    - Vertical white-to-blue sky gradient as the only light source
    - Jittered multi-sample antialiasing with gamma-2 output

Example:
    >>> import numpy as np
    >>> from pathtracer.camera import Sensor
    >>> from pathtracer.scene import create_default_scene
    >>> scene = create_default_scene()
    >>> sensor = Sensor.from_viewport(2.0, 16.0 / 9.0, 1.0)
    >>> rgb = sample_pixel(200, 112, 400, 225, scene, sensor, 10, 50,
    ...                    np.random.default_rng(0))
"""

from __future__ import annotations

import math
from collections.abc import Iterable

import numpy as np

from pathtracer.camera.sensor import Sensor
from pathtracer.core.color import Color, PixelAccumulator, lerp
from pathtracer.core.ray import Ray
from pathtracer.geometry.sphere import Sphere
from pathtracer.materials import scatter_material
from pathtracer.scene.intersection import hit_scene

# =============================================================================
# Rendering Constants
# =============================================================================

# t_min and t_max for ray intersection
T_MIN = 0.001
T_MAX = math.inf


def background_color(ray: Ray) -> Color:
    """Sky gradient seen by a ray that escapes the scene.

    Blends white at the horizon-down end into sky blue at the zenith using the
    vertical component of the unit direction.
    """
    unit_direction = ray.unit_vector()
    t = 0.5 * (unit_direction.y + 1.0)
    return lerp(Color.white(), Color.sky_blue(), t)


def shade(
    ray: Ray,
    scene: Iterable[Sphere],
    depth: int,
    rng: np.random.Generator,
) -> Color:
    """Resolve the color carried back along a ray.

    Args:
        ray: The ray to trace.
        scene: The objects to test against.
        depth: Remaining bounce budget. 0 returns black immediately.
        rng: Generator for material scattering.

    Returns:
        The (unclamped) linear color arriving along the ray.
    """
    if depth <= 0:
        return Color.black()

    rec = hit_scene(scene, ray, T_MIN, T_MAX)
    if rec is None:
        return background_color(ray)

    result = scatter_material(rec.material, rec, ray, rng)
    if result is None:
        return Color.black()

    return result.attenuation * shade(result.ray, scene, depth - 1, rng)


def sample_pixel(
    x: int,
    y: int,
    width: int,
    height: int,
    scene: Iterable[Sphere],
    sensor: Sensor,
    samples_per_pixel: int,
    max_depth: int,
    rng: np.random.Generator,
) -> tuple[int, int, int]:
    """Trace one pixel with jittered samples and combine to 8-bit RGB.

    Row 0 is the top of the image, so v runs from the bottom row up:

        u = (x + xi) / (width - 1)
        v = (height - 1 - y + xi) / (height - 1)

    Args:
        x: Column index, 0 at the left.
        y: Row index, 0 at the top.
        width: Image width in pixels.
        height: Image height in pixels.
        scene: The objects to render.
        sensor: Camera geometry.
        samples_per_pixel: Number of jittered samples to average.
        max_depth: Bounce budget for each sample.
        rng: Generator for jitter and scattering.

    Returns:
        The gamma-corrected (r, g, b) bytes.
    """
    # Single-pixel dimensions would divide by zero
    u_span = max(width - 1, 1)
    v_span = max(height - 1, 1)

    accumulator = PixelAccumulator()
    for _ in range(samples_per_pixel):
        u = (x + rng.random()) / u_span
        v = (height - 1 - y + rng.random()) / v_span
        ray = sensor.get_ray(u, v)
        accumulator.add_sample(shade(ray, scene, max_depth, rng))

    return accumulator.combine_samples(samples_per_pixel)
