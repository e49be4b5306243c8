"""Taichi backend for the path tracer.

Renders the same scene model as the thread-pool driver, but inside a single
Taichi kernel that runs every pixel in parallel on the CPU or GPU. Scene and
sensor data are copied into preallocated Taichi fields (Structure of Arrays
layout) before each render.

Differences from the thread-pool driver:
    - The bounce chain is an iterative loop with a throughput product instead
      of recursion, since Taichi functions cannot recurse. Depth exhaustion
      and absorption both leave the path black, as in shade().
    - Random numbers come from ti.random(); the stream is fixed by
      ti.init(random_seed=...), not by RenderSettings.seed.
    - Arithmetic is 32-bit float.

Taichi must be initialized before this module is imported, since the fields
are allocated at import time.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, random_seed=7)
    >>> from pathtracer.core.kernels import render_kernel_image
    >>> from pathtracer.camera import Sensor
    >>> from pathtracer.config import RenderSettings
    >>> from pathtracer.scene import create_default_scene
    >>> settings = RenderSettings(samples_per_pixel=16)
    >>> pixels = render_kernel_image(
    ...     create_default_scene(), Sensor.from_settings(settings), settings
    ... )
"""

import logging
import time

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from pathtracer.camera.sensor import Sensor
from pathtracer.config import RenderSettings
from pathtracer.core.color import quantize_image
from pathtracer.core.vec3 import NEAR_ZERO_EPSILON
from pathtracer.materials import MaterialType
from pathtracer.scene.manager import Scene

logger = logging.getLogger(__name__)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# t_min and t_max for ray intersection
T_MIN = 0.001
T_MAX = 1e10

_LAMBERTIAN = int(MaterialType.LAMBERTIAN)
_METAL = int(MaterialType.METAL)

# =============================================================================
# Taichi Fields
# =============================================================================

# Maximum number of spheres supported in the scene
MAX_SPHERES = 256

# Maximum image dimensions (preallocated buffer size)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Sphere storage: Structure of Arrays layout
_sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
_sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
_sphere_kinds = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
_sphere_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
_sphere_fuzz = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
_num_spheres = ti.field(dtype=ti.i32, shape=())

# Sensor geometry
_sensor_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_sensor_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())
_sensor_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())
_sensor_lower_left = ti.Vector.field(3, dtype=ti.f32, shape=())

# Averaged linear color per pixel, indexed [row, column] with row 0 at the top
_image = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH))


# =============================================================================
# Upload (Python-side)
# =============================================================================


def upload_scene(scene: Scene) -> None:
    """Copy the scene's spheres and materials into the Taichi fields.

    Raises:
        RuntimeError: If the scene holds more than MAX_SPHERES spheres.
    """
    if len(scene) > MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

    for idx, sphere in enumerate(scene):
        material = sphere.material
        _sphere_centers[idx] = list(sphere.center.to_tuple())
        _sphere_radii[idx] = sphere.radius
        _sphere_kinds[idx] = int(material.material_type)
        _sphere_albedos[idx] = list(material.albedo.to_tuple())
        _sphere_fuzz[idx] = getattr(material, "fuzz", 0.0)

    _num_spheres[None] = len(scene)
    logger.debug("Uploaded %d spheres", len(scene))


def upload_sensor(sensor: Sensor) -> None:
    """Copy the sensor geometry into the Taichi fields."""
    _sensor_origin[None] = list(sensor.origin.to_tuple())
    _sensor_horizontal[None] = list(sensor.horizontal.to_tuple())
    _sensor_vertical[None] = list(sensor.vertical.to_tuple())
    _sensor_lower_left[None] = list(sensor.lower_left_corner.to_tuple())


def get_sphere_count() -> int:
    """Number of spheres currently uploaded."""
    return int(_num_spheres[None])


# =============================================================================
# Taichi Functions
# =============================================================================


@ti.func
def _near_zero(v: vec3) -> ti.i32:
    return (
        ti.abs(v.x) < NEAR_ZERO_EPSILON
        and ti.abs(v.y) < NEAR_ZERO_EPSILON
        and ti.abs(v.z) < NEAR_ZERO_EPSILON
    )


@ti.func
def _random_unit_vector() -> vec3:
    """Normalized rejection sample from the unit ball."""
    p = vec3(0.0, 0.0, 0.0)
    found = False
    # Bounded so the loop always terminates
    for _ in range(100):
        if not found:
            p = vec3(
                ti.random(ti.f32) * 2.0 - 1.0,
                ti.random(ti.f32) * 2.0 - 1.0,
                ti.random(ti.f32) * 2.0 - 1.0,
            )
            len_sq = tm.dot(p, p)
            if len_sq < 1.0 and len_sq > 1e-12:
                found = True
    return tm.normalize(p)


@ti.func
def _hit_sphere(
    idx: ti.i32,
    origin: vec3,
    direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
):
    """Nearest root of sphere idx strictly inside (t_min, t_max).

    Returns:
        (hit, t) where hit is 1 if a root was accepted.
    """
    oc = origin - _sphere_centers[idx]
    radius = _sphere_radii[idx]

    a = tm.dot(direction, direction)
    b = 2.0 * tm.dot(direction, oc)
    c = tm.dot(oc, oc) - radius * radius
    discriminant = b * b - 4.0 * a * c

    hit = 0
    t = 0.0
    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        root = (-b - sqrt_d) / (2.0 * a)
        if (root > t_min) and (root < t_max):
            hit = 1
            t = root
        else:
            root = (-b + sqrt_d) / (2.0 * a)
            if (root > t_min) and (root < t_max):
                hit = 1
                t = root

    return hit, t


@ti.func
def _hit_scene(origin: vec3, direction: vec3, t_min: ti.f32, t_max: ti.f32):
    """Closest hit over all uploaded spheres.

    Returns:
        (index, t) with index -1 on a miss.
    """
    closest = t_max
    hit_index = -1
    for idx in range(_num_spheres[None]):
        hit, t = _hit_sphere(idx, origin, direction, t_min, closest)
        if hit == 1:
            closest = t
            hit_index = idx
    return hit_index, closest


@ti.func
def _scatter(idx: ti.i32, direction: vec3, normal: vec3):
    """Material scatter for sphere idx.

    Returns:
        (scattered_direction, attenuation, did_scatter).
    """
    kind = _sphere_kinds[idx]
    scattered = vec3(0.0, 0.0, 0.0)
    did_scatter = 1

    if kind == _LAMBERTIAN:
        scattered = normal + _random_unit_vector()
        if _near_zero(scattered):
            scattered = normal
    elif kind == _METAL:
        unit = tm.normalize(direction)
        reflected = unit - 2.0 * tm.dot(unit, normal) * normal
        scattered = reflected + _sphere_fuzz[idx] * _random_unit_vector()
        if tm.dot(scattered, normal) <= 0.0:
            did_scatter = 0
    else:
        did_scatter = 0

    return scattered, _sphere_albedos[idx], did_scatter


@ti.func
def _trace(origin: vec3, direction: vec3, max_depth: ti.i32) -> vec3:
    """Iterative equivalent of the recursive shade()."""
    ray_origin = origin
    ray_direction = direction
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)

    # Active flag for path continuation (no break in ti.func loops)
    active = 1

    for _ in range(max_depth):
        if active == 1:
            idx, t = _hit_scene(ray_origin, ray_direction, T_MIN, T_MAX)

            if idx < 0:
                unit = tm.normalize(ray_direction)
                s = 0.5 * (unit.y + 1.0)
                sky = (1.0 - s) * vec3(1.0, 1.0, 1.0) + s * vec3(0.5, 0.7, 1.0)
                color = throughput * sky
                active = 0
            else:
                point = ray_origin + t * ray_direction
                normal = (point - _sphere_centers[idx]) / _sphere_radii[idx]
                scattered, attenuation, did_scatter = _scatter(idx, ray_direction, normal)

                if did_scatter == 0:
                    # Absorbed
                    active = 0
                else:
                    throughput *= attenuation
                    ray_origin = point
                    ray_direction = scattered

    # Paths still active here ran out of depth and stay black
    return color


# =============================================================================
# Rendering Kernel
# =============================================================================


@ti.kernel
def _render_kernel(
    width: ti.i32,
    height: ti.i32,
    samples_per_pixel: ti.i32,
    max_depth: ti.i32,
    u_span: ti.f32,
    v_span: ti.f32,
):
    for y, x in ti.ndrange(height, width):
        origin = _sensor_origin[None]
        acc = vec3(0.0, 0.0, 0.0)

        for _ in range(samples_per_pixel):
            u = (ti.cast(x, ti.f32) + ti.random(ti.f32)) / u_span
            v = (ti.cast(height - 1 - y, ti.f32) + ti.random(ti.f32)) / v_span
            direction = (
                _sensor_lower_left[None]
                + u * _sensor_horizontal[None]
                + v * _sensor_vertical[None]
                - origin
            )
            acc += _trace(origin, direction, max_depth)

        color = acc / ti.cast(samples_per_pixel, ti.f32)

        # Check for NaN/Inf and replace with zero
        for c in ti.static(range(3)):
            if tm.isnan(color[c]) or tm.isinf(color[c]):
                color[c] = 0.0

        _image[y, x] = color


# =============================================================================
# Python API
# =============================================================================


def render_kernel_image(
    scene: Scene,
    sensor: Sensor,
    settings: RenderSettings,
) -> npt.NDArray[np.uint8]:
    """Render the scene with the Taichi kernel.

    Args:
        scene: The objects to render.
        sensor: Camera geometry.
        settings: Image size and sampling parameters. workers, seed and
            work_unit do not apply to this backend.

    Returns:
        Array of shape (height, width, 3), dtype uint8, row 0 at the top.

    Raises:
        ValueError: If the settings are invalid or the image exceeds the
            maximum supported size.
        RuntimeError: If the scene exceeds MAX_SPHERES.
    """
    settings.validate()

    width = settings.image_width
    height = settings.image_height
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    upload_scene(scene)
    upload_sensor(sensor)

    logger.info(
        "Rendering %dx%d, %d spp, depth %d, %d objects on Taichi",
        width,
        height,
        settings.samples_per_pixel,
        settings.max_depth,
        len(scene),
    )
    t0 = time.perf_counter()

    _render_kernel(
        width,
        height,
        settings.samples_per_pixel,
        settings.max_depth,
        float(max(width - 1, 1)),
        float(max(height - 1, 1)),
    )
    averaged = _image.to_numpy()[:height, :width]

    logger.info("Render finished in %.2fs", time.perf_counter() - t0)
    return quantize_image(averaged)
