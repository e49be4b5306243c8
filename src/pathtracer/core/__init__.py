"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    vec3: Immutable 3D vector and random direction sampling
    ray: Ray data structure and mirror reflection
    color: Color values and per-pixel sample accumulation
    integrator: Recursive path tracing and pixel sampling
    thread_pool: Fixed-size worker pool
    render: Parallel render driver
    kernels: Taichi backend (needs ti.init() before import)

Everything except kernels runs on plain Python floats with NumPy random
generators, so any number of worker threads can share a scene.
"""

from .color import Color, PixelAccumulator, clamp, lerp, quantize_image
from .ray import Ray, reflect
from .vec3 import (
    NEAR_ZERO_EPSILON,
    Vec3,
    dot,
    random_in_unit_sphere,
    random_unit_vector,
)

# Note: integrator, render and kernels are NOT imported here to avoid circular
# imports (materials and geometry depend on this package). Import them
# directly, e.g. from pathtracer.core.render import render_image.

__all__ = [
    "Vec3",
    "dot",
    "random_in_unit_sphere",
    "random_unit_vector",
    "NEAR_ZERO_EPSILON",
    "Ray",
    "reflect",
    "Color",
    "PixelAccumulator",
    "clamp",
    "lerp",
    "quantize_image",
]
