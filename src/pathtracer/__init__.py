"""Recursive sphere path tracer.

Renders a small scene of spheres (matte and metal) lit by a sky gradient,
spreading scanlines over a pool of worker threads. A Taichi kernel backend
renders the same scenes on CPU or GPU.

Subpackages:
    core: Vectors, rays, colors, the integrator and the render drivers
    geometry: Sphere primitive and intersection records
    materials: Lambertian and metal scattering
    scene: Scene container, traversal, scene files and presets
    camera: Sensor model with ray generation
    preview: PNG export and Matplotlib preview
"""

__version__ = "0.1.0"
