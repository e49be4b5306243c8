"""Tests for the Taichi kernel backend.

The kernel module allocates Taichi fields on import, so every test imports it
inside the test body, after the session fixture has called ti.init().
"""

import numpy as np
import pytest


def _settings(**overrides):
    from pathtracer.config import RenderSettings

    params = dict(image_width=32, samples_per_pixel=16, max_depth=6, seed=5)
    params.update(overrides)
    return RenderSettings(**params)


class TestUpload:
    """Tests for copying scenes into Taichi fields."""

    def test_sphere_count(self):
        from pathtracer.core.kernels import get_sphere_count, upload_scene
        from pathtracer.scene import create_default_scene

        upload_scene(create_default_scene())
        assert get_sphere_count() == 4

    def test_too_many_spheres(self):
        from pathtracer.core.color import Color
        from pathtracer.core.kernels import MAX_SPHERES, upload_scene
        from pathtracer.core.vec3 import Vec3
        from pathtracer.geometry import Sphere
        from pathtracer.materials import Lambertian
        from pathtracer.scene import Scene

        matte = Lambertian(Color(0.5, 0.5, 0.5))
        spheres = [
            Sphere(Vec3(float(i), 0.0, -5.0), 0.1, matte) for i in range(MAX_SPHERES + 1)
        ]
        with pytest.raises(RuntimeError, match="Maximum number of spheres"):
            upload_scene(Scene(spheres))


class TestRenderKernelImage:
    """Tests for render_kernel_image()."""

    def test_shape_and_dtype(self, sensor):
        from pathtracer.core.kernels import render_kernel_image
        from pathtracer.scene import create_default_scene

        settings = _settings()
        pixels = render_kernel_image(create_default_scene(), sensor, settings)
        assert pixels.shape == (settings.image_height, 32, 3)
        assert pixels.dtype == np.uint8

    def test_depth_zero_is_black(self, sensor):
        from pathtracer.core.kernels import render_kernel_image
        from pathtracer.scene import create_default_scene

        pixels = render_kernel_image(create_default_scene(), sensor, _settings(max_depth=0))
        assert np.all(pixels == 0)

    def test_empty_scene_matches_thread_backend(self, sensor):
        """Only the background is visible, so both backends agree closely."""
        from pathtracer.core.kernels import render_kernel_image
        from pathtracer.core.render import render_image
        from pathtracer.scene import Scene

        settings = _settings()
        kernel = render_kernel_image(Scene(), sensor, settings).astype(int)
        threads = render_image(Scene(), sensor, settings).astype(int)

        np.testing.assert_allclose(kernel, threads, atol=3)
        # Whiter towards the bottom of the image
        red = kernel[:, :, 0].mean(axis=1)
        assert np.all(np.diff(red) >= 0)

    def test_sphere_visible_at_center(self, sensor):
        from pathtracer.core.kernels import render_kernel_image
        from pathtracer.scene import Scene, create_single_sphere_scene

        settings = _settings()
        sphere = render_kernel_image(create_single_sphere_scene(), sensor, settings)
        empty = render_kernel_image(Scene(), sensor, settings)

        y, x = settings.image_height // 2, 16
        assert np.abs(sphere[y, x].astype(int) - empty[y, x].astype(int)).sum() > 60

    def test_oversized_image(self, sensor):
        from pathtracer.core.kernels import render_kernel_image
        from pathtracer.scene import Scene

        with pytest.raises(ValueError, match="exceed maximum supported"):
            render_kernel_image(Scene(), sensor, _settings(image_width=4000))

    def test_invalid_settings(self, sensor):
        from pathtracer.core.kernels import render_kernel_image
        from pathtracer.scene import Scene

        with pytest.raises(ValueError, match="samples_per_pixel"):
            render_kernel_image(Scene(), sensor, _settings(samples_per_pixel=0))
