"""End-to-end tests for the parallel render driver.

Tests cover:
- Image shape and orientation
- Identical images for any worker count and work unit given a seed
- Progress callback and per-scanline logging
- Error propagation
"""

import logging
import threading
import time

import numpy as np
import pytest


def _settings(**overrides):
    from pathtracer.config import RenderSettings

    params = dict(image_width=32, samples_per_pixel=2, max_depth=6, seed=3, workers=4)
    params.update(overrides)
    return RenderSettings(**params)


def _render(scene=None, **overrides):
    from pathtracer.camera import Sensor
    from pathtracer.core.render import render_image
    from pathtracer.scene import create_default_scene

    settings = _settings(**overrides)
    if scene is None:
        scene = create_default_scene()
    return render_image(scene, Sensor.from_settings(settings), settings)


class TestRenderImage:
    """Tests for render_image()."""

    def test_shape_and_dtype(self):
        pixels = _render()
        assert pixels.shape == (_settings().image_height, 32, 3)
        assert pixels.dtype == np.uint8

    def test_sky_at_top_ground_at_bottom(self):
        """Row 0 is the top of the image."""
        pixels = _render().astype(int)
        top, bottom = pixels[0], pixels[-1]
        # Sky is blue-dominant, the yellow ground has almost no blue
        assert np.all(top[:, 2] >= top[:, 0])
        assert bottom[:, 2].mean() < bottom[:, 0].mean()

    def test_empty_scene_is_gradient(self):
        from pathtracer.scene import Scene

        pixels = _render(scene=Scene()).astype(int)
        # Red fades from white at the bottom to 0.5 at the top
        assert pixels[0, :, 0].mean() < pixels[-1, :, 0].mean()
        assert np.all(pixels[:, :, 2] == 255)

    @pytest.mark.parametrize("work_unit", ["row", "pixel"])
    def test_worker_count_does_not_change_image(self, work_unit):
        one = _render(workers=1, work_unit=work_unit)
        eight = _render(workers=8, work_unit=work_unit)
        np.testing.assert_array_equal(one, eight)

    def test_work_unit_does_not_change_image(self):
        np.testing.assert_array_equal(_render(work_unit="row"), _render(work_unit="pixel"))

    def test_seed_changes_image(self):
        assert not np.array_equal(_render(seed=1), _render(seed=2))

    def test_depth_zero_is_black(self):
        assert np.all(_render(max_depth=0) == 0)


class TestProgress:
    """Tests for progress reporting."""

    @pytest.mark.parametrize("work_unit", ["row", "pixel"])
    def test_callback_once_per_row(self, work_unit):
        from pathtracer.camera import Sensor
        from pathtracer.core.render import render_image
        from pathtracer.scene import create_default_scene

        settings = _settings(image_width=16, work_unit=work_unit)
        calls = []
        render_image(
            create_default_scene(),
            Sensor.from_settings(settings),
            settings,
            callback=lambda done, total: calls.append((done, total)),
        )

        height = settings.image_height
        assert calls == [(i, height) for i in range(1, height + 1)]

    def test_scanlines_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="pathtracer.core.render"):
            _render(image_width=16)

        scanlines = [r for r in caplog.records if r.getMessage().startswith("Scanline")]
        assert len(scanlines) == _settings(image_width=16).image_height


class TestErrors:
    """Tests for error handling."""

    def test_zero_workers(self):
        from pathtracer.core.thread_pool import PoolCreationError

        with pytest.raises(PoolCreationError):
            _render(workers=0)

    def test_invalid_settings(self):
        with pytest.raises(ValueError, match="samples_per_pixel"):
            _render(samples_per_pixel=0)

    def test_worker_exception_propagates(self, monkeypatch):
        from pathtracer.core import render

        def broken(*args):
            raise RuntimeError("worker failed")

        monkeypatch.setattr(render, "sample_pixel", broken)
        with pytest.raises(RuntimeError, match="worker failed"):
            _render(workers=2)

    def test_worker_exception_abandons_remaining_rows(self, monkeypatch):
        """Rows still queued when a worker fails are never rendered."""
        from pathtracer.core import render

        rendered_rows = set()
        lock = threading.Lock()

        def fail_first_row(x, y, *args):
            if y == 0:
                raise RuntimeError("worker failed")
            time.sleep(0.01)
            with lock:
                rendered_rows.add(y)
            return (0, 0, 0)

        monkeypatch.setattr(render, "sample_pixel", fail_first_row)
        with pytest.raises(RuntimeError, match="worker failed"):
            _render(workers=1, image_width=16)

        assert len(rendered_rows) < _settings(image_width=16).image_height - 1


class TestPixelRng:
    """Tests for per-pixel random streams."""

    def test_seeded_streams_repeat(self):
        from pathtracer.core.render import pixel_rng

        assert pixel_rng(7, 3, 4).random() == pixel_rng(7, 3, 4).random()

    def test_seeded_streams_differ_per_pixel(self):
        from pathtracer.core.render import pixel_rng

        assert pixel_rng(7, 3, 4).random() != pixel_rng(7, 4, 3).random()

    def test_unseeded(self):
        from pathtracer.core.render import pixel_rng

        assert isinstance(pixel_rng(None, 0, 0), np.random.Generator)
