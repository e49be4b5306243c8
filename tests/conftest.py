"""Pytest configuration for path tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import numpy as np
import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. The kernel backend
    allocates its fields on import, so it must only be imported after this.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture
def rng():
    """A seeded generator so stochastic tests are repeatable."""
    return np.random.default_rng(1234)


@pytest.fixture
def sensor():
    """The standard 16:9 sensor: viewport height 2, focal length 1."""
    from pathtracer.camera import Sensor

    return Sensor.from_viewport(2.0, 16.0 / 9.0, 1.0)
