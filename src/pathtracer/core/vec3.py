"""Three-component vector value type and random direction sampling.

This module provides the Vec3 value type used for points, directions and
offsets throughout the renderer, plus the rejection samplers used by the
material models for Monte Carlo scattering.

Vectors are immutable: every operation returns a new Vec3, so instances can be
shared freely between render workers.

Example:
    >>> import numpy as np
    >>> a = Vec3(1.0, 2.0, 2.0)
    >>> a.length()
    3.0
    >>> rng = np.random.default_rng(7)
    >>> d = random_unit_vector(rng)  # unit length, uniform over directions
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

# Per-component threshold under which a vector counts as degenerate
NEAR_ZERO_EPSILON = 1e-7


@dataclass(frozen=True, slots=True)
class Vec3:
    """An immutable 3D vector of floats.

    Attributes:
        x: First component.
        y: Second component.
        z: Third component.
    """

    x: float
    y: float
    z: float

    @classmethod
    def zero(cls) -> Vec3:
        """Return the zero vector."""
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def from_sequence(cls, values) -> Vec3:
        """Build a vector from any 3-element sequence (list, tuple, array).

        Raises:
            ValueError: If the sequence does not hold exactly three values.
        """
        if len(values) != 3:
            raise ValueError(f"Expected 3 components, got {len(values)}")
        return cls(float(values[0]), float(values[1]), float(values[2]))

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def __mul__(self, scalar: float) -> Vec3:
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vec3:
        return Vec3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def length_squared(self) -> float:
        """Squared Euclidean length; cheaper than length() for comparisons."""
        return self.x * self.x + self.y * self.y + self.z * self.z

    def length(self) -> float:
        """Euclidean length of the vector."""
        return math.sqrt(self.length_squared())

    def unit_vector(self) -> Vec3:
        """Return the vector scaled to unit length.

        The zero vector has no direction; dividing by its length yields NaN
        or raises, so callers must only normalize non-degenerate vectors.
        """
        return self / self.length()

    def near_zero(self) -> bool:
        """Return True if every component is within NEAR_ZERO_EPSILON of zero."""
        return (
            abs(self.x) < NEAR_ZERO_EPSILON
            and abs(self.y) < NEAR_ZERO_EPSILON
            and abs(self.z) < NEAR_ZERO_EPSILON
        )

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


def dot(a: Vec3, b: Vec3) -> float:
    """Dot product a . b."""
    return a.x * b.x + a.y * b.y + a.z * b.z


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


def random_in_unit_sphere(rng: np.random.Generator) -> Vec3:
    """Generate a random point strictly inside the unit sphere.

    Uses rejection sampling: each component is drawn uniformly from [-1, 1)
    until the point falls inside the sphere.

    Args:
        rng: The generator supplying uniform samples.

    Returns:
        A point with length_squared() < 1.
    """
    while True:
        x, y, z = rng.uniform(-1.0, 1.0, size=3)
        p = Vec3(float(x), float(y), float(z))
        if p.length_squared() < 1.0:
            return p


def random_unit_vector(rng: np.random.Generator) -> Vec3:
    """Generate a unit vector uniformly distributed over all directions.

    This is the normalized version of random_in_unit_sphere(). The origin
    itself is rejected so normalization never divides by zero.
    """
    while True:
        p = random_in_unit_sphere(rng)
        if not p.near_zero():
            return p.unit_vector()
