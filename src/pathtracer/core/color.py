"""Color values and per-pixel sample accumulation.

Colors carry linear light energy in three float channels. While samples are
being summed the channels are unbounded; only PixelAccumulator.combine_samples()
maps them into displayable 8-bit values:

    1. divide the running sum by the number of samples,
    2. gamma-correct for gamma=2 (square root per channel),
    3. clamp into [0, 0.999] and scale by 256, truncating to an integer.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp x into [lo, hi]."""
    if x < lo:
        return lo
    if x > hi:
        return hi
    return x


@dataclass(frozen=True, slots=True)
class Color:
    """Linear RGB color.

    Attributes:
        r: Red channel.
        g: Green channel.
        b: Blue channel.
    """

    r: float
    g: float
    b: float

    @classmethod
    def black(cls) -> Color:
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def white(cls) -> Color:
        return cls(1.0, 1.0, 1.0)

    @classmethod
    def sky_blue(cls) -> Color:
        """Zenith color of the background gradient."""
        return cls(0.5, 0.7, 1.0)

    @classmethod
    def from_sequence(cls, values) -> Color:
        """Build a color from any 3-element sequence.

        Raises:
            ValueError: If the sequence does not hold exactly three values.
        """
        if len(values) != 3:
            raise ValueError(f"Expected 3 color channels, got {len(values)}")
        return cls(float(values[0]), float(values[1]), float(values[2]))

    def __add__(self, other: Color) -> Color:
        return Color(self.r + other.r, self.g + other.g, self.b + other.b)

    def __mul__(self, other: Color | float) -> Color:
        # Color * Color attenuates channel-wise, Color * float scales
        if isinstance(other, Color):
            return Color(self.r * other.r, self.g * other.g, self.b * other.b)
        return Color(self.r * other, self.g * other, self.b * other)

    __rmul__ = __mul__

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.r, self.g, self.b)


def lerp(start: Color, end: Color, t: float) -> Color:
    """Linear blend (1 - t) * start + t * end."""
    return (1.0 - t) * start + t * end


class PixelAccumulator:
    """Running sum of color samples for a single pixel.

    Example:
        >>> acc = PixelAccumulator()
        >>> acc.add_sample(Color(0.25, 0.25, 0.25))
        >>> acc.combine_samples(1)
        (128, 128, 128)
    """

    __slots__ = ("r", "g", "b")

    def __init__(self) -> None:
        self.r = 0.0
        self.g = 0.0
        self.b = 0.0

    def add_sample(self, color: Color) -> None:
        """Add one sample to the sum. No clamping happens here."""
        self.r += color.r
        self.g += color.g
        self.b += color.b

    def combine_samples(self, samples_per_pixel: int) -> tuple[int, int, int]:
        """Average, gamma-correct and quantize the accumulated samples.

        Args:
            samples_per_pixel: Number of samples that were added.

        Returns:
            Tuple of (R, G, B) integers in [0, 255].

        Raises:
            ValueError: If samples_per_pixel is not positive.
        """
        if samples_per_pixel <= 0:
            raise ValueError(
                f"samples_per_pixel must be positive, got {samples_per_pixel}"
            )
        scale = 1.0 / samples_per_pixel
        return (
            _to_byte(self.r * scale),
            _to_byte(self.g * scale),
            _to_byte(self.b * scale),
        )


def _to_byte(value: float) -> int:
    # max() guards sqrt against tiny negative sums from float error
    return int(256.0 * clamp(math.sqrt(max(value, 0.0)), 0.0, 0.999))


def quantize_image(averaged: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Array form of combine_samples() for an image of averaged samples.

    Args:
        averaged: Float array of shape (..., 3) holding per-pixel means.

    Returns:
        Array of the same shape with dtype uint8.
    """
    gamma = np.sqrt(np.maximum(averaged, 0.0))
    return (256.0 * np.clip(gamma, 0.0, 0.999)).astype(np.uint8)
