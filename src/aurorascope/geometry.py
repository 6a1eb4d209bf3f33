"""
Band geometry sampling.

Turns a band and a frame time into top/bottom edge points across the
working raster, layering three noise octaves for the centre line and a
fourth channel for thickness.
"""

import math
from dataclasses import dataclass
from typing import Iterator, Tuple

import numpy as np

from aurorascope.bands import BandModel
from aurorascope.noise import NoiseEngine

# Horizontal distance between samples, in working-raster pixels
SAMPLE_STEP = 3

# (spatial multiplier, weight, phase constant, time multiplier, z plane)
OCTAVES = (
    (2.0, 1.0, 0.0, 1.0, 0.0),
    (4.0, 0.5, 50.0, 1.5, 0.5),
    (8.0, 0.25, 100.0, 0.7, 1.0),
)


@dataclass(frozen=True)
class GeometrySample:
    """Edge points of one band for one frame. Built fresh every frame."""
    x: np.ndarray
    top: np.ndarray
    bottom: np.ndarray

    def __len__(self) -> int:
        return len(self.x)

    def __iter__(self) -> Iterator[Tuple[float, float, float]]:
        return zip(self.x.tolist(), self.top.tolist(), self.bottom.tolist())

    @property
    def mean_top(self) -> float:
        return float(self.top.mean())

    @property
    def mean_bottom(self) -> float:
        return float(self.bottom.mean())


def sample_count(width: int) -> int:
    """Number of intervals N for a raster width; N + 1 points are emitted."""
    return max(1, math.ceil(width / SAMPLE_STEP))


def build_geometry(
    band: BandModel,
    noise: NoiseEngine,
    time: float,
    width: int,
    height: int,
) -> GeometrySample:
    """
    Sample a band's shape across the full raster width.

    Args:
        band: Band to sample.
        noise: Shared noise engine.
        time: Frame counter value.
        width: Current working raster width.
        height: Current working raster height.

    Returns:
        GeometrySample with ``ceil(width / 3) + 1`` points from x=0 to x=width.
    """
    steps = sample_count(width)
    t = band.local_time(time)
    offset = band.phase_offset

    x_norm = np.arange(steps + 1, dtype=np.float64) / steps
    x = x_norm * width

    wave = np.zeros_like(x_norm)
    for spatial, weight, phase, time_mult, plane in OCTAVES:
        n = noise.sample_many(
            x_norm * band.frequency * spatial + offset + phase,
            t * time_mult,
            plane,
        )
        wave += n * weight

    y_center = band.vertical_position_fraction * height + wave * band.amplitude_fraction * height

    # Thickness undulates between 0.4x and 1.2x nominal
    thick_noise = noise.sample_many(x_norm * 3 + offset + 200, t * 0.5, 2.0)
    thickness = band.thickness_fraction * height * (0.8 + thick_noise * 0.4)

    top = y_center - thickness / 2
    bottom = y_center + thickness / 2

    assert len(x) == steps + 1
    assert np.all(top < bottom), "band collapsed to zero thickness"
    return GeometrySample(x=x, top=top, bottom=bottom)
