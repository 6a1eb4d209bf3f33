"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from aurorascope.bands import create_bands
from aurorascope.base import AuroraConfig
from aurorascope.canvas import DrawingContext
from aurorascope.noise import NoiseEngine

TEST_SEED = 1234


class RecordingContext(DrawingContext):
    """Drawing context that records every call instead of rasterizing."""

    def __init__(self):
        self.calls = []
        self.fill_style = None
        self.fills = []

    def resize(self, width, height):
        self.calls.append(("resize", width, height))

    def clear_rect(self, x, y, width, height):
        self.calls.append(("clear_rect", x, y, width, height))

    def begin_path(self):
        self.calls.append(("begin_path",))

    def move_to(self, x, y):
        self.calls.append(("move_to", x, y))

    def line_to(self, x, y):
        self.calls.append(("line_to", x, y))

    def quadratic_curve_to(self, cpx, cpy, x, y):
        self.calls.append(("quadratic_curve_to", cpx, cpy, x, y))

    def close_path(self):
        self.calls.append(("close_path",))

    def fill(self):
        self.calls.append(("fill",))
        self.fills.append(self.fill_style)

    def names(self):
        return [c[0] for c in self.calls]


@pytest.fixture
def engine() -> NoiseEngine:
    """Noise engine with reproducible tables."""
    return NoiseEngine(TEST_SEED)


@pytest.fixture
def bands():
    """The default band table with reproducible phase offsets."""
    return create_bands(rng=np.random.default_rng(TEST_SEED))


@pytest.fixture
def recording_context() -> RecordingContext:
    return RecordingContext()


@pytest.fixture
def small_config() -> AuroraConfig:
    """Tiny output so rasterizing tests stay fast."""
    return AuroraConfig(width=160, height=90, fps=30, seed=TEST_SEED)
