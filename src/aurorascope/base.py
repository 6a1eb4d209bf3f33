"""
Base configuration for the Aurorascope engine.
"""

import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple


# Resolution profiles shared by the CLI entry points
PROFILES = {
    "low": {"width": 1280, "height": 720, "fps": 30, "quality": "fast"},
    "medium": {"width": 1920, "height": 1080, "fps": 60, "quality": "medium"},
    "high": {"width": 3840, "height": 2160, "fps": 60, "quality": "high"},
}

REDUCED_MOTION_ENV = "AURORA_REDUCED_MOTION"


@dataclass
class AuroraConfig:
    """Universal configuration for the aurora band background."""
    width: int = 1920
    height: int = 1080
    fps: int = 60

    # Bands are drawn on a smaller raster and stretched back up
    render_scale: float = 0.5
    soft_focus_radius: float = 0.0
    background_color: Tuple[int, int, int] = (250, 252, 250)

    # Rasterization quality
    supersample: int = 2
    curve_segments: int = 4

    seed: Optional[int] = None
    reduced_motion: bool = False

    def __post_init__(self):
        for name in ("width", "height", "fps"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.render_scale <= 0:
            raise ValueError(f"render_scale must be positive, got {self.render_scale}")

    def get_working_dims(
        self, width: Optional[int] = None, height: Optional[int] = None
    ) -> Tuple[int, int]:
        """Returns the (width, height) of the working raster for a viewport."""
        w = self.width if width is None else width
        h = self.height if height is None else height
        return (math.ceil(w * self.render_scale), math.ceil(h * self.render_scale))

    @classmethod
    def from_profile(cls, profile: str, **overrides) -> "AuroraConfig":
        if profile not in PROFILES:
            raise ValueError(
                f"Unknown profile {profile!r} (expected one of {', '.join(PROFILES)})"
            )
        p = PROFILES[profile]
        kwargs = {"width": p["width"], "height": p["height"], "fps": p["fps"]}
        kwargs.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**kwargs)


def prefers_reduced_motion(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Reads the reduced-motion preference once from the environment."""
    env = os.environ if environ is None else environ
    value = env.get(REDUCED_MOTION_ENV, "").strip().lower()
    return value in ("1", "true", "yes", "reduce", "on")
