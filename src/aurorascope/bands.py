"""
Band configuration.

Each band is an immutable ribbon definition plus a random phase offset
that keeps bands sharing a frequency/speed from reading the same noise.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import numpy as np

from aurorascope.noise import SeedLike

PHASE_RANGE = 1000.0

# Soft greens and teals, drawn back to front
DEFAULT_BANDS: List[Dict[str, Any]] = [
    {"color": (56, 200, 97), "alpha": 0.22, "thickness_fraction": 0.35, "vertical_position_fraction": 0.12, "speed": 1.0, "frequency": 1.0, "amplitude_fraction": 0.10},
    {"color": (34, 197, 152), "alpha": 0.18, "thickness_fraction": 0.30, "vertical_position_fraction": 0.25, "speed": 0.7, "frequency": 1.3, "amplitude_fraction": 0.12},
    {"color": (16, 185, 129), "alpha": 0.25, "thickness_fraction": 0.40, "vertical_position_fraction": 0.38, "speed": 0.5, "frequency": 0.8, "amplitude_fraction": 0.14},
    {"color": (72, 190, 220), "alpha": 0.16, "thickness_fraction": 0.28, "vertical_position_fraction": 0.50, "speed": 0.9, "frequency": 1.1, "amplitude_fraction": 0.11},
    {"color": (99, 220, 130), "alpha": 0.20, "thickness_fraction": 0.38, "vertical_position_fraction": 0.62, "speed": 0.6, "frequency": 0.9, "amplitude_fraction": 0.13},
    {"color": (45, 160, 200), "alpha": 0.15, "thickness_fraction": 0.25, "vertical_position_fraction": 0.72, "speed": 1.1, "frequency": 1.4, "amplitude_fraction": 0.09},
    {"color": (110, 230, 183), "alpha": 0.18, "thickness_fraction": 0.32, "vertical_position_fraction": 0.85, "speed": 0.8, "frequency": 1.0, "amplitude_fraction": 0.12},
]

# Compact keys used by the web deployment's table
_SHORT_KEYS = {
    "width": "thickness_fraction",
    "yBase": "vertical_position_fraction",
    "freq": "frequency",
    "amp": "amplitude_fraction",
}

_REQUIRED = (
    "alpha",
    "thickness_fraction",
    "vertical_position_fraction",
    "speed",
    "frequency",
    "amplitude_fraction",
)


@dataclass(frozen=True)
class BandModel:
    """One translucent ribbon."""
    color: Tuple[int, int, int]
    alpha: float
    thickness_fraction: float
    vertical_position_fraction: float
    speed: float
    frequency: float
    amplitude_fraction: float
    phase_offset: float = 0.0

    def __post_init__(self):
        if len(self.color) != 3 or any(not 0 <= int(c) <= 255 for c in self.color):
            raise ValueError(f"color must be an RGB byte triple, got {self.color!r}")
        if not 0.0 < self.alpha <= 1.0:
            raise ValueError(f"alpha must be in (0, 1], got {self.alpha}")
        for name in ("thickness_fraction", "vertical_position_fraction"):
            value = getattr(self, name)
            if not 0.0 < value <= 1.0:
                raise ValueError(f"{name} must be in (0, 1], got {value}")

    def local_time(self, time: float) -> float:
        """Temporal noise coordinate for a frame counter value."""
        return time * 0.002 * self.speed

    @classmethod
    def from_dict(cls, definition: Mapping[str, Any], rng: SeedLike = None) -> "BandModel":
        """
        Build a band from a configuration-table entry.

        Accepts either the long field names or the compact ``r/g/b``,
        ``width``, ``yBase``, ``freq``, ``amp`` keys. The phase offset is
        drawn from ``rng`` unless the entry pins one.
        """
        d = dict(definition)
        for short, long in _SHORT_KEYS.items():
            if short in d and long not in d:
                d[long] = d.pop(short)
        if "color" not in d and all(k in d for k in "rgb"):
            d["color"] = (d.pop("r"), d.pop("g"), d.pop("b"))

        missing = [k for k in ("color",) + _REQUIRED if k not in d]
        if missing:
            raise ValueError(f"Band definition missing fields: {', '.join(missing)}")

        if "phase_offset" in d:
            phase = float(d["phase_offset"])
        else:
            phase = float(np.random.default_rng(rng).uniform(0.0, PHASE_RANGE))

        return cls(
            color=tuple(int(c) for c in d["color"]),
            alpha=float(d["alpha"]),
            thickness_fraction=float(d["thickness_fraction"]),
            vertical_position_fraction=float(d["vertical_position_fraction"]),
            speed=float(d["speed"]),
            frequency=float(d["frequency"]),
            amplitude_fraction=float(d["amplitude_fraction"]),
            phase_offset=phase,
        )


def create_bands(
    definitions: Optional[Iterable[Mapping[str, Any]]] = None,
    rng: SeedLike = None,
) -> List[BandModel]:
    """Instantiate bands in table order, sharing one generator for phases."""
    rng = np.random.default_rng(rng)
    if definitions is None:
        definitions = DEFAULT_BANDS
    return [BandModel.from_dict(d, rng) for d in definitions]


def load_band_table(path: Path) -> List[Dict[str, Any]]:
    """Read a JSON list of band definitions."""
    path = Path(path)
    with open(path) as f:
        table = json.load(f)
    if not isinstance(table, list) or not all(isinstance(e, dict) for e in table):
        raise ValueError(f"{path}: band table must be a JSON list of objects")
    return table
