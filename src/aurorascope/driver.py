"""
Animation driver.

Owns the frame counter and the pending frame handle, and on every tick
samples and draws each band in configured order. Frame scheduling,
viewport size and the drawing surface are supplied by the host
(offline renderer, pygame window, tests).
"""

import abc
import itertools
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

import numpy as np

from aurorascope.bands import BandModel, create_bands
from aurorascope.base import AuroraConfig
from aurorascope.canvas import DrawingContext
from aurorascope.geometry import build_geometry
from aurorascope.noise import NoiseEngine
from aurorascope.renderer import BandRenderer

FrameCallback = Callable[[], None]


class FrameScheduler(abc.ABC):
    """Best-effort one callback per display refresh."""

    @abc.abstractmethod
    def request_frame(self, callback: FrameCallback) -> int:
        pass

    @abc.abstractmethod
    def cancel_frame(self, handle: int):
        pass


class ManualScheduler(FrameScheduler):
    """Queues callbacks until ``run_pending`` is called. Deterministic."""

    def __init__(self):
        self._pending: Dict[int, FrameCallback] = {}
        self._ids = itertools.count(1)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int):
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def run_pending(self) -> int:
        """Run callbacks queued before this call; returns how many ran."""
        batch = list(self._pending.values())
        self._pending.clear()
        for callback in batch:
            callback()
        return len(batch)


class ViewportProvider(abc.ABC):
    @abc.abstractmethod
    def size(self) -> Tuple[int, int]:
        """Current (width, height) of the viewport."""


class FixedViewport(ViewportProvider):
    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height

    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


class AnimationDriver:
    """
    Per-frame loop over the band pipeline.

    The clock is a frame counter rather than wall time, so pausing and
    resuming continues the animation where it stopped.
    """

    def __init__(
        self,
        surface: Optional[DrawingContext],
        scheduler: FrameScheduler,
        viewport: ViewportProvider,
        config: Optional[AuroraConfig] = None,
        band_definitions: Optional[Iterable[Mapping[str, Any]]] = None,
        noise: Optional[NoiseEngine] = None,
    ):
        self.cfg = config or AuroraConfig()
        self.surface = surface
        self.scheduler = scheduler
        self.viewport = viewport
        self.band_definitions = band_definitions
        self.noise = noise
        self.band_renderer = BandRenderer()

        # State
        self.frame_count = 0
        self.handle: Optional[int] = None
        self.bands: List[BandModel] = []
        self.width = 0
        self.height = 0
        self.active = False

    @property
    def is_running(self) -> bool:
        return self.handle is not None

    def start(self) -> bool:
        """
        Build the scene and schedule the first frame.

        Returns False, touching nothing, when reduced motion is preferred
        or no drawing surface was acquired.
        """
        if self.cfg.reduced_motion or self.surface is None:
            return False
        if self.active:
            return True

        rng = np.random.default_rng(self.cfg.seed)
        if self.noise is None:
            self.noise = NoiseEngine(rng)
        self.resize()
        self.bands = create_bands(self.band_definitions, rng)
        self.active = True
        self._schedule()
        return True

    def resize(self):
        """Re-read the viewport and resize the working raster."""
        w, h = self.viewport.size()
        # A collapsed window reports 0 (or less); keep an empty raster
        self.width, self.height = self.cfg.get_working_dims(max(0, w), max(0, h))
        if self.surface is not None:
            self.surface.resize(self.width, self.height)

    def tick(self):
        """Draw one frame at the current counter value, then schedule the next."""
        self.handle = None
        if not self.active:
            return

        ctx = self.surface
        ctx.clear_rect(0, 0, self.width, self.height)
        # Nothing to draw into a collapsed raster, but time still advances
        if self.width > 0 and self.height > 0:
            for band in self.bands:
                geometry = build_geometry(
                    band, self.noise, self.frame_count, self.width, self.height
                )
                self.band_renderer.render(ctx, geometry, band)

        self.frame_count += 1
        self._schedule()

    def pause(self):
        """Cancel the pending frame. The counter is kept."""
        if self.handle is not None:
            self.scheduler.cancel_frame(self.handle)
            self.handle = None

    def resume(self):
        if self.active:
            self._schedule()

    def stop(self):
        """Tear down: no pending callback is left behind."""
        self.pause()
        self.active = False

    def _schedule(self):
        if self.handle is None:
            self.handle = self.scheduler.request_frame(self.tick)
