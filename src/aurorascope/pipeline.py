"""
Offline frame pipeline.

Drives the animation through a manual scheduler so every frame is
rendered exactly once, then presents each working raster at output
size. Yields frames as a generator for piping to the encoder.
"""

from typing import Any, Iterable, Iterator, Mapping, Optional

import numpy as np

from aurorascope.base import AuroraConfig
from aurorascope.canvas import Canvas
from aurorascope.colorgrade import composite_over, soft_focus
from aurorascope.driver import AnimationDriver, FixedViewport, ManualScheduler


class AuroraRenderer:
    """Renders the aurora band background to numpy frames."""

    def __init__(
        self,
        config: Optional[AuroraConfig] = None,
        band_definitions: Optional[Iterable[Mapping[str, Any]]] = None,
    ):
        self.cfg = config or AuroraConfig()
        self.canvas = Canvas(
            *self.cfg.get_working_dims(),
            supersample=self.cfg.supersample,
            curve_segments=self.cfg.curve_segments,
        )
        self.scheduler = ManualScheduler()
        self.viewport = FixedViewport(self.cfg.width, self.cfg.height)
        self.driver = AnimationDriver(
            self.canvas,
            self.scheduler,
            self.viewport,
            config=self.cfg,
            band_definitions=band_definitions,
        )

    def present(self) -> np.ndarray:
        """Current working raster as an (H, W, 3) uint8 frame at output size."""
        flat = composite_over(self.canvas.to_rgba(), self.cfg.background_color)
        return soft_focus(
            flat,
            (self.cfg.width, self.cfg.height),
            radius=self.cfg.soft_focus_radius,
        )

    def render_frame(self) -> Optional[np.ndarray]:
        """Advance one frame. Returns None when the animation is inert."""
        if not self.driver.active and not self.driver.start():
            return None
        self.scheduler.run_pending()
        return self.present()

    def render_frames(
        self,
        n_frames: int,
        start_frame: int = 0,
        progress_callback: callable = None,
    ) -> Iterator[np.ndarray]:
        """
        Render ``n_frames`` consecutive frames as a generator.

        Args:
            n_frames: Number of frames to yield.
            start_frame: Frame counter value of the first yielded frame.
            progress_callback: Optional callback(current, total).

        Yields:
            (H, W, 3) uint8 RGB arrays. Nothing when reduced motion is set.
        """
        if not self.driver.active and not self.driver.start():
            return
        if start_frame:
            self.driver.frame_count = start_frame

        for i in range(n_frames):
            self.scheduler.run_pending()
            yield self.present()

            if progress_callback:
                progress_callback(i + 1, n_frames)
