"""
Live preview window.

A pygame window hosts the animation: it supplies the frame scheduler,
the viewport size, resize notifications and the visibility signal
(minimise pauses, restore resumes). The half-resolution raster is
stretched to the window, as the web page does with CSS.
"""

from typing import Any, Iterable, Mapping, Optional, Tuple

import pygame

from aurorascope.base import AuroraConfig
from aurorascope.canvas import Canvas
from aurorascope.colorgrade import composite_over
from aurorascope.driver import AnimationDriver, ManualScheduler, ViewportProvider

RESIZE_DEBOUNCE_MS = 200


class PygameScheduler(ManualScheduler):
    """Runs queued callbacks once per display refresh, capped at ``fps``."""

    def __init__(self, fps: int = 60):
        super().__init__()
        self.fps = fps
        self.clock = pygame.time.Clock()

    def wait_for_refresh(self) -> int:
        return self.clock.tick(self.fps)


class WindowViewport(ViewportProvider):
    def size(self) -> Tuple[int, int]:
        return pygame.display.get_surface().get_size()


class ResizeDebouncer:
    """Reports a resize once notifications have been quiet for ``delay_ms``."""

    def __init__(self, delay_ms: int = RESIZE_DEBOUNCE_MS):
        self.delay_ms = delay_ms
        self._deadline: Optional[int] = None

    def notify(self, now_ms: int):
        self._deadline = now_ms + self.delay_ms

    def due(self, now_ms: int) -> bool:
        if self._deadline is not None and now_ms >= self._deadline:
            self._deadline = None
            return True
        return False


def run_preview(
    config: Optional[AuroraConfig] = None,
    band_definitions: Optional[Iterable[Mapping[str, Any]]] = None,
    max_frames: Optional[int] = None,
    resize_debounce_ms: int = RESIZE_DEBOUNCE_MS,
) -> int:
    """
    Open a resizable window and animate until it is closed.

    Returns:
        Number of frames drawn (0 when reduced motion is preferred).
    """
    cfg = config or AuroraConfig()
    if cfg.reduced_motion:
        return 0

    pygame.init()
    pygame.display.set_mode((cfg.width, cfg.height), pygame.RESIZABLE)
    pygame.display.set_caption("Aurorascope")

    canvas = Canvas(
        *cfg.get_working_dims(),
        supersample=cfg.supersample,
        curve_segments=cfg.curve_segments,
    )
    scheduler = PygameScheduler(cfg.fps)
    driver = AnimationDriver(canvas, scheduler, WindowViewport(), cfg, band_definitions)
    debouncer = ResizeDebouncer(resize_debounce_ms)

    frames = 0
    try:
        if not driver.start():
            return 0

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.VIDEORESIZE:
                    debouncer.notify(pygame.time.get_ticks())
                elif event.type in (pygame.WINDOWMINIMIZED, pygame.WINDOWHIDDEN):
                    driver.pause()
                elif event.type in (pygame.WINDOWRESTORED, pygame.WINDOWSHOWN):
                    driver.resume()

            if debouncer.due(pygame.time.get_ticks()):
                driver.resize()

            if scheduler.run_pending():
                frame = composite_over(canvas.to_rgba(), cfg.background_color)
                surf = pygame.image.frombuffer(frame.tobytes(), (canvas.width, canvas.height), "RGB")
                screen = pygame.display.get_surface()
                pygame.transform.smoothscale(surf, screen.get_size(), screen)
                pygame.display.flip()
                frames += 1
                if max_frames is not None and frames >= max_frames:
                    running = False

            scheduler.wait_for_refresh()
    finally:
        driver.stop()
        pygame.quit()

    return frames
