"""
2D drawing surface.

A small canvas-style context: paths of lines and quadratic curves,
linear gradients with colour stops, and source-over fills. The
raster is a premultiplied float32 RGBA buffer; path coverage is
rasterized with Pillow at a supersampled size and box-filtered down
for anti-aliased edges.
"""

import abc
import math
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw

RGBA = Tuple[float, float, float, float]
Point = Tuple[float, float]


class LinearGradient:
    """
    Colour ramp along the axis from (x0, y0) to (x1, y1).

    Stops take an offset in [0, 1] and an ``(r, g, b, a)`` colour with
    0-255 channels and 0-1 alpha. Outside the axis the end colours are
    held.
    """

    def __init__(self, x0: float, y0: float, x1: float, y1: float):
        self.x0, self.y0, self.x1, self.y1 = x0, y0, x1, y1
        self.stops: List[Tuple[float, RGBA]] = []

    def add_color_stop(self, offset: float, color: Sequence[float]):
        if not 0.0 <= offset <= 1.0:
            raise ValueError(f"Gradient stop offset must be in [0, 1], got {offset}")
        r, g, b, a = color
        self.stops.append((float(offset), (float(r), float(g), float(b), float(a))))

    @property
    def is_degenerate(self) -> bool:
        return (self.x0 == self.x1 and self.y0 == self.y1) or not self.stops

    def evaluate(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Premultiplied RGBA in [0, 1] at each (x, y) pixel centre."""
        dx = self.x1 - self.x0
        dy = self.y1 - self.y0
        t = ((xs - self.x0) * dx + (ys - self.y0) * dy) / (dx * dx + dy * dy)

        stops = sorted(self.stops, key=lambda s: s[0])
        offsets = np.array([s[0] for s in stops])
        colors = np.array([s[1] for s in stops], dtype=np.float64)
        alpha = colors[:, 3]
        premul = np.column_stack([colors[:, :3] / 255.0 * alpha[:, None], alpha])

        out = np.empty(t.shape + (4,), dtype=np.float32)
        for c in range(4):
            out[..., c] = np.interp(t, offsets, premul[:, c])
        return out


FillStyle = Union[LinearGradient, Tuple[int, int, int], Tuple[int, int, int, float]]


class DrawingContext(abc.ABC):
    """The drawing operations the band renderer relies on."""

    fill_style: Optional[FillStyle] = None

    @abc.abstractmethod
    def resize(self, width: int, height: int):
        pass

    @abc.abstractmethod
    def clear_rect(self, x: float, y: float, width: float, height: float):
        pass

    @abc.abstractmethod
    def begin_path(self):
        pass

    @abc.abstractmethod
    def move_to(self, x: float, y: float):
        pass

    @abc.abstractmethod
    def line_to(self, x: float, y: float):
        pass

    @abc.abstractmethod
    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float):
        pass

    @abc.abstractmethod
    def close_path(self):
        pass

    @abc.abstractmethod
    def fill(self):
        pass

    def create_linear_gradient(self, x0: float, y0: float, x1: float, y1: float) -> LinearGradient:
        return LinearGradient(x0, y0, x1, y1)


class Canvas(DrawingContext):
    """numpy/Pillow raster implementing DrawingContext."""

    def __init__(
        self,
        width: int,
        height: int,
        supersample: int = 2,
        curve_segments: int = 4,
    ):
        self.supersample = max(1, int(supersample))
        self.curve_segments = max(1, int(curve_segments))
        self.fill_style = (0, 0, 0)
        self.resize(width, height)

    def resize(self, width: int, height: int):
        """Reallocate the raster. Like a canvas, this clears it."""
        self.width = int(width)
        self.height = int(height)
        self.buffer = np.zeros((self.height, self.width, 4), dtype=np.float32)
        self.begin_path()

    # --- Paths ---

    def begin_path(self):
        self._subpaths: List[List[Point]] = []
        self._current: Optional[List[Point]] = None

    def move_to(self, x: float, y: float):
        self._current = [(float(x), float(y))]
        self._subpaths.append(self._current)

    def _ensure_subpath(self, x: float, y: float):
        if self._current is None:
            self.move_to(x, y)

    def line_to(self, x: float, y: float):
        self._ensure_subpath(x, y)
        self._current.append((float(x), float(y)))

    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float):
        self._ensure_subpath(cpx, cpy)
        x0, y0 = self._current[-1]
        n = self.curve_segments
        for k in range(1, n + 1):
            t = k / n
            mt = 1.0 - t
            self._current.append((
                mt * mt * x0 + 2 * mt * t * cpx + t * t * x,
                mt * mt * y0 + 2 * mt * t * cpy + t * t * y,
            ))

    def close_path(self):
        if self._current:
            start = self._current[0]
            self._current.append(start)
            self.move_to(*start)

    # --- Raster ---

    def clear_rect(self, x: float, y: float, width: float, height: float):
        x0 = max(0, int(math.floor(x)))
        y0 = max(0, int(math.floor(y)))
        x1 = min(self.width, int(math.ceil(x + width)))
        y1 = min(self.height, int(math.ceil(y + height)))
        if x1 > x0 and y1 > y0:
            self.buffer[y0:y1, x0:x1] = 0.0

    def _coverage(self, polygons: List[List[Point]]):
        """Anti-aliased coverage mask of the polygons, cropped to their bounds."""
        pts = np.array([p for poly in polygons for p in poly], dtype=np.float64)
        bx0 = max(0, int(math.floor(pts[:, 0].min())))
        by0 = max(0, int(math.floor(pts[:, 1].min())))
        bx1 = min(self.width, int(math.ceil(pts[:, 0].max())) + 1)
        by1 = min(self.height, int(math.ceil(pts[:, 1].max())) + 1)
        if bx1 <= bx0 or by1 <= by0:
            return None

        ss = self.supersample
        bw, bh = bx1 - bx0, by1 - by0
        mask = Image.new("L", (bw * ss, bh * ss), 0)
        draw = ImageDraw.Draw(mask)
        for poly in polygons:
            scaled = [((px - bx0) * ss, (py - by0) * ss) for px, py in poly]
            draw.polygon(scaled, fill=255)
        if ss > 1:
            mask = mask.resize((bw, bh), Image.BOX)

        coverage = np.asarray(mask, dtype=np.float32) / 255.0
        return coverage, (bx0, by0, bx1, by1)

    def fill(self):
        """Fill the current path with ``fill_style`` (source-over)."""
        polygons = [p for p in self._subpaths if len(p) >= 3]
        if not polygons:
            return

        style = self.fill_style
        if isinstance(style, LinearGradient) and style.is_degenerate:
            return

        result = self._coverage(polygons)
        if result is None:
            return
        coverage, (x0, y0, x1, y1) = result

        if isinstance(style, LinearGradient):
            ys, xs = np.mgrid[y0:y1, x0:x1].astype(np.float64)
            src = style.evaluate(xs + 0.5, ys + 0.5)
        else:
            r, g, b = style[:3]
            a = style[3] if len(style) > 3 else 1.0
            src = np.empty((y1 - y0, x1 - x0, 4), dtype=np.float32)
            src[...] = (r / 255.0 * a, g / 255.0 * a, b / 255.0 * a, a)

        src *= coverage[:, :, np.newaxis]
        dst = self.buffer[y0:y1, x0:x1]
        dst *= 1.0 - src[:, :, 3:4]
        dst += src

    def to_rgba(self) -> np.ndarray:
        """(H, W, 4) uint8 straight-alpha copy of the raster."""
        alpha = self.buffer[:, :, 3:4]
        rgb = np.divide(
            self.buffer[:, :, :3], alpha,
            out=np.zeros_like(self.buffer[:, :, :3]),
            where=alpha > 0,
        )
        out = np.concatenate([rgb, alpha], axis=2)
        return np.clip(np.round(out * 255.0), 0, 255).astype(np.uint8)
