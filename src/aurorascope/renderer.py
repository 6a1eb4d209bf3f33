"""
Band rasterization.

Converts a band's sampled edge points into one smooth closed path and
fills it with a vertical soft-edged opacity gradient.
"""

from typing import List, Tuple

from aurorascope.bands import BandModel
from aurorascope.canvas import DrawingContext
from aurorascope.geometry import GeometrySample

# (offset, fraction of the band's base alpha)
GRADIENT_PROFILE = (
    (0.0, 0.0),
    (0.2, 0.6),
    (0.5, 1.0),
    (0.8, 0.6),
    (1.0, 0.0),
)


def gradient_stops(band: BandModel) -> List[Tuple[float, Tuple[int, int, int, float]]]:
    """Colour stops fading the band in and out across its thickness."""
    r, g, b = band.color
    return [(offset, (r, g, b, band.alpha * k)) for offset, k in GRADIENT_PROFILE]


class BandRenderer:
    """
    Draws one band per call. Stateless: the gradient is rebuilt each
    call so it tracks the band's current mean top and bottom.
    """

    def render(self, ctx: DrawingContext, geometry: GeometrySample, band: BandModel):
        xs = geometry.x.tolist()
        tops = geometry.top.tolist()
        bots = geometry.bottom.tolist()
        n = len(xs)

        gradient = ctx.create_linear_gradient(0, geometry.mean_top, 0, geometry.mean_bottom)
        for offset, color in gradient_stops(band):
            gradient.add_color_stop(offset, color)

        ctx.begin_path()

        # Top edge, left to right. Each sample is the control point of a
        # curve ending halfway to the next, which smooths out the polyline.
        ctx.move_to(xs[0], tops[0])
        for i in range(1, n):
            ctx.quadratic_curve_to(
                xs[i - 1], tops[i - 1],
                (xs[i - 1] + xs[i]) / 2, (tops[i - 1] + tops[i]) / 2,
            )
        ctx.line_to(xs[-1], tops[-1])

        # Bottom edge, right to left
        ctx.line_to(xs[-1], bots[-1])
        for i in range(n - 2, -1, -1):
            ctx.quadratic_curve_to(
                xs[i + 1], bots[i + 1],
                (xs[i + 1] + xs[i]) / 2, (bots[i + 1] + bots[i]) / 2,
            )

        ctx.close_path()
        ctx.fill_style = gradient
        ctx.fill()
