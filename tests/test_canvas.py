"""Tests for the numpy/Pillow drawing surface."""

import numpy as np
import pytest

from aurorascope.canvas import Canvas, LinearGradient


def _rect(canvas, x0, y0, x1, y1):
    canvas.begin_path()
    canvas.move_to(x0, y0)
    canvas.line_to(x1, y0)
    canvas.line_to(x1, y1)
    canvas.line_to(x0, y1)
    canvas.close_path()


class TestCanvas:
    def test_starts_transparent(self):
        canvas = Canvas(16, 12)
        rgba = canvas.to_rgba()
        assert rgba.shape == (12, 16, 4)
        assert rgba.dtype == np.uint8
        assert rgba.max() == 0

    def test_solid_fill(self):
        canvas = Canvas(10, 10)
        _rect(canvas, 2, 2, 8, 8)
        canvas.fill_style = (255, 0, 0)
        canvas.fill()
        rgba = canvas.to_rgba()
        assert rgba[5, 5].tolist() == [255, 0, 0, 255]
        assert rgba[0, 0, 3] == 0
        assert rgba[9, 9, 3] == 0

    def test_source_over(self):
        canvas = Canvas(10, 10)
        for _ in range(2):
            _rect(canvas, 0, 0, 10, 10)
            canvas.fill_style = (0, 128, 255, 0.5)
            canvas.fill()
        alpha = canvas.to_rgba()[5, 5, 3]
        assert abs(int(alpha) - 191) <= 1

    def test_clear_rect(self):
        canvas = Canvas(10, 10)
        _rect(canvas, 0, 0, 10, 10)
        canvas.fill()
        canvas.clear_rect(0, 0, 5, 10)
        rgba = canvas.to_rgba()
        assert rgba[:, :5, 3].max() == 0
        assert rgba[:, 6:, 3].min() == 255

    def test_resize_clears(self):
        canvas = Canvas(10, 10)
        _rect(canvas, 0, 0, 10, 10)
        canvas.fill()
        canvas.resize(20, 8)
        assert canvas.to_rgba().shape == (8, 20, 4)
        assert canvas.to_rgba().max() == 0

    def test_gradient_fill_vertical(self):
        canvas = Canvas(20, 20)
        gradient = canvas.create_linear_gradient(0, 0, 0, 20)
        gradient.add_color_stop(0.0, (0, 0, 255, 0.0))
        gradient.add_color_stop(0.5, (0, 0, 255, 1.0))
        gradient.add_color_stop(1.0, (0, 0, 255, 0.0))
        _rect(canvas, 0, 0, 20, 20)
        canvas.fill_style = gradient
        canvas.fill()
        alpha = canvas.to_rgba()[:, 10, 3].astype(int)
        assert alpha[10] > 200
        assert alpha[0] < 30
        assert alpha[19] < 30
        assert canvas.to_rgba()[10, 10, 2] == 255

    def test_degenerate_gradient_paints_nothing(self):
        canvas = Canvas(10, 10)
        gradient = canvas.create_linear_gradient(0, 5, 0, 5)
        gradient.add_color_stop(0.5, (255, 255, 255, 1.0))
        _rect(canvas, 0, 0, 10, 10)
        canvas.fill_style = gradient
        canvas.fill()
        assert canvas.to_rgba().max() == 0

    def test_quadratic_curve_ends_on_endpoint(self):
        canvas = Canvas(10, 10, curve_segments=6)
        canvas.begin_path()
        canvas.move_to(0, 0)
        canvas.quadratic_curve_to(5, 10, 10, 0)
        points = canvas._subpaths[-1]
        assert len(points) == 7
        assert points[-1] == (10.0, 0.0)
        # Apex of a symmetric quadratic sits halfway to the control point
        assert points[3] == pytest.approx((5.0, 5.0))

    def test_fill_outside_bounds_is_clipped(self):
        canvas = Canvas(10, 10)
        _rect(canvas, -50, -50, -10, -10)
        canvas.fill()
        assert canvas.to_rgba().max() == 0


class TestLinearGradient:
    def test_stop_offset_validated(self):
        gradient = LinearGradient(0, 0, 0, 1)
        with pytest.raises(ValueError):
            gradient.add_color_stop(1.5, (0, 0, 0, 1.0))

    def test_holds_end_colors(self):
        gradient = LinearGradient(0, 0, 0, 10)
        gradient.add_color_stop(0.0, (255, 0, 0, 1.0))
        gradient.add_color_stop(1.0, (0, 0, 255, 1.0))
        out = gradient.evaluate(np.zeros(3), np.array([-5.0, 5.0, 15.0]))
        np.testing.assert_allclose(out[0], [1, 0, 0, 1])
        np.testing.assert_allclose(out[1], [0.5, 0, 0.5, 1])
        np.testing.assert_allclose(out[2], [0, 0, 1, 1])

    def test_unsorted_stops(self):
        gradient = LinearGradient(0, 0, 10, 0)
        gradient.add_color_stop(1.0, (0, 0, 0, 0.0))
        gradient.add_color_stop(0.0, (0, 0, 0, 1.0))
        out = gradient.evaluate(np.array([0.0, 10.0]), np.zeros(2))
        assert out[0, 3] == pytest.approx(1.0)
        assert out[1, 3] == pytest.approx(0.0)
