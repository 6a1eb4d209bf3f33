"""Tests for the lattice gradient noise engine."""

import math

import numpy as np
import pytest

from aurorascope.noise import TABLE_SIZE, NoiseEngine, fade, lerp


class TestTables:
    def test_lengths(self, engine):
        assert engine.permutation.shape == (2 * TABLE_SIZE,)
        assert engine.gradients.shape == (2 * TABLE_SIZE,)

    def test_upper_half_duplicates_lower(self, engine):
        np.testing.assert_array_equal(engine.permutation[:256], engine.permutation[256:])
        np.testing.assert_array_equal(engine.gradients[:256], engine.gradients[256:])

    def test_permutation_is_a_shuffle(self, engine):
        assert sorted(engine.permutation[:256].tolist()) == list(range(256))
        # A seeded shuffle of 256 items is essentially never the identity
        assert not np.array_equal(engine.permutation[:256], np.arange(256))

    def test_gradients_in_range(self, engine):
        assert engine.gradients.min() >= -1.0
        assert engine.gradients.max() <= 1.0

    def test_tables_read_only(self, engine):
        with pytest.raises(ValueError):
            engine.permutation[0] = 7
        with pytest.raises(ValueError):
            engine.gradients[0] = 0.5

    def test_same_seed_same_tables(self):
        a = NoiseEngine(99)
        b = NoiseEngine(np.random.default_rng(99))
        np.testing.assert_array_equal(a.permutation, b.permutation)
        np.testing.assert_array_equal(a.gradients, b.gradients)

    def test_different_seed_different_tables(self):
        a = NoiseEngine(1)
        b = NoiseEngine(2)
        assert not np.array_equal(a.gradients, b.gradients)

    def test_reinit_overwrites_everything(self, engine):
        before = engine.sample(3.3, 1.1, 0.5)
        engine.init(7)
        fresh = NoiseEngine(7)
        np.testing.assert_array_equal(engine.permutation, fresh.permutation)
        np.testing.assert_array_equal(engine.gradients, fresh.gradients)
        assert engine.sample(3.3, 1.1, 0.5) == fresh.sample(3.3, 1.1, 0.5)
        assert engine.sample(3.3, 1.1, 0.5) != before


class TestSample:
    def test_deterministic(self, engine):
        args = (12.345, -6.78, 0.5)
        assert engine.sample(*args) == engine.sample(*args)

    def test_bounded(self, engine):
        rng = np.random.default_rng(0)
        points = rng.uniform(-500, 500, size=(10_000, 3))
        values = np.array([engine.sample(x, y, z) for x, y, z in points])
        assert np.all(np.isfinite(values))
        assert np.abs(values).max() <= 1.0 + 1e-9

    def test_lattice_points_return_corner_gradient(self, engine):
        p = engine.permutation
        for k in range(-300, 600, 7):
            expected = engine.gradients[p[p[k & 255]]]
            assert engine.sample(k, 0, 0) == expected

    def test_continuous_across_cell_boundary(self, engine):
        for k in (1, 17, 255, 256):
            left = engine.sample(k - 1e-9, 0.3, 1.7)
            right = engine.sample(k + 1e-9, 0.3, 1.7)
            assert left == pytest.approx(right, abs=1e-6)

    def test_wraps_every_256_cells(self, engine):
        assert engine.sample(3.25, 0.75, 0.5) == engine.sample(3.25 + 256, 0.75, 0.5)

    def test_negative_coordinates(self, engine):
        value = engine.sample(-0.5, -3.2, -7.9)
        assert math.isfinite(value)
        assert -1.0 <= value <= 1.0


class TestSampleMany:
    def test_matches_scalar(self, engine):
        xs = np.linspace(-40.0, 900.0, 257)
        expected = np.array([engine.sample(x, 0.37, 1.5) for x in xs])
        np.testing.assert_allclose(engine.sample_many(xs, 0.37, 1.5), expected, rtol=0, atol=1e-12)

    def test_shape(self, engine):
        out = engine.sample_many(np.zeros(10), 0.0, 0.0)
        assert out.shape == (10,)


class TestHelpers:
    def test_fade_endpoints(self):
        assert fade(0.0) == 0.0
        assert fade(1.0) == 1.0
        assert fade(0.5) == pytest.approx(0.5)

    def test_fade_flat_at_ends(self):
        h = 1e-5
        assert (fade(h) - fade(0.0)) / h == pytest.approx(0.0, abs=1e-6)
        assert (fade(1.0) - fade(1.0 - h)) / h == pytest.approx(0.0, abs=1e-6)

    def test_lerp(self):
        assert lerp(2.0, 4.0, 0.0) == 2.0
        assert lerp(2.0, 4.0, 0.5) == 3.0
        assert lerp(2.0, 4.0, 1.0) == 4.0
