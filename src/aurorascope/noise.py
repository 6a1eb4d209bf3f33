"""
Lattice gradient noise.

One scalar gradient per lattice node, hashed through a doubled
permutation table and blended with the quintic fade curve. Scoped to
the 3D sampling pattern the band geometry needs: a run of x positions
at a fixed (y, z) plane.
"""

import math
from typing import Union

import numpy as np

TABLE_SIZE = 256
_MASK = TABLE_SIZE - 1

SeedLike = Union[int, np.random.Generator, None]


def fade(t):
    """Quintic fade 6t^5 - 15t^4 + 10t^3 (works on floats and arrays)."""
    return t * t * t * (t * (t * 6 - 15) + 10)


def lerp(a, b, t):
    return a + t * (b - a)


class NoiseEngine:
    """
    Smooth pseudo-random scalar field over a continuous 3D domain.

    Build once per session; the tables are read-only after ``init`` and
    safe to share across every band and every frame.
    """

    def __init__(self, rng: SeedLike = None):
        self.permutation: np.ndarray = np.empty(0, dtype=np.int64)
        self.gradients: np.ndarray = np.empty(0, dtype=np.float64)
        self._perm: list = []
        self._grad: list = []
        self.init(rng)

    def init(self, rng: SeedLike = None):
        """
        Seed both lattice tables, fully replacing any previous state.

        Args:
            rng: A numpy Generator, an integer seed, or None for fresh
                OS entropy.
        """
        rng = np.random.default_rng(rng)

        perm = np.arange(TABLE_SIZE, dtype=np.int64)
        rng.shuffle(perm)
        grad = rng.uniform(-1.0, 1.0, TABLE_SIZE)

        # Upper half duplicates the lower so corner hashes never wrap
        perm = np.concatenate([perm, perm])
        grad = np.concatenate([grad, grad])

        assert perm.shape == (2 * TABLE_SIZE,) and grad.shape == (2 * TABLE_SIZE,)
        assert np.array_equal(perm[:TABLE_SIZE], perm[TABLE_SIZE:])

        perm.setflags(write=False)
        grad.setflags(write=False)
        self.permutation = perm
        self.gradients = grad

        # Plain lists for the scalar path
        self._perm = perm.tolist()
        self._grad = grad.tolist()

    def sample(self, x: float, y: float, z: float) -> float:
        """Noise value at (x, y, z), within [-1, 1]."""
        fx, fy, fz = math.floor(x), math.floor(y), math.floor(z)
        X, Y, Z = fx & _MASK, fy & _MASK, fz & _MASK
        x, y, z = x - fx, y - fy, z - fz
        u, v, w = fade(x), fade(y), fade(z)

        p = self._perm
        g = self._grad
        A = p[X] + Y
        AA = p[A] + Z
        AB = p[A + 1] + Z
        B = p[X + 1] + Y
        BA = p[B] + Z
        BB = p[B + 1] + Z

        return lerp(
            lerp(lerp(g[AA], g[BA], u), lerp(g[AB], g[BB], u), v),
            lerp(lerp(g[AA + 1], g[BA + 1], u), lerp(g[AB + 1], g[BB + 1], u), v),
            w,
        )

    def sample_many(self, xs: np.ndarray, y: float, z: float) -> np.ndarray:
        """
        Vectorized ``sample`` along x for a fixed (y, z).

        Args:
            xs: 1D float array of x coordinates.
            y, z: Shared y and z coordinates.

        Returns:
            float64 array shaped like ``xs``.
        """
        xs = np.asarray(xs, dtype=np.float64)
        fx = np.floor(xs)
        fy, fz = math.floor(y), math.floor(z)
        X = fx.astype(np.int64) & _MASK
        Y, Z = fy & _MASK, fz & _MASK
        u = fade(xs - fx)
        v = fade(y - fy)
        w = fade(z - fz)

        p = self.permutation
        g = self.gradients
        A = p[X] + Y
        AA = p[A] + Z
        AB = p[A + 1] + Z
        B = p[X + 1] + Y
        BA = p[B] + Z
        BB = p[B + 1] + Z

        return lerp(
            lerp(lerp(g[AA], g[BA], u), lerp(g[AB], g[BB], u), v),
            lerp(lerp(g[AA + 1], g[BA + 1], u), lerp(g[AB + 1], g[BB + 1], u), v),
            w,
        )
