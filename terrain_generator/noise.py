# terrain_generator/noise.py

"""
================================================================================
NOISE GENERATION UTILITIES
================================================================================
This module provides the coherent 2D Perlin noise sampler and the seeded octave
offsets used to decorrelate fBm layers. It is designed to be a pure, stateless
utility.

Data Contract:
---------------
- Inputs:
    - p: A pre-shuffled NumPy permutation table (int array, length 512).
    - x, y: Scalars or NumPy arrays of coordinates.
    - seed, octave_count: For octave offset derivation.
- Outputs:
    - Noise values in [0, 1] (raw) or [-1, 1] (sample_2d).
    - An (octave_count, 2) float array of offsets.
- Side Effects: None.
- Invariants: Output is a pure function of the inputs. The noise repeats every
  256 units along each axis. The shape of a grid output matches its inputs.
================================================================================
"""

import math

import numpy as np
from numba import njit, prange

from . import config as DEFAULTS

# Pre-defined gradient vectors for performance.
_GRADIENT_VECTORS = np.array([[0, 1], [0, -1], [1, 0], [-1, 0]])

# Lattice period. Coordinates are reduced modulo this before flooring.
_PERIOD = 256


def build_permutation_table(seed: int) -> np.ndarray:
    """Shuffles 0..255 with `seed` and doubles it so lookups never wrap."""
    p = np.arange(_PERIOD, dtype=np.int64)
    rng = np.random.default_rng(seed)
    rng.shuffle(p)
    return np.stack([p, p]).flatten()


# The lattice behind sample_2d is fixed, so the sampler is a pure function of
# its coordinates. Per-run variety comes from the octave offsets.
PERMUTATION_TABLE = build_permutation_table(DEFAULTS.NOISE_PERMUTATION_SEED)


@njit(cache=True)
def _lerp(a, b, x):
    "Linear interpolation."
    return a + x * (b - a)


@njit(cache=True)
def _fade(t):
    "6t^5 - 15t^4 + 10t^3"
    return t * t * t * (t * (t * 6 - 15) + 10)


@njit(cache=True)
def _gradient(h, x, y):
    """Calculates the dot product between a gradient vector and coordinates."""
    g = _GRADIENT_VECTORS[h % 4]
    return g[0] * x + g[1] * y


@njit(cache=True)
def perlin_01(p, x, y):
    """
    Single-octave Perlin noise at (x, y), mapped to [0, 1].
    Reducing the coordinates modulo the lattice period first keeps huge
    offsets exact and the integer cell index small.
    """
    # Non-finite coordinates have no lattice cell; give them the lattice-point value.
    if not (math.isfinite(x) and math.isfinite(y)):
        return 0.5

    x = x % _PERIOD
    y = y % _PERIOD

    xi = int(np.floor(x))
    yi = int(np.floor(y))

    xf = x - xi
    yf = y - yi

    u = _fade(xf)
    v = _fade(yf)

    px0 = xi % _PERIOD
    px1 = (px0 + 1) % _PERIOD
    py0 = yi % _PERIOD
    py1 = (py0 + 1) % _PERIOD

    idx00 = p[p[px0] + py0]
    idx01 = p[p[px0] + py1]
    idx10 = p[p[px1] + py0]
    idx11 = p[p[px1] + py1]

    g00 = _gradient(idx00, xf, yf)
    g01 = _gradient(idx01, xf, yf - 1)
    g10 = _gradient(idx10, xf - 1, yf)
    g11 = _gradient(idx11, xf - 1, yf - 1)

    x1 = _lerp(g00, g10, u)
    x2 = _lerp(g01, g11, u)
    raw = _lerp(x1, x2, v)

    # Axis-aligned gradients keep raw within [-1, 1]; clamp away rounding.
    value = (raw + 1.0) / 2.0
    return min(1.0, max(0.0, value))


@njit(cache=True)
def sample_2d(p, x, y):
    """Perlin noise at (x, y) remapped from [0, 1] to [-1, 1]."""
    return perlin_01(p, x, y) * 2.0 - 1.0


@njit(parallel=True, cache=True)
def perlin_01_grid(p, x, y):
    """perlin_01 over two equally shaped 2D coordinate arrays."""
    rows, cols = x.shape
    out = np.empty((rows, cols))
    for i in prange(rows):
        for j in range(cols):
            out[i, j] = perlin_01(p, x[i, j], y[i, j])
    return out


@njit(parallel=True, cache=True)
def sample_2d_grid(p, x, y):
    """sample_2d over two equally shaped 2D coordinate arrays."""
    rows, cols = x.shape
    out = np.empty((rows, cols))
    for i in prange(rows):
        for j in range(cols):
            out[i, j] = sample_2d(p, x[i, j], y[i, j])
    return out


def derive_octave_offsets(seed: int, octave_count: int) -> np.ndarray:
    """
    Returns one (x, y) offset per octave, each component an integer drawn
    uniformly from [-OCTAVE_OFFSET_RANGE, OCTAVE_OFFSET_RANGE).
    The generator is seeded exactly once per call, so the same seed and
    octave count always give the same offsets.
    """
    if octave_count <= 0:
        return np.zeros((0, 2), dtype=np.float64)
    rng = np.random.default_rng(seed)
    offsets = np.empty((octave_count, 2), dtype=np.float64)
    for o in range(octave_count):
        offsets[o, 0] = rng.integers(-DEFAULTS.OCTAVE_OFFSET_RANGE, DEFAULTS.OCTAVE_OFFSET_RANGE)
        offsets[o, 1] = rng.integers(-DEFAULTS.OCTAVE_OFFSET_RANGE, DEFAULTS.OCTAVE_OFFSET_RANGE)
    return offsets
