# terrain_generator/heightfield.py

"""
================================================================================
HEIGHTFIELD BUILDER
================================================================================
This module combines layered Perlin noise with an escape-time fractal mask to
produce terrain heights.

Each height is built in two steps:
1. fBm: every octave samples the noise at `grid / scale * frequency + offset`,
   reshapes it with the height curve and adds it with the current amplitude.
   Frequency grows by the lacunarity and amplitude halves after each octave.
2. Mask: the fBm height is pulled towards `base_height` by a fractal mask,
   either the sum of two Julia masks or a noise-modulated Mandelbrot mask
   passed through the influence curve.

Data Contract:
---------------
- Inputs:
    - config (TerrainConfig), layout (RandomLayout), offsets (octaves x 2).
    - height_curve, influence_curve: `float -> float` callables.
- Outputs:
    - `build_height`: one float for one grid vertex.
    - `build_heightfield`: a (rows, x_size + 1) array for a band of rows.
- Side Effects: None.
- Invariants: Both functions give identical values for the same vertex.
  Each vertex depends only on its own (x, z), so bands can be built
  independently and stacked.
================================================================================
"""

import math

import numpy as np

from . import config as DEFAULTS
from . import fractals
from . import noise
from .curves import DEFAULT_HEIGHT_CURVE, DEFAULT_INFLUENCE_CURVE, evaluate_curve


def lerp(a, b, t):
    """Unclamped linear interpolation; extrapolates when t is outside [0, 1]."""
    return a + (b - a) * t


def _octave_count(config, offsets) -> int:
    return min(max(config.octaves, 0), len(offsets))


def _octaves_exhausted(amplitude: float, frequency: float) -> bool:
    # Past this point further octaves add nothing or would sample at infinity.
    return amplitude == 0.0 or not math.isfinite(frequency)


def build_height(
    grid_x: int,
    grid_z: int,
    offsets: np.ndarray,
    config,
    layout,
    height_curve=DEFAULT_HEIGHT_CURVE,
    influence_curve=DEFAULT_INFLUENCE_CURVE,
    max_iterations: int = DEFAULTS.MAX_ITERATIONS,
) -> float:
    """Computes the height of the vertex at (grid_x, grid_z)."""
    scale = config.effective_scale
    amplitude = DEFAULTS.INITIAL_AMPLITUDE
    frequency = 1.0
    noise_height = 0.0

    for o in range(_octave_count(config, offsets)):
        if _octaves_exhausted(amplitude, frequency):
            break
        map_z = grid_z / scale * frequency + offsets[o, 1]
        map_x = grid_x / scale * frequency + offsets[o, 0]
        perlin_value = noise.sample_2d(noise.PERMUTATION_TABLE, map_z, map_x)
        noise_height += height_curve(perlin_value) * amplitude
        frequency *= config.lacunarity
        amplitude *= DEFAULTS.PERSISTENCE

    if config.use_julia_sets:
        julia_mask_1 = fractals.julia_mask(
            grid_x, grid_z, config.x_size, config.z_size, layout.julia_constant, max_iterations
        )
        julia_mask_2 = fractals.julia_mask(
            grid_x, grid_z, config.x_size, config.z_size, layout.julia_constant_2, max_iterations
        )
        return float(lerp(config.base_height, noise_height, julia_mask_1 + julia_mask_2))

    mandelbrot_mask = fractals.mandelbrot_mask(
        grid_x, grid_z, config.x_size, config.z_size, layout, max_iterations
    )
    perlin_mask = noise.perlin_01(
        noise.PERMUTATION_TABLE,
        grid_x * DEFAULTS.PERLIN_MASK_FREQUENCY,
        grid_z * DEFAULTS.PERLIN_MASK_FREQUENCY,
    )
    blended_mask = lerp(0.0, mandelbrot_mask, perlin_mask)
    blend_factor = influence_curve(blended_mask)
    return float(lerp(config.base_height, noise_height, blend_factor))


def build_heightfield(
    config,
    layout,
    offsets: np.ndarray,
    height_curve=DEFAULT_HEIGHT_CURVE,
    influence_curve=DEFAULT_INFLUENCE_CURVE,
    z_start: int = 0,
    z_stop: int = None,
    max_iterations: int = DEFAULTS.MAX_ITERATIONS,
) -> np.ndarray:
    """
    Computes heights for grid rows [z_start, z_stop) as a (rows, x_size + 1)
    array. With the default range this is the whole (z_size + 1, x_size + 1)
    heightfield. A negative grid size yields an empty (0, 0) array.
    """
    if config.x_size < 0 or config.z_size < 0:
        return np.zeros((0, 0), dtype=np.float64)

    row_count = config.z_size + 1
    z_stop = row_count if z_stop is None else min(z_stop, row_count)
    z_start = max(z_start, 0)
    z_stop = max(z_stop, z_start)

    xs = np.arange(config.x_size + 1, dtype=np.float64)
    zs = np.arange(z_start, z_stop, dtype=np.float64)
    z_grid, x_grid = np.meshgrid(zs, xs, indexing='ij')

    # 1. Layered noise (fBm).
    scale = config.effective_scale
    amplitude = DEFAULTS.INITIAL_AMPLITUDE
    frequency = 1.0
    noise_height = np.zeros(x_grid.shape, dtype=np.float64)

    for o in range(_octave_count(config, offsets)):
        if _octaves_exhausted(amplitude, frequency):
            break
        map_z = z_grid / scale * frequency + offsets[o, 1]
        map_x = x_grid / scale * frequency + offsets[o, 0]
        perlin_values = noise.sample_2d_grid(noise.PERMUTATION_TABLE, map_z, map_x)
        noise_height += evaluate_curve(height_curve, perlin_values) * amplitude
        frequency *= config.lacunarity
        amplitude *= DEFAULTS.PERSISTENCE

    # 2. Fractal mask.
    if config.use_julia_sets:
        c1_real, c1_imag = layout.julia_constant
        c2_real, c2_imag = layout.julia_constant_2
        julia_mask_1 = fractals.julia_grid(
            config.x_size, config.z_size, z_start, z_stop,
            float(c1_real), float(c1_imag), int(max_iterations)
        )
        julia_mask_2 = fractals.julia_grid(
            config.x_size, config.z_size, z_start, z_stop,
            float(c2_real), float(c2_imag), int(max_iterations)
        )
        return lerp(config.base_height, noise_height, julia_mask_1 + julia_mask_2)

    mandelbrot_mask = fractals.mandelbrot_grid(
        config.x_size, config.z_size, z_start, z_stop,
        float(layout.rotation_angle), bool(layout.reflect_x), bool(layout.reflect_z),
        float(layout.mandelbrot_zoom), int(max_iterations)
    )
    perlin_mask = noise.perlin_01_grid(
        noise.PERMUTATION_TABLE,
        x_grid * DEFAULTS.PERLIN_MASK_FREQUENCY,
        z_grid * DEFAULTS.PERLIN_MASK_FREQUENCY,
    )
    blended_mask = lerp(0.0, mandelbrot_mask, perlin_mask)
    blend_factor = evaluate_curve(influence_curve, blended_mask)
    return lerp(config.base_height, noise_height, blend_factor)
