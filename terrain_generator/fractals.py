# terrain_generator/fractals.py

"""
================================================================================
ESCAPE-TIME FRACTAL MASKS
================================================================================
This module turns grid coordinates into [0, 1] masks by counting how long the
orbit of z -> z^2 + c stays bounded. Two variants are provided:

- Mandelbrot: z starts at 0 and c is the (reflected, rotated, zoomed) grid
  point.
- Julia: z starts at the grid point and c is a fixed constant.

Data Contract:
---------------
- Inputs:
    - Grid coordinates (x, z) and the grid dimensions (x_size, z_size).
    - Layout parameters (rotation, reflections, zoom) or a Julia constant.
    - max_iterations: The iteration cap.
- Outputs:
    - iterations / max_iterations, clamped to [0, 1]. A point that never
      escapes scores 1.0.
- Side Effects: None.
- Invariants: Always terminates within max_iterations. A non-finite
  magnitude counts as escaped, so no input produces NaN.
================================================================================
"""

import math

import numpy as np
from numba import njit, prange

from . import config as DEFAULTS

ESCAPE_RADIUS_SQUARED = DEFAULTS.ESCAPE_RADIUS_SQUARED


@njit(cache=True)
def escape_time(a, b, c_real, c_imag, max_iterations):
    """
    Iterates (a, b) -> (a^2 - b^2 + c_real, 2ab + c_imag) until the magnitude
    squared reaches the escape radius or max_iterations is hit.
    Returns the number of iterations performed.
    """
    iterations = 0
    while iterations < max_iterations:
        magnitude = a * a + b * b
        # Written as a negated comparison so NaN also counts as escaped.
        if not magnitude < ESCAPE_RADIUS_SQUARED:
            break
        temp_a = a * a - b * b + c_real
        b = 2.0 * a * b + c_imag
        a = temp_a
        iterations += 1
    return iterations


@njit(cache=True)
def _normalized(iterations, max_iterations):
    if max_iterations <= 0:
        return 0.0
    value = iterations / max_iterations
    return min(1.0, max(0.0, value))


@njit(cache=True)
def _ratio(value, size):
    # A zero-sized axis has a single vertex at 0; map it to 0.
    if size == 0:
        return 0.0
    return value / size


@njit(cache=True)
def rotate_coordinates(x, z, angle_degrees):
    """Rotates (x, z) about the origin by `angle_degrees`."""
    radians = math.radians(angle_degrees)
    cos_a = math.cos(radians)
    sin_a = math.sin(radians)
    return x * cos_a - z * sin_a, x * sin_a + z * cos_a


@njit(cache=True)
def mandelbrot_value(x, z, x_size, z_size, rotation_angle, reflect_x, reflect_z, zoom, max_iterations):
    """Mandelbrot mask at a single grid point."""
    if reflect_x:
        x = x_size - x
    if reflect_z:
        z = z_size - z

    x, z = rotate_coordinates(x, z, rotation_angle)

    real = _ratio(x, x_size) * zoom * 1.5 - 0.5
    imaginary = _ratio(z, z_size) * zoom * 1.5 - 0.25

    iterations = escape_time(0.0, 0.0, real, imaginary, max_iterations)
    return _normalized(iterations, max_iterations)


@njit(cache=True)
def julia_value(x, z, x_size, z_size, c_real, c_imag, max_iterations):
    """Julia mask at a single grid point for the constant c_real + c_imag*i."""
    real = _ratio(x, x_size) * 3.0 - 1.5
    imaginary = _ratio(z, z_size) * 3.0 - 1.0

    iterations = escape_time(real, imaginary, c_real, c_imag, max_iterations)
    return _normalized(iterations, max_iterations)


@njit(parallel=True, cache=True)
def mandelbrot_grid(x_size, z_size, z_start, z_stop, rotation_angle, reflect_x, reflect_z, zoom, max_iterations):
    """
    Mandelbrot mask for grid rows [z_start, z_stop) and every column
    0..x_size. Rows are independent and computed in parallel.
    """
    rows = max(0, z_stop - z_start)
    cols = x_size + 1
    out = np.empty((rows, cols))
    for i in prange(rows):
        z = float(z_start + i)
        for j in range(cols):
            out[i, j] = mandelbrot_value(
                float(j), z, float(x_size), float(z_size),
                rotation_angle, reflect_x, reflect_z, zoom, max_iterations
            )
    return out


@njit(parallel=True, cache=True)
def julia_grid(x_size, z_size, z_start, z_stop, c_real, c_imag, max_iterations):
    """Julia mask for grid rows [z_start, z_stop) and every column 0..x_size."""
    rows = max(0, z_stop - z_start)
    cols = x_size + 1
    out = np.empty((rows, cols))
    for i in prange(rows):
        z = float(z_start + i)
        for j in range(cols):
            out[i, j] = julia_value(
                float(j), z, float(x_size), float(z_size),
                c_real, c_imag, max_iterations
            )
    return out


# --- Layout-aware wrappers ---

def mandelbrot_mask(x, z, x_size, z_size, layout, max_iterations=DEFAULTS.MAX_ITERATIONS) -> float:
    """Mandelbrot mask at (x, z) using the layout's rotation, reflections and zoom."""
    return mandelbrot_value(
        float(x), float(z), float(x_size), float(z_size),
        float(layout.rotation_angle), bool(layout.reflect_x), bool(layout.reflect_z),
        float(layout.mandelbrot_zoom), int(max_iterations)
    )


def julia_mask(x, z, x_size, z_size, constant, max_iterations=DEFAULTS.MAX_ITERATIONS) -> float:
    """Julia mask at (x, z) for `constant`, an (real, imaginary) pair."""
    c_real, c_imag = constant
    return julia_value(
        float(x), float(z), float(x_size), float(z_size),
        float(c_real), float(c_imag), int(max_iterations)
    )
