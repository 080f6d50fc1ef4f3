"""Tests for the escape-time fractal masks."""
import dataclasses
import math

import numpy as np
import pytest

from terrain_generator import fractals


class TestEscapeTime:
    """Tests for the shared escape-time iteration."""

    def test_origin_never_escapes(self):
        """c = 0 keeps z at 0 forever, so the cap is reached."""
        assert fractals.escape_time(0.0, 0.0, 0.0, 0.0, 2000) == 2000

    def test_far_point_escapes_quickly(self):
        """c = 2 + 2i leaves the radius-2 disk after one step."""
        assert fractals.escape_time(0.0, 0.0, 2.0, 2.0, 2000) <= 3

    def test_starting_outside_escapes_immediately(self):
        assert fractals.escape_time(3.0, 0.0, 0.0, 0.0, 2000) == 0

    def test_non_finite_counts_as_escaped(self):
        assert fractals.escape_time(math.nan, 0.0, 0.0, 0.0, 100) == 0
        assert fractals.escape_time(math.inf, 0.0, 0.0, 0.0, 100) == 0
        assert fractals.escape_time(0.0, 0.0, 1e300, 1e300, 100) == 1


class TestRotation:
    """Tests for the 2D rotation used by the Mandelbrot mask."""

    def test_quarter_turn(self):
        x, z = fractals.rotate_coordinates(1.0, 0.0, 90.0)
        assert x == pytest.approx(0.0, abs=1e-12)
        assert z == pytest.approx(1.0)

    def test_half_turn(self):
        x, z = fractals.rotate_coordinates(2.0, 3.0, 180.0)
        assert x == pytest.approx(-2.0)
        assert z == pytest.approx(-3.0)

    def test_no_rotation(self):
        assert fractals.rotate_coordinates(2.0, 3.0, 0.0) == (2.0, 3.0)


class TestMandelbrotMask:
    """Tests for the Mandelbrot mask."""

    def test_known_inside_point(self, plain_layout):
        """Grid origin maps to c = -0.5 - 0.25i, inside the main cardioid."""
        assert fractals.mandelbrot_mask(0, 0, 8, 6, plain_layout, 2000) == 1.0

    def test_far_outside_is_near_zero(self, plain_layout):
        """With zoom 2 the far corner maps to c = 2.5 + 2.75i."""
        layout = dataclasses.replace(plain_layout, mandelbrot_zoom=2.0)
        assert fractals.mandelbrot_mask(8, 6, 8, 6, layout, 2000) < 0.01

    def test_bounded(self, plain_layout):
        for angle in (0.0, 90.0, 180.0, 270.0):
            layout = dataclasses.replace(plain_layout, rotation_angle=angle, reflect_x=True)
            for max_iterations in (1, 7, 200):
                for x in range(0, 9, 2):
                    for z in range(0, 7, 3):
                        value = fractals.mandelbrot_mask(x, z, 8, 6, layout, max_iterations)
                        assert 0.0 <= value <= 1.0

    def test_reflection_mirrors_coordinates(self, plain_layout):
        """Reflecting X at x is the same as not reflecting at x_size - x."""
        reflected = dataclasses.replace(plain_layout, reflect_x=True, reflect_z=True)
        for x, z in [(1, 2), (5, 0), (8, 6)]:
            assert fractals.mandelbrot_mask(x, z, 8, 6, reflected, 300) == \
                fractals.mandelbrot_mask(8 - x, 6 - z, 8, 6, plain_layout, 300)

    def test_zero_iterations(self, plain_layout):
        assert fractals.mandelbrot_mask(0, 0, 8, 6, plain_layout, 0) == 0.0

    def test_zero_sized_grid(self, plain_layout):
        value = fractals.mandelbrot_mask(0, 0, 0, 0, plain_layout, 50)
        assert 0.0 <= value <= 1.0

    def test_grid_matches_scalar(self, plain_layout):
        layout = dataclasses.replace(plain_layout, rotation_angle=270.0, reflect_z=True)
        grid = fractals.mandelbrot_grid(
            8, 6, 0, 7, layout.rotation_angle, layout.reflect_x, layout.reflect_z,
            layout.mandelbrot_zoom, 500
        )
        assert grid.shape == (7, 9)
        for z in range(7):
            for x in range(9):
                assert grid[z, x] == fractals.mandelbrot_mask(x, z, 8, 6, layout, 500)


class TestJuliaMask:
    """Tests for the Julia mask."""

    def test_fixed_point_reaches_cap(self):
        """With c = 0, the grid point mapping to z = 0 never moves."""
        assert fractals.julia_mask(4, 2, 8, 6, (0.0, 0.0), 2000) == 1.0

    def test_corner_escapes_for_large_constant(self):
        assert fractals.julia_mask(0, 0, 8, 6, (1.0, 1.0), 2000) < 0.01

    def test_bounded(self):
        rng = np.random.default_rng(3)
        for _ in range(10):
            constant = tuple(rng.uniform(-1.0, 1.0, 2))
            for x in range(9):
                value = fractals.julia_mask(x, 3, 8, 6, constant, 100)
                assert 0.0 <= value <= 1.0

    def test_band_of_rows(self):
        full = fractals.julia_grid(8, 6, 0, 7, -0.8, 0.156, 300)
        band = fractals.julia_grid(8, 6, 2, 5, -0.8, 0.156, 300)
        np.testing.assert_array_equal(band, full[2:5])

    def test_empty_band(self):
        assert fractals.julia_grid(8, 6, 4, 4, 0.0, 0.0, 10).shape == (0, 9)
