"""Shared pytest fixtures for all test modules."""
import pytest
import numpy as np

from terrain_generator import ResponseCurve, TerrainConfig
from terrain_generator.layout import RandomLayout


# === Configuration Fixtures ===

@pytest.fixture
def small_config():
    """Small Julia-mode grid for fast tests."""
    return TerrainConfig(x_size=8, z_size=6, scale=4.3, octaves=3, lacunarity=2.0)


@pytest.fixture
def mandelbrot_config():
    """Small Mandelbrot-mode grid."""
    return TerrainConfig(
        x_size=8, z_size=6, scale=4.3, octaves=3, lacunarity=2.0, use_julia_sets=False
    )


@pytest.fixture
def rng():
    """Seeded random source for reproducible layouts."""
    return np.random.default_rng(1234)


# === Layout Fixtures ===

@pytest.fixture
def plain_layout():
    """No rotation or reflection; mid-range zoom and Julia constants."""
    return RandomLayout(
        rotation_angle=0.0,
        reflect_x=False,
        reflect_z=False,
        mandelbrot_zoom=0.5,
        julia_constant=(-0.4, 0.6),
        julia_constant_2=(0.285, 0.01),
        island_centers=((1.0, 2.0), (3.0, 1.5)),
        noise_seed=42,
    )


# === Curve Fixtures ===

@pytest.fixture
def identity_height_curve():
    return ResponseCurve.identity(-1.0, 1.0)


@pytest.fixture
def identity_influence_curve():
    return ResponseCurve.identity(0.0, 1.0)
