# terrain_generator/layout.py

"""
================================================================================
RANDOM LAYOUT
================================================================================
Everything random about one terrain run is drawn here, once, at the start of
the run: the fractal mask's rotation and reflections, the Mandelbrot zoom, the
two Julia constants, the island centers and the noise seed. The result is an
immutable RandomLayout that the rest of the pipeline reads but never changes.

Data Contract:
---------------
- Inputs:
    - config (TerrainConfig): Grid size, scale and island count.
    - rng (RandomSource): Any object with uniform/integers/random, e.g.
      `numpy.random.default_rng(seed)`.
- Outputs:
    - A frozen RandomLayout.
- Side Effects: Advances the state of `rng`.
- Invariants: Replaying the same layout reproduces the same terrain.
================================================================================
"""

from dataclasses import dataclass
from typing import Protocol

from . import config as DEFAULTS
from .settings import TerrainConfig


class RandomSource(Protocol):
    """
    The random source the layout draws from. `numpy.random.Generator`
    satisfies it, so a seeded `default_rng` makes a run reproducible.
    """
    def uniform(self, low: float, high: float) -> float: ...
    def integers(self, low: int, high: int) -> int: ...
    def random(self) -> float: ...


@dataclass(frozen=True)
class RandomLayout:
    rotation_angle: float
    reflect_x: bool
    reflect_z: bool
    mandelbrot_zoom: float
    julia_constant: tuple[float, float]
    julia_constant_2: tuple[float, float]
    island_centers: tuple[tuple[float, float], ...]
    noise_seed: int

    def summary(self) -> dict:
        """A JSON-friendly, read-only view for diagnostics and placement."""
        return {
            'rotation_angle': self.rotation_angle,
            'reflect_x': self.reflect_x,
            'reflect_z': self.reflect_z,
            'mandelbrot_zoom': self.mandelbrot_zoom,
            'julia_constant': list(self.julia_constant),
            'julia_constant_2': list(self.julia_constant_2),
            'island_centers': [list(center) for center in self.island_centers],
            'noise_seed': self.noise_seed,
        }

    @classmethod
    def from_summary(cls, summary: dict) -> "RandomLayout":
        """Rebuilds a layout from `summary()` output, e.g. a saved run."""
        return cls(
            rotation_angle=float(summary['rotation_angle']),
            reflect_x=bool(summary['reflect_x']),
            reflect_z=bool(summary['reflect_z']),
            mandelbrot_zoom=float(summary['mandelbrot_zoom']),
            julia_constant=tuple(float(v) for v in summary['julia_constant']),
            julia_constant_2=tuple(float(v) for v in summary['julia_constant_2']),
            island_centers=tuple(
                (float(cx), float(cz)) for cx, cz in summary['island_centers']
            ),
            noise_seed=int(summary['noise_seed']),
        )


def _coin_flip(rng: RandomSource) -> bool:
    return float(rng.random()) > 0.5


def _julia_constant(rng: RandomSource) -> tuple[float, float]:
    low, high = DEFAULTS.JULIA_CONSTANT_RANGE
    return (float(rng.uniform(low, high)), float(rng.uniform(low, high)))


def generate_random_layout(config: TerrainConfig, rng: RandomSource) -> RandomLayout:
    """Draws a fresh layout for one run of `config`."""
    rotation_angle = int(rng.integers(0, DEFAULTS.ROTATION_STEPS)) * DEFAULTS.ROTATION_STEP_DEGREES

    julia_constant = _julia_constant(rng)
    julia_constant_2 = _julia_constant(rng)

    scale = config.effective_scale
    max_island_x = max(config.x_size, 0) * scale / DEFAULTS.ISLAND_SPREAD_DIVISOR
    max_island_z = max(config.z_size, 0) * scale / DEFAULTS.ISLAND_SPREAD_DIVISOR
    island_centers = tuple(
        (float(rng.uniform(0.0, max_island_x)), float(rng.uniform(0.0, max_island_z)))
        for _ in range(max(config.island_count, 0))
    )

    reflect_x = _coin_flip(rng)
    reflect_z = _coin_flip(rng)

    zoom_low, zoom_high = DEFAULTS.MANDELBROT_ZOOM_RANGE
    mandelbrot_zoom = float(rng.uniform(zoom_low, zoom_high))

    noise_seed = int(rng.integers(0, DEFAULTS.NOISE_SEED_RANGE))

    return RandomLayout(
        rotation_angle=float(rotation_angle),
        reflect_x=reflect_x,
        reflect_z=reflect_z,
        mandelbrot_zoom=mandelbrot_zoom,
        julia_constant=julia_constant,
        julia_constant_2=julia_constant_2,
        island_centers=island_centers,
        noise_seed=noise_seed,
    )
