# terrain_generator/settings.py

"""
================================================================================
TERRAIN CONFIGURATION
================================================================================
This module contains the TerrainConfig class, the single immutable bundle of
user parameters that drives one terrain generation run.

Data Contract:
---------------
- Inputs:
    - config (dict): User-defined parameters. Missing keys fall back to the
      defaults in `config.py`; unknown keys are ignored.
- Outputs:
    - A frozen TerrainConfig instance.
- Side Effects: None. Loading from JSON reads a file.
- Invariants: A TerrainConfig never changes after construction. Values outside
  the documented ranges are reported by `validate()`, never rejected.
================================================================================
"""

import json
from dataclasses import dataclass, asdict

from . import config as DEFAULTS


@dataclass(frozen=True)
class TerrainConfig:
    """
    User-facing parameters for a terrain run.

    Attributes:
        x_size: Quads along the X axis (vertices = x_size + 1).
        z_size: Quads along the Z axis (vertices = z_size + 1).
        scale: Noise scale. Values <= 0 are clamped, see `effective_scale`.
        octaves: Number of fBm noise layers.
        lacunarity: Frequency multiplier between octaves.
        base_height: Height the fractal mask blends towards.
        water_height: Height of the companion water plane.
        use_julia_sets: Julia masks when True, Mandelbrot mask otherwise.
        island_count: Number of island centers drawn per run.
    """
    x_size: int = DEFAULTS.DEFAULT_X_SIZE
    z_size: int = DEFAULTS.DEFAULT_Z_SIZE
    scale: float = DEFAULTS.DEFAULT_SCALE
    octaves: int = DEFAULTS.DEFAULT_OCTAVES
    lacunarity: float = DEFAULTS.DEFAULT_LACUNARITY
    base_height: float = DEFAULTS.DEFAULT_BASE_HEIGHT
    water_height: float = DEFAULTS.DEFAULT_WATER_HEIGHT
    use_julia_sets: bool = DEFAULTS.DEFAULT_USE_JULIA_SETS
    island_count: int = DEFAULTS.DEFAULT_ISLAND_COUNT

    @classmethod
    def from_dict(cls, config: dict) -> "TerrainConfig":
        """Builds a config from a user dictionary, filling in defaults."""
        return cls(
            x_size=int(config.get('x_size', DEFAULTS.DEFAULT_X_SIZE)),
            z_size=int(config.get('z_size', DEFAULTS.DEFAULT_Z_SIZE)),
            scale=float(config.get('scale', DEFAULTS.DEFAULT_SCALE)),
            octaves=int(config.get('octaves', DEFAULTS.DEFAULT_OCTAVES)),
            lacunarity=float(config.get('lacunarity', DEFAULTS.DEFAULT_LACUNARITY)),
            base_height=float(config.get('base_height', DEFAULTS.DEFAULT_BASE_HEIGHT)),
            water_height=float(config.get('water_height', DEFAULTS.DEFAULT_WATER_HEIGHT)),
            use_julia_sets=bool(config.get('use_julia_sets', DEFAULTS.DEFAULT_USE_JULIA_SETS)),
            island_count=int(config.get('island_count', DEFAULTS.DEFAULT_ISLAND_COUNT)),
        )

    @classmethod
    def from_json(cls, path: str) -> "TerrainConfig":
        """
        Loads a config from a JSON file. Parameters may sit at the top level or
        under a 'terrain_generation_parameters' key.
        """
        with open(path, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data.get('terrain_generation_parameters', data))

    def to_dict(self) -> dict:
        return asdict(self)

    @property
    def effective_scale(self) -> float:
        """The scale actually used for division; never zero or negative."""
        if self.scale <= 0:
            return DEFAULTS.MIN_SCALE
        return self.scale

    @property
    def vertex_count(self) -> int:
        """(x_size + 1) * (z_size + 1), or 0 when either size is negative."""
        if self.x_size < 0 or self.z_size < 0:
            return 0
        return (self.x_size + 1) * (self.z_size + 1)

    def validate(self) -> list[str]:
        """Returns a list of problems with this config. Empty means valid."""
        problems = []
        if self.x_size < 0 or self.z_size < 0:
            problems.append(
                f"Grid size {self.x_size}x{self.z_size} is negative; "
                "the terrain will be empty."
            )
        if self.scale <= 0:
            problems.append(
                f"Scale {self.scale} is not positive; clamping to {DEFAULTS.MIN_SCALE}."
            )
        if self.octaves < 0:
            problems.append(f"Octave count {self.octaves} is negative; no noise will be added.")
        if self.island_count < 0:
            problems.append(f"Island count {self.island_count} is negative; no islands will be placed.")
        return problems
