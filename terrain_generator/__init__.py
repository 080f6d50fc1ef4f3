# terrain_generator/__init__.py

# This file makes the 'terrain_generator' directory a Python package.
# We can also use it to define the public API of the package.

from .curves import ResponseCurve, DEFAULT_HEIGHT_CURVE, DEFAULT_INFLUENCE_CURVE
from .generator import (
    GenerationCancelled,
    MeshSink,
    TerrainGenerator,
    TerrainResult,
    WaterPlane,
    generate_terrain,
)
from .layout import RandomLayout, RandomSource, generate_random_layout
from .settings import TerrainConfig

__all__ = [
    "ResponseCurve",
    "DEFAULT_HEIGHT_CURVE",
    "DEFAULT_INFLUENCE_CURVE",
    "GenerationCancelled",
    "MeshSink",
    "TerrainGenerator",
    "TerrainResult",
    "WaterPlane",
    "generate_terrain",
    "RandomLayout",
    "RandomSource",
    "generate_random_layout",
    "TerrainConfig",
]
