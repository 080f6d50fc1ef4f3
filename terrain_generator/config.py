# terrain_generator/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the terrain
generator. These values are used if they are not explicitly provided by the
user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC TERRAIN.
Instead, pass a configuration dictionary to the TerrainGenerator instance.
================================================================================
"""

# --- Grid ---
# Number of quads along each axis. The vertex grid is one larger per axis.
DEFAULT_X_SIZE = 100
DEFAULT_Z_SIZE = 100

# --- Noise Generation ---
DEFAULT_SCALE = 20.0
DEFAULT_OCTAVES = 4
DEFAULT_LACUNARITY = 2.0

# A scale at or below zero is replaced by this value before any division.
MIN_SCALE = 0.0001

# The first octave's amplitude and the per-octave decay. Not user-tunable.
INITIAL_AMPLITUDE = 12.0
PERSISTENCE = 0.5

# Octave offsets are drawn from [-OCTAVE_OFFSET_RANGE, OCTAVE_OFFSET_RANGE).
OCTAVE_OFFSET_RANGE = 100000

# The per-run noise seed is drawn from [0, NOISE_SEED_RANGE).
NOISE_SEED_RANGE = 1000

# Seed for the fixed gradient lattice behind sample_2d. Changing it changes
# every terrain ever generated, so it is not exposed in the user config.
NOISE_PERMUTATION_SEED = 1337

# --- Heights ---
DEFAULT_BASE_HEIGHT = 0.0
DEFAULT_WATER_HEIGHT = 50.0

# --- Fractal Masks ---
DEFAULT_USE_JULIA_SETS = True
MAX_ITERATIONS = 2000
# |z|^2 >= 4 means |z| >= 2, past which the orbit always diverges.
ESCAPE_RADIUS_SQUARED = 4.0

# Frequency of the low-frequency noise that modulates the Mandelbrot mask.
PERLIN_MASK_FREQUENCY = 0.05

# --- Random Layout ---
MANDELBROT_ZOOM_RANGE = (0.3, 0.9)
JULIA_CONSTANT_RANGE = (-1.0, 1.0)
# The mask is rotated by a whole number of these steps (0, 90, 180 or 270).
ROTATION_STEP_DEGREES = 90.0
ROTATION_STEPS = 4
DEFAULT_ISLAND_COUNT = 2
# Island centers fall in [0, size * scale / ISLAND_SPREAD_DIVISOR).
ISLAND_SPREAD_DIVISOR = 10.0

# --- Engine Hand-off ---
# Uniform scale the consumer applies to the finished terrain mesh.
MESH_SCALE = 500
# The water plane sits at (scale * scale * WATER_PLANE_OFFSET_FACTOR) on X and Z.
WATER_PLANE_OFFSET_FACTOR = 10.0

# --- Performance ---
# Rows computed between cancellation checks and progress updates.
ROW_BAND_SIZE = 32
