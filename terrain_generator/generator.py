# terrain_generator/generator.py

"""
================================================================================
CORE TERRAIN GENERATOR
================================================================================
This module contains the TerrainGenerator class, responsible for running the
full pipeline: draw a random layout, derive octave offsets, build the
heightfield, triangulate the grid and hand the result to a mesh consumer.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict or TerrainConfig): Parameters which can override the
      internal defaults. Expected keys include 'x_size', 'scale', etc.
    - logger: A configured Python logging object for runtime messages.
    - rng: A seedable random source (see layout.RandomSource).
    - height_curve, influence_curve: `float -> float` response curves.
- Outputs (from methods):
    - An immutable TerrainResult holding the vertices, triangle indices,
      the layout that produced them and the water plane placement.
- Side Effects: Logs messages using the provided logger. Only `publish`
  talks to the outside world, through the MeshSink it is given.
- Invariants: Given the same config, curves and layout, the output is
  identical. Generation never raises for bad sizes or scales.
================================================================================
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Union

import numpy as np
from tqdm import tqdm

from . import config as DEFAULTS
from .curves import DEFAULT_HEIGHT_CURVE, DEFAULT_INFLUENCE_CURVE, Curve
from .heightfield import build_heightfield
from .layout import RandomLayout, RandomSource, generate_random_layout
from .mesh import build_triangles, build_vertices
from .noise import derive_octave_offsets
from .settings import TerrainConfig


class GenerationCancelled(RuntimeError):
    """Raised when a caller's cancellation check asks a run to stop."""


@dataclass(frozen=True)
class WaterPlane:
    """Where the consumer should place the water companion object."""
    position: tuple[float, float, float]
    scale: tuple[float, float, float]


def water_plane_for(config: TerrainConfig) -> WaterPlane:
    scale = config.effective_scale
    offset = scale * scale * DEFAULTS.WATER_PLANE_OFFSET_FACTOR
    return WaterPlane(
        position=(offset, config.water_height, offset),
        scale=(scale * config.x_size, 1.0, scale * config.z_size),
    )


def _read_only(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


@dataclass(frozen=True, eq=False)
class TerrainResult:
    config: TerrainConfig
    layout: RandomLayout
    offsets: np.ndarray
    heights: np.ndarray
    vertices: np.ndarray
    triangles: np.ndarray
    water_plane: WaterPlane
    mesh_scale: float = DEFAULTS.MESH_SCALE
    elapsed_seconds: float = 0.0

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles) // 3


class MeshSink(Protocol):
    """
    The engine-side collaborator that receives a finished terrain.
    Implementations upload the mesh and place the water plane; the core
    never touches a scene graph itself.
    """
    def update_mesh(self, vertices: np.ndarray, triangles: np.ndarray, mesh_scale: float) -> None: ...
    def place_water_plane(self, water_plane: WaterPlane) -> None: ...


def generate_terrain(
    config: TerrainConfig,
    rng: RandomSource,
    height_curve: Curve = DEFAULT_HEIGHT_CURVE,
    influence_curve: Curve = DEFAULT_INFLUENCE_CURVE,
    layout: Optional[RandomLayout] = None,
    logger: Optional[logging.Logger] = None,
    progress: bool = False,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> TerrainResult:
    """
    Runs the full pipeline once.

    Args:
        config: The run's parameters.
        rng: The random source a new layout is drawn from. Unused when a
            layout is supplied.
        height_curve: Remaps each noise octave.
        influence_curve: Remaps the blended Mandelbrot mask.
        layout: Replays a previous run's layout instead of drawing one.
        logger: Destination for progress messages.
        progress: Show a tqdm progress bar over row bands.
        should_cancel: Polled between row bands; returning True aborts the
            run with GenerationCancelled.
    """
    logger = logger or logging.getLogger(__name__)
    start_time = time.perf_counter()

    for problem in config.validate():
        logger.warning(problem)

    # 1. Layout and octave offsets, drawn once per run.
    if layout is None:
        layout = generate_random_layout(config, rng)
        logger.info(
            f"Drew layout: rotation {layout.rotation_angle:.0f} deg, "
            f"reflect x={layout.reflect_x} z={layout.reflect_z}, "
            f"zoom {layout.mandelbrot_zoom:.3f}, noise seed {layout.noise_seed}"
        )
    else:
        logger.debug(f"Using injected layout with noise seed {layout.noise_seed}.")
    offsets = derive_octave_offsets(layout.noise_seed, config.octaves)

    # 2. Heightfield, one band of rows at a time.
    if config.x_size < 0 or config.z_size < 0:
        heights = np.zeros((0, 0), dtype=np.float64)
    else:
        row_count = config.z_size + 1
        band_starts = range(0, row_count, DEFAULTS.ROW_BAND_SIZE)
        bands = []
        for z_start in tqdm(band_starts, desc="Building heightfield", unit="band", disable=not progress):
            if should_cancel is not None and should_cancel():
                logger.warning(f"Generation cancelled at row {z_start}/{row_count}.")
                raise GenerationCancelled(f"Cancelled at row {z_start} of {row_count}")
            bands.append(build_heightfield(
                config, layout, offsets,
                height_curve=height_curve,
                influence_curve=influence_curve,
                z_start=z_start,
                z_stop=z_start + DEFAULTS.ROW_BAND_SIZE,
            ))
        heights = np.vstack(bands)

    # 3. Mesh buffers.
    vertices = build_vertices(heights)
    triangles = build_triangles(config.x_size, config.z_size)

    elapsed = time.perf_counter() - start_time
    logger.info(
        f"Generated {len(vertices)} vertices and {len(triangles) // 3} triangles "
        f"in {elapsed:.2f} seconds."
    )

    return TerrainResult(
        config=config,
        layout=layout,
        offsets=_read_only(offsets),
        heights=_read_only(heights),
        vertices=_read_only(vertices),
        triangles=_read_only(triangles),
        water_plane=water_plane_for(config),
        elapsed_seconds=elapsed,
    )


class TerrainGenerator:
    """
    Owns a terrain configuration and its response curves and produces a new
    terrain on every `generate()` call. This class is backend-only and does
    not handle any rendering.
    """
    def __init__(
        self,
        config: Union[dict, TerrainConfig],
        logger: Optional[logging.Logger] = None,
        rng: Optional[RandomSource] = None,
        height_curve: Curve = DEFAULT_HEIGHT_CURVE,
        influence_curve: Curve = DEFAULT_INFLUENCE_CURVE,
    ):
        """
        Initializes the terrain generator.

        Args:
            config: User-defined parameters, as a dict or a TerrainConfig.
            logger: The logger instance for all output.
            rng: The random source for layouts. If None, an unseeded
                `numpy.random.default_rng()` is used.
            height_curve: Remaps each noise octave.
            influence_curve: Remaps the blended Mandelbrot mask.
        """
        self.logger = logger or logging.getLogger(__name__)
        if isinstance(config, TerrainConfig):
            self.config = config
        else:
            self.config = TerrainConfig.from_dict(config)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.height_curve = height_curve
        self.influence_curve = influence_curve

        mode = "Julia" if self.config.use_julia_sets else "Mandelbrot"
        self.logger.info(
            f"TerrainGenerator initialized: {self.config.x_size}x{self.config.z_size} grid, "
            f"{self.config.octaves} octaves, {mode} mask."
        )

    def generate(
        self,
        layout: Optional[RandomLayout] = None,
        progress: bool = False,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> TerrainResult:
        """
        Generates a terrain. Each call draws a new layout from the generator's
        random source unless `layout` is given, in which case that run is
        reproduced exactly.
        """
        return generate_terrain(
            self.config,
            self.rng,
            height_curve=self.height_curve,
            influence_curve=self.influence_curve,
            layout=layout,
            logger=self.logger,
            progress=progress,
            should_cancel=should_cancel,
        )

    def publish(self, result: TerrainResult, sink: MeshSink) -> None:
        """Hands a finished terrain to the engine-side collaborator."""
        sink.update_mesh(result.vertices, result.triangles, result.mesh_scale)
        sink.place_water_plane(result.water_plane)
        self.logger.info(f"Published terrain mesh ({result.vertex_count} vertices) and water plane.")
