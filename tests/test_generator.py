"""Tests for the terrain generation orchestrator."""
import dataclasses
import logging

import numpy as np
import pytest

from terrain_generator import (
    GenerationCancelled,
    TerrainConfig,
    TerrainGenerator,
    generate_terrain,
)
from terrain_generator import config as DEFAULTS
from terrain_generator.generator import water_plane_for


class RecordingSink:
    """Stands in for the engine-side mesh consumer."""

    def __init__(self):
        self.meshes = []
        self.water_planes = []

    def update_mesh(self, vertices, triangles, mesh_scale):
        self.meshes.append((vertices, triangles, mesh_scale))

    def place_water_plane(self, water_plane):
        self.water_planes.append(water_plane)


class TestGenerateTerrain:
    """Tests for a single generation run."""

    def test_output_shapes(self, small_config, rng):
        result = generate_terrain(small_config, rng)
        assert result.vertices.shape == (9 * 7, 3)
        assert result.heights.shape == (7, 9)
        assert len(result.triangles) == 8 * 6 * 6
        assert result.triangles.max() < 9 * 7
        assert result.offsets.shape == (3, 2)

    def test_vertices_carry_grid_coordinates(self, small_config, rng):
        result = generate_terrain(small_config, rng)
        np.testing.assert_array_equal(result.vertices[10], [1.0, result.heights[1, 1], 1.0])
        np.testing.assert_array_equal(result.vertices[:, 1], result.heights.ravel())

    def test_seeded_runs_are_identical(self, small_config):
        first = generate_terrain(small_config, np.random.default_rng(77))
        second = generate_terrain(small_config, np.random.default_rng(77))
        assert first.layout == second.layout
        np.testing.assert_array_equal(first.vertices, second.vertices)
        np.testing.assert_array_equal(first.triangles, second.triangles)

    def test_replayed_layout_is_identical(self, mandelbrot_config, rng):
        first = generate_terrain(mandelbrot_config, rng)
        replay = generate_terrain(mandelbrot_config, np.random.default_rng(999), layout=first.layout)
        assert replay.layout is first.layout
        np.testing.assert_array_equal(first.heights, replay.heights)

    def test_injected_layout_does_not_touch_rng(self, small_config, plain_layout):
        rng = np.random.default_rng(4)
        state = rng.bit_generator.state
        generate_terrain(small_config, rng, layout=plain_layout)
        assert rng.bit_generator.state == state

    def test_outputs_are_read_only(self, small_config, rng):
        result = generate_terrain(small_config, rng)
        with pytest.raises(ValueError):
            result.vertices[0, 1] = 100.0
        with pytest.raises(ValueError):
            result.triangles[0] = 3

    def test_single_vertex_grid(self, small_config, rng):
        """x_size = z_size = 0 gives one vertex and no triangles."""
        config = dataclasses.replace(small_config, x_size=0, z_size=0)
        result = generate_terrain(config, rng)
        assert result.vertices.shape == (1, 3)
        assert result.triangles.size == 0

    def test_negative_grid_is_empty(self, small_config, rng, caplog):
        config = dataclasses.replace(small_config, x_size=-3)
        with caplog.at_level(logging.WARNING):
            result = generate_terrain(config, rng)
        assert result.vertices.shape == (0, 3)
        assert result.triangles.size == 0
        assert "negative" in caplog.text

    @pytest.mark.parametrize("use_julia_sets", [True, False])
    def test_zero_scale_has_no_nan(self, small_config, rng, use_julia_sets):
        config = dataclasses.replace(small_config, scale=0.0, use_julia_sets=use_julia_sets)
        result = generate_terrain(config, rng)
        assert np.isfinite(result.vertices).all()

    def test_spans_several_row_bands(self, rng):
        config = TerrainConfig(x_size=4, z_size=DEFAULTS.ROW_BAND_SIZE * 2 + 3, scale=3.7, octaves=2)
        result = generate_terrain(config, rng)
        assert result.heights.shape == (config.z_size + 1, 5)

    def test_cancellation(self, rng):
        config = TerrainConfig(x_size=4, z_size=DEFAULTS.ROW_BAND_SIZE * 3, scale=3.7, octaves=2)
        calls = []

        def should_cancel():
            calls.append(1)
            return len(calls) > 1

        with pytest.raises(GenerationCancelled):
            generate_terrain(config, rng, should_cancel=should_cancel)
        assert len(calls) == 2

    def test_logs_layout(self, small_config, rng, caplog):
        with caplog.at_level(logging.INFO):
            generate_terrain(small_config, rng)
        assert "rotation" in caplog.text


class TestWaterPlane:
    """Tests for the water companion placement."""

    def test_placement(self):
        plane = water_plane_for(TerrainConfig(x_size=10, z_size=20, scale=2.0, water_height=12.0))
        assert plane.position == (40.0, 12.0, 40.0)
        assert plane.scale == (20.0, 1.0, 40.0)

    def test_uses_clamped_scale(self):
        plane = water_plane_for(TerrainConfig(x_size=10, z_size=10, scale=0.0))
        assert plane.scale[0] == pytest.approx(10 * DEFAULTS.MIN_SCALE)


class TestTerrainGenerator:
    """Tests for the stateful orchestrator."""

    def test_accepts_dict_config(self):
        generator = TerrainGenerator({'x_size': 4, 'z_size': 3, 'octaves': 2})
        assert generator.config == TerrainConfig(x_size=4, z_size=3, octaves=2)

    def test_each_run_draws_a_new_layout(self, small_config, rng):
        generator = TerrainGenerator(small_config, rng=rng)
        first = generator.generate()
        second = generator.generate()
        assert first.layout != second.layout
        assert not np.array_equal(first.heights, second.heights)

    def test_custom_curves_are_used(self, mandelbrot_config, rng, plain_layout):
        config = dataclasses.replace(mandelbrot_config, base_height=3.0)
        generator = TerrainGenerator(config, rng=rng, influence_curve=lambda t: 0.0)
        result = generator.generate(layout=plain_layout)
        np.testing.assert_array_equal(result.heights, np.full((7, 9), 3.0))

    def test_publish(self, small_config, rng):
        generator = TerrainGenerator(small_config, rng=rng)
        result = generator.generate()
        sink = RecordingSink()
        generator.publish(result, sink)
        vertices, triangles, mesh_scale = sink.meshes[0]
        assert vertices is result.vertices
        assert triangles is result.triangles
        assert mesh_scale == DEFAULTS.MESH_SCALE
        assert sink.water_planes == [result.water_plane]
