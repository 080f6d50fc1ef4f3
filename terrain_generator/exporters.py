# terrain_generator/exporters.py

"""
================================================================================
TERRAIN EXPORTERS
================================================================================
Writers that persist a TerrainResult for tools outside this package:

- Wavefront OBJ mesh with vertex normals.
- 8-bit grayscale heightmap PNG (preview).
- 16-bit little-endian RAW heightfield, the layout Unity's terrain importer
  reads.
- generation_config.json: the config and layout that produced the terrain,
  enough to reproduce it.

Heights are normalized to the terrain's own min/max before quantizing; a
perfectly flat terrain maps to zero.
================================================================================
"""

import json
import logging
import os

import numpy as np
from PIL import Image

from .curves import ResponseCurve
from .generator import TerrainResult
from .mesh import compute_vertex_normals


def _normalize_heights(heights: np.ndarray) -> np.ndarray:
    """Maps heights to [0, 1]. Flat or empty input maps to zeros."""
    if heights.size == 0:
        return np.zeros(heights.shape, dtype=np.float64)
    min_height, max_height = float(heights.min()), float(heights.max())
    if max_height > min_height:
        return (heights - min_height) / (max_height - min_height)
    return np.zeros(heights.shape, dtype=np.float64)


def write_obj(result: TerrainResult, path: str) -> str:
    """Writes the mesh as OBJ. Faces use 1-based vertex//normal indices."""
    vertices = result.vertices
    normals = compute_vertex_normals(vertices, result.triangles)
    faces = result.triangles.reshape(-1, 3) + 1

    with open(path, 'w') as f:
        f.write(f"# Terrain {result.config.x_size}x{result.config.z_size}, "
                f"noise seed {result.layout.noise_seed}\n")
        for x, y, z in vertices:
            f.write(f"v {x:.6f} {y:.6f} {z:.6f}\n")
        for nx, ny, nz in normals:
            f.write(f"vn {nx:.6f} {ny:.6f} {nz:.6f}\n")
        for a, b, c in faces:
            f.write(f"f {a}//{a} {b}//{b} {c}//{c}\n")
    return path


def write_heightmap_png(result: TerrainResult, path: str) -> str:
    """Writes an 8-bit grayscale preview, one pixel per vertex, z down the rows."""
    normalized = _normalize_heights(result.heights)
    if normalized.size == 0:
        # Pillow cannot save a zero-sized image; write a single black pixel.
        normalized = np.zeros((1, 1), dtype=np.float64)
    pixels = np.round(normalized * 255).astype(np.uint8)
    Image.fromarray(pixels).save(path, 'PNG')
    return path


def write_raw16(result: TerrainResult, path: str) -> str:
    """Writes heights as 16-bit little-endian unsigned integers, row-major."""
    normalized = _normalize_heights(result.heights)
    raw = np.round(normalized * 65535).astype('<u2')
    with open(path, 'wb') as f:
        f.write(raw.tobytes())
    return path


def write_generation_config(result: TerrainResult, path: str, curves: dict = None, extra: dict = None) -> str:
    """
    Writes the "birth certificate" of a terrain: its config and layout.
    Keyframed curves passed in `curves` are stored with the parameters so the
    file can be fed straight back to the command-line tool.
    """
    parameters = result.config.to_dict()
    for name, curve in (curves or {}).items():
        if isinstance(curve, ResponseCurve):
            parameters[name] = curve.to_keys()
    document = {
        'terrain_generation_parameters': parameters,
        'layout': result.layout.summary(),
        'water_plane': {
            'position': list(result.water_plane.position),
            'scale': list(result.water_plane.scale),
        },
        'mesh_scale': result.mesh_scale,
    }
    if extra:
        document.update(extra)
    with open(path, 'w') as f:
        json.dump(document, f, indent=4)
    return path


def export_terrain(
    result: TerrainResult,
    output_dir: str,
    logger: logging.Logger = None,
    curves: dict = None,
    extra: dict = None,
) -> dict:
    """
    Writes every export format into `output_dir` (created if missing).
    Returns a mapping of format name to written path.
    """
    logger = logger or logging.getLogger(__name__)
    os.makedirs(output_dir, exist_ok=True)
    logger.info(f"Output directory set to '{output_dir}'")

    paths = {
        'obj': write_obj(result, os.path.join(output_dir, "terrain.obj")),
        'png': write_heightmap_png(result, os.path.join(output_dir, "heightmap.png")),
        'raw': write_raw16(result, os.path.join(output_dir, "heightmap.raw")),
        'config': write_generation_config(result, os.path.join(output_dir, "generation_config.json"), curves, extra),
    }
    for kind, path in paths.items():
        logger.info(f"  - {kind}: {path}")
    return paths
