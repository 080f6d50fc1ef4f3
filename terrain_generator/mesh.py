# terrain_generator/mesh.py

"""
================================================================================
MESH ASSEMBLY
================================================================================
This module turns a heightfield into the arrays a mesh consumer expects:
vertex positions, a triangle index buffer and per-vertex normals.

Data Contract:
---------------
- Inputs:
    - x_size, z_size: Grid dimensions in quads.
    - heights: A (z_size + 1, x_size + 1) array.
- Outputs:
    - vertices: (N, 3) float array of (x, height, z), row-major, z outer.
    - triangles: int32 array of length x_size * z_size * 6.
    - normals: (N, 3) float array of unit vectors.
- Side Effects: None.
- Invariants: Every index in `triangles` is in [0, (x_size + 1) * (z_size + 1)).
  Non-positive sizes produce empty buffers.
================================================================================
"""

import numpy as np


def build_triangles(x_size: int, z_size: int) -> np.ndarray:
    """
    Builds the index buffer for an x_size by z_size grid of quads.

    Cells are visited row-major (z outer). For a cell whose lower-left vertex
    is v, the two triangles are (v, v + x_size + 1, v + 1) and
    (v + 1, v + x_size + 1, v + x_size + 2).
    """
    if x_size <= 0 or z_size <= 0:
        return np.zeros(0, dtype=np.int32)

    row_stride = x_size + 1
    cell_x = np.arange(x_size, dtype=np.int64)
    cell_z = np.arange(z_size, dtype=np.int64)
    v = (cell_z[:, np.newaxis] * row_stride + cell_x[np.newaxis, :]).ravel()

    triangles = np.stack(
        [v, v + row_stride, v + 1, v + 1, v + row_stride, v + row_stride + 1],
        axis=1,
    )
    return triangles.ravel().astype(np.int32)


def build_vertices(heights: np.ndarray) -> np.ndarray:
    """Lays heights out as (x, height, z) triples in row-major order."""
    rows, cols = heights.shape
    if heights.size == 0:
        return np.zeros((0, 3), dtype=np.float64)
    z_grid, x_grid = np.meshgrid(
        np.arange(rows, dtype=np.float64),
        np.arange(cols, dtype=np.float64),
        indexing='ij'
    )
    return np.column_stack((x_grid.ravel(), heights.ravel(), z_grid.ravel()))


def compute_vertex_normals(vertices: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """
    Area-weighted vertex normals: each face normal is added to its three
    vertices, then every sum is normalized. Vertices that belong to no
    triangle get the up vector (0, 1, 0).
    """
    normals = np.zeros(vertices.shape, dtype=np.float64)
    if triangles.size == 0:
        normals[:, 1] = 1.0
        return normals

    faces = triangles.reshape(-1, 3)
    v0 = vertices[faces[:, 0]]
    v1 = vertices[faces[:, 1]]
    v2 = vertices[faces[:, 2]]
    face_normals = np.cross(v1 - v0, v2 - v0)

    for corner in range(3):
        np.add.at(normals, faces[:, corner], face_normals)

    lengths = np.linalg.norm(normals, axis=1)
    unused = lengths == 0
    normals[unused] = (0.0, 1.0, 0.0)
    lengths[unused] = 1.0
    return normals / lengths[:, np.newaxis]
