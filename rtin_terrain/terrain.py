"""Dense terrain mesh: one quad per height-map pixel, heights sampled at pixel corners."""

from __future__ import annotations

import math

from .common import HeightMap, TerrainImageLoadOptions
from .mesh import Mesh, PrimitiveTopology

DEFAULT_TERRAIN_FILE = "terrain.png"


def sample_vertex_height(cy: int, cx: int, heightmap: HeightMap) -> float:
    """Return the mean normalised height of the pixels touching grid corner ``(cx, cy)``.

    Returns NaN when no pixel touches the corner.
    """
    samples = [
        heightmap.normalized(sx, sy)
        for sy in (cy - 1, cy)
        for sx in (cx - 1, cx)
        if 0 <= sx < heightmap.width and 0 <= sy < heightmap.height
    ]
    if not samples:
        return math.nan
    return sum(samples) / len(samples)


def build_terrain_grid_mesh(
    heightmap: HeightMap, options: TerrainImageLoadOptions
) -> Mesh:
    """Build a smooth-shaded triangle mesh with a vertex at every pixel corner."""
    width, height = heightmap.width, heightmap.height
    if width == 0 or height == 0:
        raise ValueError("cannot build a terrain mesh from an empty height map")

    positions = []
    uvs = []
    for cy in range(height + 1):
        for cx in range(width + 1):
            sampled = sample_vertex_height(cy, cx, heightmap)
            positions.append(
                (
                    cx * options.pixel_side_length,
                    sampled * options.max_image_height,
                    cy * options.pixel_side_length,
                )
            )
            uvs.append((cx / width, cy / height))

    grid_width = width + 1
    indices: list[int] = []
    for cy in range(height):
        for cx in range(width):
            top_left = cy * grid_width + cx
            bottom_left = (cy + 1) * grid_width + cx
            indices.extend((top_left, bottom_left + 1, top_left + 1))
            indices.extend((top_left, bottom_left, bottom_left + 1))

    mesh = Mesh(
        PrimitiveTopology.TRIANGLE_LIST,
        positions=positions,
        indices=indices,
        uvs=uvs,
    )
    mesh.compute_smooth_normals()
    return mesh


def load_terrain_bitmap(filename, options: TerrainImageLoadOptions) -> Mesh:
    """Load a 16-bit grayscale image and turn it into a dense terrain mesh."""
    return build_terrain_grid_mesh(HeightMap.open(filename), options)


def terrain_example(filename=DEFAULT_TERRAIN_FILE) -> Mesh:
    """Load ``filename`` with unit height and unit pixel size."""
    options = TerrainImageLoadOptions(max_image_height=1.0, pixel_side_length=1.0)
    return load_terrain_bitmap(filename, options)