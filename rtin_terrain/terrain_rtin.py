"""Right-triangulated irregular network meshing of square height maps."""

from __future__ import annotations

import colorsys
import math
from dataclasses import dataclass, field

from .common import HeightMap, TerrainImageLoadOptions
from .mesh import Mesh, PrimitiveTopology, Vec3
from .rtin import (
    Point,
    get_index_level_start,
    get_triangle_children_bin_ids,
    get_triangle_children_indices,
    get_triangle_coords,
    index_to_bin_id,
    pixel_coords_for_triangle_mid_point,
)

_GRADIENT_START = colorsys.rgb_to_hsv(1.0, 0.1, 0.1)
_GRADIENT_END = colorsys.rgb_to_hsv(0.1, 1.0, 1.0)
_WIREFRAME_EDGES = (0, 1, 1, 2, 2, 0)
_UV_SCALE = 100.0


@dataclass
class RtinParams:
    """Parameters of RTIN terrain generation."""

    error_threshold: float = 0.2
    load_options: TerrainImageLoadOptions = field(default_factory=TerrainImageLoadOptions)


@dataclass
class TerrainMeshData:
    """Unscaled vertices (x, normalised height, z) and triangle indices."""

    vertices: list[Vec3] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)


def is_power_of_2(x: int) -> bool:
    """Return True if ``x`` is a positive power of two."""
    return x > 0 and x & (x - 1) == 0


def validate_rtin_heightmap(heightmap: HeightMap) -> None:
    """Raise ValueError unless the height map is square with a power-of-two side."""
    if heightmap.width != heightmap.height:
        raise ValueError(
            f"RTIN needs a square height map, got {heightmap.width}x{heightmap.height}"
        )
    if not is_power_of_2(heightmap.width):
        raise ValueError(f"RTIN needs a power-of-two side, got {heightmap.width}")


def triangle_errors_vec_index(bin_id: int, grid_size: int) -> int:
    """Return the error slot of a triangle: its hypotenuse midpoint on the grid."""
    x, y = pixel_coords_for_triangle_mid_point(bin_id, grid_size)
    return y * grid_size + x


def sample_heightmap_height_corner_mean(heightmap: HeightMap, corner: Point) -> float:
    """Return the normalised height at a grid corner, clamped to the image."""
    x = min(corner[0], heightmap.width - 1)
    y = min(corner[1], heightmap.height - 1)
    return heightmap.normalized(x, y)


def build_triangle_errors_vec(heightmap: HeightMap) -> list[float]:
    """Return, per grid point, the largest error of any triangle split there."""
    validate_rtin_heightmap(heightmap)
    side = heightmap.width
    if side < 2:
        raise ValueError("RTIN needs a height map of at least 2x2 pixels")

    grid_size = side + 1
    number_of_triangles = side * side * 2 - 2
    number_of_levels = (side.bit_length() - 1) * 2
    last_level_index_start = get_index_level_start(number_of_levels - 1)

    errors = [0.0] * (grid_size * grid_size)

    for triangle_index in reversed(range(number_of_triangles)):
        bin_id = index_to_bin_id(triangle_index)
        a, b, _ = get_triangle_coords(bin_id, grid_size)
        midpoint = pixel_coords_for_triangle_mid_point(bin_id, grid_size)
        interpolated = (
            sample_heightmap_height_corner_mean(heightmap, b)
            + sample_heightmap_height_corner_mean(heightmap, a)
        ) / 2.0
        error = abs(interpolated - sample_heightmap_height_corner_mean(heightmap, midpoint))
        slot = triangle_errors_vec_index(bin_id, grid_size)

        if triangle_index >= last_level_index_start:
            errors[slot] = error
        else:
            right, left = get_triangle_children_bin_ids(bin_id)
            errors[slot] = max(
                errors[slot],
                errors[triangle_errors_vec_index(left, grid_size)],
                errors[triangle_errors_vec_index(right, grid_size)],
                error,
            )

    return errors


def rtin_select_triangles_for_heightmap(
    heightmap: HeightMap, errors_vec: list[float], error_threshold: float
) -> list[int]:
    """Return the bin ids of the triangles whose error is within the threshold."""
    side = heightmap.width
    grid_size = side + 1
    last_level_triangles = side * side * 2
    number_of_triangles = side * side * 2 - 2 + last_level_triangles

    selected: list[int] = []
    pending = [1, 0]
    while pending:
        triangle_index = pending.pop()
        bin_id = index_to_bin_id(triangle_index)
        right_index, left_index = get_triangle_children_indices(bin_id)
        is_leaf = right_index >= number_of_triangles
        error = errors_vec[triangle_errors_vec_index(bin_id, grid_size)]

        if error <= error_threshold or is_leaf:
            selected.append(bin_id)
        else:
            pending.append(right_index)
            pending.append(left_index)

    return selected


def rtin_build_terrain_from_heightmap(
    heightmap: HeightMap, error_threshold: float
) -> TerrainMeshData:
    """Triangulate a height map, sharing vertices between triangles."""
    errors = build_triangle_errors_vec(heightmap)
    grid_size = heightmap.width + 1

    data = TerrainMeshData()
    positions: dict[int, int] = {}

    for bin_id in rtin_select_triangles_for_heightmap(heightmap, errors, error_threshold):
        for corner in get_triangle_coords(bin_id, grid_size):
            vertex_id = corner[1] * grid_size + corner[0]
            vertex_index = positions.get(vertex_id)
            if vertex_index is None:
                vertex_index = len(data.vertices)
                positions[vertex_id] = vertex_index
                height = sample_heightmap_height_corner_mean(heightmap, corner)
                data.vertices.append((float(corner[0]), height, float(corner[1])))
            data.indices.append(vertex_index)

    return data


def _hue_difference_degrees(start: float, end: float) -> float:
    diff = (end - start) * 360.0
    return diff - math.ceil((diff + 180.0) / 360.0 - 1.0) * 360.0


def _encode_srgb(component: float) -> float:
    if component <= 0.0031308:
        return 12.92 * component
    return 1.055 * component ** (1.0 / 2.4) - 0.055


def height_color(height: float) -> tuple[float, float, float]:
    """Return the sRGB colour of a normalised height on the red-to-cyan gradient."""
    if height <= 0.0:
        hue, saturation, value = _GRADIENT_START
        hue *= 360.0
    elif height >= 1.0:
        hue, saturation, value = _GRADIENT_END
        hue *= 360.0
    else:
        h0, s0, v0 = _GRADIENT_START
        h1, s1, v1 = _GRADIENT_END
        hue = h0 * 360.0 + height * _hue_difference_degrees(h0, h1)
        saturation = s0 + height * (s1 - s0)
        value = v0 + height * (v1 - v0)
    linear = colorsys.hsv_to_rgb((hue / 360.0) % 1.0, saturation, value)
    red, green, blue = (_encode_srgb(c) for c in linear)
    return red, green, blue


def rtin_make_terrain_mesh(
    terrain_mesh_data: TerrainMeshData,
    load_options: TerrainImageLoadOptions,
    enable_wireframe: bool,
) -> Mesh:
    """Turn mesh data into a flat-shaded triangle mesh or a line wireframe."""
    positions = [
        (
            x * load_options.pixel_side_length,
            y * load_options.max_image_height,
            z * load_options.pixel_side_length,
        )
        for x, y, z in terrain_mesh_data.vertices
    ]
    colors = [height_color(y) for _, y, _ in terrain_mesh_data.vertices]
    uvs = [(x / _UV_SCALE, z / _UV_SCALE) for x, _, z in terrain_mesh_data.vertices]

    source = terrain_mesh_data.indices
    triangle_count = len(source) // 3
    corners = _WIREFRAME_EDGES if enable_wireframe else (0, 1, 2)
    indices = [
        source[triangle * 3 + corner]
        for triangle in range(triangle_count)
        for corner in corners
    ]

    topology = PrimitiveTopology.LINE_LIST if enable_wireframe else PrimitiveTopology.TRIANGLE_LIST
    mesh = Mesh(topology, positions=positions, indices=indices, uvs=uvs, colors=colors)

    if not enable_wireframe:
        mesh.duplicate_vertices()
        mesh.compute_flat_normals()

    return mesh


def rtin_load_terrain(filename, rtin_params: RtinParams) -> tuple[Mesh, Mesh]:
    """Load a height map file and return its (shaded, wireframe) meshes."""
    heightmap = HeightMap.open(filename)
    data = rtin_build_terrain_from_heightmap(heightmap, rtin_params.error_threshold)
    shaded = rtin_make_terrain_mesh(data, rtin_params.load_options, False)
    wireframe = rtin_make_terrain_mesh(data, rtin_params.load_options, True)
    return shaded, wireframe