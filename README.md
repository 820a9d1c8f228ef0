# rtin-terrain

Build terrain meshes from 16-bit grayscale heightmaps using a right-triangulated
irregular network (RTIN). Flat regions are covered by a few large triangles, rough
regions are refined down to pixel-sized triangles, all driven by one error threshold.
A dense grid mesh builder and a renderer-independent orbit camera are included.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Heightmaps

`rtin_terrain.common.HeightMap` is an immutable, row-major grid of 16-bit values
(`width`, `height`, `pixels`). Values outside 0..65535 or a wrong pixel count raise
`ValueError`.

- `HeightMap.open(filename)` loads an image with Pillow. Only 16-bit grayscale modes
  (`I;16`, `I;16L`, `I;16B`) and mode `I` are accepted; other modes raise `ValueError`.
- `HeightMap.from_values(width, height, values)` builds one in memory; extra values are
  ignored, too few raise `ValueError`.
- `get_pixel(x, y)` returns the raw value (`IndexError` outside the map) and
  `normalized(x, y)` returns it divided by 65535.

```python
from rtin_terrain.common import HeightMap

heightmap = HeightMap.from_values(2, 2, [0, 256, 256, 1024])
heightmap.get_pixel(1, 1)    # 1024
heightmap.normalized(1, 1)   # 1024 / 65535
```

`TerrainImageLoadOptions` holds `max_image_height` (default `20.0`) and
`pixel_side_length` (default `1.0`). `MeshStyle` has the members `SHADED` and
`WIREFRAME`.

## RTIN meshes

`rtin_terrain.terrain_rtin` needs a square heightmap whose side is a power of two and at
least 2 (`validate_rtin_heightmap` and `build_triangle_errors_vec` raise `ValueError`
otherwise).

```python
from rtin_terrain.common import TerrainImageLoadOptions
from rtin_terrain.terrain_rtin import (
    RtinParams,
    rtin_build_terrain_from_heightmap,
    rtin_make_terrain_mesh,
    rtin_load_terrain,
)

data = rtin_build_terrain_from_heightmap(heightmap, error_threshold=0.2)
shaded = rtin_make_terrain_mesh(data, TerrainImageLoadOptions(), enable_wireframe=False)
wireframe = rtin_make_terrain_mesh(data, TerrainImageLoadOptions(), enable_wireframe=True)

# or straight from an image file:
shaded, wireframe = rtin_load_terrain("terrain.png", RtinParams())
```

- `build_triangle_errors_vec(heightmap)` returns, per grid point, the largest error of
  any triangle split at that point.
- `rtin_select_triangles_for_heightmap(heightmap, errors_vec, error_threshold)` returns
  the bin ids of the chosen triangles.
- `rtin_build_terrain_from_heightmap` returns a `TerrainMeshData` with shared,
  unscaled vertices `(x, normalised height, z)` and triangle indices.
- `rtin_make_terrain_mesh` scales the vertices by the load options, colours each vertex
  with `height_color` (a red-to-cyan gradient over the normalised height, in sRGB) and
  sets UVs to `x / 100, z / 100`. Shaded meshes are triangle lists with duplicated
  vertices and flat normals; wireframe meshes are indexed line lists with the three
  edges of every triangle.

`RtinParams` defaults to an error threshold of `0.2` and default load options.

The triangle addressing lives in `rtin_terrain.rtin`: `index_to_bin_id`,
`bin_id_to_index`, `bin_id_to_level`, `bin_id_to_index_in_level`,
`get_index_level_start`, `get_triangle_children_bin_ids`,
`get_triangle_children_indices`, `bin_id_to_partition_steps` (a list of
`PartitionStep`), `get_triangle_coords`, `pixel_coords_for_triangle_mid_point` and
`msbscan`.

## Meshes

`rtin_terrain.mesh.Mesh` holds a `PrimitiveTopology` (`TRIANGLE_LIST` or `LINE_LIST`),
`positions`, and optional `indices`, `uvs`, `colors` and `normals`. Methods:
`triangles()`, `duplicate_vertices()`, `compute_flat_normals()` (unindexed triangle
lists only) and `compute_smooth_normals()` (indexed triangle lists only, area-weighted).

## Regular grid meshes

`rtin_terrain.terrain.load_terrain_bitmap(filename, options)` builds a full-resolution
triangle mesh with smooth normals and one vertex per pixel corner; each vertex height is
the mean of the pixels touching that corner (`sample_vertex_height`).
`build_terrain_grid_mesh(heightmap, options)` does the same from a `HeightMap`, and
`terrain_example(filename="terrain.png")` loads a file with unit height and unit pixel
size.

## Orbit camera

`rtin_terrain.camera` provides an orbit camera with no renderer attached:

- `collect_events(scroll, motion, left_pressed, right_pressed, gamepad, delta_secs)`
  turns one frame of input into `Zoom`, `Rotate` and `Pan` events. Mouse motion rotates
  while the left button is held and pans while only the right one is.
- `GamepadState` records stick and trigger values (`set_axis`, `set_button`,
  `disconnect`) and produces events with `events(delta_secs)`.
- `apply_camera_controls(cameras, events)` applies the events to each camera, stops at
  the first inactive one, and returns how many cameras were moved.
- `OrbitCamera.update(delta_secs)` returns the camera's `(translation, rotation)`, the
  rotation as an `(x, y, z, w)` quaternion, or `None` if the camera is inactive.

## What this package does not do

It only computes meshes and camera poses. It opens no window, draws nothing, has no
settings panel and installs no command; displaying the meshes and feeding input to the
camera is left to the application that uses it.