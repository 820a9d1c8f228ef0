import struct

import pytest
from PIL import Image

from rtin_terrain.common import HeightMap, TerrainImageLoadOptions


def test_load_options_defaults_and_override():
    options = TerrainImageLoadOptions()
    assert options.max_image_height == 20.0
    assert options.pixel_side_length == 1.0
    assert TerrainImageLoadOptions(max_image_height=1.0).pixel_side_length == 1.0


def test_from_values_is_row_major():
    heightmap = HeightMap.from_values(2, 2, [0, 256, 256, 1024])
    assert heightmap.get_pixel(0, 0) == 0
    assert heightmap.get_pixel(1, 0) == 256
    assert heightmap.get_pixel(0, 1) == 256
    assert heightmap.get_pixel(1, 1) == 1024


def test_from_values_ignores_extra_values():
    heightmap = HeightMap.from_values(1, 1, [5, 6])
    assert heightmap.pixels == (5,)


def test_from_values_too_short_raises():
    with pytest.raises(ValueError):
        HeightMap.from_values(2, 2, [1, 2, 3])


@pytest.mark.parametrize("bad", [-1, 65536])
def test_out_of_range_value_raises(bad):
    with pytest.raises(ValueError):
        HeightMap.from_values(1, 1, [bad])


@pytest.mark.parametrize("x, y", [(2, 0), (0, 2), (-1, 0)])
def test_get_pixel_out_of_bounds(x, y):
    heightmap = HeightMap.from_values(2, 2, [0, 1, 2, 3])
    with pytest.raises(IndexError):
        heightmap.get_pixel(x, y)


def test_normalized_extremes():
    heightmap = HeightMap.from_values(2, 1, [0, 65535])
    assert heightmap.normalized(0, 0) == 0.0
    assert heightmap.normalized(1, 0) == 1.0


def test_open_sixteen_bit_png_round_trip(tmp_path):
    values = [0, 256, 40000, 65535, 7, 1024]
    path = tmp_path / "height.png"
    image = Image.frombytes("I;16", (3, 2), struct.pack("<6H", *values))
    image.save(path)

    heightmap = HeightMap.open(path)
    assert (heightmap.width, heightmap.height) == (3, 2)
    assert list(heightmap.pixels) == values


def test_open_rejects_colour_image(tmp_path):
    path = tmp_path / "colour.png"
    Image.new("RGB", (2, 2)).save(path)
    with pytest.raises(ValueError):
        HeightMap.open(path)


def test_open_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        HeightMap.open(tmp_path / "missing.png")