import pytest

from rtin_terrain.rtin import (
    PartitionStep,
    bin_id_to_index,
    bin_id_to_index_in_level,
    bin_id_to_level,
    bin_id_to_partition_steps,
    get_index_level_start,
    get_triangle_children_bin_ids,
    get_triangle_children_indices,
    get_triangle_coords,
    index_to_bin_id,
    msbscan,
    pixel_coords_for_triangle_mid_point,
)


@pytest.mark.parametrize(
    "level, expected", [(0, 0b0), (1, 0b10), (1, 2), (2, 0b110), (2, 6), (3, 0b1110), (3, 14)]
)
def test_get_index_level_start(level, expected):
    assert get_index_level_start(level) == expected


@pytest.mark.parametrize(
    "bin_id, expected",
    [(0b10, 0), (0b11, 1), (0b100, 0), (0b101, 1), (0b110, 2), (0b111, 3)],
)
def test_bin_id_to_index_in_level(bin_id, expected):
    assert bin_id_to_index_in_level(bin_id) == expected


@pytest.mark.parametrize("value, expected", [(0b0000_0000, 0), (0b0000_0001, 1), (0b0001_1001, 5)])
def test_msbscan(value, expected):
    assert msbscan(value) == expected


@pytest.mark.parametrize(
    "bin_id, expected", [(0b10, 0), (0b11, 1), (0b100, 2), (0b111, 5), (0b1011, 9)]
)
def test_bin_id_to_index(bin_id, expected):
    assert bin_id_to_index(bin_id) == expected


@pytest.mark.parametrize(
    "index, expected", [(0, 0b10), (1, 0b11), (2, 0b100), (5, 0b111), (9, 0b1011)]
)
def test_index_to_bin_id(index, expected):
    assert index_to_bin_id(index) == expected


@pytest.mark.parametrize(
    "bin_id, expected", [(0b10, (0b100, 0b110)), (0b1010, (0b10010, 0b11010))]
)
def test_get_triangle_children_bin_ids(bin_id, expected):
    assert get_triangle_children_bin_ids(bin_id) == expected


def test_pixel_coords_for_triangle_mid_point():
    assert pixel_coords_for_triangle_mid_point(0b10_1110, 5) == (1, 2)


@pytest.mark.parametrize(
    "bin_id, expected",
    [
        (0b11, ((0, 0), (4, 4), (4, 0))),
        (0b110, ((0, 4), (4, 4), (2, 2))),
        (0b1_1110, ((2, 4), (2, 2), (1, 3))),
    ],
)
def test_get_triangle_coords(bin_id, expected):
    assert get_triangle_coords(bin_id, 5) == expected


@pytest.mark.parametrize(
    "bin_id, expected",
    [
        (0b10, [PartitionStep.BOTTOM_LEFT]),
        (0b11, [PartitionStep.TOP_RIGHT]),
        (0b110, [PartitionStep.BOTTOM_LEFT, PartitionStep.LEFT]),
        (
            0b10110,
            [
                PartitionStep.BOTTOM_LEFT,
                PartitionStep.LEFT,
                PartitionStep.LEFT,
                PartitionStep.RIGHT,
            ],
        ),
    ],
)
def test_bin_id_to_partition_steps(bin_id, expected):
    assert bin_id_to_partition_steps(bin_id) == expected


def test_index_bin_id_round_trip():
    for bin_id in range(2, 4096):
        assert index_to_bin_id(bin_id_to_index(bin_id)) == bin_id
    for index in range(0, 4000):
        assert bin_id_to_index(index_to_bin_id(index)) == index


def test_children_are_one_level_deeper_and_indices_agree():
    for bin_id in range(2, 512):
        right, left = get_triangle_children_bin_ids(bin_id)
        level = bin_id_to_level(bin_id)
        assert bin_id_to_level(right) == level + 1
        assert bin_id_to_level(left) == level + 1
        assert get_triangle_children_indices(bin_id) == (
            bin_id_to_index(right),
            bin_id_to_index(left),
        )


def test_children_split_parent_at_hypotenuse_midpoint():
    grid_size = 9
    for bin_id in range(2, 128):
        parent = set(get_triangle_coords(bin_id, grid_size))
        mid = pixel_coords_for_triangle_mid_point(bin_id, grid_size)
        for child in get_triangle_children_bin_ids(bin_id):
            coords = get_triangle_coords(child, grid_size)
            assert coords[2] == mid
            assert set(coords) <= parent | {mid}


def test_partition_steps_length_matches_level():
    for bin_id in range(2, 300):
        assert len(bin_id_to_partition_steps(bin_id)) == bin_id_to_level(bin_id) + 1


@pytest.mark.parametrize("bin_id", [0, 1])
def test_invalid_bin_id_raises(bin_id):
    with pytest.raises(ValueError):
        bin_id_to_level(bin_id)


def test_invalid_grid_size_raises():
    with pytest.raises(ValueError):
        get_triangle_coords(0b10, 0)


def test_negative_index_raises():
    with pytest.raises(ValueError):
        index_to_bin_id(-1)