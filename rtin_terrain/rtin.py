"""Binary-tree addressing of right-triangulated irregular network triangles.

Each triangle is identified by a *bin id*: a leading marker bit followed by
one bit per split, read from the least significant bit upwards. Level 0 holds
the two halves of the square (``0b10`` and ``0b11``); each further level
splits every triangle into a right and a left child.
"""

from __future__ import annotations

import enum

Point = tuple[int, int]
Triangle = tuple[Point, Point, Point]

_U32_BITS = 32
_U32_MASK = (1 << _U32_BITS) - 1


class PartitionStep(enum.Enum):
    """One step on the path from the square down to a triangle."""

    TOP_RIGHT = "TopRight"
    BOTTOM_LEFT = "BottomLeft"
    LEFT = "Left"
    RIGHT = "Right"


def msbscan(value: int) -> int:
    """Return the 1-based position of the most significant set bit, 0 if none."""
    if value < 0:
        raise ValueError(f"msbscan needs a non-negative value, got {value}")
    return value.bit_length()


def get_index_level_start(level: int) -> int:
    """Return the flat index of the first triangle of ``level``."""
    if level < 0:
        raise ValueError(f"level must be non-negative, got {level}")
    return ((2 << level) - 1) & ~1 & _U32_MASK


def bin_id_to_index_in_level(bin_id: int) -> int:
    """Return the position of the triangle among the triangles of its level."""
    if bin_id < 1:
        raise ValueError(f"invalid triangle bin id {bin_id}")
    return bin_id - (1 << (msbscan(bin_id) - 1))


def bin_id_to_level(bin_id: int) -> int:
    """Return the subdivision level of a triangle."""
    if bin_id < 2:
        raise ValueError(f"invalid triangle bin id {bin_id}")
    return msbscan(bin_id) - 2


def bin_id_to_index(bin_id: int) -> int:
    """Convert a triangle bin id to its flat index."""
    level = bin_id_to_level(bin_id)
    return get_index_level_start(level) + bin_id_to_index_in_level(bin_id)


def index_to_bin_id(index: int) -> int:
    """Convert a flat triangle index to its bin id."""
    if index < 0:
        raise ValueError(f"triangle index must be non-negative, got {index}")
    level = 0
    for candidate in range(1, _U32_BITS):
        if get_index_level_start(candidate) > index:
            break
        level = candidate
    return (1 << (level + 1)) + index - get_index_level_start(level)


def get_triangle_children_bin_ids(bin_id: int) -> tuple[int, int]:
    """Return the bin ids of the (right, left) children of a triangle."""
    level = bin_id_to_level(bin_id)
    right = bin_id + (1 << (level + 2)) - (1 << (level + 1))
    left = bin_id + (1 << (level + 2))
    return right, left


def get_triangle_children_indices(bin_id: int) -> tuple[int, int]:
    """Return the flat indices of the (right, left) children of a triangle."""
    right, left = get_triangle_children_bin_ids(bin_id)
    return bin_id_to_index(right), bin_id_to_index(left)


def bin_id_to_partition_steps(bin_id: int) -> list[PartitionStep]:
    """Return the splits that lead from the square to the triangle."""
    level = bin_id_to_level(bin_id)
    steps = [PartitionStep.TOP_RIGHT if bin_id & 1 else PartitionStep.BOTTOM_LEFT]
    steps.extend(
        PartitionStep.LEFT if (bin_id >> bit) & 1 else PartitionStep.RIGHT
        for bit in range(1, level + 1)
    )
    return steps


def _midpoint(p: Point, q: Point) -> Point:
    return (p[0] + q[0]) // 2, (p[1] + q[1]) // 2


def get_triangle_coords(bin_id: int, grid_size: int) -> Triangle:
    """Return the vertices ``(a, b, c)`` of a triangle on a grid of ``grid_size`` points.

    ``c`` is always the right-angle corner and ``a, b, c`` run clockwise.
    """
    if grid_size < 1:
        raise ValueError(f"grid size must be positive, got {grid_size}")
    far = grid_size - 1
    a: Point = (0, 0)
    b: Point = (0, 0)
    c: Point = (0, 0)

    for step in bin_id_to_partition_steps(bin_id):
        if step is PartitionStep.TOP_RIGHT:
            a, b, c = (0, 0), (far, far), (far, 0)
        elif step is PartitionStep.BOTTOM_LEFT:
            a, b, c = (far, far), (0, 0), (0, far)
        elif step is PartitionStep.LEFT:
            a, b, c = c, a, _midpoint(a, b)
        else:
            a, b, c = b, c, _midpoint(a, b)

    return a, b, c


def pixel_coords_for_triangle_mid_point(bin_id: int, grid_size: int) -> Point:
    """Return the midpoint of the hypotenuse of a triangle."""
    a, b, _ = get_triangle_coords(bin_id, grid_size)
    return _midpoint(a, b)