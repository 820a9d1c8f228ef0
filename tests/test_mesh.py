import math

import pytest

from rtin_terrain.mesh import Mesh, PrimitiveTopology

QUAD_POSITIONS = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 0.0, 1.0), (0.0, 0.0, 1.0)]
QUAD_INDICES = [0, 2, 1, 0, 3, 2]
QUAD_UVS = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]


def quad():
    return Mesh(
        PrimitiveTopology.TRIANGLE_LIST,
        positions=list(QUAD_POSITIONS),
        indices=list(QUAD_INDICES),
        uvs=list(QUAD_UVS),
    )


def dot(u, v):
    return sum(a * b for a, b in zip(u, v))


def test_duplicate_vertices_follows_indices():
    mesh = quad()
    mesh.duplicate_vertices()
    assert mesh.indices is None
    assert len(mesh.positions) == len(QUAD_INDICES)
    assert mesh.positions == [QUAD_POSITIONS[i] for i in QUAD_INDICES]
    assert mesh.uvs == [QUAD_UVS[i] for i in QUAD_INDICES]
    assert mesh.colors is None


def test_duplicate_vertices_keeps_triangles():
    mesh = quad()
    before = mesh.triangles()
    mesh.duplicate_vertices()
    assert mesh.triangles() == before
    assert len(before) == 2


def test_duplicate_vertices_without_indices_is_unchanged():
    mesh = Mesh(PrimitiveTopology.TRIANGLE_LIST, positions=list(QUAD_POSITIONS[:3]))
    mesh.duplicate_vertices()
    assert mesh.positions == QUAD_POSITIONS[:3]


def test_flat_normals_are_unit_and_perpendicular():
    mesh = quad()
    mesh.duplicate_vertices()
    mesh.compute_flat_normals()
    assert len(mesh.normals) == len(mesh.positions)
    for corner, (a, b, c) in enumerate(mesh.triangles()):
        for normal in mesh.normals[corner * 3 : corner * 3 + 3]:
            assert math.isclose(math.sqrt(dot(normal, normal)), 1.0)
            edge1 = tuple(q - p for p, q in zip(a, b))
            edge2 = tuple(q - p for p, q in zip(a, c))
            assert math.isclose(dot(normal, edge1), 0.0, abs_tol=1e-12)
            assert math.isclose(dot(normal, edge2), 0.0, abs_tol=1e-12)


def test_flat_normals_point_up_for_clockwise_quad():
    mesh = quad()
    mesh.duplicate_vertices()
    mesh.compute_flat_normals()
    assert all(normal == (0.0, 1.0, 0.0) for normal in mesh.normals)


def test_flat_normal_of_degenerate_triangle_is_nan():
    mesh = Mesh(PrimitiveTopology.TRIANGLE_LIST, positions=[(0.0, 0.0, 0.0)] * 3)
    mesh.compute_flat_normals()
    normals = mesh.normals
    assert len(normals) == 3
    first = normals[0]
    assert len(first) == 3
    assert math.isnan(first[0])
    assert math.isnan(first[1])
    assert math.isnan(first[2])
    last = normals[2]
    assert math.isnan(last[0])
    assert math.isnan(last[1])
    assert math.isnan(last[2])


def test_flat_normals_refuse_indexed_mesh():
    with pytest.raises(ValueError):
        quad().compute_flat_normals()


def test_smooth_normals_match_flat_normals_on_plane():
    smooth = quad()
    smooth.compute_smooth_normals()
    flat = quad()
    flat.duplicate_vertices()
    flat.compute_flat_normals()
    assert len(smooth.normals) == len(QUAD_POSITIONS)
    for normal in smooth.normals:
        assert all(math.isclose(x, y) for x, y in zip(normal, flat.normals[0]))


def test_smooth_normal_of_unused_vertex_is_zero():
    mesh = Mesh(
        PrimitiveTopology.TRIANGLE_LIST,
        positions=list(QUAD_POSITIONS),
        indices=[0, 2, 1],
    )
    mesh.compute_smooth_normals()
    assert mesh.normals[3] == (0.0, 0.0, 0.0)
    assert math.isclose(math.sqrt(dot(mesh.normals[0], mesh.normals[0])), 1.0)


def test_smooth_normals_need_indices():
    mesh = Mesh(PrimitiveTopology.TRIANGLE_LIST, positions=list(QUAD_POSITIONS[:3]))
    with pytest.raises(ValueError):
        mesh.compute_smooth_normals()


def test_line_list_has_no_triangles():
    mesh = Mesh(PrimitiveTopology.LINE_LIST, positions=list(QUAD_POSITIONS), indices=[0, 1, 1, 2])
    with pytest.raises(ValueError):
        mesh.triangles()
    with pytest.raises(ValueError):
        mesh.compute_smooth_normals()