"""A minimal triangle/line mesh with per-vertex attributes and normal generation."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field

Vec3 = tuple[float, float, float]
Vec2 = tuple[float, float]

VERTEX_COLOR_ATTRIBUTE_NAME = "Vertex_Color"
VERTEX_COLOR_ATTRIBUTE_ID = 7642011322398579


class PrimitiveTopology(enum.Enum):
    """How the vertex list is assembled into primitives."""

    TRIANGLE_LIST = "triangle_list"
    LINE_LIST = "line_list"


def _sub(p: Vec3, q: Vec3) -> Vec3:
    return p[0] - q[0], p[1] - q[1], p[2] - q[2]


def _cross(u: Vec3, v: Vec3) -> Vec3:
    return (
        u[1] * v[2] - u[2] * v[1],
        u[2] * v[0] - u[0] * v[2],
        u[0] * v[1] - u[1] * v[0],
    )


def _area_normal(a: Vec3, b: Vec3, c: Vec3) -> Vec3:
    return _cross(_sub(b, a), _sub(c, a))


def _length(v: Vec3) -> float:
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def _normalize(v: Vec3) -> Vec3:
    length = _length(v)
    if length == 0.0:
        return math.nan, math.nan, math.nan
    return v[0] / length, v[1] / length, v[2] / length


def _try_normalize(v: Vec3) -> Vec3:
    length = _length(v)
    if length == 0.0 or not math.isfinite(length):
        return 0.0, 0.0, 0.0
    return v[0] / length, v[1] / length, v[2] / length


def _chunks_of_three(items):
    return zip(*[iter(items)] * 3)


@dataclass
class Mesh:
    """Vertex positions with optional indices, UVs, colours and normals."""

    topology: PrimitiveTopology
    positions: list[Vec3] = field(default_factory=list)
    indices: list[int] | None = None
    uvs: list[Vec2] | None = None
    colors: list[Vec3] | None = None
    normals: list[Vec3] | None = None

    def _require_triangles(self, operation: str) -> None:
        if self.topology is not PrimitiveTopology.TRIANGLE_LIST:
            raise ValueError(f"{operation} needs a triangle list, mesh is {self.topology.value}")

    def triangles(self) -> list[tuple[Vec3, Vec3, Vec3]]:
        """Return the corner positions of every triangle."""
        self._require_triangles("triangles")
        order = self.indices if self.indices is not None else range(len(self.positions))
        return list(_chunks_of_three(self.positions[i] for i in order))

    def duplicate_vertices(self) -> None:
        """Give every index its own copy of the vertex and drop the indices."""
        if self.indices is None:
            return
        order = self.indices
        self.indices = None

        def pick(values):
            return None if values is None else [values[i] for i in order]

        self.positions = pick(self.positions)
        self.uvs = pick(self.uvs)
        self.colors = pick(self.colors)
        self.normals = pick(self.normals)

    def compute_flat_normals(self) -> None:
        """Set one face normal per triangle corner; the mesh must not be indexed."""
        if self.indices is not None:
            raise ValueError(
                "flat normals can't be computed on indexed geometry; "
                "call duplicate_vertices or compute_smooth_normals instead"
            )
        self._require_triangles("compute_flat_normals")
        normals: list[Vec3] = []
        for a, b, c in _chunks_of_three(self.positions):
            normal = _normalize(_area_normal(a, b, c))
            normals.extend((normal, normal, normal))
        self.normals = normals

    def compute_smooth_normals(self) -> None:
        """Set each vertex normal to the area-weighted mean of its faces' normals."""
        if self.indices is None:
            raise ValueError("smooth normals can only be computed on indexed meshes")
        self._require_triangles("compute_smooth_normals")
        sums = [[0.0, 0.0, 0.0] for _ in self.positions]
        for face in _chunks_of_three(self.indices):
            normal = _area_normal(*(self.positions[i] for i in face))
            for vertex in face:
                total = sums[vertex]
                total[0] += normal[0]
                total[1] += normal[1]
                total[2] += normal[2]
        self.normals = [_try_normalize((x, y, z)) for x, y, z in sums]