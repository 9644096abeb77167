"""Low-poly mesh primitives and material descriptions handed to renderers."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

Color = Tuple[float, float, float]


def color_from_hex(value: int) -> Color:
    """Split a ``0xRRGGBB`` integer into normalized channels."""

    return (
        ((value >> 16) & 0xFF) / 255.0,
        ((value >> 8) & 0xFF) / 255.0,
        (value & 0xFF) / 255.0,
    )


@dataclass(frozen=True)
class Material:
    """Surface description; renderers decide how much of it they honour."""

    color: Color = (1.0, 1.0, 1.0)
    roughness: float = 1.0
    metalness: float = 0.0
    flat_shading: bool = True
    vertex_colors: bool = False
    opacity: float = 1.0
    unlit: bool = False
    double_sided: bool = False
    back_side: bool = False
    fog: bool = True

    @property
    def transparent(self) -> bool:
        return self.opacity < 1.0


@dataclass
class MeshData:
    """Indexed triangle mesh with optional per-vertex colours."""

    vertices: np.ndarray
    triangles: np.ndarray
    colors: Optional[np.ndarray] = None
    normals: Optional[np.ndarray] = None

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def triangle_count(self) -> int:
        return int(self.triangles.shape[0])

    def face_normals(self) -> np.ndarray:
        """Stored per-face normals when the builder supplied them, otherwise computed."""

        if self.normals is not None:
            return self.normals
        return face_normals(self.vertices, self.triangles)


@dataclass(frozen=True)
class Transform:
    """Position, XYZ euler rotation and scale of a scene object."""

    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    scale: Tuple[float, float, float] = (1.0, 1.0, 1.0)

    def matrix(self) -> np.ndarray:
        rx, ry, rz = self.rotation
        linear = rotation_matrix(rx, ry, rz) @ np.diag(np.asarray(self.scale, dtype=float))
        result = np.eye(4)
        result[:3, :3] = linear
        result[:3, 3] = self.position
        return result

    def apply(self, points: np.ndarray) -> np.ndarray:
        matrix = self.matrix()
        return points @ matrix[:3, :3].T + matrix[:3, 3]


@dataclass
class SceneObject:
    """A named mesh, its material and where it sits in the world."""

    name: str
    mesh: MeshData
    material: Material
    transform: Transform = field(default_factory=Transform)
    children: Tuple["SceneObject", ...] = ()
    cast_shadow: bool = False
    receive_shadow: bool = False


# //1.- Compose rotations in XYZ order so x is applied last, matching euler conventions of scene graphs.
def rotation_matrix(rx: float, ry: float, rz: float) -> np.ndarray:
    cx, sx = math.cos(rx), math.sin(rx)
    cy, sy = math.cos(ry), math.sin(ry)
    cz, sz = math.cos(rz), math.sin(rz)
    x_axis = np.array([[1.0, 0.0, 0.0], [0.0, cx, -sx], [0.0, sx, cx]])
    y_axis = np.array([[cy, 0.0, sy], [0.0, 1.0, 0.0], [-sy, 0.0, cy]])
    z_axis = np.array([[cz, -sz, 0.0], [sz, cz, 0.0], [0.0, 0.0, 1.0]])
    return x_axis @ y_axis @ z_axis


# //2.- Per-triangle unit normals; degenerate triangles report a zero vector.
def face_normals(vertices: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    if triangles.size == 0:
        return np.zeros((0, 3))
    v0 = vertices[triangles[:, 0]]
    v1 = vertices[triangles[:, 1]]
    v2 = vertices[triangles[:, 2]]
    normals = np.cross(v1 - v0, v2 - v0)
    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    return np.divide(normals, lengths, out=np.zeros_like(normals), where=lengths > 0)


def box(width: float, height: float, depth: float) -> MeshData:
    hx, hy, hz = width * 0.5, height * 0.5, depth * 0.5
    vertices = np.array(
        [
            [-hx, -hy, -hz],
            [hx, -hy, -hz],
            [hx, hy, -hz],
            [-hx, hy, -hz],
            [-hx, -hy, hz],
            [hx, -hy, hz],
            [hx, hy, hz],
            [-hx, hy, hz],
        ],
        dtype=float,
    )
    triangles = np.array(
        [
            [0, 2, 1], [0, 3, 2],  # back
            [4, 5, 6], [4, 6, 7],  # front
            [0, 1, 5], [0, 5, 4],  # bottom
            [3, 7, 6], [3, 6, 2],  # top
            [0, 4, 7], [0, 7, 3],  # left
            [1, 2, 6], [1, 6, 5],  # right
        ],
        dtype=np.int64,
    )
    return MeshData(vertices=vertices, triangles=triangles)


def cylinder(radius_top: float, radius_bottom: float, height: float, sides: int) -> MeshData:
    """Capped prism centred on the origin along y; ``radius_top=0`` yields a cone."""

    sides = max(3, int(sides))
    half = height * 0.5
    angles = np.arange(sides) * (2.0 * math.pi / sides)
    top = np.stack([np.sin(angles) * radius_top, np.full(sides, half), np.cos(angles) * radius_top], axis=1)
    bottom = np.stack([np.sin(angles) * radius_bottom, np.full(sides, -half), np.cos(angles) * radius_bottom], axis=1)
    vertices = np.vstack([top, bottom, [[0.0, half, 0.0], [0.0, -half, 0.0]]])
    top_center = 2 * sides
    bottom_center = top_center + 1
    triangles = []
    for index in range(sides):
        following = (index + 1) % sides
        triangles.append([index, sides + index, sides + following])
        if radius_top > 0:
            triangles.append([index, sides + following, following])
            triangles.append([top_center, index, following])
        triangles.append([bottom_center, sides + following, sides + index])
    return MeshData(vertices=vertices, triangles=np.asarray(triangles, dtype=np.int64))


def cone(radius: float, height: float, sides: int) -> MeshData:
    return cylinder(0.0, radius, height, sides)


def icosahedron(radius: float) -> MeshData:
    t = (1.0 + math.sqrt(5.0)) / 2.0
    raw = np.array(
        [
            [-1, t, 0], [1, t, 0], [-1, -t, 0], [1, -t, 0],
            [0, -1, t], [0, 1, t], [0, -1, -t], [0, 1, -t],
            [t, 0, -1], [t, 0, 1], [-t, 0, -1], [-t, 0, 1],
        ],
        dtype=float,
    )
    vertices = raw / np.linalg.norm(raw, axis=1, keepdims=True) * radius
    triangles = np.array(
        [
            [0, 11, 5], [0, 5, 1], [0, 1, 7], [0, 7, 10], [0, 10, 11],
            [1, 5, 9], [5, 11, 4], [11, 10, 2], [10, 7, 6], [7, 1, 8],
            [3, 9, 4], [3, 4, 2], [3, 2, 6], [3, 6, 8], [3, 8, 9],
            [4, 9, 5], [2, 4, 11], [6, 2, 10], [8, 6, 7], [9, 8, 1],
        ],
        dtype=np.int64,
    )
    return MeshData(vertices=vertices, triangles=triangles)


def uv_sphere(radius: float, width_segments: int, height_segments: int) -> MeshData:
    width_segments = max(3, int(width_segments))
    height_segments = max(2, int(height_segments))
    rows = []
    for iy in range(height_segments + 1):
        theta = math.pi * iy / height_segments
        for ix in range(width_segments + 1):
            phi = 2.0 * math.pi * ix / width_segments
            rows.append(
                [
                    -radius * math.cos(phi) * math.sin(theta),
                    radius * math.cos(theta),
                    radius * math.sin(phi) * math.sin(theta),
                ]
            )
    vertices = np.asarray(rows, dtype=float)
    stride = width_segments + 1
    triangles = []
    for iy in range(height_segments):
        for ix in range(width_segments):
            a = iy * stride + ix + 1
            b = iy * stride + ix
            c = (iy + 1) * stride + ix
            d = (iy + 1) * stride + ix + 1
            if iy != 0:
                triangles.append([a, b, d])
            if iy != height_segments - 1:
                triangles.append([b, c, d])
    return MeshData(vertices=vertices, triangles=np.asarray(triangles, dtype=np.int64))


def torus(radius: float, tube: float, radial_segments: int, tubular_segments: int) -> MeshData:
    """Torus lying in the xy plane around the z axis."""

    radial_segments = max(3, int(radial_segments))
    tubular_segments = max(3, int(tubular_segments))
    rows = []
    for j in range(radial_segments + 1):
        v = 2.0 * math.pi * j / radial_segments
        for i in range(tubular_segments + 1):
            u = 2.0 * math.pi * i / tubular_segments
            rows.append(
                [
                    (radius + tube * math.cos(v)) * math.cos(u),
                    (radius + tube * math.cos(v)) * math.sin(u),
                    tube * math.sin(v),
                ]
            )
    vertices = np.asarray(rows, dtype=float)
    stride = tubular_segments + 1
    triangles = []
    for j in range(1, radial_segments + 1):
        for i in range(1, tubular_segments + 1):
            a = stride * j + i - 1
            b = stride * (j - 1) + i - 1
            c = stride * (j - 1) + i
            d = stride * j + i
            triangles.append([a, b, d])
            triangles.append([b, c, d])
    return MeshData(vertices=vertices, triangles=np.asarray(triangles, dtype=np.int64))


def empty_mesh() -> MeshData:
    """Placeholder geometry for grouping nodes that only carry children."""

    return MeshData(vertices=np.zeros((0, 3)), triangles=np.zeros((0, 3), dtype=np.int64))
