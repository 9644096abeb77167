"""Displaced low-poly terrain and the height field backed by it."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ...geometry import Material, MeshData, color_from_hex, face_normals
from ..generation.settings import RiverSettings, TerrainSettings

LOGGER = logging.getLogger(__name__)

TERRAIN_MATERIAL = Material(roughness=0.9, metalness=0.1, flat_shading=True, vertex_colors=True)


# //1.- Winding river centreline; props and colouring share this definition with the carving.
def river_centerline(z, river: RiverSettings):
    return river.amplitude * np.sin(np.asarray(z, dtype=float) * river.frequency)


def river_influence(x, z, river: RiverSettings):
    """1 on the centreline, fading linearly to 0 at ``river.width``."""

    offset = np.abs(np.asarray(x, dtype=float) - river_centerline(z, river))
    return np.maximum(0.0, 1.0 - offset / river.width)


# //2.- Immutable mesh bundle handed to renderers once generation completes.
@dataclass(frozen=True)
class TerrainMesh:
    mesh: MeshData
    material: Material = TERRAIN_MATERIAL

    @property
    def vertices(self) -> np.ndarray:
        return self.mesh.vertices

    @property
    def colors(self) -> np.ndarray:
        return self.mesh.colors  # type: ignore[return-value]

    @property
    def triangles(self) -> np.ndarray:
        return self.mesh.triangles

    @property
    def face_normals(self) -> np.ndarray:
        return self.mesh.face_normals()


class HeightField:
    """Exact surface heights of a generated terrain grid.

    Each cell is split along the same diagonal as the rendered triangles, so a
    query returns the height a downward ray would hit on the displayed mesh.
    """

    def __init__(self, heights: np.ndarray, size: float) -> None:
        heights = np.array(heights, dtype=float)
        if heights.ndim != 2 or heights.shape[0] != heights.shape[1] or heights.shape[0] < 2:
            raise ValueError("Height grid must be square with at least two samples per side")
        heights.setflags(write=False)
        self._heights = heights
        self._size = float(size)
        self._half = self._size * 0.5
        self._cells = heights.shape[0] - 1
        self._cell_size = self._size / self._cells

    @property
    def size(self) -> float:
        return self._size

    @property
    def resolution(self) -> int:
        return self._cells

    def contains(self, x: float, z: float) -> bool:
        return -self._half <= x <= self._half and -self._half <= z <= self._half

    def height(self, x: float, z: float) -> Optional[float]:
        """Surface height at ``(x, z)`` or ``None`` outside the mesh footprint."""

        if not (math.isfinite(x) and math.isfinite(z)) or not self.contains(x, z):
            return None
        fx = (x + self._half) / self._cell_size
        fz = (z + self._half) / self._cell_size
        ix = min(int(math.floor(fx)), self._cells - 1)
        iz = min(int(math.floor(fz)), self._cells - 1)
        tx = fx - ix
        tz = fz - iz
        h_a = self._heights[iz, ix]
        h_b = self._heights[iz + 1, ix]
        h_d = self._heights[iz, ix + 1]
        if tx + tz <= 1.0:
            value = h_a + (h_d - h_a) * tx + (h_b - h_a) * tz
        else:
            h_c = self._heights[iz + 1, ix + 1]
            value = h_c + (h_b - h_c) * (1.0 - tx) + (h_d - h_c) * (1.0 - tz)
        return float(value)

    def ground_height(self, x: float, z: float, fallback: float = 0.0) -> float:
        value = self.height(x, z)
        return fallback if value is None else value


# //3.- Two triangles per cell sharing the (ix, iz + 1) -> (ix + 1, iz) diagonal.
def _grid_triangles(resolution: int) -> np.ndarray:
    stride = resolution + 1
    ix, iz = np.meshgrid(np.arange(resolution), np.arange(resolution))
    a = (iz * stride + ix).ravel()
    b = ((iz + 1) * stride + ix).ravel()
    c = ((iz + 1) * stride + ix + 1).ravel()
    d = (iz * stride + ix + 1).ravel()
    first = np.stack([a, b, d], axis=1)
    second = np.stack([b, c, d], axis=1)
    return np.concatenate([first, second]).astype(np.int64)


def _lerp_colors(base: np.ndarray, target: Tuple[float, float, float], alpha: np.ndarray) -> np.ndarray:
    return base + (np.asarray(target) - base) * alpha[:, None]


# //4.- Blend base ochre toward river teal near water and toward green patches elsewhere.
def _vertex_colors(weight: np.ndarray, settings: TerrainSettings, rng: np.random.Generator) -> np.ndarray:
    count = weight.shape[0]
    colors = np.tile(np.asarray(color_from_hex(settings.base_color)), (count, 1))
    in_river = weight > settings.river_color_threshold
    river_alpha = np.minimum(weight * settings.river_color_gain, 1.0)
    colors[in_river] = _lerp_colors(colors[in_river], color_from_hex(settings.river_color), river_alpha[in_river])
    roll, spread, amount = rng.random((3, count))
    patched = ~in_river & (roll < settings.patch_threshold * (spread * 0.5 + 0.5))
    patch_alpha = amount * 0.4 + 0.1
    colors[patched] = _lerp_colors(colors[patched], color_from_hex(settings.patch_color), patch_alpha[patched])
    return np.clip(colors, 0.0, 1.0)


def generate_terrain(settings: TerrainSettings, rng: np.random.Generator) -> Tuple[TerrainMesh, HeightField]:
    """Build the displaced terrain mesh and its matching height field."""

    resolution = int(settings.resolution)
    half = settings.size * 0.5
    axis = np.linspace(-half, half, resolution + 1)
    xs, zs = np.meshgrid(axis, axis)
    # //5.- Random hills first, then carve the river channel proportionally to its influence.
    heights = (rng.random(xs.shape) - 0.5) * settings.hill_height
    weight = river_influence(xs, zs, settings.river)
    heights = heights - weight * settings.river.depth
    vertices = np.stack([xs.ravel(), heights.ravel(), zs.ravel()], axis=1)
    triangles = _grid_triangles(resolution)
    colors = _vertex_colors(weight.ravel(), settings, rng)
    # //6.- Normals are recomputed after displacement and stored with the mesh.
    mesh = MeshData(
        vertices=vertices,
        triangles=triangles,
        colors=colors,
        normals=face_normals(vertices, triangles),
    )
    terrain = TerrainMesh(mesh=mesh)
    LOGGER.debug(
        "Generated terrain with %d vertices, %d triangles, heights %.2f..%.2f",
        mesh.vertex_count,
        mesh.triangle_count,
        float(heights.min()),
        float(heights.max()),
    )
    return terrain, HeightField(heights, settings.size)
