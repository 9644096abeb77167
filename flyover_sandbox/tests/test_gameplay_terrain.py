"""Tests for terrain generation and height field queries."""
from __future__ import annotations

import math
from dataclasses import replace

import numpy as np
import pytest

from flyover_sandbox.geometry import color_from_hex
from flyover_sandbox.src.gameplay.terrain import HeightField, generate_terrain, river_centerline, river_influence


def test_height_queries_are_repeatable(world_settings, rng) -> None:
    _, field = generate_terrain(world_settings.terrain, rng)
    first = field.height(12.3, -45.6)
    second = field.height(12.3, -45.6)
    assert first is not None
    assert first == second


def test_height_matches_displaced_vertices(small_settings, rng) -> None:
    terrain, field = generate_terrain(small_settings.terrain, rng)
    # //1.- Every grid vertex must report exactly the height it was displaced to.
    for x, y, z in terrain.vertices[::7]:
        assert field.height(float(x), float(z)) == pytest.approx(float(y), abs=1e-9)


def test_height_interpolates_inside_a_cell() -> None:
    heights = np.array([[0.0, 2.0], [4.0, 6.0]])
    field = HeightField(heights, size=2.0)
    # //1.- Corner rows are indexed [z, x]; the cell is split along the (0, 1) -> (1, 0) diagonal.
    assert field.height(-1.0, -1.0) == pytest.approx(0.0)
    assert field.height(1.0, -1.0) == pytest.approx(2.0)
    assert field.height(-1.0, 1.0) == pytest.approx(4.0)
    assert field.height(1.0, 1.0) == pytest.approx(6.0)
    assert field.height(-0.5, -0.5) == pytest.approx(1.5)


def test_height_follows_the_rendered_cell_diagonal() -> None:
    # //1.- Only the (x, z) = (1, 1) corner is raised, so the two halves of the cell disagree.
    field = HeightField(np.array([[0.0, 0.0], [0.0, 6.0]]), size=2.0)
    assert field.height(-0.2, -0.2) == pytest.approx(0.0)
    assert field.height(0.8, -0.9) == pytest.approx(0.0)
    assert field.height(0.2, 0.2) == pytest.approx(1.2)
    assert field.height(0.9, 0.9) == pytest.approx(5.4)
    # //2.- Points on the shared diagonal stay on the flat triangle.
    assert field.height(0.5, -0.5) == pytest.approx(0.0)
    assert field.height(-0.5, 0.5) == pytest.approx(0.0)


def test_height_outside_footprint_is_none(world_settings, rng) -> None:
    _, field = generate_terrain(world_settings.terrain, rng)
    half = world_settings.terrain.size / 2.0
    assert field.height(half + 1.0, 0.0) is None
    assert field.height(0.0, -half - 0.01) is None
    assert field.height(math.nan, 0.0) is None
    assert field.ground_height(half + 10.0, 0.0) == 0.0
    assert field.ground_height(half + 10.0, 0.0, fallback=-3.0) == -3.0


def test_height_field_rejects_degenerate_grids() -> None:
    with pytest.raises(ValueError):
        HeightField(np.zeros((1, 1)), size=10.0)
    with pytest.raises(ValueError):
        HeightField(np.zeros((3, 4)), size=10.0)


def test_river_channel_is_carved_below_flat_ground(small_settings, rng) -> None:
    flat = replace(small_settings.terrain, hill_height=0.0)
    _, field = generate_terrain(flat, rng)
    river = flat.river
    z = 0.0
    centre = float(river_centerline(z, river))
    assert field.height(centre, z) == pytest.approx(-river.depth)
    assert field.height(centre + river.width + 40.0, z) == pytest.approx(0.0, abs=1e-9)


def test_river_influence_fades_to_zero_at_width(world_settings) -> None:
    river = world_settings.terrain.river
    z = 17.0
    centre = float(river_centerline(z, river))
    assert float(river_influence(centre, z, river)) == pytest.approx(1.0)
    assert float(river_influence(centre + river.width / 2.0, z, river)) == pytest.approx(0.5)
    assert float(river_influence(centre + river.width * 2.0, z, river)) == 0.0


def test_terrain_mesh_structure(small_settings, rng) -> None:
    terrain, field = generate_terrain(small_settings.terrain, rng)
    cells = small_settings.terrain.resolution
    assert terrain.mesh.vertex_count == (cells + 1) ** 2
    assert terrain.mesh.triangle_count == 2 * cells * cells
    assert field.resolution == cells
    # //1.- Colours stay in range and the displaced surface faces upward.
    assert terrain.colors.shape == (terrain.mesh.vertex_count, 3)
    assert np.all((terrain.colors >= 0.0) & (terrain.colors <= 1.0))
    assert np.all(terrain.face_normals[:, 1] > 0.0)
    lengths = np.linalg.norm(terrain.face_normals, axis=1)
    assert np.allclose(lengths, 1.0)
    # //2.- Renderers read the normals stored at generation time.
    assert terrain.mesh.normals is not None
    assert terrain.mesh.face_normals() is terrain.mesh.normals


def test_hill_heights_stay_within_amplitude(world_settings, rng) -> None:
    terrain, _ = generate_terrain(world_settings.terrain, rng)
    settings = world_settings.terrain
    heights = terrain.vertices[:, 1]
    assert heights.max() <= settings.hill_height / 2.0
    assert heights.min() >= -settings.hill_height / 2.0 - settings.river.depth


def _vertex_weights(terrain, settings):
    vertices = terrain.vertices
    return river_influence(vertices[:, 0], vertices[:, 2], settings.river)


def test_river_vertices_blend_toward_river_colour(world_settings, rng) -> None:
    settings = world_settings.terrain
    terrain, _ = generate_terrain(settings, rng)
    weight = _vertex_weights(terrain, settings)
    base = np.asarray(color_from_hex(settings.base_color))
    river = np.asarray(color_from_hex(settings.river_color))
    # //1.- Strong river influence saturates the blend at the river colour itself.
    strong = weight >= 2.0 / 3.0
    assert strong.any()
    assert np.allclose(terrain.colors[strong], river, atol=1e-12)
    # //2.- Weaker influence above the threshold blends by 1.5 times the weight.
    partial = (weight > settings.river_color_threshold) & ~strong
    assert partial.any()
    expected = base + (river - base) * (weight[partial] * settings.river_color_gain)[:, None]
    assert np.allclose(terrain.colors[partial], expected, atol=1e-12)


def test_dry_vertices_are_base_or_partially_patched(world_settings, rng) -> None:
    settings = world_settings.terrain
    terrain, _ = generate_terrain(settings, rng)
    weight = _vertex_weights(terrain, settings)
    base = np.asarray(color_from_hex(settings.base_color))
    patch = np.asarray(color_from_hex(settings.patch_color))
    dry = terrain.colors[weight <= settings.river_color_threshold]
    # //1.- Red differs between base and patch colours, so it recovers the blend factor.
    alpha = (dry[:, 0] - base[0]) / (patch[0] - base[0])
    plain = np.isclose(alpha, 0.0, atol=1e-12)
    patched = ~plain
    assert plain.any()
    assert patched.any()
    assert np.allclose(dry[plain], base, atol=1e-12)
    assert np.all(alpha[patched] >= 0.1 - 1e-9)
    assert np.all(alpha[patched] < 0.5)
    expected = base + (patch - base) * alpha[patched][:, None]
    assert np.allclose(dry[patched], expected, atol=1e-12)
