"""Tests for scatter policies and prop placement rules."""
from __future__ import annotations

import math
from dataclasses import replace

import numpy as np

from flyover_sandbox.src.gameplay.placeables import (
    AltitudeBand,
    BoxRegion,
    GroundPlacement,
    MountainShape,
    RockShape,
    ScatterPolicy,
    TreeShape,
    build_policies,
    make_rock_shape,
    prop_object,
    random_tumble,
    scatter,
)
from flyover_sandbox.src.gameplay.terrain import generate_terrain, river_centerline


def _scattered(settings, seed: int = 4):
    rng = np.random.default_rng(seed)
    _, field = generate_terrain(settings.terrain, rng)
    policies = {policy.kind: policy for policy in build_policies(settings.scatter, settings.terrain.river)}
    placed = {kind: scatter(policy, field, rng) for kind, policy in policies.items()}
    return field, policies, placed


def test_ground_props_avoid_the_river(world_settings) -> None:
    _, _, placed = _scattered(world_settings)
    river = world_settings.terrain.river
    for kind in ("tree", "ground_rock"):
        width = world_settings.scatter[kind].exclusion_width
        assert placed[kind]
        for prop in placed[kind]:
            x, _, z = prop.position
            assert abs(x - float(river_centerline(z, river))) >= width


def test_scatter_never_exceeds_count(world_settings) -> None:
    _, policies, placed = _scattered(world_settings)
    for kind, props in placed.items():
        assert len(props) <= policies[kind].count
        assert all(prop.kind == kind for prop in props)


def test_ground_props_rest_above_minimum_height(world_settings) -> None:
    field, _, placed = _scattered(world_settings, seed=11)
    for kind in ("tree", "ground_rock"):
        minimum = world_settings.scatter[kind].min_height
        for prop in placed[kind]:
            x, _, z = prop.position
            assert field.ground_height(x, z) > minimum
    for tree in placed["tree"]:
        x, y, z = tree.position
        assert math.isclose(y, field.ground_height(x, z))
        assert isinstance(tree.shape, TreeShape)
        assert 2.0 <= tree.shape.trunk_height < 4.0


def test_ground_rocks_sit_half_buried(world_settings) -> None:
    field, _, placed = _scattered(world_settings, seed=5)
    for rock in placed["ground_rock"]:
        x, y, z = rock.position
        assert isinstance(rock.shape, RockShape)
        assert math.isclose(y, field.ground_height(x, z) + rock.shape.radius * 0.5)


def test_floating_rocks_stay_inside_altitude_band(world_settings) -> None:
    _, _, placed = _scattered(world_settings, seed=8)
    low, high = world_settings.scatter["floating_rock"].altitude_band
    floating = placed["floating_rock"]
    # //1.- Floating rocks have no rejection tests, so every sample lands.
    assert len(floating) == world_settings.scatter["floating_rock"].count
    for rock in floating:
        assert low <= rock.position[1] <= high
        assert abs(rock.position[0]) <= 200.0
        assert abs(rock.position[2]) <= 200.0


def test_mountains_form_a_distant_ring(world_settings) -> None:
    field, _, placed = _scattered(world_settings, seed=9)
    region = world_settings.scatter["mountain"].region
    mountains = placed["mountain"]
    assert len(mountains) == world_settings.scatter["mountain"].count
    for mountain in mountains:
        x, y, z = mountain.position
        assert region.inner_radius - 1e-9 <= math.hypot(x, z) <= region.outer_radius + 1e-9
        assert isinstance(mountain.shape, MountainShape)
        assert 4 <= mountain.shape.sides <= 6
        assert math.isclose(y, field.ground_height(x, z) + mountain.shape.height / 2.0 - 5.0)


def test_zero_count_places_nothing(world_settings, rng) -> None:
    settings = replace(
        world_settings,
        scatter={kind: replace(entry, count=0) for kind, entry in world_settings.scatter.items()},
    )
    _, field = generate_terrain(settings.terrain, rng)
    for policy in build_policies(settings.scatter, settings.terrain.river):
        assert scatter(policy, field, rng) == ()


def test_rejected_samples_are_not_retried(world_settings, rng) -> None:
    _, field = generate_terrain(world_settings.terrain, rng)
    policy = ScatterPolicy(
        kind="ground_rock",
        count=25,
        region=BoxRegion(half_extent=100.0),
        altitude=GroundPlacement(min_height=-1.0),
        make_shape=make_rock_shape(0x778877),
        rest_offset=lambda shape: 0.0,
        orient=random_tumble,
        exclusion=lambda x, z: True,
    )
    assert scatter(policy, field, rng) == ()


def test_altitude_band_ignores_terrain_footprint(world_settings, rng) -> None:
    _, field = generate_terrain(world_settings.terrain, rng)
    policy = ScatterPolicy(
        kind="floating_rock",
        count=5,
        region=BoxRegion(half_extent=1000.0),
        altitude=AltitudeBand(10.0, 10.0),
        make_shape=make_rock_shape(0xAAAAAA),
        rest_offset=lambda shape: 0.0,
        orient=random_tumble,
    )
    props = scatter(policy, field, rng)
    assert len(props) == 5
    assert all(prop.position[1] == 10.0 for prop in props)


def test_prop_objects_describe_each_family(world_settings) -> None:
    _, _, placed = _scattered(world_settings, seed=3)
    tree = prop_object(placed["tree"][0], 0)
    assert tree.name == "tree-0"
    assert [child.name for child in tree.children] == ["tree-0-trunk", "tree-0-canopy"]
    assert tree.mesh.triangle_count == 0
    rock = prop_object(placed["floating_rock"][0], 2)
    assert rock.mesh.triangle_count == 20
    assert rock.material.flat_shading
    mountain = prop_object(placed["mountain"][0], 1)
    assert mountain.mesh.triangle_count == 2 * placed["mountain"][0].shape.sides


def test_prop_objects_carry_shadow_roles(world_settings) -> None:
    _, _, placed = _scattered(world_settings, seed=3)
    tree = prop_object(placed["tree"][0], 0)
    assert all(child.cast_shadow and not child.receive_shadow for child in tree.children)
    for kind in ("ground_rock", "floating_rock", "mountain"):
        obj = prop_object(placed[kind][0], 0)
        assert obj.cast_shadow
        assert obj.receive_shadow
