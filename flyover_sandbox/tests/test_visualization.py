"""Tests for the sky backdrop, camera projection and mesh primitives."""
from __future__ import annotations

import math

import numpy as np
import pytest

from flyover_sandbox import geometry
from flyover_sandbox.camera import CameraPose, OrbitCamera, OrbitParams, PerspectiveCamera
from flyover_sandbox.geometry import color_from_hex
from flyover_sandbox.src.gameplay.sky import Fog, build_sky, gradient_colors


def test_sky_gradient_runs_from_horizon_to_zenith(world_settings) -> None:
    dome = world_settings.sky.dome
    colors = gradient_colors(np.array([[0.0, 1000.0, 0.0], [0.0, -1000.0, 0.0]]), dome)
    assert colors[0] == pytest.approx(np.asarray(color_from_hex(dome.top_color)), abs=0.05)
    assert colors[1] == pytest.approx(np.asarray(color_from_hex(dome.bottom_color)))


def test_build_sky_describes_dome_ring_and_atmosphere(world_settings) -> None:
    sky = build_sky(world_settings.sky)
    assert [obj.name for obj in sky.objects] == ["sky-dome", "sky-ring"]
    assert sky.dome.material.back_side
    assert sky.dome.mesh.colors.shape == (sky.dome.mesh.vertex_count, 3)
    assert sky.ring.material.transparent
    assert sky.ring.transform.position[1] == world_settings.sky.ring.elevation
    assert sky.atmosphere.fog.color == color_from_hex(world_settings.sky.background)
    assert sky.atmosphere.sun.position == (100.0, 150.0, 100.0)
    assert sky.atmosphere.shadows_enabled
    assert sky.atmosphere.sun.shadow_bounds() == (-150.0, 150.0, -150.0, 150.0)
    assert not sky.atmosphere.ambient.casts_shadow
    assert sky.atmosphere.ambient.shadow_bounds() is None


def test_fog_factor_is_linear_between_planes() -> None:
    fog = Fog(color=(0.0, 0.0, 0.0), near=50.0, far=250.0)
    assert fog.factor(10.0) == 0.0
    assert fog.factor(150.0) == pytest.approx(0.5)
    assert fog.factor(400.0) == 1.0


def test_resize_keeps_aspect_in_step_with_window() -> None:
    camera = PerspectiveCamera(fov_degrees=75.0)
    assert camera.resize(1920, 1080)
    assert camera.aspect == pytest.approx(16.0 / 9.0)
    assert not camera.resize(1920, 0)
    assert camera.aspect == pytest.approx(16.0 / 9.0)
    projection = camera.projection_matrix()
    assert projection[1, 1] / projection[0, 0] == pytest.approx(camera.aspect)


def test_view_matrix_places_eye_at_origin() -> None:
    pose = CameraPose(position=(3.0, 4.0, 5.0), yaw=0.4, pitch=-0.2)
    view = pose.view_matrix()
    eye = view @ np.array([3.0, 4.0, 5.0, 1.0])
    assert eye[:3] == pytest.approx(np.zeros(3), abs=1e-9)
    ahead = np.append(np.asarray(pose.position) + np.asarray(pose.direction()), 1.0)
    assert (view @ ahead)[:3] == pytest.approx(np.array([0.0, 0.0, -1.0]), abs=1e-9)


def test_orbit_camera_eases_toward_requested_angle() -> None:
    orbit = OrbitCamera(params=OrbitParams(distance=10.0, smoothing=0.2))
    orbit.rotate(-100.0, 0.0)
    orbit.update(0.2)
    assert orbit.azimuth == pytest.approx(orbit.desired_azimuth / 2.0)
    pose = orbit.pose()
    assert math.dist(pose.position, orbit.target) == pytest.approx(10.0)


def test_primitives_have_outward_normals() -> None:
    for mesh in (geometry.box(2.0, 1.0, 3.0), geometry.icosahedron(1.5), geometry.cone(2.0, 4.0, 5)):
        centroids = mesh.vertices[mesh.triangles].mean(axis=1)
        normals = mesh.face_normals()
        assert np.all(np.einsum("ij,ij->i", centroids, normals) > 0.0)


def test_transform_applies_scale_then_rotation() -> None:
    transform = geometry.Transform(position=(1.0, 0.0, 0.0), rotation=(0.0, math.pi / 2.0, 0.0), scale=(2.0, 1.0, 1.0))
    moved = transform.apply(np.array([[1.0, 0.0, 0.0]]))
    assert moved[0] == pytest.approx(np.array([1.0, 0.0, -2.0]), abs=1e-9)
