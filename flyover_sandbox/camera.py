"""Perspective camera and the orbit camera used outside pointer-lock flight."""
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .src.gameplay import vector
from .src.gameplay.vector import Vector3


@dataclass
class PerspectiveCamera:
    fov_degrees: float = 75.0
    aspect: float = 16.0 / 9.0
    near: float = 0.1
    far: float = 1000.0

    def resize(self, width: int, height: int) -> bool:
        # //1.- Ignore minimized or degenerate windows instead of producing an infinite aspect.
        if width <= 0 or height <= 0:
            return False
        self.aspect = width / height
        return True

    def projection_matrix(self) -> np.ndarray:
        focal = 1.0 / math.tan(math.radians(self.fov_degrees) / 2.0)
        depth = self.near - self.far
        return np.array(
            [
                [focal / self.aspect, 0.0, 0.0, 0.0],
                [0.0, focal, 0.0, 0.0],
                [0.0, 0.0, (self.far + self.near) / depth, 2.0 * self.far * self.near / depth],
                [0.0, 0.0, -1.0, 0.0],
            ]
        )


def view_matrix(eye: Vector3, direction: Vector3, up: Vector3 = vector.WORLD_UP) -> np.ndarray:
    """Right-handed look-along matrix; the camera looks down its local -z."""

    forward = vector.normalize(direction, (0.0, 0.0, -1.0))
    right = vector.normalize(vector.cross(forward, up), (1.0, 0.0, 0.0))
    true_up = vector.cross(right, forward)
    matrix = np.eye(4)
    matrix[0, :3] = right
    matrix[1, :3] = true_up
    matrix[2, :3] = vector.scale(forward, -1.0)
    matrix[:3, 3] = (-vector.dot(right, eye), -vector.dot(true_up, eye), vector.dot(forward, eye))
    return matrix


@dataclass
class CameraPose:
    position: Vector3
    yaw: float
    pitch: float

    def direction(self) -> Vector3:
        return vector.direction_from_angles(self.yaw, self.pitch)

    def view_matrix(self) -> np.ndarray:
        return view_matrix(self.position, self.direction())


@dataclass
class OrbitParams:
    distance: float = 30.0
    smoothing: float = 0.15
    rotate_speed: float = 0.005
    min_elevation: float = -math.pi / 2.0 + 0.05
    max_elevation: float = math.pi / 2.0 - 0.05


@dataclass
class OrbitCamera:
    """Damped orbit around a target point, driven by pointer drags."""

    params: OrbitParams
    target: Vector3 = (0.0, 2.0, 0.0)
    azimuth: float = 0.0
    elevation: float = 0.3
    desired_azimuth: float = 0.0
    desired_elevation: float = 0.3

    def rotate(self, dx: float, dy: float) -> None:
        self.desired_azimuth -= dx * self.params.rotate_speed
        self.desired_elevation = max(
            self.params.min_elevation,
            min(self.params.max_elevation, self.desired_elevation + dy * self.params.rotate_speed),
        )

    def update(self, dt: float) -> None:
        # //2.- Ease toward the requested angles with a frame-rate independent half-life.
        lerp_factor = 1.0 - pow(0.5, dt / max(1e-4, self.params.smoothing))
        self.azimuth += (self.desired_azimuth - self.azimuth) * lerp_factor
        self.elevation += (self.desired_elevation - self.elevation) * lerp_factor

    def pose(self) -> CameraPose:
        offset = vector.scale(
            (
                math.sin(self.azimuth) * math.cos(self.elevation),
                math.sin(self.elevation),
                math.cos(self.azimuth) * math.cos(self.elevation),
            ),
            self.params.distance,
        )
        position = vector.add(self.target, offset)
        look = vector.scale(offset, -1.0)
        return CameraPose(position=position, yaw=vector.yaw_of(look), pitch=-self.elevation)
