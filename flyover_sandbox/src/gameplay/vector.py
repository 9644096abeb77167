"""Tuple vector helpers shared by the flight and placement systems."""
from __future__ import annotations

import math
from typing import Iterable, Tuple

Vector3 = Tuple[float, float, float]

WORLD_UP: Vector3 = (0.0, 1.0, 0.0)


# //1.- Convert iterables into three-component float tuples.
def _to_vector(components: Iterable[float]) -> Vector3:
    values = tuple(float(component) for component in components)
    if len(values) != 3:
        raise ValueError("Vector3 requires exactly three components")
    return values  # type: ignore[return-value]


# //2.- Add vectors component-wise returning a new tuple.
def add(a: Iterable[float], b: Iterable[float]) -> Vector3:
    ax, ay, az = _to_vector(a)
    bx, by, bz = _to_vector(b)
    return (ax + bx, ay + by, az + bz)


# //3.- Multiply a vector by a scalar value.
def scale(vector: Iterable[float], scalar: float) -> Vector3:
    vx, vy, vz = _to_vector(vector)
    factor = float(scalar)
    return (vx * factor, vy * factor, vz * factor)


def dot(a: Iterable[float], b: Iterable[float]) -> float:
    ax, ay, az = _to_vector(a)
    bx, by, bz = _to_vector(b)
    return ax * bx + ay * by + az * bz


# //4.- Compute the cross product following the right-hand rule.
def cross(a: Iterable[float], b: Iterable[float]) -> Vector3:
    ax, ay, az = _to_vector(a)
    bx, by, bz = _to_vector(b)
    return (ay * bz - az * by, az * bx - ax * bz, ax * by - ay * bx)


# //5.- Normalize a vector guarding against zero length inputs.
def normalize(vector: Iterable[float], fallback: Vector3 = (0.0, 0.0, 0.0)) -> Vector3:
    vx, vy, vz = _to_vector(vector)
    magnitude = math.sqrt(vx * vx + vy * vy + vz * vz)
    if magnitude == 0:
        return fallback
    inv = 1.0 / magnitude
    return (vx * inv, vy * inv, vz * inv)


# //6.- Build a look direction from yaw and pitch; yaw 0 looks down -z.
def direction_from_angles(yaw: float, pitch: float) -> Vector3:
    cos_pitch = math.cos(pitch)
    return (-math.sin(yaw) * cos_pitch, math.sin(pitch), -math.cos(yaw) * cos_pitch)


# //7.- Recover the yaw component of a direction, ignoring pitch entirely.
def yaw_of(direction: Iterable[float]) -> float:
    dx, _, dz = _to_vector(direction)
    return math.atan2(-dx, -dz)


# //8.- Rotate a vector about the world up axis.
def rotate_y(vector: Iterable[float], angle: float) -> Vector3:
    vx, vy, vz = _to_vector(vector)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return (vx * cos_a + vz * sin_a, vy, -vx * sin_a + vz * cos_a)
