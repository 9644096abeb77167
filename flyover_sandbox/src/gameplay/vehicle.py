"""Flyable spaceship body and the pointer-driven viewpoint attached to it."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Tuple

from ... import geometry
from ...geometry import Material, SceneObject, Transform, color_from_hex
from . import vector
from .vector import Vector3

PITCH_LIMIT = math.pi / 2.0

HULL_MATERIAL = Material(color=color_from_hex(0xDDDDDD), roughness=0.6)
VIEWPORT_MATERIAL = Material(color=color_from_hex(0x444466), roughness=0.1, metalness=0.2)
NACELLE_MATERIAL = Material(color=color_from_hex(0x666666), roughness=0.8)


# //1.- Assemble the hull in its local frame; the nose points down -z.
def build_hull_parts() -> Tuple[SceneObject, ...]:
    stabilizer = geometry.box(5.0, 0.2, 2.0)
    nacelle = geometry.cylinder(0.4, 0.5, 1.0, 8)
    return (
        SceneObject(name="hull", mesh=geometry.box(2.0, 0.8, 4.0), material=HULL_MATERIAL, cast_shadow=True),
        SceneObject(
            name="viewport",
            mesh=geometry.box(1.2, 0.6, 1.5),
            material=VIEWPORT_MATERIAL,
            transform=Transform(position=(0.0, 0.5, -0.5)),
            cast_shadow=True,
        ),
        SceneObject(
            name="stabilizer-left",
            mesh=stabilizer,
            material=HULL_MATERIAL,
            transform=Transform(position=(-2.5, 0.0, -0.5), rotation=(0.0, 0.0, math.pi / 16.0)),
            cast_shadow=True,
        ),
        SceneObject(
            name="stabilizer-right",
            mesh=stabilizer,
            material=HULL_MATERIAL,
            transform=Transform(position=(2.5, 0.0, -0.5), rotation=(0.0, 0.0, -math.pi / 16.0)),
            cast_shadow=True,
        ),
        SceneObject(
            name="nacelle-left",
            mesh=nacelle,
            material=NACELLE_MATERIAL,
            transform=Transform(position=(-0.7, 0.0, 2.2), rotation=(math.pi / 2.0, 0.0, 0.0)),
            cast_shadow=True,
        ),
        SceneObject(
            name="nacelle-right",
            mesh=nacelle,
            material=NACELLE_MATERIAL,
            transform=Transform(position=(0.7, 0.0, 2.2), rotation=(math.pi / 2.0, 0.0, 0.0)),
            cast_shadow=True,
        ),
    )


@dataclass
class Viewpoint:
    """Look orientation owned by pointer input, offset from the hull origin."""

    offset: Vector3 = (0.0, 2.0, 6.0)
    yaw: float = 0.0
    pitch: float = 0.0

    @classmethod
    def aimed_at_hull(cls, offset: Vector3) -> "Viewpoint":
        # //2.- Start by looking back at the hull origin from the offset position.
        horizontal = math.hypot(offset[0], offset[2])
        pitch = math.atan2(-offset[1], horizontal)
        yaw = vector.yaw_of((-offset[0], 0.0, -offset[2])) if horizontal else 0.0
        return cls(offset=offset, yaw=yaw, pitch=pitch)

    def look_direction(self) -> Vector3:
        return vector.direction_from_angles(self.yaw, self.pitch)

    def turn(self, dx: float, dy: float, sensitivity: float) -> None:
        # //3.- Pointer motion right turns right, motion down looks down; pitch stops at straight up/down.
        self.yaw -= dx * sensitivity
        self.pitch = max(-PITCH_LIMIT, min(PITCH_LIMIT, self.pitch - dy * sensitivity))


@dataclass
class Vehicle:
    """Composite hull with a yaw-only driver orientation."""

    position: Vector3 = (0.0, 5.0, 0.0)
    yaw: float = 0.0
    viewpoint: Viewpoint = field(default_factory=Viewpoint)
    parts: Tuple[SceneObject, ...] = field(default_factory=build_hull_parts)

    def transform(self) -> Transform:
        return Transform(position=self.position, rotation=(0.0, self.yaw, 0.0))

    def viewpoint_position(self) -> Vector3:
        """World position of the viewpoint: hull origin plus the yaw-rotated offset."""

        return vector.add(self.position, vector.rotate_y(self.viewpoint.offset, self.yaw))

    def scene_object(self) -> SceneObject:
        return SceneObject(
            name="vehicle",
            mesh=geometry.empty_mesh(),
            material=HULL_MATERIAL,
            transform=self.transform(),
            children=self.parts,
        )


def spawn_vehicle(position: Vector3 = (0.0, 5.0, 0.0), viewpoint_offset: Vector3 = (0.0, 2.0, 6.0)) -> Vehicle:
    return Vehicle(
        position=(float(position[0]), float(position[1]), float(position[2])),
        viewpoint=Viewpoint.aimed_at_hull(viewpoint_offset),
    )
