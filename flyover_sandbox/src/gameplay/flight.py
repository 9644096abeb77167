"""Yaw-only hover flight driven by latched intents and the viewpoint."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional

from ..generation.settings import FlightSettings
from . import vector
from .controls import InputSnapshot
from .vector import Vector3
from .vehicle import Vehicle

LOGGER = logging.getLogger(__name__)

HeightQuery = Callable[[float, float], Optional[float]]


# //1.- The only state machine: pointer capture gates whether input moves the vehicle.
class ControlMode(Enum):
    FREE_LOOK = auto()
    PILOTING = auto()


@dataclass(frozen=True)
class FlightParameters:
    move_speed: float = 20.0
    look_speed: float = 0.002
    hover_offset: float = 3.0
    smoothing: float = 0.05
    vertical_rate: float = 0.5
    fallback_ground: float = 0.0

    @classmethod
    def from_settings(cls, settings: FlightSettings) -> "FlightParameters":
        return cls(
            move_speed=settings.move_speed,
            look_speed=settings.look_speed,
            hover_offset=settings.hover_offset,
            smoothing=settings.smoothing,
            vertical_rate=settings.vertical_rate,
            fallback_ground=settings.fallback_ground,
        )


# //2.- Horizontal basis derived from the look direction; pitch never feeds translation.
def horizontal_forward(look: Vector3, yaw: float) -> Vector3:
    fallback = vector.direction_from_angles(yaw, 0.0)
    return vector.normalize((look[0], 0.0, look[2]), fallback)


def horizontal_right(forward: Vector3) -> Vector3:
    return vector.normalize(vector.cross(vector.WORLD_UP, forward), (1.0, 0.0, 0.0))


def settle_height(y: float, target: float, smoothing: float) -> float:
    """One exponential smoothing step toward ``target``; deliberately not scaled by dt."""

    return y + (target - y) * smoothing


def resolve_ground(height_query: HeightQuery, x: float, z: float, fallback: float) -> float:
    height = height_query(x, z)
    return fallback if height is None else float(height)


class FlightController:
    """Applies one flight tick to a vehicle while the pointer is captured."""

    def __init__(self, parameters: Optional[FlightParameters] = None) -> None:
        self.parameters = parameters or FlightParameters()
        self._mode = ControlMode.FREE_LOOK

    @property
    def mode(self) -> ControlMode:
        return self._mode

    @property
    def piloting(self) -> bool:
        return self._mode is ControlMode.PILOTING

    def set_pointer_locked(self, locked: bool) -> bool:
        """Apply a capture acquired/released event; returns True on a transition."""

        target = ControlMode.PILOTING if locked else ControlMode.FREE_LOOK
        if target is self._mode:
            return False
        LOGGER.info("Control mode %s -> %s", self._mode.name, target.name)
        self._mode = target
        return True

    def look(self, vehicle: Vehicle, dx: float, dy: float) -> None:
        # //3.- The viewpoint stays frozen outside piloting.
        if self.piloting:
            vehicle.viewpoint.turn(dx, dy, self.parameters.look_speed)

    def step(self, vehicle: Vehicle, inputs: InputSnapshot, height_query: HeightQuery, dt: float) -> bool:
        """Advance ``vehicle`` by ``dt`` seconds; returns False when nothing ran."""

        if not self.piloting:
            return False
        params = self.parameters
        viewpoint = vehicle.viewpoint
        forward = horizontal_forward(viewpoint.look_direction(), viewpoint.yaw)
        right = horizontal_right(forward)
        distance = params.move_speed * dt
        # //4.- Horizontal translation from forward and lateral intents.
        displacement = vector.add(
            vector.scale(forward, inputs.forward * distance),
            vector.scale(right, inputs.lateral * distance),
        )
        x, y, z = vector.add(vehicle.position, displacement)
        # //5.- Vertical intent climbs at a fraction of the horizontal speed.
        y += inputs.vertical * distance * params.vertical_rate
        # //6.- Ease toward the hover altitude above whatever ground lies below the new position.
        target = resolve_ground(height_query, x, z, params.fallback_ground) + params.hover_offset
        y = settle_height(y, target, params.smoothing)
        vehicle.position = (x, y, z)
        # //7.- The hull follows the viewpoint's heading but never its pitch.
        vehicle.yaw = viewpoint.yaw
        return True
