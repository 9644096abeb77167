"""Flyover sandbox package.

Procedurally builds a low-poly landscape (terrain with a winding river,
trees, rocks, mountains and a stylized sky) and flies a small spaceship over
it with mouse-look and keyboard controls.
"""

from .src.gameplay import (
    ControlMode,
    FlightController,
    FlightParameters,
    FlightSession,
    HeadlessRenderer,
    HeightField,
    InputState,
    SimulationLoop,
    Vehicle,
    World,
    build_world,
    generate_terrain,
    scatter,
)
from .src.generation import GenerationSeed, load_world_settings
from .camera import OrbitCamera, PerspectiveCamera
from .geometry import Material, MeshData, SceneObject, Transform

__all__ = [
    "ControlMode",
    "FlightController",
    "FlightParameters",
    "FlightSession",
    "HeadlessRenderer",
    "HeightField",
    "InputState",
    "SimulationLoop",
    "Vehicle",
    "World",
    "build_world",
    "generate_terrain",
    "scatter",
    "GenerationSeed",
    "load_world_settings",
    "OrbitCamera",
    "PerspectiveCamera",
    "Material",
    "MeshData",
    "SceneObject",
    "Transform",
]
