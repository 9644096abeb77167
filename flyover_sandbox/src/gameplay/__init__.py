"""Gameplay systems for the low-poly flyover sandbox."""
from . import vector
from .terrain import HeightField, TerrainMesh, generate_terrain, river_centerline, river_influence
from .placeables import PlacedProp, ScatterPolicy, build_policies, scatter
from .sky import SkyDome, build_sky
from .vehicle import Vehicle, Viewpoint, spawn_vehicle
from .controls import InputSnapshot, InputState, KeyBindings, KeyEvent, PointerLockEvent, PointerMoveEvent, ResizeEvent
from .flight import ControlMode, FlightController, FlightParameters
from .world import FlightSession, FrameClock, FrameView, HeadlessRenderer, Renderer, SimulationLoop, World, build_world
