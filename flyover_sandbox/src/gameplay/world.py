"""World aggregate, pilot session and the frame loop that drives rendering."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, Tuple

import numpy as np

from ...camera import CameraPose, OrbitCamera, OrbitParams, PerspectiveCamera
from ...geometry import SceneObject
from ..generation.settings import WorldSettings, load_world_settings
from .controls import InputEvent, InputState, KeyBindings, KeyEvent, PointerLockEvent, PointerMoveEvent, ResizeEvent
from .flight import FlightController, FlightParameters
from .placeables import PlacedProp, build_policies, prop_object, scatter
from .sky import SkyDome, build_sky
from .terrain import HeightField, TerrainMesh, generate_terrain
from .vehicle import Vehicle, spawn_vehicle

LOGGER = logging.getLogger(__name__)

POINTER_LOCK = "pointer_lock"
ORBIT = "orbit"


# //1.- Everything generated for one session; only the vehicle and camera mutate after build.
@dataclass
class World:
    settings: WorldSettings
    terrain: TerrainMesh
    height_field: HeightField
    props: Dict[str, Tuple[PlacedProp, ...]]
    prop_objects: Tuple[SceneObject, ...]
    sky: SkyDome
    vehicle: Vehicle
    camera: PerspectiveCamera

    def terrain_object(self) -> SceneObject:
        return SceneObject(
            name="terrain",
            mesh=self.terrain.mesh,
            material=self.terrain.material,
            receive_shadow=True,
        )

    def scene_objects(self) -> Tuple[SceneObject, ...]:
        return (self.terrain_object(),) + self.prop_objects + self.sky.objects + (self.vehicle.scene_object(),)

    def prop_count(self) -> int:
        return sum(len(placed) for placed in self.props.values())


def build_world(settings: Optional[WorldSettings] = None, rng: Optional[np.random.Generator] = None) -> World:
    """Generate terrain, props, sky and vehicle synchronously before the first tick."""

    settings = settings or load_world_settings()
    rng = rng if rng is not None else np.random.default_rng()
    terrain, height_field = generate_terrain(settings.terrain, rng)
    props: Dict[str, Tuple[PlacedProp, ...]] = {}
    objects = []
    for policy in build_policies(settings.scatter, settings.terrain.river):
        placed = scatter(policy, height_field, rng)
        props[policy.kind] = placed
        objects.extend(prop_object(prop, index) for index, prop in enumerate(placed))
    flight = settings.flight
    camera = PerspectiveCamera(
        fov_degrees=flight.camera.fov_degrees,
        near=flight.camera.near,
        far=flight.camera.far,
    )
    world = World(
        settings=settings,
        terrain=terrain,
        height_field=height_field,
        props=props,
        prop_objects=tuple(objects),
        sky=build_sky(settings.sky),
        vehicle=spawn_vehicle(flight.spawn_position, flight.viewpoint_offset),
        camera=camera,
    )
    LOGGER.info(
        "Built world: %d terrain vertices, props %s",
        terrain.mesh.vertex_count,
        ", ".join(f"{kind}={len(placed)}" for kind, placed in props.items()),
    )
    return world


# //2.- What a renderer receives each frame: the world plus the composed viewpoint.
@dataclass(frozen=True)
class FrameView:
    world: World
    camera_pose: CameraPose
    projection: np.ndarray
    frame_index: int
    dt: float


class Renderer(Protocol):
    def render(self, frame: FrameView) -> None:
        """Draw the world from the frame's camera pose."""

    def resize(self, width: int, height: int) -> None:
        """Match the drawable viewport to the host window."""


class HeadlessRenderer:
    """Renderer stand-in that only tracks frames and viewport size."""

    def __init__(self) -> None:
        self.frames = 0
        self.viewport: Tuple[int, int] = (0, 0)
        self.last_frame: Optional[FrameView] = None

    def render(self, frame: FrameView) -> None:
        self.frames += 1
        self.last_frame = frame
        LOGGER.debug("Frame %d camera at %s", frame.frame_index, frame.camera_pose.position)

    def resize(self, width: int, height: int) -> None:
        self.viewport = (width, height)


class FrameClock:
    """Measures the time between consecutive ticks; the first delta is zero."""

    def __init__(self, time_source: Callable[[], float] = time.perf_counter) -> None:
        self._time_source = time_source
        self._last: Optional[float] = None

    def delta(self) -> float:
        now = self._time_source()
        previous = self._last
        self._last = now
        if previous is None:
            return 0.0
        return max(0.0, now - previous)


class FlightSession:
    """Owns one world and routes input events and ticks to it."""

    def __init__(
        self,
        world: World,
        *,
        control_scheme: str = POINTER_LOCK,
        controller: Optional[FlightController] = None,
        input_state: Optional[InputState] = None,
        orbit: Optional[OrbitCamera] = None,
    ) -> None:
        if control_scheme not in (POINTER_LOCK, ORBIT):
            raise ValueError(f"Unknown control scheme {control_scheme!r}")
        flight = world.settings.flight
        self.world = world
        self.control_scheme = control_scheme
        self.controller = controller or FlightController(FlightParameters.from_settings(flight))
        self.input = input_state or InputState(bindings=KeyBindings.default(flight.vertical_keys))
        self.orbit = orbit or OrbitCamera(params=OrbitParams())
        self.frame_index = 0

    @property
    def mode(self):
        return self.controller.mode

    # //3.- Event boundary: events only write state, the next tick reads it.
    def handle_event(self, event: InputEvent, renderer: Optional[Renderer] = None) -> None:
        if isinstance(event, KeyEvent):
            self.input.apply(event)
        elif isinstance(event, PointerLockEvent):
            if self.control_scheme == ORBIT:
                LOGGER.debug("Ignoring pointer lock change in orbit scheme")
                return
            self.controller.set_pointer_locked(event.locked)
        elif isinstance(event, PointerMoveEvent):
            if self.control_scheme == ORBIT:
                self.orbit.rotate(event.dx, event.dy)
            else:
                self.controller.look(self.world.vehicle, event.dx, event.dy)
        elif isinstance(event, ResizeEvent):
            self.resize(event.width, event.height, renderer)

    def resize(self, width: int, height: int, renderer: Optional[Renderer] = None) -> None:
        if not self.world.camera.resize(width, height):
            LOGGER.debug("Ignoring degenerate viewport %dx%d", width, height)
            return
        if renderer is not None:
            renderer.resize(width, height)

    def camera_pose(self) -> CameraPose:
        if self.control_scheme == ORBIT:
            return self.orbit.pose()
        vehicle = self.world.vehicle
        return CameraPose(
            position=vehicle.viewpoint_position(),
            yaw=vehicle.viewpoint.yaw,
            pitch=vehicle.viewpoint.pitch,
        )

    def tick(self, dt: float) -> FrameView:
        """Advance the simulation one frame and describe what should be drawn."""

        if self.control_scheme == ORBIT:
            self.orbit.update(dt)
        else:
            self.controller.step(self.world.vehicle, self.input.snapshot(), self.world.height_field.height, dt)
        frame = FrameView(
            world=self.world,
            camera_pose=self.camera_pose(),
            projection=self.world.camera.projection_matrix(),
            frame_index=self.frame_index,
            dt=dt,
        )
        self.frame_index += 1
        return frame


class SimulationLoop:
    """Runs one session tick per frame and hands each frame to the renderer."""

    def __init__(
        self,
        session: FlightSession,
        renderer: Renderer,
        *,
        clock: Optional[FrameClock] = None,
        poll_events: Optional[Callable[[], Tuple[InputEvent, ...]]] = None,
    ) -> None:
        self.session = session
        self.renderer = renderer
        self.clock = clock or FrameClock()
        self._poll_events = poll_events
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def stop(self) -> None:
        self._running = False

    def frame(self) -> FrameView:
        if self._poll_events is not None:
            for event in self._poll_events():
                self.session.handle_event(event, self.renderer)
        view = self.session.tick(self.clock.delta())
        self.renderer.render(view)
        return view

    def run(self, max_frames: Optional[int] = None) -> int:
        """Tick until ``stop`` is called or ``max_frames`` frames were drawn."""

        self._running = True
        frames = 0
        while self._running and (max_frames is None or frames < max_frames):
            self.frame()
            frames += 1
        self._running = False
        LOGGER.info("Simulation loop stopped after %d frames", frames)
        return frames
