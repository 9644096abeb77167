"""Best-effort scattering of trees, rocks and mountains across the terrain."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, Union

import numpy as np

from ... import geometry
from ...geometry import Material, SceneObject, Transform, color_from_hex
from ..generation.settings import RegionSettings, RiverSettings, ScatterSettings
from .terrain import HeightField, river_centerline
from .vector import Vector3

LOGGER = logging.getLogger(__name__)

GROUND_ROCK_COLOR = 0x778877
FLOATING_ROCK_COLOR = 0xAAAAAA


# //1.- Shape proxies carrying the randomized dimensions of each prop family.
@dataclass(frozen=True)
class TreeShape:
    trunk_height: float
    canopy_radius: float
    canopy_stretch: float
    canopy_yaw: float


@dataclass(frozen=True)
class RockShape:
    radius: float
    color: int


@dataclass(frozen=True)
class MountainShape:
    height: float
    radius: float
    sides: int


PropShape = Union[TreeShape, RockShape, MountainShape]


@dataclass(frozen=True)
class PlacedProp:
    kind: str
    position: Vector3
    rotation: Vector3
    shape: PropShape


# //2.- Sampling regions: an axis aligned square or a radial ring around the origin.
@dataclass(frozen=True)
class BoxRegion:
    half_extent: float

    def sample(self, rng: np.random.Generator) -> Tuple[float, float]:
        x = (rng.random() - 0.5) * 2.0 * self.half_extent
        z = (rng.random() - 0.5) * 2.0 * self.half_extent
        return float(x), float(z)


@dataclass(frozen=True)
class RingRegion:
    inner_radius: float
    outer_radius: float

    def sample(self, rng: np.random.Generator) -> Tuple[float, float]:
        angle = rng.random() * 2.0 * math.pi
        distance = self.inner_radius + rng.random() * (self.outer_radius - self.inner_radius)
        return float(math.cos(angle) * distance), float(math.sin(angle) * distance)


Region = Union[BoxRegion, RingRegion]
ExclusionTest = Callable[[float, float], bool]


@dataclass(frozen=True)
class RiverExclusion:
    """Rejects points closer than ``width`` to the river centreline."""

    river: RiverSettings
    width: float

    def __call__(self, x: float, z: float) -> bool:
        return abs(x - float(river_centerline(z, self.river))) < self.width


# //3.- Vertical placement rules: rest on the ground or float inside an altitude band.
@dataclass(frozen=True)
class GroundPlacement:
    min_height: Optional[float] = None
    fallback: float = 0.0


@dataclass(frozen=True)
class AltitudeBand:
    low: float
    high: float


AltitudeRule = Union[GroundPlacement, AltitudeBand]


@dataclass(frozen=True)
class ScatterPolicy:
    kind: str
    count: int
    region: Region
    altitude: AltitudeRule
    make_shape: Callable[[np.random.Generator], PropShape]
    rest_offset: Callable[[PropShape], float]
    orient: Callable[[np.random.Generator], Vector3]
    exclusion: Optional[ExclusionTest] = None


# //4.- Shape factories reproducing the low-poly proportions of each family.
def make_tree_shape(rng: np.random.Generator) -> TreeShape:
    return TreeShape(
        trunk_height=float(rng.random() * 2.0 + 2.0),
        canopy_radius=float(rng.random() * 1.5 + 1.0),
        canopy_stretch=float(rng.random() * 0.5 + 0.8),
        canopy_yaw=float(rng.random() * 2.0 * math.pi),
    )


def make_rock_shape(color: int) -> Callable[[np.random.Generator], RockShape]:
    def _factory(rng: np.random.Generator) -> RockShape:
        return RockShape(radius=float(rng.random() * 0.8 + 0.3), color=color)

    return _factory


def make_mountain_shape(rng: np.random.Generator) -> MountainShape:
    return MountainShape(
        height=float(rng.random() * 80.0 + 40.0),
        radius=float(rng.random() * 30.0 + 20.0),
        sides=int(rng.integers(4, 7)),
    )


def random_yaw(rng: np.random.Generator) -> Vector3:
    return (0.0, float(rng.random() * 2.0 * math.pi), 0.0)


def random_tumble(rng: np.random.Generator) -> Vector3:
    rx, ry, rz = rng.random(3) * math.pi
    return (float(rx), float(ry), float(rz))


def _no_offset(_shape: PropShape) -> float:
    return 0.0


def _rock_rest_offset(shape: PropShape) -> float:
    return shape.radius * 0.5  # type: ignore[union-attr]


def _mountain_rest_offset(shape: PropShape) -> float:
    return shape.height / 2.0 - 5.0  # type: ignore[union-attr]


def _region_from_settings(region: RegionSettings) -> Region:
    if region.kind == "ring":
        return RingRegion(inner_radius=region.inner_radius, outer_radius=region.outer_radius)
    return BoxRegion(half_extent=region.half_extent)


def _altitude_from_settings(settings: ScatterSettings) -> AltitudeRule:
    if settings.altitude_band is not None:
        return AltitudeBand(*settings.altitude_band)
    return GroundPlacement(min_height=settings.min_height)


_FAMILY_TRAITS = {
    "tree": (make_tree_shape, _no_offset, random_yaw),
    "ground_rock": (make_rock_shape(GROUND_ROCK_COLOR), _rock_rest_offset, random_tumble),
    "floating_rock": (make_rock_shape(FLOATING_ROCK_COLOR), _no_offset, random_tumble),
    "mountain": (make_mountain_shape, _mountain_rest_offset, random_yaw),
}


# //5.- Build the four family policies from configuration so one routine can place all of them.
def build_policies(scatter: Dict[str, ScatterSettings], river: RiverSettings) -> Tuple[ScatterPolicy, ...]:
    policies = []
    for kind, (make_shape, rest_offset, orient) in _FAMILY_TRAITS.items():
        settings = scatter[kind]
        exclusion = None
        if settings.exclusion_width is not None:
            exclusion = RiverExclusion(river=river, width=settings.exclusion_width)
        policies.append(
            ScatterPolicy(
                kind=kind,
                count=settings.count,
                region=_region_from_settings(settings.region),
                altitude=_altitude_from_settings(settings),
                make_shape=make_shape,
                rest_offset=rest_offset,
                orient=orient,
                exclusion=exclusion,
            )
        )
    return tuple(policies)


def scatter(policy: ScatterPolicy, height_field: HeightField, rng: np.random.Generator) -> Tuple[PlacedProp, ...]:
    """Place up to ``policy.count`` props; rejected samples are dropped, not retried."""

    placed = []
    excluded = 0
    too_low = 0
    for _ in range(max(0, int(policy.count))):
        x, z = policy.region.sample(rng)
        # //6.- A rejected sample costs one slot, so the realized count may fall short.
        if policy.exclusion is not None and policy.exclusion(x, z):
            excluded += 1
            continue
        altitude = policy.altitude
        if isinstance(altitude, AltitudeBand):
            y = float(altitude.low + rng.random() * (altitude.high - altitude.low))
        else:
            y = height_field.ground_height(x, z, altitude.fallback)
            if altitude.min_height is not None and not y > altitude.min_height:
                too_low += 1
                continue
        shape = policy.make_shape(rng)
        position = (x, y + policy.rest_offset(shape), z)
        placed.append(PlacedProp(kind=policy.kind, position=position, rotation=policy.orient(rng), shape=shape))
    LOGGER.debug(
        "Scattered %d/%d %s (%d excluded, %d too low)",
        len(placed),
        policy.count,
        policy.kind,
        excluded,
        too_low,
    )
    return tuple(placed)


# //7.- Translate placed props into renderable scene objects.
TRUNK_MATERIAL = Material(color=color_from_hex(0x5A3A2A), roughness=1.0)
CANOPY_MATERIAL = Material(color=color_from_hex(0x44AA44), roughness=0.8)
MOUNTAIN_MATERIAL = Material(color=color_from_hex(0xAA8866), roughness=0.95)


def prop_object(prop: PlacedProp, index: int = 0) -> SceneObject:
    transform = Transform(position=prop.position, rotation=prop.rotation)
    name = f"{prop.kind}-{index}"
    shape = prop.shape
    if isinstance(shape, TreeShape):
        trunk = SceneObject(
            name=f"{name}-trunk",
            mesh=geometry.cylinder(0.2, 0.3, shape.trunk_height, 6),
            material=TRUNK_MATERIAL,
            transform=Transform(position=(0.0, shape.trunk_height / 2.0, 0.0)),
            cast_shadow=True,
        )
        canopy = SceneObject(
            name=f"{name}-canopy",
            mesh=geometry.icosahedron(shape.canopy_radius),
            material=CANOPY_MATERIAL,
            transform=Transform(
                position=(0.0, shape.trunk_height + shape.canopy_radius * 0.7, 0.0),
                rotation=(0.0, shape.canopy_yaw, 0.0),
                scale=(1.0, shape.canopy_stretch, 1.0),
            ),
            cast_shadow=True,
        )
        return SceneObject(
            name=name,
            mesh=geometry.empty_mesh(),
            material=TRUNK_MATERIAL,
            transform=transform,
            children=(trunk, canopy),
        )
    if isinstance(shape, RockShape):
        material = Material(color=color_from_hex(shape.color), roughness=1.0)
        return SceneObject(
            name=name,
            mesh=geometry.icosahedron(shape.radius),
            material=material,
            transform=transform,
            cast_shadow=True,
            receive_shadow=True,
        )
    return SceneObject(
        name=name,
        mesh=geometry.cone(shape.radius, shape.height, shape.sides),
        material=MOUNTAIN_MATERIAL,
        transform=transform,
        cast_shadow=True,
        receive_shadow=True,
    )
