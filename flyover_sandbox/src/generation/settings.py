"""Structured loader for landscape and flight settings."""
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

SCATTER_FAMILIES = ("tree", "ground_rock", "floating_rock", "mountain")


# //1.- Capture the terrain grid and river carving parameters.
@dataclass(frozen=True)
class RiverSettings:
    width: float
    depth: float
    amplitude: float
    frequency: float


@dataclass(frozen=True)
class TerrainSettings:
    size: float
    resolution: int
    hill_height: float
    river: RiverSettings
    base_color: int
    river_color: int
    patch_color: int
    river_color_threshold: float
    river_color_gain: float
    patch_threshold: float


# //2.- Describe where one prop family may land and how it is filtered.
@dataclass(frozen=True)
class RegionSettings:
    kind: str
    half_extent: float = 0.0
    inner_radius: float = 0.0
    outer_radius: float = 0.0


@dataclass(frozen=True)
class ScatterSettings:
    count: int
    region: RegionSettings
    exclusion_width: Optional[float] = None
    min_height: Optional[float] = None
    altitude_band: Optional[Tuple[float, float]] = None


# //3.- Bundle flight tuning together with the viewpoint camera lens.
@dataclass(frozen=True)
class CameraSettings:
    fov_degrees: float
    near: float
    far: float


@dataclass(frozen=True)
class FlightSettings:
    move_speed: float
    look_speed: float
    hover_offset: float
    smoothing: float
    vertical_rate: float
    fallback_ground: float
    vertical_keys: bool
    spawn_position: Tuple[float, float, float]
    viewpoint_offset: Tuple[float, float, float]
    camera: CameraSettings


# //4.- Sky backdrop, fog and lights.
@dataclass(frozen=True)
class DomeSettings:
    radius: float
    width_segments: int
    height_segments: int
    top_color: int
    bottom_color: int
    offset: float
    exponent: float


@dataclass(frozen=True)
class RingSettings:
    radius: float
    tube: float
    radial_segments: int
    tubular_segments: int
    tilt: Tuple[float, float, float]
    elevation: float
    color: int
    opacity: float


@dataclass(frozen=True)
class ShadowSettings:
    map_size: int
    near: float
    far: float
    extent: float


@dataclass(frozen=True)
class LightSettings:
    color: int
    intensity: float
    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    shadow: Optional[ShadowSettings] = None


@dataclass(frozen=True)
class SkySettings:
    background: int
    fog_near: float
    fog_far: float
    dome: DomeSettings
    ring: RingSettings
    ambient_light: LightSettings
    sun: LightSettings


# //5.- Aggregate complete world settings for downstream modules.
@dataclass(frozen=True)
class WorldSettings:
    terrain: TerrainSettings
    scatter: Dict[str, ScatterSettings]
    flight: FlightSettings
    sky: SkySettings


def _default_config_directory() -> str:
    base_dir = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
    return os.path.join(base_dir, "config")


def _read_json_config(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


# //6.- Accept "#rrggbb" or "0xrrggbb" strings as well as raw integers.
def parse_color(value: object) -> int:
    if isinstance(value, int):
        color = value
    else:
        text = str(value).strip().lower()
        if text.startswith("#"):
            text = text[1:]
        elif text.startswith("0x"):
            text = text[2:]
        try:
            color = int(text, 16)
        except ValueError as exc:
            raise ValueError(f"Invalid colour value {value!r}") from exc
    if not 0 <= color <= 0xFFFFFF:
        raise ValueError(f"Colour {value!r} is outside the 24-bit range")
    return color


def _vector3(values: object, label: str) -> Tuple[float, float, float]:
    components = tuple(float(component) for component in values)  # type: ignore[union-attr]
    if len(components) != 3:
        raise ValueError(f"{label} must contain exactly three components")
    return components  # type: ignore[return-value]


def _positive(value: float, label: str) -> float:
    if value <= 0:
        raise ValueError(f"{label} must be positive")
    return value


def _load_terrain_settings(config_dir: str) -> TerrainSettings:
    payload = _read_json_config(os.path.join(config_dir, "terrain.json"))
    river = payload["river"]
    colors = payload.get("colors", {})
    resolution = int(payload["resolution"])
    if resolution < 1:
        raise ValueError("Terrain resolution must be at least one cell")
    return TerrainSettings(
        size=_positive(float(payload["size"]), "Terrain size"),
        resolution=resolution,
        hill_height=float(payload.get("hill_height", 0.0)),
        river=RiverSettings(
            width=_positive(float(river["width"]), "River width"),
            depth=float(river.get("depth", 0.0)),
            amplitude=float(river.get("amplitude", 0.0)),
            frequency=float(river.get("frequency", 0.0)),
        ),
        base_color=parse_color(colors.get("base", "#ccaa66")),
        river_color=parse_color(colors.get("river", "#339999")),
        patch_color=parse_color(colors.get("patch", "#55aa55")),
        river_color_threshold=float(payload.get("river_color_threshold", 0.1)),
        river_color_gain=float(payload.get("river_color_gain", 1.5)),
        patch_threshold=float(payload.get("patch_threshold", 0.6)),
    )


def _load_region(payload: Mapping[str, object], family: str) -> RegionSettings:
    kind = str(payload.get("kind", "box")).strip().lower()
    if kind == "box":
        return RegionSettings(kind=kind, half_extent=float(payload["half_extent"]))
    if kind == "ring":
        inner = float(payload["inner_radius"])
        outer = float(payload["outer_radius"])
        if inner < 0 or outer < inner:
            raise ValueError(f"Ring region for {family} needs 0 <= inner_radius <= outer_radius")
        return RegionSettings(kind=kind, inner_radius=inner, outer_radius=outer)
    raise ValueError(f"Unsupported scatter region {kind!r} for {family}")


def _load_scatter_settings(config_dir: str) -> Dict[str, ScatterSettings]:
    payload = _read_json_config(os.path.join(config_dir, "scatter.json"))
    scatter: Dict[str, ScatterSettings] = {}
    for family in SCATTER_FAMILIES:
        if family not in payload:
            raise ValueError(f"Missing scatter settings for {family}")
        entry = payload[family]
        band = entry.get("altitude_band")
        altitude_band = None
        if band is not None:
            low, high = (float(value) for value in band)
            if high < low:
                raise ValueError(f"Altitude band for {family} is inverted")
            altitude_band = (low, high)
        exclusion = entry.get("exclusion_width")
        minimum = entry.get("min_height")
        scatter[family] = ScatterSettings(
            count=max(0, int(entry.get("count", 0))),
            region=_load_region(entry["region"], family),
            exclusion_width=float(exclusion) if exclusion is not None else None,
            min_height=float(minimum) if minimum is not None else None,
            altitude_band=altitude_band,
        )
    return scatter


def _load_flight_settings(config_dir: str) -> FlightSettings:
    payload = _read_json_config(os.path.join(config_dir, "flight.json"))
    smoothing = float(payload["smoothing"])
    if not 0.0 < smoothing <= 1.0:
        raise ValueError("Height smoothing factor must lie in (0, 1]")
    camera = payload.get("camera", {})
    near = _positive(float(camera.get("near", 0.1)), "Camera near plane")
    far = float(camera.get("far", 1000.0))
    if far <= near:
        raise ValueError("Camera far plane must lie beyond the near plane")
    return FlightSettings(
        move_speed=float(payload["move_speed"]),
        look_speed=float(payload["look_speed"]),
        hover_offset=float(payload["hover_offset"]),
        smoothing=smoothing,
        vertical_rate=float(payload.get("vertical_rate", 0.5)),
        fallback_ground=float(payload.get("fallback_ground", 0.0)),
        vertical_keys=bool(payload.get("vertical_keys", True)),
        spawn_position=_vector3(payload["spawn_position"], "spawn_position"),
        viewpoint_offset=_vector3(payload["viewpoint_offset"], "viewpoint_offset"),
        camera=CameraSettings(
            fov_degrees=_positive(float(camera.get("fov_degrees", 75.0)), "Camera field of view"),
            near=near,
            far=far,
        ),
    )


def _load_shadow(payload: Mapping[str, object]) -> ShadowSettings:
    map_size = int(payload.get("map_size", 1024))  # type: ignore[arg-type]
    near = _positive(float(payload.get("near", 0.5)), "Shadow near plane")  # type: ignore[arg-type]
    far = float(payload.get("far", 500.0))  # type: ignore[arg-type]
    if far <= near:
        raise ValueError("Shadow far plane must lie beyond the near plane")
    return ShadowSettings(
        map_size=int(_positive(map_size, "Shadow map size")),
        near=near,
        far=far,
        extent=_positive(float(payload.get("extent", 150.0)), "Shadow extent"),  # type: ignore[arg-type]
    )


def _load_light(payload: Mapping[str, object]) -> LightSettings:
    position = payload.get("position")
    shadow = payload.get("shadow")
    return LightSettings(
        color=parse_color(payload["color"]),
        intensity=float(payload.get("intensity", 1.0)),  # type: ignore[arg-type]
        position=_vector3(position, "light position") if position is not None else (0.0, 0.0, 0.0),
        shadow=_load_shadow(shadow) if shadow is not None else None,  # type: ignore[arg-type]
    )


def _load_sky_settings(config_dir: str) -> SkySettings:
    payload = _read_json_config(os.path.join(config_dir, "sky.json"))
    fog = payload.get("fog", {})
    dome = payload["dome"]
    ring = payload["ring"]
    return SkySettings(
        background=parse_color(payload.get("background", "#408080")),
        fog_near=float(fog.get("near", 50.0)),
        fog_far=float(fog.get("far", 250.0)),
        dome=DomeSettings(
            radius=_positive(float(dome["radius"]), "Sky dome radius"),
            width_segments=int(dome.get("width_segments", 16)),
            height_segments=int(dome.get("height_segments", 8)),
            top_color=parse_color(dome["top_color"]),
            bottom_color=parse_color(dome["bottom_color"]),
            offset=float(dome.get("offset", 0.0)),
            exponent=float(dome.get("exponent", 1.0)),
        ),
        ring=RingSettings(
            radius=float(ring["radius"]),
            tube=float(ring["tube"]),
            radial_segments=int(ring.get("radial_segments", 6)),
            tubular_segments=int(ring.get("tubular_segments", 40)),
            tilt=_vector3(ring.get("tilt", (0.0, 0.0, 0.0)), "ring tilt"),
            elevation=float(ring.get("elevation", 0.0)),
            color=parse_color(ring["color"]),
            opacity=min(1.0, max(0.0, float(ring.get("opacity", 1.0)))),
        ),
        ambient_light=_load_light(payload["ambient_light"]),
        sun=_load_light(payload["sun"]),
    )


# //7.- Public helper assembling the full settings bundle.
def load_world_settings(config_dir: str | None = None) -> WorldSettings:
    directory = config_dir or _default_config_directory()
    return WorldSettings(
        terrain=_load_terrain_settings(directory),
        scatter=_load_scatter_settings(directory),
        flight=_load_flight_settings(directory),
        sky=_load_sky_settings(directory),
    )
