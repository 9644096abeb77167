"""Configuration utilities for the flyover sandbox."""
from .config import CONTROL_SCHEMES, DisplayConfig, GenerationSeed, load_display_config
from .settings import (
    SCATTER_FAMILIES,
    CameraSettings,
    FlightSettings,
    RegionSettings,
    ScatterSettings,
    ShadowSettings,
    SkySettings,
    TerrainSettings,
    WorldSettings,
    load_world_settings,
    parse_color,
)

__all__ = [
    "CONTROL_SCHEMES",
    "DisplayConfig",
    "GenerationSeed",
    "load_display_config",
    "SCATTER_FAMILIES",
    "CameraSettings",
    "FlightSettings",
    "RegionSettings",
    "ScatterSettings",
    "ShadowSettings",
    "SkySettings",
    "TerrainSettings",
    "WorldSettings",
    "load_world_settings",
    "parse_color",
]
