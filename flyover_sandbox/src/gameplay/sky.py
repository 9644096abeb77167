"""Stylized sky backdrop: gradient dome, decorative ring, fog and lights."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ... import geometry
from ...geometry import Color, Material, SceneObject, Transform, color_from_hex
from ..generation.settings import DomeSettings, RingSettings, ShadowSettings, SkySettings


@dataclass(frozen=True)
class Fog:
    color: Color
    near: float
    far: float

    def factor(self, distance: float) -> float:
        """Linear fog blend: 0 before ``near``, 1 beyond ``far``."""

        if self.far <= self.near:
            return 1.0 if distance >= self.far else 0.0
        return float(min(1.0, max(0.0, (distance - self.near) / (self.far - self.near))))


@dataclass(frozen=True)
class Light:
    color: Color
    intensity: float
    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    shadow: Optional[ShadowSettings] = None

    @property
    def casts_shadow(self) -> bool:
        return self.shadow is not None

    def shadow_bounds(self) -> Optional[Tuple[float, float, float, float]]:
        """Left, right, bottom and top of the square orthographic shadow volume."""

        if self.shadow is None:
            return None
        extent = self.shadow.extent
        return (-extent, extent, -extent, extent)


@dataclass(frozen=True)
class Atmosphere:
    background: Color
    fog: Fog
    ambient: Light
    sun: Light

    @property
    def shadows_enabled(self) -> bool:
        return self.sun.casts_shadow


@dataclass(frozen=True)
class SkyDome:
    dome: SceneObject
    ring: SceneObject
    atmosphere: Atmosphere

    @property
    def objects(self) -> Tuple[SceneObject, ...]:
        return (self.dome, self.ring)


# //1.- Evaluate the vertical gradient the dome shows: bottom colour at the horizon, top colour overhead.
def gradient_colors(vertices: np.ndarray, settings: DomeSettings) -> np.ndarray:
    shifted = vertices + settings.offset
    lengths = np.linalg.norm(shifted, axis=1)
    h = np.divide(shifted[:, 1], lengths, out=np.zeros_like(lengths), where=lengths > 0)
    blend = np.power(np.maximum(h, 0.0), settings.exponent)
    bottom = np.asarray(color_from_hex(settings.bottom_color))
    top = np.asarray(color_from_hex(settings.top_color))
    return bottom + (top - bottom) * blend[:, None]


def build_dome(settings: DomeSettings) -> SceneObject:
    mesh = geometry.uv_sphere(settings.radius, settings.width_segments, settings.height_segments)
    mesh.colors = gradient_colors(mesh.vertices, settings)
    material = Material(vertex_colors=True, unlit=True, flat_shading=False, back_side=True, fog=False)
    return SceneObject(name="sky-dome", mesh=mesh, material=material)


def build_ring(settings: RingSettings) -> SceneObject:
    mesh = geometry.torus(settings.radius, settings.tube, settings.radial_segments, settings.tubular_segments)
    material = Material(
        color=color_from_hex(settings.color),
        opacity=settings.opacity,
        unlit=True,
        flat_shading=False,
        double_sided=True,
    )
    transform = Transform(position=(0.0, settings.elevation, 0.0), rotation=settings.tilt)
    return SceneObject(name="sky-ring", mesh=mesh, material=material, transform=transform)


def build_sky(settings: SkySettings) -> SkyDome:
    background = color_from_hex(settings.background)
    atmosphere = Atmosphere(
        background=background,
        fog=Fog(color=background, near=settings.fog_near, far=settings.fog_far),
        ambient=Light(color=color_from_hex(settings.ambient_light.color), intensity=settings.ambient_light.intensity),
        sun=Light(
            color=color_from_hex(settings.sun.color),
            intensity=settings.sun.intensity,
            position=settings.sun.position,
            shadow=settings.sun.shadow,
        ),
    )
    return SkyDome(dome=build_dome(settings.dome), ring=build_ring(settings.ring), atmosphere=atmosphere)
