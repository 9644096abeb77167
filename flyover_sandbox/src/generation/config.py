"""Environment driven configuration for world seeding and the demo window."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

import numpy as np

CONTROL_SCHEMES = ("pointer_lock", "orbit")


# //1.- Optional seed; None keeps the generator on ambient entropy.
@dataclass(frozen=True)
class GenerationSeed:
    """Seed driving the stochastic parts of world generation."""

    value: Optional[int] = None

    @classmethod
    def from_mapping(cls, payload: Optional[Mapping[str, object]] = None) -> "GenerationSeed":
        if not payload or payload.get("seed") is None:
            return cls()
        return cls(value=int(payload["seed"]))  # type: ignore[arg-type]

    # //2.- Allow pinning the layout through the environment for repeatable sessions.
    @classmethod
    def from_environment(cls, prefix: str = "FLYOVER") -> "GenerationSeed":
        seed = os.getenv(f"{prefix}_SEED")
        mapping: Dict[str, object] = {}
        if seed is not None and seed.strip():
            mapping["seed"] = int(seed)
        return cls.from_mapping(mapping)

    def create_generator(self) -> np.random.Generator:
        if self.value is None:
            return np.random.default_rng()
        return np.random.default_rng(np.uint64(self.value & ((1 << 64) - 1)))


@dataclass(frozen=True)
class DisplayConfig:
    """Window size and control scheme for the interactive demo."""

    width: int
    height: int
    control_scheme: str


# //3.- Resolve display options from a mapping so tests can inject values.
def load_display_config(env: Optional[Mapping[str, str]] = None) -> DisplayConfig:
    source = env if env is not None else os.environ
    width = int(source.get("FLYOVER_WIDTH", "1280"))
    height = int(source.get("FLYOVER_HEIGHT", "720"))
    if width <= 0 or height <= 0:
        raise ValueError("Window dimensions must be positive")
    scheme = source.get("FLYOVER_CONTROL_SCHEME", "pointer_lock").strip().lower()
    if scheme not in CONTROL_SCHEMES:
        raise ValueError(f"Unknown control scheme {scheme!r}")
    return DisplayConfig(width=width, height=height, control_scheme=scheme)
