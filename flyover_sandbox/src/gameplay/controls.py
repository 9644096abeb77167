"""Latched pilot intents fed by discrete key events."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple, Union

FORWARD = "forward"
LATERAL = "lateral"
VERTICAL = "vertical"


# //1.- Events delivered by whatever host owns the window and input devices.
@dataclass(frozen=True)
class KeyEvent:
    code: str
    pressed: bool


@dataclass(frozen=True)
class PointerLockEvent:
    locked: bool


@dataclass(frozen=True)
class PointerMoveEvent:
    dx: float
    dy: float


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


InputEvent = Union[KeyEvent, PointerLockEvent, PointerMoveEvent, ResizeEvent]


# //2.- Map logical key codes to an intent axis and the value a key press writes.
@dataclass(frozen=True)
class KeyBindings:
    bindings: Dict[str, Tuple[str, int]] = field(
        default_factory=lambda: {
            "KeyW": (FORWARD, 1),
            "KeyS": (FORWARD, -1),
            "KeyA": (LATERAL, -1),
            "KeyD": (LATERAL, 1),
        }
    )

    @classmethod
    def default(cls, vertical_keys: bool = True) -> "KeyBindings":
        bindings = cls().bindings
        if vertical_keys:
            bindings.update({"KeyE": (VERTICAL, 1), "KeyQ": (VERTICAL, -1)})
        return cls(bindings=bindings)

    def lookup(self, code: str) -> Tuple[str, int] | None:
        return self.bindings.get(code)


@dataclass(frozen=True)
class InputSnapshot:
    forward: int = 0
    lateral: int = 0
    vertical: int = 0

    @property
    def idle(self) -> bool:
        return self.forward == 0 and self.lateral == 0 and self.vertical == 0


@dataclass
class InputState:
    """Last-writer-wins intents; releasing either key of a pair zeroes its axis."""

    bindings: KeyBindings = field(default_factory=KeyBindings.default)
    forward: int = 0
    lateral: int = 0
    vertical: int = 0

    def apply(self, event: KeyEvent) -> bool:
        binding = self.bindings.lookup(event.code)
        if binding is None:
            return False
        axis, value = binding
        # //3.- A release never restores the opposite key even if it is still held.
        setattr(self, axis, value if event.pressed else 0)
        return True

    def snapshot(self) -> InputSnapshot:
        return InputSnapshot(forward=self.forward, lateral=self.lateral, vertical=self.vertical)
