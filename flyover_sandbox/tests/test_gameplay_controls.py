"""Key binding and latched intent tests."""
from __future__ import annotations

from flyover_sandbox.src.gameplay.controls import InputState, KeyBindings, KeyEvent


def _press(state: InputState, code: str) -> bool:
    return state.apply(KeyEvent(code=code, pressed=True))


def _release(state: InputState, code: str) -> bool:
    return state.apply(KeyEvent(code=code, pressed=False))


def test_last_pressed_key_wins_and_release_zeroes_axis() -> None:
    state = InputState()
    _press(state, "KeyW")
    _press(state, "KeyS")
    assert state.forward == -1
    _release(state, "KeyS")
    # //1.- W is still held, but releasing either key of the pair clears the axis.
    assert state.forward == 0


def test_lateral_keys_map_to_signed_intent() -> None:
    state = InputState()
    _press(state, "KeyA")
    assert state.snapshot().lateral == -1
    _press(state, "KeyD")
    assert state.snapshot().lateral == 1
    _release(state, "KeyA")
    assert state.snapshot().idle


def test_vertical_keys_follow_binding_toggle() -> None:
    enabled = InputState(bindings=KeyBindings.default(vertical_keys=True))
    assert _press(enabled, "KeyE")
    assert enabled.vertical == 1
    _press(enabled, "KeyQ")
    assert enabled.vertical == -1
    disabled = InputState(bindings=KeyBindings.default(vertical_keys=False))
    assert not _press(disabled, "KeyE")
    assert disabled.vertical == 0


def test_unbound_keys_are_ignored() -> None:
    state = InputState()
    assert not _press(state, "Space")
    assert state.snapshot().idle


def test_snapshot_is_detached_from_later_events() -> None:
    state = InputState()
    _press(state, "KeyW")
    snapshot = state.snapshot()
    _release(state, "KeyW")
    assert snapshot.forward == 1
    assert state.snapshot().idle
