"""Joypad register state and keyboard input handling."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

INPUT_SELECT_BUTTONS = 0x20
INPUT_SELECT_DIRECTIONS = 0x10
INPUT_BUTTONS_START = 0x08
INPUT_BUTTONS_SELECT = 0x04
INPUT_BUTTONS_B = 0x02
INPUT_BUTTONS_A = 0x01
INPUT_DIRECTIONS_DOWN = 0x08
INPUT_DIRECTIONS_UP = 0x04
INPUT_DIRECTIONS_LEFT = 0x02
INPUT_DIRECTIONS_RIGHT = 0x01


class Button(Enum):
    """A joypad input: which register row it lives on and its bit."""

    START = ("buttons", INPUT_BUTTONS_START)
    SELECT = ("buttons", INPUT_BUTTONS_SELECT)
    B = ("buttons", INPUT_BUTTONS_B)
    A = ("buttons", INPUT_BUTTONS_A)
    DOWN = ("directions", INPUT_DIRECTIONS_DOWN)
    UP = ("directions", INPUT_DIRECTIONS_UP)
    LEFT = ("directions", INPUT_DIRECTIONS_LEFT)
    RIGHT = ("directions", INPUT_DIRECTIONS_RIGHT)

    @property
    def is_direction(self) -> bool:
        return self.value[0] == "directions"

    @property
    def mask(self) -> int:
        return self.value[1]


@dataclass
class Joypad:
    """Active-low button and direction rows plus the interrupt they raise."""

    joyp: int = 0xFF
    buttons: int = 0xFF
    directions: int = 0xFF
    select: int = INPUT_SELECT_BUTTONS
    interrupt_requested: bool = False
    halted: bool = False

    def press(self, button: Button) -> None:
        if button.is_direction:
            self.directions &= ~button.mask & 0xFF
        else:
            self.buttons &= ~button.mask & 0xFF
        self._wake()

    def release(self, button: Button) -> None:
        if button.is_direction:
            self.directions |= button.mask
        else:
            self.buttons |= button.mask
        self._wake()

    def _wake(self) -> None:
        self.interrupt_requested = True
        self.halted = False


_KEYMAP = {
    "return": Button.START,
    "tab": Button.SELECT,
    "s": Button.A,
    "a": Button.B,
    "up": Button.UP,
    "down": Button.DOWN,
    "left": Button.LEFT,
    "right": Button.RIGHT,
}

_QUIT_KEYS = frozenset({"escape", "q"})
_PAUSE_KEY = "p"


@dataclass
class InputHandler:
    """Turns key events into joypad changes and run-control flags."""

    joypad: Joypad = field(default_factory=Joypad)
    stop: bool = False
    paused: bool = False

    def handle_key_down(self, key: str) -> None:
        key = key.lower()
        if key in _QUIT_KEYS:
            self.stop = True
        elif key == _PAUSE_KEY:
            self.paused = not self.paused
        elif key in _KEYMAP:
            self.joypad.press(_KEYMAP[key])

    def handle_key_up(self, key: str) -> None:
        button = _KEYMAP.get(key.lower())
        if button is not None:
            self.joypad.release(button)

    def handle_quit(self) -> None:
        self.stop = True