"""
InputSnapshot - per-tick input data handed to the active mode
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple


class Key(Enum):
    """Keyboard keys the modes understand"""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    ROTATE_CCW = "q"
    ROTATE_CW = "e"
    SCALE_UP = "+"
    SCALE_DOWN = "-"
    ENTER = "enter"
    ESCAPE = "escape"
    BACKSPACE = "backspace"
    DELETE = "delete"
    GAME = "g"
    REAL = "r"
    BEFORE = "b"
    AFTER = "a"
    DIGIT_0 = "0"
    DIGIT_1 = "1"
    DIGIT_2 = "2"
    DIGIT_3 = "3"
    DIGIT_4 = "4"
    DIGIT_5 = "5"
    DIGIT_6 = "6"
    DIGIT_7 = "7"
    DIGIT_8 = "8"
    DIGIT_9 = "9"

    @property
    def digit(self) -> Optional[int]:
        """Digit value for DIGIT_* keys, None otherwise"""
        if self.name.startswith("DIGIT_"):
            return int(self.value)
        return None

    @classmethod
    def for_digit(cls, value: int) -> 'Key':
        return cls(str(value))


@dataclass(frozen=True)
class KeyboardState:
    """
    Keys held down this tick and keys that went down since the last tick.

    Usage:
        keys = KeyboardState(held=frozenset({Key.UP}), just_pressed=(Key.UP,))
        if keys.is_held(Key.UP): ...
    """
    held: FrozenSet[Key] = frozenset()
    just_pressed: Tuple[Key, ...] = ()         # In arrival order

    def is_held(self, key: Key) -> bool:
        return key in self.held

    def was_pressed(self, key: Key) -> bool:
        return key in self.just_pressed

    def pressed_digits(self) -> List[int]:
        """Digits that went down this tick, in typing order"""
        return [key.digit for key in self.just_pressed if key.digit is not None]


@dataclass(frozen=True)
class ButtonSnapshot:
    """Debounced level and edges of one button for one tick"""
    pressed: bool = False
    just_pressed: bool = False
    just_released: bool = False


RELEASED = ButtonSnapshot()


@dataclass
class InputSnapshot:
    """
    Everything a mode may read during one update() call.

    Built once per tick by the GameManager after every button was polled.
    Unknown button ids read as released.
    """
    now: float                                  # Monotonic seconds
    buttons: Dict[str, ButtonSnapshot] = field(default_factory=dict)
    keyboard: KeyboardState = field(default_factory=KeyboardState)
    dt: float = 0.0                             # Seconds since previous tick

    # Calculated fields
    pressed_ids: List[str] = field(init=False)
    just_pressed_ids: List[str] = field(init=False)

    def __post_init__(self):
        if self.dt < 0:
            raise ValueError(f"dt must not be negative, got {self.dt}")
        self.pressed_ids = [button_id for button_id, snap in self.buttons.items() if snap.pressed]
        self.just_pressed_ids = [button_id for button_id, snap in self.buttons.items() if snap.just_pressed]

    def button(self, button_id: str) -> ButtonSnapshot:
        return self.buttons.get(button_id, RELEASED)

    def is_pressed(self, button_id: Optional[str]) -> bool:
        return button_id is not None and self.button(button_id).pressed

    def just_pressed(self, button_id: Optional[str]) -> bool:
        return button_id is not None and self.button(button_id).just_pressed

    def just_released(self, button_id: Optional[str]) -> bool:
        return button_id is not None and self.button(button_id).just_released

    def __str__(self) -> str:
        return (
            f"InputSnapshot(now={self.now:.3f}, pressed={self.pressed_ids}, "
            f"edges={self.just_pressed_ids}, keys={[k.value for k in self.keyboard.just_pressed]})"
        )
