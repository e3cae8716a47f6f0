"""
Playable unit: one cue light, an optional press sensor and a side
"""

from typing import Optional

from .devices import Button, Led
from .pin_assignment import PinGroup


class Target:
    """
    A footwork cue.

    The Led is required. The Button is optional; a target without one can
    be shown but never hit, so the game modes only pick playable targets.
    """

    def __init__(self, target_id: str, index: int, group: Optional[PinGroup], led: Led, button: Optional[Button] = None):
        self._id = target_id
        self._index = index
        self._group = group
        self.led = led
        self.button = button

    @property
    def id(self) -> str:
        return self._id

    @property
    def index(self) -> int:
        """Position in declaration order; also the CalibratedLayout key"""
        return self._index

    @property
    def group(self) -> Optional[PinGroup]:
        return self._group

    @property
    def is_playable(self) -> bool:
        return self.button is not None

    def __repr__(self) -> str:
        group = self._group.value if self._group else "-"
        return f"Target({self._id!r}, #{self._index}, {group}, button={'yes' if self.button else 'no'})"
