"""
Render frame handed to the (external) projection renderer once per tick
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from gpio_system.pin_assignment import PinGroup

from .layout import Transform


class Tint(Enum):
    NONE = "none"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class DisplayHints:
    """Mode-specific hints; the renderer decides how to draw them"""
    metadata_step: Optional[int] = None     # Measurement entry step (0-2)
    metadata_text: str = ""                 # Current entry buffer/value
    cue_visible: bool = False
    tint: Tint = Tint.NONE
    editing_index: Optional[int] = None     # Calibration: -1 center, else target index
    level: Optional[int] = None


@dataclass(frozen=True)
class TargetView:
    index: int
    id: str
    group: Optional[PinGroup]
    on: bool
    transform: Transform


@dataclass(frozen=True)
class RenderFrame:
    mode_name: str
    lives: int
    center: Transform
    targets: List[TargetView] = field(default_factory=list)
    hints: DisplayHints = field(default_factory=DisplayHints)


class IRenderer(ABC):
    """Consumer of render frames (projection output)"""

    @abstractmethod
    def draw(self, frame: RenderFrame) -> None:
        pass
