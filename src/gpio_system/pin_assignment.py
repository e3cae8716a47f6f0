"""
Declarative pin table types
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PinKind(Enum):
    LED = "LED"
    BUTTON = "BUTTON"


class PinRole(Enum):
    LIFE = "LIFE"
    START = "START"
    TARGET = "TARGET"


class PinGroup(Enum):
    LEFT = "LEFT"
    RIGHT = "RIGHT"


class Bias(Enum):
    """Bias argument understood by gpioget"""
    PULL_UP = "pull-up"
    PULL_DOWN = "pull-down"
    DISABLED = "disabled"


@dataclass(frozen=True)
class PinAssignment:
    """
    One row of the pin table.

    A TARGET needs an LED row; a BUTTON row with the same id is optional
    and attaches to that target.
    """
    id: str
    kind: PinKind
    role: PinRole
    pin: int
    group: Optional[PinGroup] = None

    def __str__(self) -> str:
        group = f" {self.group.value}" if self.group else ""
        return f"{self.id}:{self.kind.value}/{self.role.value}@GPIO{self.pin}{group}"
