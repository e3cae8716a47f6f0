"""
Base class for the game mode state machine
"""

from abc import ABC, abstractmethod
from typing import Optional, TYPE_CHECKING

from .animation_helpers import AnimationHelpers
from .render import DisplayHints

if TYPE_CHECKING:
    from game_system.game_manager import GameManager
    from game_system.input_state import InputSnapshot


class GameState(ABC):
    """
    Abstract base class for all game modes.

    Each mode owns its own:
    - Button and keyboard handling logic
    - Phase timers (plain deadlines re-checked every tick)
    - Transition conditions

    A mode instance lives from on_enter() to on_exit(); all of its state is
    dropped with it.
    """

    def __init__(self, game_manager: 'GameManager'):
        self.game_manager: 'GameManager' = game_manager
        self.inventory = game_manager.inventory
        self.config = game_manager.config
        self.logger = game_manager.logger.create_class_logger(self.__class__.__name__)

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @property
    def lives(self) -> int:
        """Lives shown to the renderer (only the game mode tracks lives)"""
        return 0

    @abstractmethod
    def update(self, inputs: 'InputSnapshot') -> Optional['GameState']:
        """
        Advance the mode by one tick.

        Args:
            inputs: Debounced button edges, keyboard state and timestamp

        Returns:
            New GameState instance if transition needed, None to stay
        """
        pass

    def display_hints(self) -> DisplayHints:
        return DisplayHints()

    def on_enter(self) -> None:
        """Called when entering this mode - logs and calls custom enter"""
        self.logger.debug(f"Entering mode: {self.name}")
        self.custom_on_enter()

    def on_exit(self) -> None:
        """Called when exiting this mode - calls custom exit and logs"""
        self.custom_on_exit()
        self.logger.debug(f"Exited mode: {self.name}")

    @abstractmethod
    def custom_on_enter(self) -> None:
        """Custom enter logic (override in subclasses)"""
        pass

    @abstractmethod
    def custom_on_exit(self) -> None:
        """Custom exit logic (override in subclasses)"""
        pass

    def blink(self, leds, times: int, on_ms: float, off_ms: float) -> None:
        """Synchronous blink using the manager's sleep function"""
        AnimationHelpers.blink(leds, times, on_ms, off_ms, sleep=self.game_manager.sleep)
