"""
Keyboard readers producing one KeyboardState per tick
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Set

import pygame

from .input_state import Key, KeyboardState

PYGAME_KEY_MAP: Dict[int, Key] = {
    pygame.K_UP: Key.UP,
    pygame.K_DOWN: Key.DOWN,
    pygame.K_LEFT: Key.LEFT,
    pygame.K_RIGHT: Key.RIGHT,
    pygame.K_q: Key.ROTATE_CCW,
    pygame.K_e: Key.ROTATE_CW,
    pygame.K_PLUS: Key.SCALE_UP,
    pygame.K_EQUALS: Key.SCALE_UP,
    pygame.K_KP_PLUS: Key.SCALE_UP,
    pygame.K_MINUS: Key.SCALE_DOWN,
    pygame.K_KP_MINUS: Key.SCALE_DOWN,
    pygame.K_RETURN: Key.ENTER,
    pygame.K_KP_ENTER: Key.ENTER,
    pygame.K_ESCAPE: Key.ESCAPE,
    pygame.K_BACKSPACE: Key.BACKSPACE,
    pygame.K_DELETE: Key.DELETE,
    pygame.K_g: Key.GAME,
    pygame.K_r: Key.REAL,
    pygame.K_b: Key.BEFORE,
    pygame.K_a: Key.AFTER,
    pygame.K_0: Key.DIGIT_0,
    pygame.K_1: Key.DIGIT_1,
    pygame.K_2: Key.DIGIT_2,
    pygame.K_3: Key.DIGIT_3,
    pygame.K_4: Key.DIGIT_4,
    pygame.K_5: Key.DIGIT_5,
    pygame.K_6: Key.DIGIT_6,
    pygame.K_7: Key.DIGIT_7,
    pygame.K_8: Key.DIGIT_8,
    pygame.K_9: Key.DIGIT_9,
    pygame.K_KP0: Key.DIGIT_0,
    pygame.K_KP1: Key.DIGIT_1,
    pygame.K_KP2: Key.DIGIT_2,
    pygame.K_KP3: Key.DIGIT_3,
    pygame.K_KP4: Key.DIGIT_4,
    pygame.K_KP5: Key.DIGIT_5,
    pygame.K_KP6: Key.DIGIT_6,
    pygame.K_KP7: Key.DIGIT_7,
    pygame.K_KP8: Key.DIGIT_8,
    pygame.K_KP9: Key.DIGIT_9,
}


class IKeyboardReader(ABC):
    """Source of per-tick keyboard state"""

    # Set when the window was closed; the game loop stops on it
    quit_requested: bool = False

    @abstractmethod
    def read_keys(self) -> KeyboardState:
        """Drain pending key events and return the state for this tick"""
        pass

    @abstractmethod
    def cleanup(self) -> None:
        pass


class NullKeyboardReader(IKeyboardReader):
    """Used when no keyboard/display is attached (--no-keyboard)"""

    def read_keys(self) -> KeyboardState:
        return KeyboardState()

    def cleanup(self) -> None:
        pass


class PygameKeyboardReader(IKeyboardReader):
    """
    Keyboard edge events from the pygame event queue.

    pygame only delivers key events to a focused window, so a small window
    is opened when the process does not already own a display surface.
    """

    def __init__(self, logger, window_size=(320, 120), caption: str = "Reaction Floor"):
        self.logger = logger
        self._held: Set[Key] = set()
        self.quit_requested = False

        pygame.display.init()
        if pygame.display.get_surface() is None:
            pygame.display.set_mode(window_size)
            pygame.display.set_caption(caption)
        pygame.event.set_allowed([pygame.QUIT, pygame.KEYDOWN, pygame.KEYUP])
        self.logger.info(f"Keyboard reader ready (pygame {pygame.version.ver})")

    def read_keys(self) -> KeyboardState:
        just_pressed: List[Key] = []
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.quit_requested = True
            elif event.type == pygame.KEYDOWN:
                key = PYGAME_KEY_MAP.get(event.key)
                if key is not None:
                    just_pressed.append(key)
                    self._held.add(key)
            elif event.type == pygame.KEYUP:
                key = PYGAME_KEY_MAP.get(event.key)
                if key is not None:
                    self._held.discard(key)
        return KeyboardState(held=frozenset(self._held), just_pressed=tuple(just_pressed))

    def cleanup(self) -> None:
        self._held.clear()
        pygame.display.quit()
        self.logger.debug("Keyboard reader closed")
