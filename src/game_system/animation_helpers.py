"""
Helper utilities for indicator animations
"""

import time
from typing import Callable, Iterable, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from gpio_system.devices import Led

SleepFunction = Callable[[float], None]


class AnimationHelpers:
    """
    Static helpers for synchronous blink sequences.

    These block the tick on purpose: they run at protocol boundaries where
    the indicators must reach a known state before the next phase starts.
    Every helper takes the sleep function so tests can run without delays.
    """

    @staticmethod
    def blink(leds: Iterable['Led'],
              times: int,
              on_ms: float,
              off_ms: float,
              sleep: Optional[SleepFunction] = None) -> None:
        """
        Blink a group of LEDs together and leave them off.

        Args:
            leds: LEDs switched as one group
            times: Number of on/off cycles (<= 0 just turns them off)
            on_ms: On duration per cycle
            off_ms: Off duration per cycle
            sleep: Sleep function taking seconds (defaults to time.sleep)
        """
        sleep = sleep or time.sleep
        group: List['Led'] = list(leds)
        for _ in range(max(0, times)):
            for led in group:
                led.on()
            sleep(on_ms / 1000.0)
            for led in group:
                led.off()
            sleep(off_ms / 1000.0)
        for led in group:
            led.off()
