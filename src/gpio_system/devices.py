"""
Domain devices: indicator lights and momentary buttons
"""

from .debouncer import Debouncer
from .edge_tracker import EdgeTracker
from .interfaces import IInputDriver, IOutputDriver


class Led:
    """Indicator light on an output driver"""

    def __init__(self, led_id: str, driver: IOutputDriver):
        self.id = led_id
        self._driver = driver

    @property
    def is_on(self) -> bool:
        return self._driver.is_high()

    def on(self) -> None:
        self._driver.set_high()

    def off(self) -> None:
        self._driver.set_low()

    def set(self, lit: bool) -> None:
        if lit:
            self.on()
        else:
            self.off()

    def shutdown(self) -> None:
        self._driver.shutdown()

    def __repr__(self) -> str:
        return f"Led({self.id!r}, on={self.is_on})"


class Button:
    """
    Momentary button: input driver + debouncer + edge tracker.

    poll() must be called exactly once per tick; the edge flags stay valid
    until the next poll.
    """

    def __init__(self, button_id: str, driver: IInputDriver, debounce_ms: float = 35):
        self.id = button_id
        self._driver = driver
        self._debouncer = Debouncer(debounce_ms)
        self._edges = EdgeTracker()

    def poll(self, now: float) -> bool:
        raw = self._driver.sample_is_active()
        stable = self._debouncer.update(raw, now)
        self._edges.update(stable)
        return stable

    @property
    def is_pressed(self) -> bool:
        return self._debouncer.stable

    @property
    def just_pressed(self) -> bool:
        return self._edges.just_activated

    @property
    def just_released(self) -> bool:
        return self._edges.just_deactivated

    def shutdown(self) -> None:
        # Input lines hold no process between samples
        pass

    def __repr__(self) -> str:
        return f"Button({self.id!r}, pressed={self.is_pressed})"
