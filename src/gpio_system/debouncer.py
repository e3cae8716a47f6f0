"""
Time-windowed hysteresis filter for noisy boolean inputs
"""


class Debouncer:
    """
    Converts a noisy boolean into a stable one.

    The stable value only follows the raw value once the raw value has
    stayed unchanged for at least `window_ms`. Toggles shorter than the
    window never reach the output.

    Example:
        debouncer = Debouncer(window_ms=35)
        stable = debouncer.update(raw_pressed, time.monotonic())
    """

    def __init__(self, window_ms: float = 35):
        self.window_ms = window_ms
        self._stable = False
        self._last_raw = False
        self._last_change = 0.0
        self._has_sample = False

    @property
    def stable(self) -> bool:
        return self._stable

    def update(self, raw: bool, now: float) -> bool:
        """
        Feed one raw sample.

        Args:
            raw: Raw sampled value
            now: Monotonic timestamp in seconds

        Returns:
            The stable (debounced) value
        """
        if not self._has_sample:
            self._stable = raw
            self._last_raw = raw
            self._last_change = now
            self._has_sample = True
            return self._stable

        if raw != self._last_raw:
            self._last_raw = raw
            self._last_change = now

        if raw != self._stable and (now - self._last_change) * 1000 >= self.window_ms:
            self._stable = raw

        return self._stable
