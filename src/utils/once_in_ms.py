"""
Timing utility for throttling execution in the tick loop
"""

import time
from typing import Optional


class OnceInMs:
    """
    Timer for throttling code execution to at most once per interval.

    The tick loop runs every frame (e.g. 20ms); use this to limit how often
    housekeeping such as resource logging runs.

    Example:
        self._memory_monitor = OnceInMs(60000)  # Once per minute

        if self._memory_monitor.should_execute():
            self._log_memory_usage()
    """

    def __init__(self, interval_ms: int):
        """
        Args:
            interval_ms: Minimum milliseconds between executions
        """
        self.interval_ms = interval_ms
        self.interval = interval_ms / 1000.0
        self.last_execution: Optional[float] = None

    def should_execute(self, now: Optional[float] = None) -> bool:
        """
        Check if enough time has passed and update timer if so.

        Args:
            now: Monotonic timestamp in seconds, defaults to time.monotonic()

        Returns:
            True if interval has passed (and timer is updated), False otherwise
        """
        current = time.monotonic() if now is None else now
        if self.last_execution is None or current - self.last_execution >= self.interval:
            self.last_execution = current
            return True
        return False
