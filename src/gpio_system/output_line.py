"""
Output pin driven by a held gpioset process
"""

from typing import List, Optional

from .interfaces import ICommandExecutor, IHeldProcess, IOutputDriver


class OutputLine(IOutputDriver):
    """
    Two-state output on one BCM pin.

    libgpiod releases a line when the requesting process exits, so a level
    is asserted by keeping one `gpioset <pin>=<level>` process alive. Every
    level change tears down the old holder before spawning the new one,
    which guarantees at most one holder per line.

    Setting the level the line already has is a no-op.
    """

    def __init__(self,
                 executor: ICommandExecutor,
                 pin: int,
                 logger,
                 start_on: bool = False,
                 inverted: bool = False,
                 chip: str = "gpiochip0",
                 command: str = "gpioset"):
        self._executor = executor
        self._logger = logger
        self.pin = pin
        self.inverted = inverted
        self._command = command
        self._chip = chip

        self._current_high = False
        self._has_value = False
        self._held: Optional[IHeldProcess] = None

        if start_on:
            self.set_high()
        else:
            self.set_low()

    def _build_argv(self, level: bool) -> List[str]:
        return [self._command, "-c", self._chip, f"{self.pin}={1 if level else 0}"]

    def set_high(self) -> None:
        self.set_value_physical(not self.inverted)

    def set_low(self) -> None:
        self.set_value_physical(self.inverted)

    def is_high(self) -> bool:
        """Logical level (inversion removed)"""
        return self._has_value and (self._current_high != self.inverted)

    @property
    def physical_high(self) -> bool:
        return self._current_high

    @property
    def held_process(self) -> Optional[IHeldProcess]:
        return self._held

    def set_value_physical(self, level: bool) -> None:
        """
        Assert an electrical level.

        Raises:
            CommandExecutionError: The holder could not be started. The line
                is left without a holder and without a recorded value.
        """
        if self._has_value and self._current_high == level:
            return

        self._release_holder()
        self._has_value = False

        self._held = self._executor.spawn_held(self._build_argv(level))
        self._current_high = level
        self._has_value = True
        self._logger.debug(f"GPIO{self.pin} -> {1 if level else 0}")

    def _release_holder(self) -> None:
        if self._held is not None:
            held, self._held = self._held, None
            held.terminate()

    def shutdown(self) -> None:
        self._release_holder()
        self._has_value = False
