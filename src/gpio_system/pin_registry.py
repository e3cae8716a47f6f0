"""
Exclusive BCM pin ownership and driver factory
"""

from typing import Dict, List

from utils.gpio_utils import describe_pin

from .exceptions import PinConflictError
from .input_line import InputLine
from .interfaces import ICommandExecutor
from .output_line import OutputLine
from .pin_assignment import Bias


class PinRegistry:
    """
    Hands out drivers and guarantees one driver per pin.

    Claims live for the whole process; there is no release. A second claim
    of the same pin raises PinConflictError and leaves the first claim
    untouched.

    Example:
        registry = PinRegistry(CommandExecutor(), logger)
        led_line = registry.create_output_driver(26, owner="t1")
        button_line = registry.create_input_driver(16, owner="t1")
    """

    def __init__(self,
                 executor: ICommandExecutor,
                 logger,
                 chip: str = "gpiochip0",
                 get_command: str = "gpioget",
                 set_command: str = "gpioset"):
        self._executor = executor
        self._logger = logger
        self._chip = chip
        self._get_command = get_command
        self._set_command = set_command
        self._claims: Dict[int, str] = {}

    @property
    def claimed_pins(self) -> List[int]:
        return sorted(self._claims)

    def owner_of(self, pin: int) -> str:
        return self._claims[pin]

    def claim(self, pin: int, owner: str) -> None:
        if pin in self._claims:
            raise PinConflictError(pin, owner, self._claims[pin])
        self._claims[pin] = owner
        self._logger.debug(f"Claimed {describe_pin(pin)} for '{owner}'")

    def create_output_driver(self, pin: int, owner: str, start_on: bool = False, inverted: bool = False) -> OutputLine:
        self.claim(pin, owner)
        return OutputLine(
            self._executor, pin, self._logger,
            start_on=start_on, inverted=inverted,
            chip=self._chip, command=self._set_command,
        )

    def create_input_driver(self, pin: int, owner: str, active_low: bool = True, bias: Bias = Bias.PULL_UP) -> InputLine:
        self.claim(pin, owner)
        return InputLine(
            self._executor, pin, self._logger,
            active_low=active_low, bias=bias,
            chip=self._chip, command=self._get_command,
        )
