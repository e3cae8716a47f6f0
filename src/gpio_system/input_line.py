"""
Input pin sampled through gpioget
"""

from typing import List, Optional

from .exceptions import CommandExecutionError
from .interfaces import ICommandExecutor, IInputDriver
from .pin_assignment import Bias


def parse_line_reply(reply: str) -> Optional[bool]:
    """
    Parse a gpioget reply into the raw electrical level.

    Accepted forms, tried in order:
        "0" / "1"                      (libgpiod v1, --numeric)
        '"17"=active' / '17=inactive'  (libgpiod v2)
        anything containing active/inactive
        anything ending in a 0/1 digit

    Returns:
        True for high, False for low, None when the reply is unrecognized
    """
    text = reply.strip()
    if text == "1":
        return True
    if text == "0":
        return False

    normalized = text.replace('"', "").replace("'", "").replace(" ", "").lower()
    if normalized.endswith("=inactive"):
        return False
    if normalized.endswith("=active"):
        return True

    # "inactive" contains "active", so it has to be checked first
    if "inactive" in normalized:
        return False
    if "active" in normalized:
        return True

    if text and text[-1] in "01":
        return text[-1] == "1"

    return None


class InputLine(IInputDriver):
    """
    Momentary input on one BCM pin.

    Every sample is a fresh gpioget invocation. A failed or unreadable
    sample is logged and reported as inactive; the next tick retries.
    """

    def __init__(self,
                 executor: ICommandExecutor,
                 pin: int,
                 logger,
                 active_low: bool = True,
                 bias: Bias = Bias.PULL_UP,
                 chip: str = "gpiochip0",
                 command: str = "gpioget"):
        self._executor = executor
        self._logger = logger
        self.pin = pin
        self.active_low = active_low
        self.bias = bias
        self._argv: List[str] = [command, "-c", chip, "--bias", bias.value, str(pin)]

    @property
    def argv(self) -> List[str]:
        return list(self._argv)

    def sample_is_active(self) -> bool:
        try:
            reply = self._executor.run(self._argv)
        except CommandExecutionError as e:
            self._logger.warning(f"GPIO{self.pin} sample failed, assuming inactive: {e}")
            return False

        raw_high = parse_line_reply(reply)
        if raw_high is None:
            # Inactive regardless of polarity: an unreadable active-low line must not look pressed
            self._logger.warning(f"GPIO{self.pin} unrecognized reply {reply.strip()!r}, assuming inactive")
            return False

        return (not raw_high) if self.active_low else raw_high
