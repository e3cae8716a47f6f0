"""
Exceptions raised by the GPIO device layer
"""

from typing import Optional, Sequence


class GpioError(Exception):
    """Base class for all device layer failures"""


class PinConflictError(GpioError):
    """A BCM pin was claimed twice. Fatal at startup."""

    def __init__(self, pin: int, owner: str, existing_owner: str):
        self.pin = pin
        self.owner = owner
        self.existing_owner = existing_owner
        super().__init__(
            f"GPIO{pin} requested by '{owner}' is already claimed by '{existing_owner}'"
        )


class CommandExecutionError(GpioError):
    """An external line tool could not be launched or exited non-zero"""

    def __init__(self, argv: Sequence[str], reason: str, output: Optional[str] = None):
        self.argv = list(argv)
        self.reason = reason
        self.output = output
        message = f"Command {' '.join(self.argv)!r} failed: {reason}"
        if output:
            message += f" | output: {output.strip()}"
        super().__init__(message)
