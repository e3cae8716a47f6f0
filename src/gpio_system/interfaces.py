"""
Abstract interfaces for the GPIO device layer
"""

from abc import ABC, abstractmethod
from typing import Sequence


class IHeldProcess(ABC):
    """
    A long-lived external process whose lifetime is an assertion.

    For output lines the held process keeps a level applied to a pin;
    terminating it releases the level.
    """

    @abstractmethod
    def is_running(self) -> bool:
        """True while the process is alive"""
        pass

    @abstractmethod
    def terminate(self) -> None:
        """Request a graceful stop and wait for it (forced kill on timeout)"""
        pass


class ICommandExecutor(ABC):
    """
    Runs the external line tools.

    Separates process handling from pin semantics so that lines can be
    exercised against a fake executor without hardware.
    """

    @abstractmethod
    def run(self, argv: Sequence[str]) -> str:
        """
        Run a command to completion.

        Returns:
            Merged stdout/stderr text

        Raises:
            CommandExecutionError: Launch failure or non-zero exit
        """
        pass

    @abstractmethod
    def spawn_held(self, argv: Sequence[str]) -> IHeldProcess:
        """
        Launch a command that stays alive until terminated.

        Raises:
            CommandExecutionError: Launch failure or immediate exit
        """
        pass


class IInputDriver(ABC):
    """Momentary input pin"""

    @abstractmethod
    def sample_is_active(self) -> bool:
        """Sample the pin once and return its logical (active) state"""
        pass


class IOutputDriver(ABC):
    """Two-state output pin"""

    @abstractmethod
    def set_high(self) -> None:
        """Drive the logical level high"""
        pass

    @abstractmethod
    def set_low(self) -> None:
        """Drive the logical level low"""
        pass

    @abstractmethod
    def is_high(self) -> bool:
        """Current logical level"""
        pass

    @abstractmethod
    def shutdown(self) -> None:
        """Release any resources holding the pin"""
        pass
