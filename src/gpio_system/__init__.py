"""
GPIO System Package

Pin-level device layer driven through the libgpiod command line tools:
exclusive pin claims, debounced buttons with edge detection, and output
lines held by one gpioset process per asserted level.
"""

from .exceptions import GpioError, PinConflictError, CommandExecutionError
from .interfaces import ICommandExecutor, IHeldProcess, IInputDriver, IOutputDriver
from .command_executor import CommandExecutor, HeldProcess
from .debouncer import Debouncer
from .edge_tracker import EdgeTracker
from .pin_assignment import PinAssignment, PinKind, PinRole, PinGroup, Bias
from .input_line import InputLine, parse_line_reply
from .output_line import OutputLine
from .pin_registry import PinRegistry
from .devices import Led, Button
from .target import Target
from .inventory import HardwareInventory, LIFE_FIRING_ORDER, MAX_LIVES
from .process_reaper import ProcessReaper

__all__ = [
    "GpioError",
    "PinConflictError",
    "CommandExecutionError",
    "ICommandExecutor",
    "IHeldProcess",
    "IInputDriver",
    "IOutputDriver",
    "CommandExecutor",
    "HeldProcess",
    "Debouncer",
    "EdgeTracker",
    "PinAssignment",
    "PinKind",
    "PinRole",
    "PinGroup",
    "Bias",
    "InputLine",
    "parse_line_reply",
    "OutputLine",
    "PinRegistry",
    "Led",
    "Button",
    "Target",
    "HardwareInventory",
    "LIFE_FIRING_ORDER",
    "MAX_LIVES",
    "ProcessReaper",
]
