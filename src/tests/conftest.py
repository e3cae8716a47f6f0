"""
Shared fixtures: a scripted command executor standing in for gpioget/gpioset,
a file-only logger and a manual clock for driving the tick loop.
"""

import logging
import random
from typing import Dict, List, Optional, Sequence, Set

import pytest

from gpio_system import (
    CommandExecutionError,
    HardwareInventory,
    ICommandExecutor,
    IHeldProcess,
    PinAssignment,
    PinGroup,
    PinKind,
    PinRegistry,
    PinRole,
)
from game_system import GameConfig, GameManager, IKeyboardReader, Key, KeyboardState
from utils import HybridLogger


class FakeHeldProcess(IHeldProcess):
    def __init__(self, argv: Sequence[str]):
        self.argv = list(argv)
        self.running = True

    def is_running(self) -> bool:
        return self.running

    def terminate(self) -> None:
        self.running = False


class FakeExecutor(ICommandExecutor):
    """
    Answers gpioget with the scripted electrical level of each pin and
    records every gpioset holder.

    Buttons are active-low by default: a released pin reads "1".
    """

    def __init__(self):
        self.levels: Dict[int, str] = {}
        self.failing_pins: Set[int] = set()
        self.failing_spawn_pins: Set[int] = set()
        self.run_calls: List[List[str]] = []
        self.spawned: List[FakeHeldProcess] = []

    def run(self, argv: Sequence[str]) -> str:
        argv = list(argv)
        self.run_calls.append(argv)
        pin = int(argv[-1])
        if pin in self.failing_pins:
            raise CommandExecutionError(argv, "exit code 1", "gpioget: unable to request line")
        return self.levels.get(pin, "1") + "\n"

    def spawn_held(self, argv: Sequence[str]) -> FakeHeldProcess:
        pin = int(argv[-1].split("=")[0])
        if pin in self.failing_spawn_pins:
            raise CommandExecutionError(argv, "exited immediately")
        process = FakeHeldProcess(argv)
        self.spawned.append(process)
        return process

    def press(self, pin: int) -> None:
        self.levels[pin] = "0"

    def release(self, pin: int) -> None:
        self.levels[pin] = "1"

    def holders(self, pin: int) -> List[FakeHeldProcess]:
        """Live holder processes of one pin"""
        return [p for p in self.spawned if p.running and p.argv[-1].startswith(f"{pin}=")]

    def level(self, pin: int) -> Optional[int]:
        """Electrical level asserted by the live holder, None when released"""
        live = self.holders(pin)
        if not live:
            return None
        return int(live[-1].argv[-1].split("=")[1])


class ScriptedKeyboardReader(IKeyboardReader):
    def __init__(self):
        self.held: Set[Key] = set()
        self.pending: List[Key] = []
        self.cleaned_up = False

    def tap(self, *keys: Key) -> None:
        self.pending.extend(keys)

    def read_keys(self) -> KeyboardState:
        state = KeyboardState(held=frozenset(self.held.union(self.pending)), just_pressed=tuple(self.pending))
        self.pending = []
        return state

    def cleanup(self) -> None:
        self.cleaned_up = True


class StubRng:
    """Shortest random wait and always the first candidate"""

    def uniform(self, low, high):
        return low

    def choice(self, seq):
        return seq[0]


class SleepRecorder:
    def __init__(self):
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


# Pin numbers of the default floor
LIFE3, LIFE2, LIFE1 = 5, 6, 13
START = 12
T1_LED, T1_BUTTON = 26, 16
T2_LED, T2_BUTTON = 22, 23


def scenario_pin_table() -> List[PinAssignment]:
    return [
        PinAssignment("life3", PinKind.LED, PinRole.LIFE, LIFE3),
        PinAssignment("life2", PinKind.LED, PinRole.LIFE, LIFE2),
        PinAssignment("life1", PinKind.LED, PinRole.LIFE, LIFE1),
        PinAssignment("start", PinKind.BUTTON, PinRole.START, START),
        PinAssignment("t1", PinKind.LED, PinRole.TARGET, T1_LED, PinGroup.LEFT),
        PinAssignment("t1", PinKind.BUTTON, PinRole.TARGET, T1_BUTTON, PinGroup.LEFT),
        PinAssignment("t2", PinKind.LED, PinRole.TARGET, T2_LED, PinGroup.RIGHT),
        PinAssignment("t2", PinKind.BUTTON, PinRole.TARGET, T2_BUTTON, PinGroup.RIGHT),
    ]


class Floor:
    """
    Drives a GameManager through time in fixed ticks.

    Button helpers change the scripted pin level; the debouncer then needs
    a few ticks before the press shows up as an edge.
    """

    TICK_S = 0.01

    def __init__(self, manager: GameManager, executor: FakeExecutor, keyboard: ScriptedKeyboardReader):
        self.manager = manager
        self.executor = executor
        self.keyboard = keyboard
        self.now = 1000.0

    def enter(self, mode) -> None:
        """Install a mode and take one settling sample of every button"""
        self.manager.start(mode)
        self.tick()

    def wait_for(self, predicate, limit_s: float = 10.0) -> None:
        deadline = self.now + limit_s
        while not predicate():
            if self.now > deadline:
                raise AssertionError(f"condition not reached within {limit_s}s (mode {self.mode_name})")
            self.tick()

    def tick(self, count: int = 1) -> None:
        for _ in range(count):
            self.now += self.TICK_S
            self.manager.update(self.now)

    def advance(self, seconds: float) -> None:
        self.tick(max(1, int(round(seconds / self.TICK_S))))

    def press(self, pin: int, settle: float = 0.06) -> None:
        self.executor.press(pin)
        self.advance(settle)

    def release(self, pin: int, settle: float = 0.06) -> None:
        self.executor.release(pin)
        self.advance(settle)

    def click(self, pin: int, hold: float = 0.1) -> None:
        self.executor.press(pin)
        self.advance(hold)
        self.release(pin)

    def tap(self, *keys: Key) -> None:
        self.keyboard.tap(*keys)
        self.tick()

    @property
    def mode_name(self) -> str:
        return self.manager.get_current_state_name()


@pytest.fixture
def logger(tmp_path):
    hybrid = HybridLogger("reaction_floor_test", log_dir=str(tmp_path / "logs"), console=False)
    yield hybrid.get_class_logger("Test", logging.DEBUG)
    hybrid.cleanup()


@pytest.fixture
def executor():
    return FakeExecutor()


@pytest.fixture
def registry(executor, logger):
    return PinRegistry(executor, logger)


@pytest.fixture
def inventory(registry, logger):
    return HardwareInventory(scenario_pin_table(), registry, logger)


@pytest.fixture
def config(tmp_path):
    return GameConfig(pin_table=scenario_pin_table(), export_path=str(tmp_path / "measurements.csv"))


@pytest.fixture
def sleep():
    return SleepRecorder()


@pytest.fixture
def keyboard():
    return ScriptedKeyboardReader()


@pytest.fixture
def manager(config, inventory, logger, keyboard, sleep):
    return GameManager(
        config=config,
        inventory=inventory,
        logger=logger,
        keyboard_reader=keyboard,
        rng=random.Random(1234),
        clock=lambda: 0.0,
        sleep=sleep,
    )


@pytest.fixture
def floor(manager, executor, keyboard):
    return Floor(manager, executor, keyboard)
