"""
Boot mode: indicator sweep and per-button validation
"""

import random

import pytest

from gpio_system import HardwareInventory, PinAssignment, PinGroup, PinKind, PinRegistry, PinRole
from game_system import BootMode, GameConfig, GameManager

from conftest import LIFE1, LIFE2, LIFE3, START, T1_BUTTON, T1_LED, T2_BUTTON, T2_LED, Floor


@pytest.fixture
def boot(floor, manager):
    mode = BootMode(manager)
    floor.enter(mode)
    return floor, mode


def wait_for_buttons(floor, mode):
    floor.wait_for(lambda: mode.phase == BootMode.Phase.WAIT_BUTTONS)


def test_delay_keeps_everything_dark(boot, executor):
    floor, mode = boot
    floor.advance(0.9)
    assert mode.phase == BootMode.Phase.DELAY
    assert not any(executor.level(pin) for pin in (LIFE3, LIFE2, LIFE1, T1_LED, T2_LED))


def test_sweep_blinks_life_then_targets_in_order(boot, executor):
    floor, mode = boot
    executor.spawned.clear()
    wait_for_buttons(floor, mode)

    lit = [int(p.argv[-1].split("=")[0]) for p in executor.spawned if p.argv[-1].endswith("=1")]
    order = [pin for i, pin in enumerate(lit) if i == 0 or lit[i - 1] != pin]
    assert order == [LIFE3, LIFE2, LIFE1, T1_LED, T2_LED]
    assert all(lit.count(pin) == 2 for pin in order)
    assert mode.test_ids == ["start", "t1", "t2"]


def lit_count(executor, pin):
    return sum(1 for p in executor.spawned if p.argv[-1] == f"{pin}=1")


def test_start_feedback_lights_outer_life_indicators(boot, executor):
    floor, mode = boot
    wait_for_buttons(floor, mode)
    assert [led.id for led in mode.feedback_leds("start")] == ["life3", "life1"]
    assert [led.id for led in mode.feedback_leds("t2")] == ["t2"]

    executor.spawned.clear()
    floor.press(START)
    assert "start" in mode.validated
    # Held feedback stays lit into the first of three confirm blinks
    assert lit_count(executor, LIFE3) == 3
    assert lit_count(executor, LIFE1) == 3
    assert lit_count(executor, LIFE2) == 0

    # Validated buttons show no held feedback
    floor.tick(5)
    assert executor.level(LIFE3) == 0
    assert executor.level(LIFE1) == 0
    # life2 was never driven after the log was cleared
    assert not executor.holders(LIFE2)


def test_held_feedback_waits_for_exclusive_press(boot, executor):
    floor, mode = boot
    wait_for_buttons(floor, mode)
    executor.press(T1_BUTTON)
    executor.press(T2_BUTTON)
    floor.advance(0.1)
    executor.release(T2_BUTTON)
    floor.advance(0.1)
    assert executor.level(T1_LED) == 1
    assert mode.validated == set()
    floor.release(T1_BUTTON)
    assert executor.level(T1_LED) == 0


def test_validation_blinks_confirm(boot, sleep):
    floor, mode = boot
    wait_for_buttons(floor, mode)
    floor.click(T1_BUTTON)
    assert mode.validated == {"t1"}
    assert len(sleep.calls) == 3 * 2

    floor.click(T1_BUTTON)
    assert len(sleep.calls) == 3 * 2


def test_two_buttons_at_once_validate_nothing(boot, executor):
    floor, mode = boot
    wait_for_buttons(floor, mode)
    executor.press(T1_BUTTON)
    executor.press(T2_BUTTON)
    floor.advance(0.1)
    assert mode.validated == set()
    assert executor.level(T1_LED) == 0


def test_all_buttons_validated_goes_to_idle(boot, sleep):
    floor, mode = boot
    wait_for_buttons(floor, mode)
    for pin in (START, T1_BUTTON, T2_BUTTON):
        floor.click(pin)
    assert floor.mode_name == "IdleMode"
    # confirm blinks for three buttons + done blink
    assert len(sleep.calls) == 3 * 3 * 2 + 2 * 2


def test_table_without_buttons_completes_after_sweep(executor, logger, keyboard, sleep, tmp_path):
    table = [
        PinAssignment("life1", PinKind.LED, PinRole.LIFE, LIFE1),
        PinAssignment("t1", PinKind.LED, PinRole.TARGET, T1_LED, PinGroup.LEFT),
    ]
    inventory = HardwareInventory(table, PinRegistry(executor, logger), logger)
    manager = GameManager(GameConfig(pin_table=table, export_path=str(tmp_path / "m.csv")), inventory, logger,
                          keyboard_reader=keyboard, rng=random.Random(1), sleep=sleep)
    floor = Floor(manager, executor, keyboard)
    floor.enter(BootMode(manager))
    floor.wait_for(lambda: floor.mode_name == "IdleMode")
