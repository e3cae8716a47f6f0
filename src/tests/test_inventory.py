"""
PinRegistry ownership and HardwareInventory construction
"""

import pytest

from gpio_system import (
    HardwareInventory,
    PinAssignment,
    PinConflictError,
    PinGroup,
    PinKind,
    PinRegistry,
    PinRole,
)

from conftest import LIFE1, LIFE2, LIFE3, START, T1_BUTTON, T1_LED, T2_LED, scenario_pin_table


def test_second_claim_raises_and_keeps_first(registry):
    registry.create_output_driver(26, "t1")
    with pytest.raises(PinConflictError) as excinfo:
        registry.create_input_driver(26, "t2")
    assert excinfo.value.pin == 26
    assert excinfo.value.existing_owner == "t1"
    assert registry.owner_of(26) == "t1"
    assert registry.claimed_pins == [26]


def test_scenario_builds_full_graph(inventory):
    assert [led.id for led in inventory.life_leds] == ["life3", "life2", "life1"]
    assert inventory.start_button.id == "start"
    assert [target.id for target in inventory.targets] == ["t1", "t2"]
    assert all(target.is_playable for target in inventory.targets)
    assert inventory.target("t1").group == PinGroup.LEFT
    assert inventory.target("t2").group == PinGroup.RIGHT
    assert inventory.claimed_pins == sorted([LIFE3, LIFE2, LIFE1, START, T1_LED, T1_BUTTON, T2_LED, 23])
    assert len(inventory.claimed_pins) == 8


def test_every_led_starts_off(inventory, executor):
    for pin in (LIFE3, LIFE2, LIFE1, T1_LED, T2_LED):
        assert executor.level(pin) == 0


def test_life_leds_reordered_into_firing_order(registry, logger):
    table = [
        PinAssignment("life1", PinKind.LED, PinRole.LIFE, LIFE1),
        PinAssignment("life2", PinKind.LED, PinRole.LIFE, LIFE2),
        PinAssignment("life3", PinKind.LED, PinRole.LIFE, LIFE3),
    ]
    inventory = HardwareInventory(table, registry, logger)
    assert [led.id for led in inventory.life_leds] == ["life3", "life2", "life1"]


def test_target_without_button_is_not_playable(registry, logger):
    table = [
        PinAssignment("t1", PinKind.LED, PinRole.TARGET, T1_LED, PinGroup.LEFT),
        PinAssignment("t2", PinKind.LED, PinRole.TARGET, T2_LED, PinGroup.RIGHT),
        PinAssignment("t2", PinKind.BUTTON, PinRole.TARGET, 23, PinGroup.RIGHT),
    ]
    inventory = HardwareInventory(table, registry, logger)
    assert len(inventory.targets) == 2
    assert [target.id for target in inventory.playable_targets] == ["t2"]
    assert inventory.start_button is None


def test_target_button_without_led_is_skipped(registry, logger):
    table = [PinAssignment("t9", PinKind.BUTTON, PinRole.TARGET, 27, PinGroup.LEFT)]
    inventory = HardwareInventory(table, registry, logger)
    assert inventory.targets == []
    assert inventory.button("t9") is not None


def test_duplicate_pin_in_table_is_fatal(executor, logger):
    table = scenario_pin_table() + [PinAssignment("t3", PinKind.LED, PinRole.TARGET, START, PinGroup.LEFT)]
    with pytest.raises(PinConflictError):
        HardwareInventory(table, PinRegistry(executor, logger), logger)


@pytest.mark.parametrize("lives, lit", [
    (3, [True, True, True]),
    (2, [False, True, True]),
    (1, [False, False, True]),
    (0, [False, False, False]),
    (5, [True, True, True]),
    (-1, [False, False, False]),
])
def test_show_lives(inventory, lives, lit):
    inventory.show_lives(lives)
    assert [led.is_on for led in inventory.life_leds] == lit


def test_poll_samples_every_button_once(inventory, executor):
    executor.run_calls.clear()
    inventory.poll(1.0)
    assert sorted(int(argv[-1]) for argv in executor.run_calls) == sorted([START, T1_BUTTON, 23])


def test_button_press_after_debounce(inventory, executor):
    button = inventory.target("t1").button
    inventory.poll(1.0)
    executor.press(T1_BUTTON)
    inventory.poll(1.01)
    assert not button.is_pressed
    inventory.poll(1.05)
    assert button.is_pressed
    assert button.just_pressed
    inventory.poll(1.06)
    assert not button.just_pressed


def test_shutdown_releases_all_lines(inventory, executor):
    inventory.led("t1").on()
    failures = inventory.shutdown()
    assert failures == 0
    assert all(not process.is_running() for process in executor.spawned)


def test_shutdown_isolates_failures(inventory, executor, monkeypatch):
    def broken():
        raise RuntimeError("stuck")

    monkeypatch.setattr(inventory.led("life2"), "shutdown", broken)
    assert inventory.shutdown() == 1
    assert executor.holders(LIFE3) == []
    assert executor.holders(LIFE1) == []
