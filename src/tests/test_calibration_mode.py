"""
Calibration mode: keyboard editing of the projection layout
"""

import pytest

from game_system import CalibrationMode, Key

from conftest import START, T1_LED, T2_LED


@pytest.fixture
def editor(floor, manager):
    mode = CalibrationMode(manager)
    floor.enter(mode)
    return floor, mode


def hold(floor, key, seconds):
    floor.keyboard.held.add(key)
    floor.advance(seconds)
    floor.keyboard.held.discard(key)


def confirm(floor):
    floor.advance(0.2)
    floor.tap(Key.ENTER)


def test_edits_center_first(editor, executor):
    floor, mode = editor
    assert mode.editing_index == CalibrationMode.CENTER
    assert executor.level(T1_LED) == 0
    assert mode.display_hints().editing_index == CalibrationMode.CENTER


def test_arrows_move_at_fixed_speed(editor, manager):
    floor, mode = editor
    hold(floor, Key.RIGHT, 1.0)
    hold(floor, Key.UP, 0.5)
    assert mode.current.x == pytest.approx(1260, abs=1)
    assert mode.current.y == pytest.approx(390, abs=1)
    # Not committed yet
    assert manager.layout.center.x == pytest.approx(960)


def test_position_is_clamped_to_canvas(editor):
    floor, mode = editor
    hold(floor, Key.LEFT, 5.0)
    assert mode.current.x == 0.0


def test_center_ignores_rotation_and_clamps_scale(editor):
    floor, mode = editor
    hold(floor, Key.ROTATE_CW, 1.0)
    hold(floor, Key.SCALE_UP, 4.0)
    assert mode.current.rotation == 0.0
    assert mode.current.scale == 2.0


def test_enter_commits_and_lights_edited_target(editor, manager, executor):
    floor, mode = editor
    hold(floor, Key.DOWN, 1.0)
    confirm(floor)
    assert manager.layout.center.y == pytest.approx(840, abs=1)
    assert mode.editing_index == 0
    assert executor.level(T1_LED) == 1

    hold(floor, Key.ROTATE_CW, 1.0)
    hold(floor, Key.SCALE_DOWN, 4.0)
    confirm(floor)
    assert manager.layout.target(0).rotation == pytest.approx(90, abs=0.5)
    assert manager.layout.target(0).scale == 0.25
    assert executor.level(T1_LED) == 0
    assert executor.level(T2_LED) == 1


def test_rotation_wraps(editor, manager):
    floor, mode = editor
    confirm(floor)
    hold(floor, Key.ROTATE_CCW, 1.0)
    assert mode.current.rotation == pytest.approx(270, abs=0.5)


def test_enter_debounced_after_confirm(editor):
    floor, mode = editor
    confirm(floor)
    assert mode.editing_index == 0
    floor.tap(Key.ENTER)
    assert mode.editing_index == 0
    confirm(floor)
    assert mode.editing_index == 1


def test_completion_holds_then_returns_to_idle(editor, executor):
    floor, mode = editor
    for _ in range(3):
        confirm(floor)
    assert mode.completed
    assert executor.level(T2_LED) == 0
    floor.advance(0.5)
    assert floor.mode_name == "CalibrationMode"
    floor.advance(0.6)
    assert floor.mode_name == "IdleMode"


def test_escape_discards_uncommitted_edits(editor, manager):
    floor, mode = editor
    confirm(floor)
    hold(floor, Key.LEFT, 0.5)
    floor.tap(Key.ESCAPE)
    assert floor.mode_name == "IdleMode"
    assert manager.layout.target(0) == manager.layout.default_transform()


def test_physical_buttons_are_ignored(editor):
    floor, mode = editor
    floor.click(START)
    floor.advance(1.0)
    assert floor.mode_name == "CalibrationMode"
    assert mode.editing_index == CalibrationMode.CENTER
