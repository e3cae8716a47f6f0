"""
InputLine reply parsing/polarity and OutputLine held-process model
"""

import pytest

from gpio_system import Bias, CommandExecutionError, InputLine, OutputLine, parse_line_reply


@pytest.mark.parametrize("reply, expected", [
    ("1", True),
    ("0\n", False),
    ('"17"=active', True),
    ('"17"=inactive', False),
    ("17=inactive\n", False),
    ("line 17: active", True),
    ("gpiochip0 17 inactive", False),
    ("value: 1", True),
    ("value 0", False),
    ("", None),
    ("garbage", None),
])
def test_parse_line_reply(reply, expected):
    assert parse_line_reply(reply) is expected


def test_input_line_argv(executor, logger):
    line = InputLine(executor, 16, logger, bias=Bias.PULL_UP)
    assert line.argv == ["gpioget", "-c", "gpiochip0", "--bias", "pull-up", "16"]


def test_active_low_inverts_level(executor, logger):
    line = InputLine(executor, 16, logger, active_low=True)
    executor.levels[16] = "0"
    assert line.sample_is_active() is True
    executor.levels[16] = "1"
    assert line.sample_is_active() is False


def test_active_high_passes_level_through(executor, logger):
    line = InputLine(executor, 16, logger, active_low=False, bias=Bias.PULL_DOWN)
    executor.levels[16] = "1"
    assert line.sample_is_active() is True
    assert executor.run_calls[-1][4] == "pull-down"


def test_command_failure_reads_inactive(executor, logger):
    line = InputLine(executor, 16, logger, active_low=True)
    executor.failing_pins.add(16)
    assert line.sample_is_active() is False


def test_unparseable_reply_reads_inactive_for_active_low(executor, logger):
    line = InputLine(executor, 16, logger, active_low=True)
    executor.levels[16] = "???"
    assert line.sample_is_active() is False


def test_output_line_starts_low_with_one_holder(executor, logger):
    line = OutputLine(executor, 26, logger)
    assert executor.level(26) == 0
    assert len(executor.holders(26)) == 1
    assert line.is_high() is False


def test_output_line_argv(executor, logger):
    OutputLine(executor, 26, logger, start_on=True)
    assert executor.spawned[-1].argv == ["gpioset", "-c", "gpiochip0", "26=1"]


def test_level_change_replaces_holder(executor, logger):
    line = OutputLine(executor, 26, logger)
    first = line.held_process
    line.set_high()
    assert not first.is_running()
    assert executor.level(26) == 1
    assert len(executor.holders(26)) == 1
    assert line.is_high() is True


def test_same_level_is_a_noop(executor, logger):
    line = OutputLine(executor, 26, logger)
    line.set_high()
    spawned = len(executor.spawned)
    line.set_high()
    assert len(executor.spawned) == spawned


def test_inverted_line(executor, logger):
    line = OutputLine(executor, 26, logger, inverted=True)
    assert executor.level(26) == 1
    line.set_high()
    assert executor.level(26) == 0
    assert line.is_high() is True
    assert line.physical_high is False


def test_spawn_failure_propagates(executor, logger):
    line = OutputLine(executor, 26, logger)
    executor.failing_spawn_pins.add(26)
    with pytest.raises(CommandExecutionError):
        line.set_high()
    assert line.held_process is None
    assert line.is_high() is False


def test_shutdown_releases_holder(executor, logger):
    line = OutputLine(executor, 26, logger, start_on=True)
    line.shutdown()
    assert executor.holders(26) == []
    assert line.held_process is None
