"""
Configuration validation, layout store, diagnostic records and sequence detection
"""

import csv

import pytest

from gpio_system import PinAssignment, PinKind, PinRole
from game_system import CalibratedLayout, DiagnosticSink, GameConfig, SequenceDetector, Transform
from game_system.diagnostics import CSV_HEADER, DiagnosticRecord

from conftest import scenario_pin_table


# ----------------------------------------------------------------------
# GameConfig
# ----------------------------------------------------------------------

def test_default_config_is_valid():
    config = GameConfig(pin_table=scenario_pin_table())
    config.validate()
    assert config.target_ids == ["t1", "t2"]
    assert config.life_count == 3
    assert config.target_fps == 50.0


def test_empty_pin_table_rejected():
    with pytest.raises(ValueError):
        GameConfig(pin_table=[]).validate()


def test_pin_out_of_range_rejected():
    table = scenario_pin_table() + [PinAssignment("life4", PinKind.LED, PinRole.LIFE, 40)]
    with pytest.raises(ValueError, match="range"):
        GameConfig(pin_table=table).validate()


def test_target_without_group_rejected():
    table = [PinAssignment("t1", PinKind.LED, PinRole.TARGET, 26)]
    with pytest.raises(ValueError, match="group"):
        GameConfig(pin_table=table).validate()


def test_too_many_trials_rejected():
    config = GameConfig(pin_table=scenario_pin_table())
    config.measurement.trial_count = 11
    with pytest.raises(ValueError, match="Trial count"):
        config.validate()


def test_non_positive_timing_rejected():
    config = GameConfig(pin_table=scenario_pin_table())
    config.playing.hit_window_ms = 0
    with pytest.raises(ValueError):
        config.validate()


# ----------------------------------------------------------------------
# CalibratedLayout
# ----------------------------------------------------------------------

def test_layout_defaults_to_canvas_center():
    layout = CalibratedLayout(1920, 1080)
    assert layout.center == Transform(960.0, 540.0, 0.0, 1.0)
    assert layout.target(3) == Transform(960.0, 540.0, 0.0, 1.0)
    assert layout.calibrated_indices() == []


def test_layout_stores_target_transforms():
    layout = CalibratedLayout(800, 600)
    layout.set_target(1, Transform(10, 20, 45, 2.0))
    assert layout.target(1).rotation == 45
    assert layout.calibrated_indices() == [1]


def test_transform_clamps_and_wraps():
    transform = Transform(100, 100)
    assert transform.moved(-500, 50, 800, 600) == Transform(0.0, 150.0)
    assert transform.moved(1000, 1000, 800, 600) == Transform(800.0, 600.0)
    assert transform.rotated(370).rotation == pytest.approx(10.0)
    assert transform.rotated(-30).rotation == pytest.approx(330.0)
    assert transform.scaled(5.0, 0.5, 2.0).scale == 2.0
    assert transform.scaled(-5.0, 0.5, 2.0).scale == 0.5


# ----------------------------------------------------------------------
# DiagnosticSink
# ----------------------------------------------------------------------

def test_record_rejects_unknown_values():
    with pytest.raises(ValueError):
        DiagnosticRecord(subject_id=1, measurement_moment="during")
    with pytest.raises(ValueError):
        DiagnosticRecord(subject_id=1, test_condition="lab")


def test_commit_appends_and_discard_drops(logger):
    sink = DiagnosticSink(logger)
    sink.open(7, "before", "game").set_trial(0, 321.0)
    sink.commit()
    sink.open(8, "after", "real")
    sink.discard()
    assert [record.subject_id for record in sink.records] == [7]
    assert sink.open_record is None


def test_commit_without_open_record(logger):
    assert DiagnosticSink(logger).commit() is None


def test_export_writes_header_once(tmp_path, logger):
    path = tmp_path / "out" / "measurements.csv"
    sink = DiagnosticSink(logger)
    record = sink.open(42, "after", "game")
    for trial in range(10):
        record.set_trial(trial, 200.0 + trial)
    sink.commit()
    sink.open(43, "before", "real")
    sink.commit()

    assert sink.export_csv(str(path)) == 2
    assert sink.export_csv(str(path)) == 2

    with open(path, newline="") as handle:
        rows = list(csv.reader(handle))
    assert rows[0] == CSV_HEADER
    assert len(rows) == 5
    assert rows[1][1:4] == ["42", "after", "game"]
    assert rows[1][4] == "200.0"
    assert rows[1][13] == "209.0"
    assert rows[2][4:] == [""] * 10


def test_export_without_records_creates_nothing(tmp_path, logger):
    path = tmp_path / "measurements.csv"
    assert DiagnosticSink(logger).export_csv(str(path)) == 0
    assert not path.exists()


# ----------------------------------------------------------------------
# SequenceDetector
# ----------------------------------------------------------------------

def test_double_press_within_window():
    detector = SequenceDetector(["start", "start"], max_delay_ms=500)
    assert detector.add_event("start", 10.0) is False
    assert detector.current_sequence == ["start"]
    assert detector.add_event("start", 10.4) is True
    assert detector.current_sequence == []


def test_slow_presses_do_not_complete():
    detector = SequenceDetector(["start", "start"], max_delay_ms=500)
    assert detector.add_event("start", 10.0) is False
    assert detector.add_event("start", 10.6) is False
    assert detector.add_event("start", 10.9) is True


def test_other_buttons_break_the_sequence():
    detector = SequenceDetector(["a", "b"], max_delay_ms=1000)
    detector.add_event("a", 1.0)
    assert detector.add_event("a", 1.1) is False
    assert detector.add_event("b", 1.2) is True
