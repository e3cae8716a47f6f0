"""
Game system configuration
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import List

from gpio_system.pin_assignment import Bias, PinAssignment, PinKind, PinRole
from utils.gpio_utils import MAX_BCM_PIN, MIN_BCM_PIN

from .diagnostics import TRIAL_SLOTS


@dataclass
class GpioCommandConfig:
    """libgpiod command line tools"""
    chip: str = "gpiochip0"
    get_command: str = "gpioget"
    set_command: str = "gpioset"
    run_timeout_s: float = 1.0
    terminate_timeout_s: float = 1.0


@dataclass
class ButtonConfig:
    """Button hardware configuration (buttons switch to ground)"""
    debounce_ms: int = 35
    active_low: bool = True
    bias: Bias = Bias.PULL_UP


@dataclass
class LedConfig:
    """Indicator hardware configuration"""
    start_on: bool = False
    inverted: bool = False


@dataclass
class BootConfig:
    startup_delay_ms: int = 1000
    sweep_blinks: int = 2
    sweep_on_ms: int = 150
    sweep_off_ms: int = 150
    sweep_gap_ms: int = 100
    confirm_blinks: int = 3
    confirm_on_ms: int = 120
    confirm_off_ms: int = 120
    done_blinks: int = 2
    done_on_ms: int = 250
    done_off_ms: int = 250


@dataclass
class IdleConfig:
    long_press_ms: int = 3000
    click_window_ms: int = 500
    bounce_floor_ms: int = 30
    shutdown_blinks: int = 3
    blink_on_ms: int = 200
    blink_off_ms: int = 200


@dataclass
class PlayingConfig:
    starting_lives: int = 3
    hit_window_ms: int = 2000
    show_duration_ms: int = 1000
    random_wait_min_ms: int = 500
    random_wait_max_ms: int = 3500
    random_waits_per_level: int = 2
    correct_per_level: int = 6
    base_attempts_per_level: int = 6
    hit_window_step_ms: int = 200
    hit_window_floor_ms: int = 300
    show_duration_step_ms: int = 100
    show_duration_floor_ms: int = 200
    perfect_levels_for_life: int = 3
    blink_on_ms: int = 150
    blink_off_ms: int = 150
    game_over_blinks: int = 2


@dataclass
class MeasurementConfig:
    trial_count: int = 10
    inter_trial_gap_ms: int = 500
    abort_double_press_ms: int = 500
    feedback_blinks: int = 2
    blink_on_ms: int = 200
    blink_off_ms: int = 200


@dataclass
class CalibrationConfig:
    canvas_width: int = 1920
    canvas_height: int = 1080
    move_speed_px_s: float = 300.0
    rotate_speed_deg_s: float = 90.0
    scale_speed_per_s: float = 0.5
    center_scale_min: float = 0.5
    center_scale_max: float = 2.0
    target_scale_min: float = 0.25
    target_scale_max: float = 3.0
    enter_debounce_frames: int = 10
    completion_hold_ms: int = 1000


@dataclass
class GameConfig:
    """Main game system configuration"""

    pin_table: List[PinAssignment]
    gpio: GpioCommandConfig = field(default_factory=GpioCommandConfig)
    buttons: ButtonConfig = field(default_factory=ButtonConfig)
    leds: LedConfig = field(default_factory=LedConfig)
    boot: BootConfig = field(default_factory=BootConfig)
    idle: IdleConfig = field(default_factory=IdleConfig)
    playing: PlayingConfig = field(default_factory=PlayingConfig)
    measurement: MeasurementConfig = field(default_factory=MeasurementConfig)
    calibration: CalibrationConfig = field(default_factory=CalibrationConfig)

    # Timing configuration
    frame_duration_ms: float = 20  # 50 FPS

    # Diagnostic export (flushed on shutdown)
    export_path: str = "measurements.csv"

    # Computed properties
    @property
    def target_ids(self) -> List[str]:
        ids = []
        for row in self.pin_table:
            if row.role == PinRole.TARGET and row.id not in ids:
                ids.append(row.id)
        return ids

    @property
    def life_count(self) -> int:
        return sum(1 for row in self.pin_table if row.role == PinRole.LIFE)

    @property
    def target_fps(self) -> float:
        """Target FPS derived from frame duration"""
        return 1000.0 / self.frame_duration_ms

    def validate(self) -> None:
        """
        Basic validation of configuration.

        Duplicate pins are left to the PinRegistry so that they surface as
        PinConflictError with both owners named.
        """
        if not self.pin_table:
            raise ValueError("Pin table must not be empty")

        if self.frame_duration_ms <= 0:
            raise ValueError("Frame duration must be positive")

        for row in self.pin_table:
            if not (MIN_BCM_PIN <= row.pin <= MAX_BCM_PIN):
                raise ValueError(f"Row {row}: GPIO pin out of valid range ({MIN_BCM_PIN}-{MAX_BCM_PIN})")
            if row.role == PinRole.LIFE and row.kind != PinKind.LED:
                raise ValueError(f"Row {row}: LIFE rows must be LEDs")
            if row.role == PinRole.START and row.kind != PinKind.BUTTON:
                raise ValueError(f"Row {row}: START rows must be buttons")
            if row.role == PinRole.TARGET and row.group is None:
                raise ValueError(f"Row {row}: TARGET rows need a LEFT/RIGHT group")

        duplicates = [key for key, count in Counter((row.id, row.kind) for row in self.pin_table).items() if count > 1]
        if duplicates:
            raise ValueError(f"Duplicate id/kind rows: {duplicates}")

        starts = [row for row in self.pin_table if row.role == PinRole.START]
        if len(starts) > 1:
            raise ValueError(f"Only one START button is supported, got {len(starts)}")

        if self.life_count > 3:
            raise ValueError(f"At most 3 life indicators are supported, got {self.life_count}")

        if self.playing.hit_window_ms <= 0 or self.playing.show_duration_ms <= 0:
            raise ValueError("Hit window and show duration must be positive")
        if self.playing.random_wait_min_ms > self.playing.random_wait_max_ms:
            raise ValueError("random_wait_min_ms must not exceed random_wait_max_ms")
        if not (0 < self.measurement.trial_count <= TRIAL_SLOTS):
            raise ValueError(f"Trial count must be within 1..{TRIAL_SLOTS}")
        if self.calibration.canvas_width <= 0 or self.calibration.canvas_height <= 0:
            raise ValueError("Canvas size must be positive")

