"""
Game mode implementations: Boot, Idle, Playing, Measurement, Calibration
"""

from enum import Enum
from typing import Dict, List, Optional, Set, Tuple, TYPE_CHECKING

from gpio_system.inventory import MAX_LIVES

from .base_classes import GameState
from .diagnostics import CONDITION_GAME, CONDITION_REAL, MOMENT_AFTER, MOMENT_BEFORE
from .input_state import Key
from .render import DisplayHints, Tint
from .sequence_detector import SequenceDetector

if TYPE_CHECKING:
    from gpio_system.devices import Led
    from gpio_system.target import Target
    from game_system.game_manager import GameManager
    from game_system.input_state import InputSnapshot


def elapsed_ms(now: float, since: float) -> float:
    return (now - since) * 1000.0


class BootMode(GameState):
    """
    Hardware self-test.

    Phases:
    - DELAY: startup pause
    - SWEEP: every life then target indicator blinks in turn
    - WAIT_BUTTONS: each test button (start + target buttons) must be pressed
      once on its own; a validated press blinks its feedback (CONFIRM)
    - DONE: blink everything, go to Idle

    Transitions:
    - All test buttons validated -> IdleMode
    """

    class Phase(Enum):
        DELAY = "delay"
        SWEEP = "sweep"
        WAIT_BUTTONS = "wait_buttons"
        DONE = "done"

    def __init__(self, game_manager: 'GameManager'):
        super().__init__(game_manager)
        self.boot = self.config.boot
        self.phase = BootMode.Phase.DELAY
        self._phase_start: Optional[float] = None

        # Sweep schedule: (led or None for a gap, lit, duration_ms)
        self._schedule: List[Tuple[Optional['Led'], bool, float]] = []
        self._step_index = 0
        self._step_start: Optional[float] = None

        self.test_ids: List[str] = []
        self.validated: Set[str] = set()
        self._feedback_id: Optional[str] = None

    def custom_on_enter(self) -> None:
        self.inventory.all_off()
        self._schedule = self._build_sweep_schedule()
        self.test_ids = self._build_test_ids()
        self.logger.info(f"Self-test: {len(self._schedule)} sweep steps, test buttons {self.test_ids}")

    def custom_on_exit(self) -> None:
        self.inventory.all_off()

    def _build_sweep_schedule(self) -> List[Tuple[Optional['Led'], bool, float]]:
        schedule = []
        for led in self.inventory.life_leds + self.inventory.target_leds:
            for _ in range(self.boot.sweep_blinks):
                schedule.append((led, True, self.boot.sweep_on_ms))
                schedule.append((led, False, self.boot.sweep_off_ms))
            schedule.append((None, False, self.boot.sweep_gap_ms))
        return schedule

    def _build_test_ids(self) -> List[str]:
        ids = []
        if self.inventory.start_button is not None:
            ids.append(self.inventory.start_button.id)
        ids.extend(target.button.id for target in self.inventory.targets if target.button is not None)
        return ids

    def feedback_leds(self, button_id: str) -> List['Led']:
        """Start lights the two outer life indicators, a target lights its own"""
        start = self.inventory.start_button
        if start is not None and button_id == start.id:
            lives = self.inventory.life_leds
            if not lives:
                return []
            return [lives[0]] if len(lives) == 1 else [lives[0], lives[-1]]
        target = self.inventory.target(button_id)
        return [target.led] if target is not None else []

    def update(self, inputs: 'InputSnapshot') -> Optional[GameState]:
        now = inputs.now
        if self._phase_start is None:
            self._phase_start = now

        if self.phase == BootMode.Phase.DELAY:
            if elapsed_ms(now, self._phase_start) >= self.boot.startup_delay_ms:
                self.phase = BootMode.Phase.SWEEP
                self._step_index = 0
                self._step_start = None
            return None

        if self.phase == BootMode.Phase.SWEEP:
            if self._advance_sweep(now):
                self.inventory.all_off()
                if self.test_ids:
                    self.logger.info("Sweep done, waiting for button presses")
                    self.phase = BootMode.Phase.WAIT_BUTTONS
                else:
                    self.logger.warning("No test buttons, self-test complete after sweep")
                    return self._finish()
            return None

        if self.phase == BootMode.Phase.WAIT_BUTTONS:
            return self._wait_buttons(inputs)

        return None

    def _advance_sweep(self, now: float) -> bool:
        """Apply due sweep steps; True once the schedule is exhausted"""
        while self._step_index < len(self._schedule):
            led, lit, duration_ms = self._schedule[self._step_index]
            if self._step_start is None:
                if led is not None:
                    led.set(lit)
                self._step_start = now
            if elapsed_ms(now, self._step_start) < duration_ms:
                return False
            self._step_index += 1
            self._step_start = None
        return True

    def _wait_buttons(self, inputs: 'InputSnapshot') -> Optional[GameState]:
        down = [button_id for button_id in self.test_ids if inputs.is_pressed(button_id)]

        if len(down) != 1 or down[0] in self.validated:
            self._show_feedback(None)
            return None

        button_id = down[0]
        self._show_feedback(button_id)

        if inputs.just_pressed(button_id):
            self.validated.add(button_id)
            self.logger.info(f"Button '{button_id}' validated ({len(self.validated)}/{len(self.test_ids)})")
            self._confirm(button_id)

            if len(self.validated) == len(self.test_ids):
                return self._finish()
        return None

    def _show_feedback(self, button_id: Optional[str]) -> None:
        if button_id == self._feedback_id:
            return
        if self._feedback_id is not None:
            for led in self.feedback_leds(self._feedback_id):
                led.off()
        self._feedback_id = button_id
        if button_id is not None:
            for led in self.feedback_leds(button_id):
                led.on()

    def _confirm(self, button_id: str) -> None:
        self._feedback_id = None
        self.blink(self.feedback_leds(button_id), self.boot.confirm_blinks,
                   self.boot.confirm_on_ms, self.boot.confirm_off_ms)

    def _finish(self) -> GameState:
        self.phase = BootMode.Phase.DONE
        self.blink(self.inventory.all_leds, self.boot.done_blinks, self.boot.done_on_ms, self.boot.done_off_ms)
        self.logger.info("Self-test complete")
        return IdleMode(self.game_manager)


class IdleMode(GameState):
    """
    Waiting for a start-button gesture.

    Transitions (clicks counted within the multi-click window):
    - 1 click -> PlayingMode
    - 2 clicks -> MeasurementMode
    - 3 clicks -> BootMode
    - 4+ clicks -> CalibrationMode
    - Long press -> GameManager.shutdown()
    """

    def __init__(self, game_manager: 'GameManager'):
        super().__init__(game_manager)
        self.idle = self.config.idle
        self.click_count = 0
        self.press_start: Optional[float] = None
        self.long_press_fired = False
        self.window_deadline: Optional[float] = None

    def custom_on_enter(self) -> None:
        self.inventory.all_off()

    def custom_on_exit(self) -> None:
        pass

    def update(self, inputs: 'InputSnapshot') -> Optional[GameState]:
        start = self.inventory.start_button
        if start is None:
            return None
        now = inputs.now

        # Window expiry wins over a press landing on the same tick
        if self.window_deadline is not None and now >= self.window_deadline:
            count = self.click_count
            self.click_count = 0
            self.window_deadline = None
            return self.dispatch(count)

        if inputs.just_pressed(start.id):
            if self.window_deadline is None:
                self.click_count = 0
            self.press_start = now
            self.long_press_fired = False
            self.window_deadline = None

        if inputs.is_pressed(start.id) and self.press_start is not None and not self.long_press_fired:
            if elapsed_ms(now, self.press_start) >= self.idle.long_press_ms:
                self.long_press_fired = True
                self.click_count = 0
                self.logger.info("Long press detected, shutting down")
                self.game_manager.shutdown()
                return None

        if inputs.just_released(start.id) and self.press_start is not None:
            held_ms = elapsed_ms(now, self.press_start)
            self.press_start = None
            if self.long_press_fired:
                return None
            if held_ms >= self.idle.bounce_floor_ms:
                self.click_count += 1
                self.logger.debug(f"Click {self.click_count} (held {held_ms:.0f}ms)")
            if self.click_count > 0:
                self.window_deadline = now + self.idle.click_window_ms / 1000.0
            return None

        return None

    def dispatch(self, clicks: int) -> Optional[GameState]:
        if clicks < 1:
            return None
        if clicks > 4:
            self.logger.warning(f"{clicks} clicks, treating as 4")
            clicks = 4
        self.logger.info(f"{clicks} click(s)")
        if clicks == 1:
            return PlayingMode(self.game_manager)
        if clicks == 2:
            return MeasurementMode(self.game_manager)
        if clicks == 3:
            return BootMode(self.game_manager)
        return CalibrationMode(self.game_manager)


class PlayingMode(GameState):
    """
    Adaptive reaction game.

    A random playable target lights up; stepping on it within the hit
    window scores, anything else costs a life. Levels get harder by
    alternately shrinking the hit window and the result display time.

    Transitions:
    - Lives exhausted -> IdleMode
    """

    class Phase(Enum):
        WAIT = "wait"
        SHOW = "show"
        RESULT = "result"

    def __init__(self, game_manager: 'GameManager'):
        super().__init__(game_manager)
        self.playing = self.config.playing
        self.rng = game_manager.rng

        self.lives_remaining = min(MAX_LIVES, self.playing.starting_lives)
        self.level = 1
        self.hit_window_ms = self.playing.hit_window_ms
        self.show_duration_ms = self.playing.show_duration_ms
        self.shrink_hit_window_next = True
        self.perfect_streak = 0

        self.correct_in_level = 0
        self.attempts_in_level = 0
        self.random_waits_used = 0
        self.lives_at_level_start = self.lives_remaining
        self.max_attempts = self._max_attempts()

        self.phase = PlayingMode.Phase.WAIT
        self.deadline: Optional[float] = None
        self.current_target: Optional['Target'] = None
        self.tint = Tint.NONE

    @property
    def lives(self) -> int:
        return self.lives_remaining

    def _max_attempts(self) -> int:
        return self.playing.base_attempts_per_level + (self.lives_at_level_start - 1)

    def custom_on_enter(self) -> None:
        self.inventory.all_off()
        self.inventory.show_lives(self.lives_remaining)
        self.logger.info(
            f"Game started: {self.lives_remaining} lives, hit window {self.hit_window_ms}ms, "
            f"show duration {self.show_duration_ms}ms"
        )

    def custom_on_exit(self) -> None:
        self.inventory.all_off()
        self.logger.info(f"Game ended at level {self.level}")

    def display_hints(self) -> DisplayHints:
        return DisplayHints(cue_visible=self.phase == PlayingMode.Phase.SHOW, tint=self.tint, level=self.level)

    def update(self, inputs: 'InputSnapshot') -> Optional[GameState]:
        if self.phase == PlayingMode.Phase.WAIT:
            return self._update_wait(inputs)
        if self.phase == PlayingMode.Phase.SHOW:
            self._update_show(inputs)
            return None
        return self._update_result(inputs)

    def _update_wait(self, inputs: 'InputSnapshot') -> Optional[GameState]:
        now = inputs.now
        if self.deadline is None:
            delay_ms = 0.0
            if self.random_waits_used < self.playing.random_waits_per_level:
                delay_ms = self.rng.uniform(self.playing.random_wait_min_ms, self.playing.random_wait_max_ms)
                self.random_waits_used += 1
            self.deadline = now + delay_ms / 1000.0

        if now < self.deadline:
            return None

        playable = self.inventory.playable_targets
        if not playable:
            self.logger.error("No playable targets, leaving game")
            return IdleMode(self.game_manager)

        self.current_target = self.rng.choice(playable)
        self.current_target.led.on()
        self.deadline = now + self.hit_window_ms / 1000.0
        self.tint = Tint.NONE
        self.phase = PlayingMode.Phase.SHOW
        self.logger.debug(f"Cue on '{self.current_target.id}' for {self.hit_window_ms}ms")
        return None

    def _update_show(self, inputs: 'InputSnapshot') -> None:
        now = inputs.now
        target = self.current_target

        if inputs.just_pressed(target.button.id) and now <= self.deadline:
            self._finish_attempt(now, success=True)
            return

        wrong = [other.id for other in self.inventory.playable_targets
                 if other is not target and inputs.just_pressed(other.button.id)]
        if wrong:
            self.logger.debug(f"Wrong target {wrong} while '{target.id}' was lit")
            self._finish_attempt(now, success=False)
        elif now >= self.deadline:
            self.logger.debug(f"Missed '{target.id}'")
            self._finish_attempt(now, success=False)

    def _finish_attempt(self, now: float, success: bool) -> None:
        self.current_target.led.off()
        self.attempts_in_level += 1
        if success:
            self.correct_in_level += 1
            self.tint = Tint.SUCCESS
        else:
            self.lives_remaining = max(0, self.lives_remaining - 1)
            self.inventory.show_lives(self.lives_remaining)
            self.tint = Tint.FAILURE
        self.deadline = now + self.show_duration_ms / 1000.0
        self.phase = PlayingMode.Phase.RESULT

    def _update_result(self, inputs: 'InputSnapshot') -> Optional[GameState]:
        if inputs.now < self.deadline:
            return None

        if self.lives_remaining == 0:
            self.logger.info(f"Game over at level {self.level}")
            self.blink(self.inventory.all_leds, self.playing.game_over_blinks,
                       self.playing.blink_on_ms, self.playing.blink_off_ms)
            return IdleMode(self.game_manager)

        if (self.correct_in_level >= self.playing.correct_per_level
                or self.attempts_in_level >= self.max_attempts):
            self._level_up()

        self.tint = Tint.NONE
        self.deadline = None
        self.phase = PlayingMode.Phase.WAIT
        return None

    def _level_up(self) -> None:
        perfect = self.correct_in_level == self.playing.correct_per_level
        self.level += 1
        self.blink(self.inventory.target_leds, self.level, self.playing.blink_on_ms, self.playing.blink_off_ms)

        if self.shrink_hit_window_next:
            self.hit_window_ms = max(self.playing.hit_window_floor_ms,
                                     self.hit_window_ms - self.playing.hit_window_step_ms)
        else:
            self.show_duration_ms = max(self.playing.show_duration_floor_ms,
                                        self.show_duration_ms - self.playing.show_duration_step_ms)
        self.shrink_hit_window_next = not self.shrink_hit_window_next

        if perfect:
            self.perfect_streak += 1
            if self.perfect_streak >= self.playing.perfect_levels_for_life:
                self.lives_remaining = min(MAX_LIVES, self.lives_remaining + 1)
                self.perfect_streak = 0
                self.logger.info(f"Perfect streak, life restored ({self.lives_remaining})")
        else:
            self.perfect_streak = 0
        self.inventory.show_lives(self.lives_remaining)

        self.correct_in_level = 0
        self.attempts_in_level = 0
        self.random_waits_used = 0
        self.lives_at_level_start = self.lives_remaining
        self.max_attempts = self._max_attempts()

        self.logger.info(
            f"Level {self.level}: hit window {self.hit_window_ms}ms, show duration {self.show_duration_ms}ms, "
            f"max attempts {self.max_attempts}"
        )


class MeasurementMode(GameState):
    """
    Fixed-protocol reaction measurement.

    Metadata is entered on the keyboard in three Enter-gated steps (subject
    id, condition, moment), then a fixed number of single-target trials run
    and their reaction times are committed as one diagnostic record.

    Transitions:
    - All trials done -> IdleMode (record committed)
    - Start pressed twice quickly -> IdleMode (record discarded)
    """

    STEP_SUBJECT = 0
    STEP_CONDITION = 1
    STEP_MOMENT = 2

    class Phase(Enum):
        METADATA = "metadata"
        GAP = "gap"
        CUE = "cue"

    def __init__(self, game_manager: 'GameManager'):
        super().__init__(game_manager)
        self.measurement = self.config.measurement
        self.rng = game_manager.rng
        self.sink = game_manager.diagnostics

        self.phase = MeasurementMode.Phase.METADATA
        self.step = MeasurementMode.STEP_SUBJECT
        self.subject_buffer = ""
        self.subject_id: Optional[int] = None
        self.test_condition = CONDITION_REAL
        self.measurement_moment = MOMENT_BEFORE

        self.trial = 0
        self.deadline: Optional[float] = None
        self.cue_start: Optional[float] = None
        self.current_target: Optional['Target'] = None
        self._committed = False

        start = self.inventory.start_button
        self.abort_detector: Optional[SequenceDetector] = None
        if start is not None:
            self.abort_detector = SequenceDetector([start.id, start.id], self.measurement.abort_double_press_ms)

    def custom_on_enter(self) -> None:
        self.inventory.all_off()
        self._show_step()
        self.logger.info("Measurement: enter subject id")

    def custom_on_exit(self) -> None:
        if not self._committed and self.sink.open_record is not None:
            self.sink.discard()
        self.inventory.all_off()

    def display_hints(self) -> DisplayHints:
        if self.phase != MeasurementMode.Phase.METADATA:
            return DisplayHints(cue_visible=self.phase == MeasurementMode.Phase.CUE)
        texts: Dict[int, str] = {
            MeasurementMode.STEP_SUBJECT: self.subject_buffer,
            MeasurementMode.STEP_CONDITION: self.test_condition,
            MeasurementMode.STEP_MOMENT: self.measurement_moment,
        }
        return DisplayHints(metadata_step=self.step, metadata_text=texts[self.step])

    def _show_step(self) -> None:
        for index, led in enumerate(self.inventory.life_leds):
            led.set(index == self.step)

    def update(self, inputs: 'InputSnapshot') -> Optional[GameState]:
        start = self.inventory.start_button
        if self.abort_detector is not None and inputs.just_pressed(start.id):
            if self.abort_detector.add_event(start.id, inputs.now):
                self.logger.info("Measurement aborted")
                self.sink.discard()
                return IdleMode(self.game_manager)

        if self.phase == MeasurementMode.Phase.METADATA:
            return self._update_metadata(inputs)
        if self.phase == MeasurementMode.Phase.GAP:
            return self._update_gap(inputs)
        return self._update_cue(inputs)

    def _update_metadata(self, inputs: 'InputSnapshot') -> Optional[GameState]:
        keys = inputs.keyboard

        if self.step == MeasurementMode.STEP_SUBJECT:
            if keys.was_pressed(Key.BACKSPACE) or keys.was_pressed(Key.DELETE):
                self.subject_buffer = ""
            for digit in keys.pressed_digits():
                self.subject_buffer += str(digit)
            if keys.was_pressed(Key.ENTER) and self.subject_buffer:
                self.subject_id = int(self.subject_buffer)
                self.logger.info(f"Subject id: {self.subject_id}")
                self._next_step()
            return None

        if self.step == MeasurementMode.STEP_CONDITION:
            if keys.was_pressed(Key.GAME):
                self.test_condition = CONDITION_GAME
            if keys.was_pressed(Key.REAL):
                self.test_condition = CONDITION_REAL
            if keys.was_pressed(Key.ENTER):
                self.logger.info(f"Test condition: {self.test_condition}")
                self._next_step()
            return None

        if keys.was_pressed(Key.BEFORE):
            self.measurement_moment = MOMENT_BEFORE
        if keys.was_pressed(Key.AFTER):
            self.measurement_moment = MOMENT_AFTER
        if keys.was_pressed(Key.ENTER):
            self.logger.info(f"Measurement moment: {self.measurement_moment}")
            return self._begin_trials(inputs.now)
        return None

    def _next_step(self) -> None:
        self.step += 1
        self._show_step()

    def _begin_trials(self, now: float) -> Optional[GameState]:
        if not self.inventory.playable_targets:
            self.logger.error("No playable targets, cannot measure")
            return IdleMode(self.game_manager)

        self.sink.open(self.subject_id, self.measurement_moment, self.test_condition)
        self.inventory.all_off()
        self.blink(self.inventory.all_leds, self.measurement.feedback_blinks,
                   self.measurement.blink_on_ms, self.measurement.blink_off_ms)
        self.trial = 0
        self.deadline = now
        self.phase = MeasurementMode.Phase.GAP
        return None

    def _update_gap(self, inputs: 'InputSnapshot') -> Optional[GameState]:
        if inputs.now < self.deadline:
            return None
        self.current_target = self.rng.choice(self.inventory.playable_targets)
        self.current_target.led.on()
        self.cue_start = inputs.now
        self.phase = MeasurementMode.Phase.CUE
        return None

    def _update_cue(self, inputs: 'InputSnapshot') -> Optional[GameState]:
        target = self.current_target
        if not inputs.just_pressed(target.button.id):
            return None

        reaction_ms = elapsed_ms(inputs.now, self.cue_start)
        target.led.off()
        self.sink.open_record.set_trial(self.trial, reaction_ms)
        self.logger.info(f"Trial {self.trial + 1}/{self.measurement.trial_count}: '{target.id}' {reaction_ms:.0f}ms")
        self.trial += 1

        if self.trial >= self.measurement.trial_count:
            self.sink.commit()
            self._committed = True
            self.blink(self.inventory.all_leds, self.measurement.feedback_blinks,
                       self.measurement.blink_on_ms, self.measurement.blink_off_ms)
            return IdleMode(self.game_manager)

        self.deadline = inputs.now + self.measurement.inter_trial_gap_ms / 1000.0
        self.phase = MeasurementMode.Phase.GAP
        return None


class CalibrationMode(GameState):
    """
    Keyboard-driven layout editor.

    Edits the center icon first, then every target in declaration order.
    Physical buttons are ignored.

    Transitions:
    - Escape -> IdleMode (uncommitted edits dropped)
    - Last item confirmed -> short hold -> IdleMode
    """

    CENTER = -1

    def __init__(self, game_manager: 'GameManager'):
        super().__init__(game_manager)
        self.calibration = self.config.calibration
        self.layout = game_manager.layout

        self.items: List[int] = [CalibrationMode.CENTER] + [target.index for target in self.inventory.targets]
        self.item_position = 0
        self.current = self.layout.center
        self.frames_since_confirm = self.calibration.enter_debounce_frames
        self.completed = False
        self.complete_deadline: Optional[float] = None

    @property
    def editing_index(self) -> Optional[int]:
        if self.completed:
            return None
        return self.items[self.item_position]

    def custom_on_enter(self) -> None:
        self.inventory.all_off()
        self._load_item()
        self.logger.info(f"Calibration: {len(self.items)} items (center + {len(self.items) - 1} targets)")

    def custom_on_exit(self) -> None:
        self.inventory.all_off()

    def display_hints(self) -> DisplayHints:
        return DisplayHints(editing_index=self.editing_index)

    def _load_item(self) -> None:
        index = self.editing_index
        self.inventory.targets_off()
        if index == CalibrationMode.CENTER:
            self.current = self.layout.center
            return
        self.current = self.layout.target(index)
        target = self.inventory.targets[index]
        target.led.on()

    def update(self, inputs: 'InputSnapshot') -> Optional[GameState]:
        keys = inputs.keyboard

        if keys.was_pressed(Key.ESCAPE):
            self.logger.info("Calibration cancelled")
            return IdleMode(self.game_manager)

        if self.completed:
            if inputs.now >= self.complete_deadline:
                return IdleMode(self.game_manager)
            return None

        self._apply_held_keys(keys, inputs.dt)

        self.frames_since_confirm += 1
        if keys.was_pressed(Key.ENTER) and self.frames_since_confirm > self.calibration.enter_debounce_frames:
            self.frames_since_confirm = 0
            self._commit_and_advance(inputs.now)
        return None

    def _apply_held_keys(self, keys, dt: float) -> None:
        cal = self.calibration
        is_center = self.editing_index == CalibrationMode.CENTER

        dx = (keys.is_held(Key.RIGHT) - keys.is_held(Key.LEFT)) * cal.move_speed_px_s * dt
        dy = (keys.is_held(Key.DOWN) - keys.is_held(Key.UP)) * cal.move_speed_px_s * dt
        if dx or dy:
            self.current = self.current.moved(dx, dy, cal.canvas_width, cal.canvas_height)

        if not is_center:
            rotation = (keys.is_held(Key.ROTATE_CW) - keys.is_held(Key.ROTATE_CCW)) * cal.rotate_speed_deg_s * dt
            if rotation:
                self.current = self.current.rotated(rotation)

        scale = (keys.is_held(Key.SCALE_UP) - keys.is_held(Key.SCALE_DOWN)) * cal.scale_speed_per_s * dt
        if scale:
            if is_center:
                self.current = self.current.scaled(scale, cal.center_scale_min, cal.center_scale_max)
            else:
                self.current = self.current.scaled(scale, cal.target_scale_min, cal.target_scale_max)

    def _commit_and_advance(self, now: float) -> None:
        index = self.editing_index
        if index == CalibrationMode.CENTER:
            self.layout.set_center(self.current)
        else:
            self.layout.set_target(index, self.current)
        self.logger.info(f"Committed {'center' if index == CalibrationMode.CENTER else f'target #{index}'}: {self.current}")

        self.item_position += 1
        if self.item_position >= len(self.items):
            self.completed = True
            self.complete_deadline = now + self.calibration.completion_hold_ms / 1000.0
            self.inventory.targets_off()
            self.logger.info("Calibration complete")
            return
        self._load_item()
