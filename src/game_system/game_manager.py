"""
Main game manager - orchestrates the mode state machine, device polling and rendering
"""

import random
import time
from typing import Callable, Optional, TYPE_CHECKING

import psutil

from utils import OnceInMs

from .animation_helpers import AnimationHelpers
from .base_classes import GameState
from .diagnostics import DiagnosticSink
from .input_state import ButtonSnapshot, InputSnapshot, KeyboardState
from .layout import CalibratedLayout
from .render import DisplayHints, RenderFrame, TargetView

if TYPE_CHECKING:
    from gpio_system.inventory import HardwareInventory
    from gpio_system.process_reaper import ProcessReaper
    from game_system.config import GameConfig
    from game_system.keyboard_reader import IKeyboardReader
    from game_system.render import IRenderer
    from utils import ClassLogger


class GameManager:
    """
    Main game manager that orchestrates the entire installation.

    Responsibilities:
    - Hold exactly one mode and sequence exit/enter on transitions
    - Build one InputSnapshot per tick and feed it to the mode
    - Hand a RenderFrame to the renderer
    - Maintain consistent frame timing
    - Ordered shutdown of the hardware
    """

    def __init__(self,
                 config: 'GameConfig',
                 inventory: 'HardwareInventory',
                 logger: 'ClassLogger',
                 keyboard_reader: Optional['IKeyboardReader'] = None,
                 renderer: Optional['IRenderer'] = None,
                 layout: Optional[CalibratedLayout] = None,
                 diagnostics: Optional[DiagnosticSink] = None,
                 reaper: Optional['ProcessReaper'] = None,
                 rng: Optional[random.Random] = None,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Initialize the game manager.

        Args:
            config: Validated game configuration
            inventory: Device graph built from the pin table
            logger: Logger for debugging and monitoring
            keyboard_reader: Source of keyboard state (None reads no keys)
            renderer: Consumer of render frames (None skips rendering)
            layout: Calibrated layout store (created from the canvas size if None)
            diagnostics: Measurement record sink (created if None)
            reaper: Orphaned holder process fallback used on shutdown
            rng: Random source for target picks and waits
            clock: Monotonic clock in seconds
            sleep: Sleep function used by the loop and blink sequences
        """
        self.config = config
        self.inventory = inventory
        self.logger = logger
        self.keyboard_reader = keyboard_reader
        self.renderer = renderer
        self.layout = layout or CalibratedLayout(config.calibration.canvas_width, config.calibration.canvas_height)
        self.diagnostics = diagnostics or DiagnosticSink(logger.create_class_logger("DiagnosticSink"))
        self.reaper = reaper
        self.rng = rng or random.Random()
        self.clock = clock
        self.sleep = sleep
        self.target_frame_duration = config.frame_duration_ms / 1000.0

        self.current_state: Optional[GameState] = None
        self.running = True
        self.exit_code: Optional[int] = None
        self._shutdown_done = False
        self._last_tick: Optional[float] = None

        # Memory monitoring using OnceInMs
        self._memory_monitor = OnceInMs(60000)  # Log every 60 seconds
        self._process = psutil.Process()

        self.logger.info(
            f"GameManager initialized: {config.frame_duration_ms}ms frame duration, "
            f"{len(inventory.targets)} targets, keyboard {'on' if keyboard_reader else 'off'}"
        )

    def start(self, initial_state: Optional[GameState] = None) -> None:
        """Install the first mode (hardware self-test unless given)"""
        if initial_state is None:
            from game_system.states import BootMode
            initial_state = BootMode(self)
        self.set_mode(initial_state)

    def run_game_loop(self) -> None:
        """
        Run the game loop with automatic frame duration limiting.

        Returns once shutdown() ran or stop was requested.
        """
        self.logger.info(f"Starting game loop with {int(self.target_frame_duration * 1000)}ms frame duration")

        try:
            while self.running:
                frame_start = self.clock()

                self.tick()

                # Frame duration limiting
                frame_duration = self.clock() - frame_start
                sleep_time = self.target_frame_duration - frame_duration

                if sleep_time > 0 and self.running:
                    self.sleep(sleep_time)

        except KeyboardInterrupt:
            self.logger.info("Game stopped by user (Ctrl+C)")
            self.logger.flush()
        except Exception as e:
            self.logger.error(f"Game loop error: {e}", exception=e)
            raise
        finally:
            if not self._shutdown_done:
                self.shutdown()

    def tick(self, now: Optional[float] = None) -> None:
        """One cooperative tick: poll + update, then render"""
        self.update(now)
        self.render()

    def update(self, now: Optional[float] = None) -> None:
        """
        Poll every device once, build the InputSnapshot and let the mode
        handle it. A returned mode is installed before the next tick.
        """
        if self.current_state is None:
            return

        now = self.clock() if now is None else now
        dt = 0.0 if self._last_tick is None else max(0.0, now - self._last_tick)
        self._last_tick = now

        if self._memory_monitor.should_execute(now):
            self._log_memory_usage()

        self.inventory.poll(now)
        inputs = InputSnapshot(now=now, buttons=self._button_snapshots(), keyboard=self._read_keys(), dt=dt)

        if inputs.just_pressed_ids:
            self.logger.debug(f"Pressed: {inputs.just_pressed_ids}")

        new_state = self.current_state.update(inputs)
        if new_state is not None and self.running:
            self.set_mode(new_state)

    def render(self) -> Optional[RenderFrame]:
        """Hand the current frame to the renderer (no-op without a mode or renderer)"""
        if self.current_state is None or self.renderer is None:
            return None
        frame = self.build_frame()
        self.renderer.draw(frame)
        return frame

    def build_frame(self) -> RenderFrame:
        state = self.current_state
        views = [
            TargetView(
                index=target.index,
                id=target.id,
                group=target.group,
                on=target.led.is_on,
                transform=self.layout.target(target.index),
            )
            for target in self.inventory.targets
        ]
        return RenderFrame(
            mode_name=state.name if state else "",
            lives=state.lives if state else 0,
            center=self.layout.center,
            targets=views,
            hints=state.display_hints() if state else DisplayHints(),
        )

    def set_mode(self, new_state: Optional[GameState]) -> None:
        """
        Handle transition to a new mode.

        Exit of the old mode completes before the new one is entered.

        Args:
            new_state: The mode to install (None leaves no mode active)
        """
        old_state = self.current_state
        if old_state is not None:
            old_state.on_exit()

        old_state_name = old_state.name if old_state else "None"
        new_state_name = new_state.name if new_state else "None"
        self.logger.info(f"Mode transition: {old_state_name} -> {new_state_name}")

        self.current_state = new_state
        if new_state is not None:
            new_state.on_enter()

    def request_stop(self) -> None:
        """Ask the loop to stop at the end of the current tick"""
        self.running = False

    def shutdown(self) -> None:
        """
        Ordered teardown.

        1. Leave the active mode
        2. Export diagnostic records (errors logged)
        3. Blink feedback
        4. Release every device (failures isolated)
        5. Stop orphaned gpioset holders
        6. Stop the loop with exit code 0
        """
        if self._shutdown_done:
            return
        self._shutdown_done = True
        self.logger.info("Shutting down")

        if self.current_state is not None:
            self.set_mode(None)

        try:
            self.diagnostics.export_csv(self.config.export_path)
        except Exception as e:
            self.logger.error(f"Diagnostic export to {self.config.export_path} failed: {e}", exception=e)

        idle = self.config.idle
        try:
            AnimationHelpers.blink(self.inventory.all_leds, idle.shutdown_blinks,
                                   idle.blink_on_ms, idle.blink_off_ms, sleep=self.sleep)
        except Exception as e:
            self.logger.error(f"Shutdown blink failed: {e}", exception=e)

        failures = self.inventory.shutdown()
        if failures:
            self.logger.warning(f"{failures} device(s) failed to shut down")

        if self.reaper is not None:
            self.reaper.reap()

        if self.keyboard_reader is not None:
            self.keyboard_reader.cleanup()

        self.running = False
        self.exit_code = 0
        self.logger.info("Game stopped")
        self.logger.flush()

    def get_current_state_name(self) -> str:
        """Get the name of the current mode."""
        return self.current_state.name if self.current_state else "None"

    def _button_snapshots(self):
        return {
            button.id: ButtonSnapshot(button.is_pressed, button.just_pressed, button.just_released)
            for button in self.inventory.all_buttons
        }

    def _read_keys(self) -> KeyboardState:
        if self.keyboard_reader is None:
            return KeyboardState()
        keys = self.keyboard_reader.read_keys()
        if self.keyboard_reader.quit_requested and self.running:
            self.logger.info("Window closed, stopping")
            self.request_stop()
        return keys

    def _log_memory_usage(self) -> None:
        """Log current memory and CPU usage (process and system)"""
        try:
            mem_info = self._process.memory_info()
            process_mb = mem_info.rss / 1024 / 1024

            process_cpu_percent = self._process.cpu_percent(interval=None)

            sys_mem = psutil.virtual_memory()
            sys_total_mb = sys_mem.total / 1024 / 1024
            sys_used_mb = sys_mem.used / 1024 / 1024
            sys_available_mb = sys_mem.available / 1024 / 1024

            sys_cpu_percent = psutil.cpu_percent(interval=None)

            self.logger.info(
                f"Memory - Process: {process_mb:.1f}MB | "
                f"System: {sys_used_mb:.0f}/{sys_total_mb:.0f}MB ({sys_mem.percent:.1f}%, "
                f"{sys_available_mb:.0f}MB free) | "
                f"CPU - Process: {process_cpu_percent:.1f}% | System: {sys_cpu_percent:.1f}%"
            )
        except psutil.Error as e:
            self.logger.warning(f"Failed to log system usage: {e}")
