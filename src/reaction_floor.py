#!/usr/bin/env python3
"""
Reaction Floor Interactive Training System

Main application for the floor-projection reaction trainer. Builds the
device graph from the pin table, then runs the mode state machine
(self-test, idle gestures, reaction game, measurement, calibration) until
the start button is held for a long press.
"""

import argparse
import logging
import signal
import sys
from typing import List, Optional

from gpio_system import (
    CommandExecutor,
    GpioError,
    HardwareInventory,
    PinAssignment,
    PinConflictError,
    PinGroup,
    PinKind,
    PinRegistry,
    PinRole,
    ProcessReaper,
)
from game_system import GameConfig, GameManager, NullKeyboardReader, PygameKeyboardReader
from utils import HybridLogger

# Global references for signal handlers
_global_logger = None
_global_game_manager: Optional[GameManager] = None


def handle_signal(sig, frame=None):
    """Flush logs and let the game loop shut the hardware down"""
    if _global_logger:
        _global_logger.critical(f"Signal received: {signal.Signals(sig).name} - stopping")
        _global_logger.flush()

    if _global_game_manager is not None and _global_game_manager.running:
        _global_game_manager.request_stop()
    else:
        sys.exit(0 if sig == signal.SIGINT else 1)


def install_signal_handlers() -> None:
    signal.signal(signal.SIGTERM, handle_signal)  # Termination signal
    signal.signal(signal.SIGHUP, handle_signal)   # Hangup signal
    signal.signal(signal.SIGINT, handle_signal)   # Ctrl+C


def create_pin_table() -> List[PinAssignment]:
    """Wiring of the installation floor (BCM numbering)"""
    return [
        PinAssignment("life3", PinKind.LED, PinRole.LIFE, 5),
        PinAssignment("life2", PinKind.LED, PinRole.LIFE, 6),
        PinAssignment("life1", PinKind.LED, PinRole.LIFE, 13),
        PinAssignment("start", PinKind.BUTTON, PinRole.START, 12),
        PinAssignment("t1", PinKind.LED, PinRole.TARGET, 26, PinGroup.LEFT),
        PinAssignment("t1", PinKind.BUTTON, PinRole.TARGET, 16, PinGroup.LEFT),
        PinAssignment("t2", PinKind.LED, PinRole.TARGET, 22, PinGroup.RIGHT),
        PinAssignment("t2", PinKind.BUTTON, PinRole.TARGET, 23, PinGroup.RIGHT),
        PinAssignment("t3", PinKind.LED, PinRole.TARGET, 17, PinGroup.LEFT),
        PinAssignment("t3", PinKind.BUTTON, PinRole.TARGET, 27, PinGroup.LEFT),
        PinAssignment("t4", PinKind.LED, PinRole.TARGET, 24, PinGroup.RIGHT),
        PinAssignment("t4", PinKind.BUTTON, PinRole.TARGET, 25, PinGroup.RIGHT),
    ]


def create_reaction_floor_config(export_path: str = "measurements.csv") -> GameConfig:
    """Create default configuration for the installation"""
    return GameConfig(
        pin_table=create_pin_table(),
        frame_duration_ms=20,  # 50 FPS
        export_path=export_path,
    )


def create_game_system(config: GameConfig, app_logger, use_keyboard: bool = True) -> GameManager:
    """
    Create and configure the complete game system using provided config.

    Args:
        config: GameConfig instance with all system configuration
        app_logger: ClassLogger instance for logging initialization steps
        use_keyboard: Open the pygame keyboard reader

    Returns:
        GameManager: Configured game manager ready to run

    Raises:
        PinConflictError: Two pin table rows share a BCM pin
    """
    config.validate()

    game_manager_logger = app_logger.create_class_logger("GameManager", logging.INFO)
    registry_logger = app_logger.create_class_logger("PinRegistry", logging.INFO)
    inventory_logger = app_logger.create_class_logger("HardwareInventory", logging.INFO)
    reaper_logger = app_logger.create_class_logger("ProcessReaper", logging.INFO)
    keyboard_logger = app_logger.create_class_logger("KeyboardReader", logging.INFO)

    executor = CommandExecutor(
        run_timeout_s=config.gpio.run_timeout_s,
        terminate_timeout_s=config.gpio.terminate_timeout_s,
    )
    registry = PinRegistry(
        executor,
        registry_logger,
        chip=config.gpio.chip,
        get_command=config.gpio.get_command,
        set_command=config.gpio.set_command,
    )
    reaper = ProcessReaper(reaper_logger, command=config.gpio.set_command,
                           timeout_s=config.gpio.terminate_timeout_s)

    try:
        inventory = HardwareInventory(
            config.pin_table,
            registry,
            inventory_logger,
            debounce_ms=config.buttons.debounce_ms,
            button_active_low=config.buttons.active_low,
            button_bias=config.buttons.bias,
            led_start_on=config.leds.start_on,
            led_inverted=config.leds.inverted,
        )
    except GpioError:
        # Lines driven before the failure must not outlive the process
        reaper.reap()
        raise

    keyboard_reader = NullKeyboardReader()
    if use_keyboard:
        keyboard_reader = PygameKeyboardReader(keyboard_logger)

    game_manager = GameManager(
        config=config,
        inventory=inventory,
        logger=game_manager_logger,
        keyboard_reader=keyboard_reader,
        reaper=reaper,
    )

    app_logger.info("Reaction floor system initialized successfully")
    app_logger.info(
        f"Hardware: {len(inventory.life_leds)} life indicators, {len(inventory.targets)} targets "
        f"({len(inventory.playable_targets)} playable), {len(inventory.claimed_pins)} pins claimed"
    )
    return game_manager


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reaction floor training installation")
    parser.add_argument("--log-dir", default="logs", help="Directory for log files (default: logs)")
    parser.add_argument("--export-path", default="measurements.csv",
                        help="CSV file measurement records are appended to on shutdown")
    parser.add_argument("--no-keyboard", action="store_true",
                        help="Run without the pygame keyboard window (calibration and measurement entry disabled)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function - sets up and runs the reaction floor system.

    Returns:
        Process exit code (0 after a normal shutdown, 1 on fatal errors)
    """
    args = parse_args(argv)

    main_logger = HybridLogger("ReactionFloor", log_dir=args.log_dir)
    app_logger = main_logger.get_class_logger("ReactionFloor")

    global _global_logger, _global_game_manager
    _global_logger = app_logger
    install_signal_handlers()

    app_logger.info("REACTION FLOOR INTERACTIVE SYSTEM")

    config = create_reaction_floor_config(export_path=args.export_path)
    app_logger.info(f"Pin table: {len(config.pin_table)} rows, targets {config.target_ids}")
    app_logger.info(f"Game settings: {config.frame_duration_ms}ms frame duration ({config.target_fps:.1f} FPS)")
    app_logger.info(f"Measurement export: {config.export_path}")

    exit_code = 1
    try:
        game_manager = create_game_system(config, app_logger, use_keyboard=not args.no_keyboard)
        _global_game_manager = game_manager

        app_logger.info("Starting reaction floor system...")
        game_manager.start()
        game_manager.run_game_loop()
        exit_code = game_manager.exit_code if game_manager.exit_code is not None else 0

    except PinConflictError as e:
        app_logger.error(f"Pin table conflict: {e}", exception=e)
    except ValueError as e:
        app_logger.error(f"Invalid configuration: {e}", exception=e)
    except Exception as e:
        app_logger.error(f"Reaction floor system error: {e}", exception=e)
    finally:
        _global_game_manager = None
        app_logger.info(f"Reaction floor system shut down (exit code {exit_code})")
        app_logger.flush()
        main_logger.cleanup()

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
