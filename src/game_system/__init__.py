"""
Game System - Mode state machine for the reaction floor

This module provides the tick-driven mode layer: per-tick input snapshots,
the five operating modes, the calibrated projection layout and the
diagnostic measurement records.
"""

from .base_classes import GameState
from .game_manager import GameManager
from .states import BootMode, IdleMode, PlayingMode, MeasurementMode, CalibrationMode
from .input_state import Key, KeyboardState, ButtonSnapshot, InputSnapshot
from .keyboard_reader import IKeyboardReader, NullKeyboardReader, PygameKeyboardReader
from .layout import Transform, CalibratedLayout
from .diagnostics import DiagnosticRecord, DiagnosticSink
from .render import DisplayHints, TargetView, RenderFrame, IRenderer, Tint
from .sequence_detector import SequenceDetector
from .animation_helpers import AnimationHelpers
from .config import (
    GameConfig,
    GpioCommandConfig,
    ButtonConfig,
    LedConfig,
    BootConfig,
    IdleConfig,
    PlayingConfig,
    MeasurementConfig,
    CalibrationConfig,
)

__all__ = [
    # Base classes
    "GameState",
    "GameManager",
    # Modes
    "BootMode",
    "IdleMode",
    "PlayingMode",
    "MeasurementMode",
    "CalibrationMode",
    # Input
    "Key",
    "KeyboardState",
    "ButtonSnapshot",
    "InputSnapshot",
    "IKeyboardReader",
    "NullKeyboardReader",
    "PygameKeyboardReader",
    # Layout, records and rendering
    "Transform",
    "CalibratedLayout",
    "DiagnosticRecord",
    "DiagnosticSink",
    "DisplayHints",
    "TargetView",
    "RenderFrame",
    "IRenderer",
    "Tint",
    "SequenceDetector",
    "AnimationHelpers",
    # Configuration
    "GameConfig",
    "GpioCommandConfig",
    "ButtonConfig",
    "LedConfig",
    "BootConfig",
    "IdleConfig",
    "PlayingConfig",
    "MeasurementConfig",
    "CalibrationConfig",
]
