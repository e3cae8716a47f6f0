"""
Device graph built from the declarative pin table
"""

from typing import Dict, Iterable, List, Optional

from utils.gpio_utils import describe_pin

from .devices import Button, Led
from .pin_assignment import Bias, PinAssignment, PinGroup, PinKind, PinRole
from .pin_registry import PinRegistry
from .target import Target

# Life indicator ids in firing order: the first one goes dark first
LIFE_FIRING_ORDER = ("life3", "life2", "life1")
MAX_LIVES = 3


class HardwareInventory:
    """
    Owns every Led, Button and Target of the installation.

    Built once at startup; membership never changes afterwards. Lookups
    return the owned devices without transferring ownership.

    Build steps:
        1. One driver per row through the PinRegistry (conflicts are fatal)
        2. Route by role: LIFE -> life list, START -> start button,
           TARGET -> target led/button maps
        3. Join target LEDs with optional buttons of the same id
        4. Reorder life indicators into firing order when life1..3 exist
    """

    def __init__(self,
                 pin_table: Iterable[PinAssignment],
                 registry: PinRegistry,
                 logger,
                 debounce_ms: float = 35,
                 button_active_low: bool = True,
                 button_bias: Bias = Bias.PULL_UP,
                 led_start_on: bool = False,
                 led_inverted: bool = False):
        self._registry = registry
        self._logger = logger

        self._leds: Dict[str, Led] = {}
        self._buttons: Dict[str, Button] = {}
        self._life_leds: List[Led] = []
        self._start_button: Optional[Button] = None
        self._target_leds: Dict[str, Led] = {}
        self._target_buttons: Dict[str, Button] = {}
        self._target_groups: Dict[str, Optional[PinGroup]] = {}
        self._targets: List[Target] = []

        for row in pin_table:
            if row.kind == PinKind.LED:
                driver = registry.create_output_driver(row.pin, row.id, start_on=led_start_on, inverted=led_inverted)
                device = Led(row.id, driver)
                self._leds[row.id] = device
            else:
                driver = registry.create_input_driver(row.pin, row.id, active_low=button_active_low, bias=button_bias)
                device = Button(row.id, driver, debounce_ms=debounce_ms)
                self._buttons[row.id] = device

            self._logger.info(f"{row.kind.value:<6} '{row.id}' on {describe_pin(row.pin)} ({row.role.value})")
            self._route(row, device)

        self._assemble_targets()
        self._order_life_leds()

        self._logger.info(
            f"Inventory ready: {len(self._life_leds)} life indicators, "
            f"start button {'present' if self._start_button else 'missing'}, "
            f"{len(self._targets)} targets, {len(registry.claimed_pins)} pins claimed"
        )

    def _route(self, row: PinAssignment, device) -> None:
        if row.role == PinRole.LIFE and row.kind == PinKind.LED:
            self._life_leds.append(device)
        elif row.role == PinRole.START and row.kind == PinKind.BUTTON:
            if self._start_button is not None:
                self._logger.warning(f"Second START button '{row.id}' ignored, keeping '{self._start_button.id}'")
            else:
                self._start_button = device
        elif row.role == PinRole.TARGET:
            if row.kind == PinKind.LED:
                self._target_leds[row.id] = device
            else:
                self._target_buttons[row.id] = device
            if row.id not in self._target_groups or self._target_groups[row.id] is None:
                self._target_groups[row.id] = row.group
        else:
            self._logger.warning(f"Row {row} has no role routing, device kept by id only")

    def _assemble_targets(self) -> None:
        for target_id, group in self._target_groups.items():
            led = self._target_leds.get(target_id)
            if led is None:
                self._logger.warning(f"Target '{target_id}' has no LED row, skipped")
                continue
            button = self._target_buttons.get(target_id)
            self._targets.append(Target(target_id, len(self._targets), group, led, button))

    def _order_life_leds(self) -> None:
        by_id = {led.id: led for led in self._life_leds}
        if all(life_id in by_id for life_id in LIFE_FIRING_ORDER):
            ordered = [by_id[life_id] for life_id in LIFE_FIRING_ORDER]
            ordered += [led for led in self._life_leds if led.id not in LIFE_FIRING_ORDER]
            self._life_leds = ordered

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @property
    def life_leds(self) -> List[Led]:
        return list(self._life_leds)

    @property
    def start_button(self) -> Optional[Button]:
        return self._start_button

    @property
    def targets(self) -> List[Target]:
        return list(self._targets)

    @property
    def playable_targets(self) -> List[Target]:
        return [target for target in self._targets if target.is_playable]

    @property
    def target_leds(self) -> List[Led]:
        return [target.led for target in self._targets]

    @property
    def target_buttons(self) -> List[Button]:
        return [target.button for target in self._targets if target.button is not None]

    @property
    def all_leds(self) -> List[Led]:
        return list(self._leds.values())

    @property
    def all_buttons(self) -> List[Button]:
        return list(self._buttons.values())

    @property
    def claimed_pins(self) -> List[int]:
        return self._registry.claimed_pins

    def led(self, led_id: str) -> Optional[Led]:
        return self._leds.get(led_id)

    def button(self, button_id: str) -> Optional[Button]:
        return self._buttons.get(button_id)

    def target(self, target_id: str) -> Optional[Target]:
        for target in self._targets:
            if target.id == target_id:
                return target
        return None

    # ------------------------------------------------------------------
    # Aggregate operations
    # ------------------------------------------------------------------

    def poll(self, now: float) -> None:
        """Sample, debounce and edge-track every button once"""
        for button in self._buttons.values():
            button.poll(now)

    def show_lives(self, lives: int) -> None:
        lives = max(0, min(MAX_LIVES, lives))
        for position, led in enumerate(self._life_leds):
            led.set(lives >= MAX_LIVES - position)

    def all_off(self) -> None:
        for led in self._leds.values():
            led.off()

    def targets_off(self) -> None:
        for target in self._targets:
            target.led.off()

    def shutdown(self) -> int:
        """
        Release every device.

        Each failure is logged and the sweep continues.

        Returns:
            Number of devices that failed to shut down
        """
        failures = 0
        for device in list(self._leds.values()) + list(self._buttons.values()):
            try:
                device.shutdown()
            except Exception as e:
                failures += 1
                self._logger.error(f"Shutdown of '{device.id}' failed: {e}", exception=e)
        self._logger.info(f"Devices released ({failures} failures)")
        return failures
