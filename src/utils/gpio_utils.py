"""
BCM <-> physical header pin mapping for the 40-pin Raspberry Pi header.

Used to make pin-claim log lines readable when wiring the installation.
"""

from typing import Optional

# BCM GPIO number -> physical header pin
GPIO_TO_PHYSICAL = {
    0: 27,   1: 28,   2: 3,    3: 5,
    4: 7,    5: 29,   6: 31,   7: 26,
    8: 24,   9: 21,   10: 19,  11: 23,
    12: 32,  13: 33,  14: 8,   15: 10,
    16: 36,  17: 11,  18: 12,  19: 35,
    20: 38,  21: 40,  22: 15,  23: 16,
    24: 18,  25: 22,  26: 37,  27: 13
}

MIN_BCM_PIN = min(GPIO_TO_PHYSICAL)
MAX_BCM_PIN = max(GPIO_TO_PHYSICAL)


def gpio_to_physical(gpio_num: int) -> Optional[int]:
    """Convert BCM GPIO number to physical pin number (None if not on the header)"""
    return GPIO_TO_PHYSICAL.get(gpio_num)


def describe_pin(gpio_num: int) -> str:
    """Human readable label, e.g. 'GPIO26 (pin 37)'"""
    physical = gpio_to_physical(gpio_num)
    if physical is None:
        return f"GPIO{gpio_num} (not on header)"
    return f"GPIO{gpio_num} (pin {physical})"
