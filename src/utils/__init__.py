"""
Utilities package - Common utilities for the reaction floor system
"""

from .hybrid_logger import HybridLogger, ClassLogger, ColoredFormatter
from .gpio_utils import gpio_to_physical, describe_pin, GPIO_TO_PHYSICAL, MIN_BCM_PIN, MAX_BCM_PIN
from .once_in_ms import OnceInMs

__all__ = [
    'HybridLogger',
    'ClassLogger',
    'ColoredFormatter',
    'gpio_to_physical',
    'describe_pin',
    'GPIO_TO_PHYSICAL',
    'MIN_BCM_PIN',
    'MAX_BCM_PIN',
    'OnceInMs'
]
