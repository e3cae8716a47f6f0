"""
Calibrated projection layout: one transform per target plus the center icon
"""

from dataclasses import dataclass, replace
from typing import Dict


@dataclass(frozen=True)
class Transform:
    """Placement of one projected item on the canvas"""
    x: float
    y: float
    rotation: float = 0.0   # Degrees, [0, 360)
    scale: float = 1.0

    def moved(self, dx: float, dy: float, width: float, height: float) -> 'Transform':
        """New transform shifted by (dx, dy) and clamped to the canvas"""
        return replace(
            self,
            x=min(max(self.x + dx, 0.0), float(width)),
            y=min(max(self.y + dy, 0.0), float(height)),
        )

    def rotated(self, degrees: float) -> 'Transform':
        return replace(self, rotation=(self.rotation + degrees) % 360.0)

    def scaled(self, delta: float, minimum: float, maximum: float) -> 'Transform':
        return replace(self, scale=min(max(self.scale + delta, minimum), maximum))


class CalibratedLayout:
    """
    Per-target placement store.

    Keyed by target index (declaration order) plus a single center entry.
    Entries never written read as the default: canvas center, rotation 0,
    scale 1.0. Written only by the calibration mode, read by rendering.
    """

    def __init__(self, canvas_width: int = 1920, canvas_height: int = 1080):
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height
        self._center = self.default_transform()
        self._targets: Dict[int, Transform] = {}

    def default_transform(self) -> Transform:
        return Transform(self.canvas_width / 2.0, self.canvas_height / 2.0)

    @property
    def center(self) -> Transform:
        return self._center

    def set_center(self, transform: Transform) -> None:
        self._center = transform

    def target(self, index: int) -> Transform:
        return self._targets.get(index, self.default_transform())

    def set_target(self, index: int, transform: Transform) -> None:
        if index < 0:
            raise ValueError(f"Target index must not be negative, got {index}")
        self._targets[index] = transform

    def calibrated_indices(self):
        return sorted(self._targets)
