"""
Rising/falling edge detection over a stable boolean
"""


class EdgeTracker:
    """
    Reports transitions of a stable signal, each exactly one update wide.

    The first update only records the level; it never reports an edge.
    """

    def __init__(self):
        self.previous = False
        self.has_previous = False
        self.just_activated = False
        self.just_deactivated = False

    def update(self, current: bool) -> None:
        if not self.has_previous:
            self.previous = current
            self.has_previous = True
            self.just_activated = False
            self.just_deactivated = False
            return

        self.just_activated = (not self.previous) and current
        self.just_deactivated = self.previous and (not current)
        self.previous = current
