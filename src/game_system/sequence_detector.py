"""
Button sequence detection for timed press gestures
"""

from typing import List


class SequenceDetector:
    """
    Detects specific button press sequences with timing constraints.

    Used for gestures like "press start twice within 500 ms". A gap longer
    than max_delay_ms between two events resets the sequence.
    """

    def __init__(self, target_sequence: List[str], max_delay_ms: int = 500):
        """
        Initialize sequence detector.

        Args:
            target_sequence: Button ids that form the target sequence
            max_delay_ms: Maximum time between button presses before reset
        """
        self.target_sequence: List[str] = list(target_sequence)
        self.max_delay_ms: int = max_delay_ms
        self.current_sequence: List[str] = []
        self.last_event_time: float = 0.0

    def add_event(self, button_id: str, now: float) -> bool:
        """
        Add a button press event to the sequence.

        Args:
            button_id: Id of the button that was pressed
            now: Event time in seconds

        Returns:
            True if the target sequence was completed, False otherwise
        """
        if self.current_sequence and (now - self.last_event_time) * 1000 > self.max_delay_ms:
            self.current_sequence = []

        self.current_sequence.append(button_id)
        self.last_event_time = now

        if self._matches_target():
            self.reset()
            return True

        # Keep only the relevant suffix to avoid unbounded growth
        if len(self.current_sequence) >= len(self.target_sequence):
            keep_count = len(self.target_sequence) - 1
            self.current_sequence = self.current_sequence[-keep_count:] if keep_count > 0 else []

        return False

    def reset(self) -> None:
        """Reset the sequence detector to initial state"""
        self.current_sequence = []
        self.last_event_time = 0.0

    def _matches_target(self) -> bool:
        return self.current_sequence[-len(self.target_sequence):] == self.target_sequence

