"""
Diagnostic measurement records and their CSV export
"""

import csv
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

TRIAL_SLOTS = 10

MOMENT_BEFORE = "before"
MOMENT_AFTER = "after"
CONDITION_GAME = "game"
CONDITION_REAL = "real"

CSV_HEADER = (
    ["timestamp", "subject_id", "measurement_moment", "test_condition"]
    + [f"reaction_time_{i}" for i in range(1, TRIAL_SLOTS + 1)]
)


@dataclass
class DiagnosticRecord:
    """One measurement session: metadata plus ten reaction times in ms"""
    subject_id: int
    measurement_moment: str = MOMENT_BEFORE
    test_condition: str = CONDITION_REAL
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat(timespec="seconds"))
    reaction_times: List[Optional[float]] = field(default_factory=lambda: [None] * TRIAL_SLOTS)

    def __post_init__(self):
        if self.measurement_moment not in (MOMENT_BEFORE, MOMENT_AFTER):
            raise ValueError(f"Unknown measurement moment: {self.measurement_moment}")
        if self.test_condition not in (CONDITION_GAME, CONDITION_REAL):
            raise ValueError(f"Unknown test condition: {self.test_condition}")
        if len(self.reaction_times) != TRIAL_SLOTS:
            raise ValueError(f"Expected {TRIAL_SLOTS} reaction time slots, got {len(self.reaction_times)}")

    def set_trial(self, trial: int, elapsed_ms: float) -> None:
        """Store the reaction time of a 0-based trial"""
        if not (0 <= trial < TRIAL_SLOTS):
            raise IndexError(f"Trial {trial} outside 0..{TRIAL_SLOTS - 1}")
        self.reaction_times[trial] = elapsed_ms

    @property
    def completed_trials(self) -> int:
        return sum(1 for value in self.reaction_times if value is not None)

    def to_row(self) -> List[str]:
        times = ["" if value is None else f"{value:.1f}" for value in self.reaction_times]
        return [self.timestamp, str(self.subject_id), self.measurement_moment, self.test_condition] + times


class DiagnosticSink:
    """
    Append-only store of measurement records.

    A record is opened when a session starts and only becomes part of the
    sink once committed; discard() drops the open record.
    """

    def __init__(self, logger):
        self.logger = logger
        self._records: List[DiagnosticRecord] = []
        self._open: Optional[DiagnosticRecord] = None

    @property
    def records(self) -> List[DiagnosticRecord]:
        return list(self._records)

    @property
    def open_record(self) -> Optional[DiagnosticRecord]:
        return self._open

    def open(self, subject_id: int, measurement_moment: str, test_condition: str) -> DiagnosticRecord:
        if self._open is not None:
            self.logger.warning(f"Discarding unfinished record for subject {self._open.subject_id}")
        self._open = DiagnosticRecord(subject_id, measurement_moment, test_condition)
        self.logger.info(f"Record opened: subject={subject_id}, moment={measurement_moment}, condition={test_condition}")
        return self._open

    def commit(self) -> Optional[DiagnosticRecord]:
        record = self._open
        if record is None:
            self.logger.warning("commit() without an open record")
            return None
        self._records.append(record)
        self._open = None
        self.logger.info(f"Record committed: subject={record.subject_id}, times={record.reaction_times}")
        return record

    def discard(self) -> None:
        if self._open is not None:
            self.logger.info(f"Record discarded: subject={self._open.subject_id}")
        self._open = None

    def export_csv(self, path: str) -> int:
        """
        Append committed records to a CSV file.

        The header is written only when the file does not exist yet.

        Returns:
            Number of rows written
        """
        if not self._records:
            self.logger.debug("No diagnostic records to export")
            return 0

        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        write_header = not os.path.exists(path)

        with open(path, "a", newline="") as handle:
            writer = csv.writer(handle)
            if write_header:
                writer.writerow(CSV_HEADER)
            for record in self._records:
                writer.writerow(record.to_row())

        self.logger.info(f"Exported {len(self._records)} record(s) to {path}")
        return len(self._records)
