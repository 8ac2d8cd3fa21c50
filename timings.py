"""Per-session timing log.

Appends measurements to timings_sec_lvl_<level>.csv, one row per
measurement: kind, value, unit.
"""
from pathlib import Path
from typing import Union
import csv
import logging
import time

log = logging.getLogger(__name__)


def log_path(directory: Union[str, Path], level: int) -> Path:
    return Path(directory) / f"timings_sec_lvl_{level}.csv"


class TimingLog:
    """Collects measurements for one session and appends them on flush()."""

    def __init__(self, directory: Union[str, Path], level: int):
        self.path = log_path(directory, level)
        self.level = level
        self.rows: list[tuple[str, int, str]] = []

    def record(self, kind: str, value: int, unit: str = 'ns') -> None:
        self.rows.append((kind, value, unit))

    def timed(self, kind: str, fn, *args):
        """Call fn(*args), record its duration in nanoseconds, return its result."""
        start = time.perf_counter_ns()
        result = fn(*args)
        self.record(kind, time.perf_counter_ns() - start)
        return result

    def flush(self) -> None:
        if not self.rows:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'a', newline='') as f:
            writer = csv.writer(f)
            for row in self.rows:
                writer.writerow(row)
        log.info(f"timings.flush: appended {len(self.rows)} rows to {self.path}")
        self.rows = []
