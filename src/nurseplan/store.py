from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from nurseplan.result_types import SchedulingAlgorithm, ScheduleResult


@dataclass(frozen=True)
class StoredSchedule:
    id: int
    created: datetime
    result: ScheduleResult

    @property
    def algorithm(self) -> SchedulingAlgorithm:
        return self.result.algorithm


class ScheduleStore:
    """
    In-memory stand-in for the schedule repository: stores results and looks them
    up by id, by algorithm, or by recency.
    """

    def __init__(self) -> None:
        self._items: list[StoredSchedule] = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._items)

    def save(self, result: ScheduleResult, created: Optional[datetime] = None) -> StoredSchedule:
        with self._lock:
            item = StoredSchedule(
                id=next(self._ids), created=created or datetime.now(), result=result
            )
            self._items.append(item)
        return item

    def get(self, schedule_id: int) -> StoredSchedule:
        for item in self._items:
            if item.id == schedule_id:
                return item
        raise KeyError(f"Schedule not found: {schedule_id}")

    def list_all(self) -> list[StoredSchedule]:
        """All schedules, newest first."""
        if not self._items:
            raise LookupError("No schedules found")
        return sorted(self._items, key=lambda s: (s.created, s.id), reverse=True)

    def latest(self, algorithm: SchedulingAlgorithm) -> Optional[StoredSchedule]:
        matching = [s for s in self._items if s.algorithm == algorithm]
        if not matching:
            return None
        return max(matching, key=lambda s: (s.created, s.id))

    def most_recent(self) -> list[StoredSchedule]:
        """Latest heuristic schedule then latest ILP schedule, whichever exist."""
        out = [
            s
            for s in (self.latest(alg) for alg in SchedulingAlgorithm)
            if s is not None
        ]
        if not out:
            raise LookupError("No schedules found")
        return out
