from __future__ import annotations

from typing import Protocol, Sequence

from .model import ScheduleEntry


class ScheduleRepository(Protocol):
    def upsert(self, entry: ScheduleEntry) -> ScheduleEntry:
        """Insert, or replace the entry already held for (student_id, period)."""

        raise NotImplementedError

    def list_for_student(self, student_id: str) -> Sequence[ScheduleEntry]:
        raise NotImplementedError
