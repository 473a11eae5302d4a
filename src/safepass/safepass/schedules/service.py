from __future__ import annotations

import logging
from typing import Sequence

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError, NotFoundError
from ..state.app_state import AppState
from ..students.model import ImportResult
from ..users.service import SessionUser
from .model import ScheduleEntry
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository, state: AppState):
        self._schedules = schedules
        self._state = state

    def list_for_student(self, student_id: str) -> Sequence[ScheduleEntry]:
        self._state.ensure_loaded()
        if not self._state.find_student(student_id):
            raise NotFoundError("Student not found")
        return self._schedules.list_for_student(student_id)

    def import_csv(self, *, current: SessionUser, text: str) -> ImportResult:
        """Rows: student id, period, subject, room, teacher; header line first."""

        if current.role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

        self._state.ensure_loaded()
        lines = [line for line in (text or "").splitlines() if line.strip()]
        processed = 0
        errors: list[str] = []
        for number, line in enumerate(lines[1:], start=2):
            values = [v.strip() for v in line.split(",")]
            if len(values) < 4:
                continue
            student_id = values[0]
            if not self._state.find_student(student_id):
                errors.append(f"Row {number}: Student {student_id} not found")
                continue
            entry = ScheduleEntry(
                student_id=student_id,
                period=values[1],
                subject=values[2],
                room=values[3],
                teacher=values[4] if len(values) > 4 and values[4] else None,
            )
            try:
                self._schedules.upsert(entry)
                processed += 1
            except DomainError as e:
                logger.warning("Schedule import row %d failed: %s", number, e)
                errors.append(f"Row {number}: {e}")
        return ImportResult(processed=processed, errors=errors)
