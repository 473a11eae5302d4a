from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import parse_enum, require_non_empty
from ..core.constants import MANUAL_LOCATION, MOBILE_LOCATION
from ..core.enums import ScanAction
from ..core.exceptions import NotFoundError, RemoteServiceError, ValidationError
from ..notifications.client import FunctionsClient
from ..scans.model import ScanEvent
from ..state.app_state import AppState
from ..students.model import Student
from ..users.service import SessionUser
from .allergy_alerts import AllergyAlert, AllergyAlertBoard

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanResult:
    event: ScanEvent
    student: Student
    allergy_alert: Optional[AllergyAlert] = None
    nurse_notified: Optional[bool] = None

    @property
    def message(self) -> str:
        return f"{self.student.name} scanned {self.event.action.value} at {self.event.location}"

    def to_public(self) -> dict:
        return {
            "event": self.event.to_public(),
            "student": {"id": self.student.student_id, "name": self.student.name, "grade": self.student.grade},
            "allergy_alert": self.allergy_alert.to_public() if self.allergy_alert else None,
            "nurse_notified": self.nurse_notified,
            "message": self.message,
        }


class ScanService:
    """Use case: record a check-in/check-out scan for a student."""

    def __init__(
        self,
        state: AppState,
        functions: FunctionsClient,
        alert_board: AllergyAlertBoard,
        *,
        locations: Iterable[str],
        clock: Callable[[], datetime] = now_local,
    ):
        self._state = state
        self._functions = functions
        self._board = alert_board
        self._locations = tuple(locations)
        self._clock = clock

    @property
    def locations(self) -> tuple[str, ...]:
        return self._locations

    def submit_scan(self, identifier: str, location: str, action, actor: SessionUser, *, now: Optional[datetime] = None) -> ScanResult:
        if not (identifier or "").strip() or not (location or "").strip():
            raise ValidationError("Please enter student ID and location")
        student_id = identifier.strip()
        location = location.strip()
        if location not in self._locations:
            raise ValidationError(f"Unknown scan location: {location}")
        scan_action = parse_enum(ScanAction, action, "Action")

        return self._record(student_id, location, scan_action, actor, now=now)

    def quick_scan(self, identifier: str, action, actor: SessionUser, *, now: Optional[datetime] = None) -> ScanResult:
        """Mobile scan: the location is the actor's bus, or the device itself."""

        student_id = require_non_empty(identifier, "Student ID").upper()
        scan_action = parse_enum(ScanAction, action, "Action")
        location = actor.bus_id or MOBILE_LOCATION
        return self._record(student_id, location, scan_action, actor, now=now)

    def record_manual(self, student_id: str, action, actor: SessionUser, *, now: Optional[datetime] = None) -> ScanResult:
        scan_action = parse_enum(ScanAction, action, "Action")
        return self._record(require_non_empty(student_id, "Student ID"), MANUAL_LOCATION, scan_action, actor, now=now)

    def _record(self, student_id: str, location: str, action: ScanAction, actor: SessionUser, *, now: Optional[datetime]) -> ScanResult:
        self._state.ensure_loaded()
        student = self._state.find_student(student_id)
        if not student:
            raise NotFoundError("Student not found")

        now = now or self._clock()
        scanned_by = actor.name or "Unknown"
        event = self._state.add_scan_log(
            ScanEvent(student_id=student.student_id, location=location, action=action, timestamp=now, scanned_by=scanned_by)
        )
        logger.info("Scan recorded: %s %s at %s by %s", student.student_id, action.value, location, scanned_by)

        if not student.has_allergies:
            return ScanResult(event=event, student=student)

        alert = self._board.raise_alert(student, location=location, scanned_by=scanned_by, now=now)
        return ScanResult(
            event=event,
            student=student,
            allergy_alert=alert,
            nurse_notified=self._notify_nurse(student, location=location, scanned_by=scanned_by, now=now),
        )

    def _notify_nurse(self, student: Student, *, location: str, scanned_by: str, now: datetime) -> bool:
        try:
            self._functions.notify_allergy(
                student_name=student.name,
                allergies=student.allergies,
                location=location,
                scanned_by=scanned_by,
                timestamp=now,
            )
            return True
        except RemoteServiceError as e:
            # the scan itself is already saved; the caller reports the failed notification
            logger.warning("Failed to notify nurse about %s: %s", student.student_id, e)
            return False
