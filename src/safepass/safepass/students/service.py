from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from ..common.validators import parse_enum, require_non_empty
from ..core.enums import Role, TransportationStatus
from ..core.exceptions import AuthorizationError, DomainError, NotFoundError
from ..settings.service import SettingsService
from ..state.app_state import AppState
from ..users.service import SessionUser
from .model import ImportResult, Student

logger = logging.getLogger(__name__)

_KNOWN_FIELDS = {
    "name",
    "student_id",
    "grade",
    "student_number",
    "allergies",
    "medical_notes",
    "emergency_contact",
    "emergency_phone",
    "parent_email",
    "parent_phone",
    "transportation_status",
    "bus_route",
    "teacher_name",
    "classroom_number",
}


def split_allergies(raw: Optional[str], sep: str = ",") -> tuple[str, ...]:
    items = (a.strip() for a in (raw or "").split(sep))
    return tuple(a for a in items if a and a.lower() != "none")


def _blank_to_none(value) -> Optional[str]:
    value = (value or "").strip() if isinstance(value, str) else value
    return value or None


class StudentService:
    def __init__(self, state: AppState, settings: Optional[SettingsService] = None):
        self._state = state
        self._settings = settings

    def _require_admin(self, current: SessionUser) -> None:
        if current.role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

    def list_students(self, *, grade: Optional[str] = None) -> Sequence[Student]:
        self._state.ensure_loaded()
        students = self._state.students
        if grade and grade != "all":
            return [s for s in students if s.grade == grade]
        return list(students)

    def get_student(self, student_id: str) -> Student:
        self._state.ensure_loaded()
        student = self._state.find_student(student_id)
        if not student:
            raise NotFoundError("Student not found")
        return student

    def next_student_id(self) -> str:
        taken = {s.student_id for s in self._state.students}
        n = len(taken) + 1
        while f"STU{n:03d}" in taken:
            n += 1
        return f"STU{n:03d}"

    def _custom_fields(self, form: Mapping) -> dict:
        if not self._settings:
            return {}
        extra = [f for f in self._settings.get().student_profile_fields if f not in _KNOWN_FIELDS]
        return {f: str(form[f]).strip() for f in extra if str(form.get(f) or "").strip()}

    def add_student(self, *, current: SessionUser, form: Mapping) -> Student:
        self._require_admin(current)
        name = require_non_empty(form.get("name"), "Name")
        grade = require_non_empty(form.get("grade"), "Grade")
        emergency_contact = require_non_empty(form.get("emergency_contact"), "Emergency contact")
        transport = form.get("transportation_status") or TransportationStatus.WALKER.value

        self._state.ensure_loaded()
        student = Student(
            student_id=self.next_student_id(),
            name=name,
            grade=grade,
            emergency_contact=emergency_contact,
            allergies=split_allergies(form.get("allergies")),
            transportation_status=parse_enum(TransportationStatus, transport, "Transportation status"),
            student_number=_blank_to_none(form.get("student_number")),
            medical_notes=_blank_to_none(form.get("medical_notes")),
            emergency_phone=_blank_to_none(form.get("emergency_phone")),
            parent_email=_blank_to_none(form.get("parent_email")),
            parent_phone=_blank_to_none(form.get("parent_phone")),
            bus_route=_blank_to_none(form.get("bus_route")),
            teacher_name=_blank_to_none(form.get("teacher_name")),
            classroom_number=_blank_to_none(form.get("classroom_number")),
            custom_fields=self._custom_fields(form),
        )
        saved = self._state.add_student(student)
        logger.info("Student added: %s (%s)", saved.student_id, saved.name)
        return saved

    def import_csv(self, *, current: SessionUser, text: str) -> ImportResult:
        """Rows: name, grade, emergency contact, allergies (;-separated), transportation.

        The first line is a header. Short rows are skipped; failing rows are
        reported and the rest still import.
        """

        self._require_admin(current)
        lines = [line for line in (text or "").splitlines() if line.strip()]
        processed = 0
        errors: list[str] = []
        for number, line in enumerate(lines[1:], start=2):
            values = [v.strip() for v in line.split(",")]
            if len(values) < 4:
                continue
            form = {
                "name": values[0],
                "grade": values[1],
                "emergency_contact": values[2],
                "allergies": ",".join(split_allergies(values[3], ";")),
                "transportation_status": (values[4] if len(values) > 4 and values[4] else TransportationStatus.WALKER.value),
            }
            try:
                self.add_student(current=current, form=form)
                processed += 1
            except DomainError as e:
                logger.warning("Student import row %d failed: %s", number, e)
                errors.append(f"Row {number}: {e}")
        return ImportResult(processed=processed, errors=errors)
