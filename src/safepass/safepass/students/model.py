from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import TransportationStatus


@dataclass(frozen=True)
class Student:
    """Domain entity: a student on the roster."""

    student_id: str
    name: str
    grade: str
    emergency_contact: Optional[str] = None
    allergies: tuple[str, ...] = ()
    transportation_status: TransportationStatus = TransportationStatus.WALKER
    student_number: Optional[str] = None
    medical_notes: Optional[str] = None
    emergency_phone: Optional[str] = None
    parent_email: Optional[str] = None
    parent_phone: Optional[str] = None
    bus_route: Optional[str] = None
    teacher_name: Optional[str] = None
    classroom_number: Optional[str] = None
    custom_fields: dict = field(default_factory=dict, compare=False)

    @property
    def has_allergies(self) -> bool:
        return len(self.allergies) > 0

    @property
    def is_walker(self) -> bool:
        return self.transportation_status == TransportationStatus.WALKER

    def to_public(self) -> dict:
        return {
            "id": self.student_id,
            "name": self.name,
            "grade": self.grade,
            "student_number": self.student_number,
            "allergies": list(self.allergies),
            "medical_notes": self.medical_notes,
            "emergency_contact": self.emergency_contact,
            "emergency_phone": self.emergency_phone,
            "parent_email": self.parent_email,
            "parent_phone": self.parent_phone,
            "transportation_status": self.transportation_status.value,
            "bus_route": self.bus_route,
            "teacher_name": self.teacher_name,
            "classroom_number": self.classroom_number,
            "custom_fields": dict(self.custom_fields),
        }


@dataclass(frozen=True)
class ImportResult:
    """Outcome of a bulk CSV import."""

    processed: int
    errors: list[str]

    def to_public(self) -> dict:
        return {"processed": self.processed, "errors": list(self.errors)}
