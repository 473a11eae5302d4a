from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


def rate(part: int, total: int) -> float:
    return round(part / total * 100, 1) if total else 0.0


@dataclass(frozen=True)
class GradeRow:
    grade: str
    total: int
    present: int
    late: int
    missing: int

    @property
    def attendance_rate(self) -> float:
        return rate(self.present + self.late, self.total)

    def to_public(self) -> dict:
        return {
            "grade": self.grade,
            "total": self.total,
            "present": self.present,
            "late": self.late,
            "missing": self.missing,
            "attendance_rate": self.attendance_rate,
        }


@dataclass(frozen=True)
class AttendanceReport:
    day: date
    grades: list[GradeRow]

    @property
    def total(self) -> int:
        return sum(g.total for g in self.grades)

    @property
    def present(self) -> int:
        return sum(g.present for g in self.grades)

    @property
    def late(self) -> int:
        return sum(g.late for g in self.grades)

    @property
    def missing(self) -> int:
        return sum(g.missing for g in self.grades)

    @property
    def attendance_rate(self) -> float:
        return rate(self.present + self.late, self.total)

    def to_public(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "grades": [g.to_public() for g in self.grades],
            "totals": {
                "total": self.total,
                "present": self.present,
                "late": self.late,
                "missing": self.missing,
                "attendance_rate": self.attendance_rate,
            },
        }


@dataclass(frozen=True)
class HistoryRow:
    timestamp: datetime
    student_id: str
    student_name: str
    grade: str
    action: str
    location: str
    scanned_by: str

    def to_public(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "student_id": self.student_id,
            "student_name": self.student_name,
            "grade": self.grade,
            "action": self.action,
            "location": self.location,
            "scanned_by": self.scanned_by,
        }
