from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ScheduleEntry:
    student_id: str
    period: str
    subject: str
    room: str
    teacher: Optional[str] = None

    def to_public(self) -> dict:
        return {
            "student_id": self.student_id,
            "period": self.period,
            "subject": self.subject,
            "room": self.room,
            "teacher": self.teacher,
        }
