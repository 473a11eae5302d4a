from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from ..core.enums import AlertType, BusStatus, MissedType, Severity
from ..students.model import Student


@dataclass(frozen=True)
class Alert:
    """Derived view-model; never persisted."""

    alert_id: str
    alert_type: AlertType
    student_id: str
    message: str
    timestamp: datetime
    severity: Severity
    resolved: bool = False

    def mark(self, resolved: bool) -> "Alert":
        return self if self.resolved == resolved else replace(self, resolved=resolved)

    def to_public(self) -> dict:
        return {
            "id": self.alert_id,
            "type": self.alert_type.value,
            "student_id": self.student_id,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "severity": self.severity.value,
            "resolved": self.resolved,
        }


@dataclass(frozen=True)
class UnscannedStudent:
    student: Student
    missed_type: MissedType

    def to_public(self) -> dict:
        data = self.student.to_public()
        data["missed_type"] = self.missed_type.value
        return data


@dataclass(frozen=True)
class TrackerSnapshot:
    on_bus: list[Student]
    on_campus: list[Student]
    unaccounted: list[Student]
    bus_status: BusStatus

    def to_public(self) -> dict:
        return {
            "on_bus": [s.to_public() for s in self.on_bus],
            "on_campus": [s.to_public() for s in self.on_campus],
            "unaccounted": [s.to_public() for s in self.unaccounted],
            "bus_status": self.bus_status.value,
            "counts": {
                "on_bus": len(self.on_bus),
                "on_campus": len(self.on_campus),
                "unaccounted": len(self.unaccounted),
            },
        }
