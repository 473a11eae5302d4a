from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ScanAction


@dataclass(frozen=True)
class ScanEvent:
    """Immutable check-in/check-out record; never updated or deleted."""

    student_id: str
    location: str
    action: ScanAction
    timestamp: datetime
    scanned_by: str
    event_id: Optional[int] = None

    @property
    def is_bus(self) -> bool:
        return "bus" in self.location.lower()

    def to_public(self) -> dict:
        return {
            "id": self.event_id,
            "student_id": self.student_id,
            "location": self.location,
            "action": self.action.value,
            "timestamp": self.timestamp.isoformat(),
            "scanned_by": self.scanned_by,
        }
