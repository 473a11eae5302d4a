from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional

from ..core.constants import ALLERGY_ALERT_TIMEOUT_SECONDS
from ..students.model import Student


@dataclass(frozen=True)
class AllergyAlert:
    """Blocking notice raised when a student with allergies is scanned."""

    alert_id: str
    student_id: str
    student_name: str
    allergies: tuple[str, ...]
    location: str
    scanned_by: str
    raised_at: datetime
    expires_at: datetime
    acknowledged: bool = False

    def is_active(self, now: datetime) -> bool:
        return not self.acknowledged and now < self.expires_at

    def to_public(self) -> dict:
        return {
            "id": self.alert_id,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "allergies": list(self.allergies),
            "location": self.location,
            "scanned_by": self.scanned_by,
            "raised_at": self.raised_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
            "auto_dismiss_seconds": int((self.expires_at - self.raised_at).total_seconds()),
            "message": "Notify nurse immediately if exposure occurs",
        }


class AllergyAlertBoard:
    """In-memory allergy alerts; each one dismisses itself after a timeout unless acknowledged first."""

    def __init__(self, *, timeout_seconds: int = ALLERGY_ALERT_TIMEOUT_SECONDS):
        self._timeout = timedelta(seconds=timeout_seconds)
        self._lock = threading.Lock()
        self._alerts: dict[str, AllergyAlert] = {}

    def raise_alert(self, student: Student, *, location: str, scanned_by: str, now: datetime) -> AllergyAlert:
        alert = AllergyAlert(
            alert_id=uuid.uuid4().hex,
            student_id=student.student_id,
            student_name=student.name,
            allergies=tuple(student.allergies),
            location=location,
            scanned_by=scanned_by,
            raised_at=now,
            expires_at=now + self._timeout,
        )
        with self._lock:
            self._prune(now)
            self._alerts[alert.alert_id] = alert
        return alert

    def _prune(self, now: datetime) -> None:
        # caller holds the lock
        self._alerts = {k: a for k, a in self._alerts.items() if a.is_active(now)}

    def __len__(self) -> int:
        with self._lock:
            return len(self._alerts)

    def get(self, alert_id: str) -> Optional[AllergyAlert]:
        with self._lock:
            return self._alerts.get(alert_id)

    def active(self, now: datetime) -> list[AllergyAlert]:
        with self._lock:
            self._prune(now)
            return sorted(self._alerts.values(), key=lambda a: a.raised_at)

    def acknowledge(self, alert_id: str) -> bool:
        with self._lock:
            alert = self._alerts.get(alert_id)
            if not alert or alert.acknowledged:
                return False
            self._alerts[alert_id] = replace(alert, acknowledged=True)
            return True
