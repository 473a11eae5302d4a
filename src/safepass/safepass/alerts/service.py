from __future__ import annotations

import logging
import threading
from datetime import date, datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import RESOLVED_ALERTS_SHOWN
from ..core.enums import AlertType, MissedType, Role, Severity
from ..core.exceptions import NotFoundError, ValidationError
from ..notifications.client import FunctionsClient
from ..scanning.service import ScanResult, ScanService
from ..settings.service import SettingsService
from ..state.app_state import AppState
from ..users.service import SessionUser
from .derivation import derive_alerts, driver_alerts, find_unscanned_students, tracker_snapshot
from .model import Alert, TrackerSnapshot, UnscannedStudent

logger = logging.getLogger(__name__)

MORNING_MESSAGE = "⚠️ SafePass Alert: {name} has not scanned in this morning. Please confirm attendance."
AFTERNOON_MESSAGE = "⚠️ SafePass Alert: {name} has not scanned out this afternoon. Please confirm pickup."


class AlertService:
    """Derived alert views over the shared cache.

    Results are cached until the state reports a change or the clock moves to
    a new minute. Resolutions live only in this process and only for the day
    they were made on.
    """

    def __init__(
        self,
        state: AppState,
        functions: FunctionsClient,
        scans: ScanService,
        *,
        settings: Optional[SettingsService] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._state = state
        self._functions = functions
        self._scans = scans
        self._settings = settings
        self._clock = clock
        self._lock = threading.Lock()
        self._resolved: set[tuple[date, str]] = set()
        self._dirty = True
        self._computed_for: Optional[datetime] = None
        self._alerts: list[Alert] = []
        self._unscanned: list[UnscannedStudent] = []
        self._unsubscribe = state.subscribe(self._on_state_change)

    def close(self) -> None:
        self._unsubscribe()

    def _on_state_change(self, _state: AppState) -> None:
        with self._lock:
            self._dirty = True

    def _recompute(self, now: Optional[datetime]) -> datetime:
        now = now or self._clock()
        minute = now.replace(second=0, microsecond=0)
        with self._lock:
            if not self._dirty and self._computed_for == minute:
                return now
            students = self._state.students
            scans = self._state.scan_events
            self._alerts = derive_alerts(students, scans, now)
            self._unscanned = find_unscanned_students(students, scans, now)
            self._computed_for = minute
            self._dirty = False
            self._resolved = {r for r in self._resolved if r[0] == now.date()}
        return now

    def all_alerts(self, *, now: Optional[datetime] = None) -> list[Alert]:
        now = self._recompute(now)
        day = now.date()
        with self._lock:
            return [a.mark((day, a.alert_id) in self._resolved) for a in self._alerts]

    def active_alerts(self, *, now: Optional[datetime] = None) -> list[Alert]:
        return [a for a in self.all_alerts(now=now) if not a.resolved]

    def resolved_alerts(self, *, now: Optional[datetime] = None, limit: int = RESOLVED_ALERTS_SHOWN) -> list[Alert]:
        return [a for a in self.all_alerts(now=now) if a.resolved][:limit]

    def counts(self, *, now: Optional[datetime] = None) -> dict:
        active = self.active_alerts(now=now)
        return {
            "total": len(active),
            "high": sum(1 for a in active if a.severity == Severity.HIGH),
            "medium": sum(1 for a in active if a.severity == Severity.MEDIUM),
            "low": sum(1 for a in active if a.severity == Severity.LOW),
            "by_type": {t.value: sum(1 for a in active if a.alert_type == t) for t in AlertType},
        }

    def resolve(self, alert_id: str, *, now: Optional[datetime] = None) -> Alert:
        now = now or self._clock()
        for alert in self.all_alerts(now=now):
            if alert.alert_id == alert_id:
                with self._lock:
                    self._resolved.add((now.date(), alert_id))
                logger.info("Alert resolved: %s", alert_id)
                return alert.mark(True)
        raise NotFoundError("Alert not found")

    def alerts_for(self, current: SessionUser, *, now: Optional[datetime] = None) -> list[Alert]:
        """Drivers only see alerts for the students assigned to their bus."""

        if current.role == Role.DRIVER:
            now = now or self._clock()
            return driver_alerts(self._state.students, self._state.scan_events, now, bus_id=current.bus_id)
        return self.active_alerts(now=now)

    def unscanned(self, *, now: Optional[datetime] = None) -> list[UnscannedStudent]:
        self._recompute(now)
        with self._lock:
            return list(self._unscanned)

    def tracker(self, *, grade: Optional[str] = None, now: Optional[datetime] = None) -> TrackerSnapshot:
        now = now or self._clock()
        return tracker_snapshot(self._state.students, self._state.scan_events, now, grade=grade)

    def notify_unscanned(self, student_id: str, *, now: Optional[datetime] = None) -> UnscannedStudent:
        entry = next((u for u in self.unscanned(now=now) if u.student.student_id == student_id), None)
        if not entry:
            raise NotFoundError("Student is not currently unscanned")

        student = entry.student
        if not student.parent_email:
            raise ValidationError("No parent email on file")
        if self._settings is not None:
            channels = self._settings.get().notification_settings
            if not (channels.email_enabled or channels.sms_enabled):
                raise ValidationError("Parent notifications are turned off in settings")

        template = MORNING_MESSAGE if entry.missed_type == MissedType.MORNING else AFTERNOON_MESSAGE
        self._functions.notify_attendance(
            student_id=student.student_id,
            student_name=student.name,
            message=template.format(name=student.name),
            parent_email=student.parent_email,
            parent_phone=student.parent_phone,
            notification_type=entry.missed_type.value,
        )
        logger.info("Parent notified about %s (%s)", student.student_id, entry.missed_type.value)
        return entry

    def mark_manually(self, student_id: str, action, actor: SessionUser, *, now: Optional[datetime] = None) -> ScanResult:
        return self._scans.record_manual(student_id, action, actor, now=now)

