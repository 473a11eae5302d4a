"""Pure derivations over the cached roster and scan log.

Every function here takes the collections and the current time explicitly and
returns fresh values, so the same inputs always give the same output.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import at
from ..core.constants import (
    AFTERNOON_CUTOFF,
    BUS_ACTIVITY_WINDOW_MINUTES,
    LATE_CUTOFF,
    MORNING_CUTOFF,
    NOON_HOUR,
    RECENT_ALLERGY_SCAN_MINUTES,
    SCHOOL_START,
)
from ..core.enums import AlertType, BusStatus, MissedType, ScanAction, Severity, TrackerStatus
from ..scans.model import ScanEvent
from ..students.model import Student
from .model import Alert, TrackerSnapshot, UnscannedStudent

CAMPUS_KEYWORDS = ("classroom", "entrance", "cafeteria", "manual entry")


def scans_on(day: date, scans: Iterable[ScanEvent]) -> list[ScanEvent]:
    return [s for s in scans if s.timestamp.date() == day]


def _by_student(scans: Iterable[ScanEvent]) -> dict[str, list[ScanEvent]]:
    out: dict[str, list[ScanEvent]] = {}
    for s in scans:
        out.setdefault(s.student_id, []).append(s)
    return out


def _has_morning_scan(scans: Sequence[ScanEvent]) -> bool:
    return any(s.action == ScanAction.IN and s.timestamp.hour < NOON_HOUR for s in scans)


def _has_afternoon_scan(scans: Sequence[ScanEvent]) -> bool:
    return any(s.action == ScanAction.OUT and s.timestamp.hour >= NOON_HOUR for s in scans)


def find_unscanned_students(
    students: Sequence[Student],
    scans: Iterable[ScanEvent],
    now: datetime,
    *,
    morning_cutoff: time = MORNING_CUTOFF,
    afternoon_cutoff: time = AFTERNOON_CUTOFF,
) -> list[UnscannedStudent]:
    """Students missing today's expected morning check-in or afternoon check-out.

    Walkers are never listed.
    """

    today = now.date()
    past_morning = now > at(today, morning_cutoff)
    past_afternoon = now > at(today, afternoon_cutoff)
    if not past_morning and not past_afternoon:
        return []

    todays = _by_student(scans_on(today, scans))
    out: list[UnscannedStudent] = []
    for student in students:
        if student.is_walker:
            continue
        own = todays.get(student.student_id, [])
        if past_morning and not _has_morning_scan(own):
            out.append(UnscannedStudent(student=student, missed_type=MissedType.MORNING))
        elif past_afternoon and not _has_afternoon_scan(own):
            out.append(UnscannedStudent(student=student, missed_type=MissedType.AFTERNOON))
    return out


def first_check_in(scans: Iterable[ScanEvent]) -> Optional[ScanEvent]:
    ins = [s for s in scans if s.action == ScanAction.IN]
    return min(ins, key=lambda s: s.timestamp) if ins else None


def derive_alerts(
    students: Sequence[Student],
    scans: Iterable[ScanEvent],
    now: datetime,
    *,
    school_start: time = SCHOOL_START,
    late_cutoff: time = LATE_CUTOFF,
    recent_minutes: int = RECENT_ALLERGY_SCAN_MINUTES,
) -> list[Alert]:
    """Allergy, missed-scan and late-arrival alerts, highest severity first.

    Within a severity alerts keep roster order.
    """

    today = now.date()
    todays = _by_student(scans_on(today, scans))
    recent_window = timedelta(minutes=recent_minutes)
    after_start = now > at(today, school_start)
    late_at = at(today, late_cutoff)

    alerts: list[Alert] = []
    for student in students:
        own = todays.get(student.student_id, [])

        recent = sorted(
            (s for s in own if timedelta(0) <= now - s.timestamp < recent_window),
            key=lambda s: s.timestamp,
            reverse=True,
        )
        if recent and student.has_allergies:
            alerts.append(
                Alert(
                    alert_id=f"allergy-{student.student_id}",
                    alert_type=AlertType.ALLERGY,
                    student_id=student.student_id,
                    message=f"{student.name} has allergies: {', '.join(student.allergies)}. Recently scanned in.",
                    timestamp=recent[0].timestamp,
                    severity=Severity.HIGH,
                )
            )

        if not own and after_start and not student.is_walker:
            alerts.append(
                Alert(
                    alert_id=f"missed-{student.student_id}",
                    alert_type=AlertType.MISSED_SCAN,
                    student_id=student.student_id,
                    message=f"{student.name} has not been scanned in today.",
                    timestamp=now,
                    severity=Severity.MEDIUM,
                )
            )

        first = first_check_in(own)
        if first and first.timestamp > late_at:
            alerts.append(
                Alert(
                    alert_id=f"late-{student.student_id}",
                    alert_type=AlertType.LATE_ARRIVAL,
                    student_id=student.student_id,
                    message=f"{student.name} arrived late at {first.timestamp.strftime('%H:%M:%S')}.",
                    timestamp=first.timestamp,
                    severity=Severity.LOW,
                )
            )

    # sorted() is stable, so discovery order survives within a severity
    return sorted(alerts, key=lambda a: a.severity.rank)


def driver_alerts(students: Sequence[Student], scans: Iterable[ScanEvent], now: datetime, *, bus_id: Optional[str]) -> list[Alert]:
    """Allergy and not-yet-scanned alerts for the students riding one driver's bus."""

    if not bus_id:
        return []
    assigned = [s for s in students if s.bus_route == bus_id]
    scanned_today = {s.student_id for s in scans_on(now.date(), scans)}

    alerts: list[Alert] = []
    for student in assigned:
        if student.has_allergies:
            alerts.append(
                Alert(
                    alert_id=f"allergy-{student.student_id}",
                    alert_type=AlertType.ALLERGY,
                    student_id=student.student_id,
                    message=f"Has allergies: {', '.join(student.allergies)}",
                    timestamp=now,
                    severity=Severity.HIGH,
                )
            )
    for student in assigned:
        if student.student_id not in scanned_today:
            alerts.append(
                Alert(
                    alert_id=f"unscanned-{student.student_id}",
                    alert_type=AlertType.MISSED_SCAN,
                    student_id=student.student_id,
                    message="Not yet scanned today",
                    timestamp=now,
                    severity=Severity.MEDIUM,
                )
            )
    return sorted(alerts, key=lambda a: a.severity.rank)


def student_status(student_id: str, scans: Iterable[ScanEvent], now: datetime) -> TrackerStatus:
    own = [s for s in scans_on(now.date(), scans) if s.student_id == student_id]
    if not own:
        return TrackerStatus.UNACCOUNTED

    latest = max(own, key=lambda s: s.timestamp)
    if latest.action == ScanAction.OUT:
        return TrackerStatus.UNACCOUNTED
    location = latest.location.lower()
    if "bus" in location:
        return TrackerStatus.ON_BUS
    if any(k in location for k in CAMPUS_KEYWORDS):
        return TrackerStatus.ON_CAMPUS
    return TrackerStatus.UNACCOUNTED


def bus_status(scans: Iterable[ScanEvent], now: datetime, *, window_minutes: int = BUS_ACTIVITY_WINDOW_MINUTES) -> BusStatus:
    bus_scans = [s for s in scans_on(now.date(), scans) if s.is_bus]
    if any(now - s.timestamp < timedelta(minutes=window_minutes) for s in bus_scans):
        return BusStatus.IN_TRANSIT
    if bus_scans:
        return BusStatus.ARRIVED
    return BusStatus.MISSING_SCANS


def tracker_snapshot(
    students: Sequence[Student],
    scans: Sequence[ScanEvent],
    now: datetime,
    *,
    grade: Optional[str] = None,
) -> TrackerSnapshot:
    groups: dict[TrackerStatus, list[Student]] = {status: [] for status in TrackerStatus}
    for student in students:
        if grade and grade != "all" and student.grade != grade:
            continue
        groups[student_status(student.student_id, scans, now)].append(student)

    return TrackerSnapshot(
        on_bus=groups[TrackerStatus.ON_BUS],
        on_campus=groups[TrackerStatus.ON_CAMPUS],
        unaccounted=groups[TrackerStatus.UNACCOUNTED],
        bus_status=bus_status(scans, now),
    )
