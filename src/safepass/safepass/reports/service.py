from __future__ import annotations

import logging
from collections import Counter, defaultdict
from datetime import date, datetime, time, timedelta
from typing import Callable, Optional

from ..alerts.derivation import first_check_in
from ..common.datetime_utils import at, now_local
from ..core.constants import DEFAULT_REPORT_DAYS, LATE_CUTOFF
from ..core.enums import AttendanceStatus, ScanAction
from ..core.exceptions import ValidationError
from ..scans.model import ScanEvent
from ..state.app_state import AppState
from .model import AttendanceReport, GradeRow, HistoryRow, rate

logger = logging.getLogger(__name__)

UNKNOWN_STUDENT = "Unknown Student"
SORT_FIELDS = {
    "timestamp": lambda r: r.timestamp,
    "studentName": lambda r: r.student_name.lower(),
    "location": lambda r: r.location.lower(),
}


def attendance_status(scans: list[ScanEvent], day: date, *, late_cutoff: time = LATE_CUTOFF) -> AttendanceStatus:
    """Status from the first check-in of the day, or the first scan when there is none."""

    if not scans:
        return AttendanceStatus.MISSING
    first = first_check_in(scans) or min(scans, key=lambda s: s.timestamp)
    if first.timestamp > at(day, late_cutoff):
        return AttendanceStatus.LATE
    return AttendanceStatus.PRESENT


class ReportService:
    def __init__(
        self,
        state: AppState,
        *,
        late_cutoff: time = LATE_CUTOFF,
        days: int = DEFAULT_REPORT_DAYS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._state = state
        self._late_cutoff = late_cutoff
        self._days = days
        self._clock = clock

    def attendance_report(self, day: Optional[date] = None) -> AttendanceReport:
        self._state.ensure_loaded()
        day = day or self._clock().date()

        by_student: dict[str, list[ScanEvent]] = defaultdict(list)
        for s in self._state.scan_events:
            if s.timestamp.date() == day:
                by_student[s.student_id].append(s)

        counts: dict[str, Counter] = {}
        for student in self._state.students:
            status = attendance_status(by_student.get(student.student_id, []), day, late_cutoff=self._late_cutoff)
            counts.setdefault(student.grade, Counter())[status] += 1

        grades = [
            GradeRow(
                grade=grade,
                total=sum(c.values()),
                present=c[AttendanceStatus.PRESENT],
                late=c[AttendanceStatus.LATE],
                missing=c[AttendanceStatus.MISSING],
            )
            for grade, c in sorted(counts.items())
        ]
        logger.debug("Attendance report for %s: %d grades", day, len(grades))
        return AttendanceReport(day=day, grades=grades)

    def analytics(self, today: Optional[date] = None) -> dict:
        self._state.ensure_loaded()
        today = today or self._clock().date()
        window = [today - timedelta(days=offset) for offset in range(self._days - 1, -1, -1)]
        in_window = [s for s in self._state.scan_events if window[0] <= s.timestamp.date() <= today]

        daily = []
        for day in window:
            scans = [s for s in in_window if s.timestamp.date() == day]
            daily.append(
                {"date": day.isoformat(), "scans": len(scans), "unique_students": len({s.student_id for s in scans})}
            )

        grades = {s.student_id: s.grade for s in self._state.students}
        late_by_grade: Counter = Counter()
        for s in in_window:
            if s.action == ScanAction.IN and s.timestamp > at(s.timestamp.date(), self._late_cutoff):
                late_by_grade[grades.get(s.student_id, "Unknown")] += 1

        scan_days: dict[str, set] = defaultdict(set)
        for s in in_window:
            scan_days[s.student_id].add(s.timestamp.date())
        ranking = sorted(
            (
                {
                    "student_id": st.student_id,
                    "name": st.name,
                    "grade": st.grade,
                    "missed_days": self._days - len(scan_days[st.student_id]),
                    "attendance_rate": rate(len(scan_days[st.student_id]), self._days),
                }
                for st in self._state.students
            ),
            key=lambda row: row["missed_days"],
            reverse=True,
        )

        students = self._state.students
        return {
            "daily": daily,
            "late_arrivals_by_grade": dict(sorted(late_by_grade.items())),
            "missed_days": ranking,
            "total_scans": len(in_window),
            "average_scans_per_day": round(len(in_window) / self._days, 1),
            "attendance_rate": rate(len({s.student_id for s in in_window} & {st.student_id for st in students}), len(students)),
        }

    def scan_history(
        self,
        day: Optional[date] = None,
        *,
        search: str = "",
        sort_field: str = "timestamp",
        direction: str = "desc",
    ) -> list[HistoryRow]:
        if sort_field not in SORT_FIELDS:
            raise ValidationError(f"Cannot sort by {sort_field}")
        if direction not in ("asc", "desc"):
            raise ValidationError("Direction must be asc or desc")

        self._state.ensure_loaded()
        day = day or self._clock().date()
        needle = (search or "").strip().lower()

        rows = []
        for event in self._state.scan_events:
            if event.timestamp.date() != day:
                continue
            student = self._state.find_student(event.student_id)
            row = HistoryRow(
                timestamp=event.timestamp,
                student_id=event.student_id,
                student_name=student.name if student else UNKNOWN_STUDENT,
                grade=student.grade if student else "",
                action=event.action.value,
                location=event.location,
                scanned_by=event.scanned_by,
            )
            if needle and not any(needle in v.lower() for v in (row.student_name, row.location, row.scanned_by)):
                continue
            rows.append(row)

        rows.sort(key=SORT_FIELDS[sort_field], reverse=direction == "desc")
        return rows
