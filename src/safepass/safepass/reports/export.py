"""CSV renderings of the report views."""

from __future__ import annotations

import csv
import io
from typing import Iterable

from .model import AttendanceReport, HistoryRow

GRADE_REPORT_HEADER = ["Grade", "Total", "Present", "Late", "Missing", "Attendance Rate"]
SCAN_HISTORY_HEADER = ["Timestamp", "Student Name", "Grade", "Action", "Location", "Scanned By"]


def grade_report_csv(report: AttendanceReport) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(GRADE_REPORT_HEADER)
    for g in report.grades:
        writer.writerow([g.grade, g.total, g.present, g.late, g.missing, f"{g.attendance_rate:.1f}%"])
    return buf.getvalue()


def scan_history_csv(rows: Iterable[HistoryRow]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(SCAN_HISTORY_HEADER)
    for r in rows:
        writer.writerow(
            [
                r.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
                r.student_name,
                r.grade,
                r.action.upper(),
                r.location,
                r.scanned_by,
            ]
        )
    return buf.getvalue()
