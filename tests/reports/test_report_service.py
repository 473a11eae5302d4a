from __future__ import annotations

from datetime import date, datetime

import pytest

from src.safepass.safepass.core.enums import ScanAction
from src.safepass.safepass.core.exceptions import ValidationError
from src.safepass.safepass.reports.export import grade_report_csv, scan_history_csv
from src.safepass.safepass.reports.service import ReportService
from src.safepass.safepass.state.app_state import AppState
from tests.helpers import InMemoryScans, InMemoryStudents, make_scan, make_student

DAY = date(2026, 3, 10)


def _service(students, scans):
    state = AppState(InMemoryStudents(students), InMemoryScans(scans))
    state.refresh()
    return ReportService(state, clock=lambda: datetime(2026, 3, 10, 17, 0))


def _roster():
    return [make_student("STU001", "Ava Brown", "5"), make_student("STU002", "Ben Carter", "5"), make_student("STU003", "Cara Diaz", "3")]


def test_attendance_report_by_grade():
    svc = _service(
        _roster(),
        [
            make_scan("STU001", datetime(2026, 3, 10, 8, 0)),
            make_scan("STU002", datetime(2026, 3, 10, 8, 45)),
            make_scan("STU003", datetime(2026, 3, 9, 8, 0)),
        ],
    )

    report = svc.attendance_report(DAY)

    rows = {g.grade: g for g in report.grades}
    assert (rows["5"].present, rows["5"].late, rows["5"].missing) == (1, 1, 0)
    assert rows["5"].attendance_rate == 100.0
    assert (rows["3"].total, rows["3"].missing, rows["3"].attendance_rate) == (1, 1, 0.0)
    assert report.attendance_rate == 66.7


def test_rate_is_full_when_everyone_scanned():
    svc = _service(_roster(), [make_scan(sid, datetime(2026, 3, 10, 8, 10)) for sid in ("STU001", "STU002", "STU003")])

    assert svc.attendance_report(DAY).attendance_rate == 100.0


def test_rate_is_zero_without_scans_or_students():
    assert _service(_roster(), []).attendance_report(DAY).attendance_rate == 0.0
    assert _service([], []).attendance_report(DAY).attendance_rate == 0.0


def test_grade_report_csv():
    svc = _service(_roster(), [make_scan("STU001", datetime(2026, 3, 10, 8, 0))])

    text = grade_report_csv(svc.attendance_report(DAY))

    assert text.splitlines() == [
        "Grade,Total,Present,Late,Missing,Attendance Rate",
        "3,1,0,0,1,0.0%",
        "5,2,1,0,1,50.0%",
    ]


def test_analytics_window_and_rankings():
    scans = [
        make_scan("STU001", datetime(2026, 3, 10, 8, 0)),
        make_scan("STU001", datetime(2026, 3, 9, 8, 45)),
        make_scan("STU001", datetime(2026, 3, 9, 15, 30), action=ScanAction.OUT),
        make_scan("STU002", datetime(2026, 3, 8, 9, 0)),
        make_scan("STU002", datetime(2026, 2, 1, 8, 0)),
    ]

    data = _service(_roster(), scans).analytics(DAY)

    assert [d["date"] for d in data["daily"]][0] == "2026-03-04"
    assert data["daily"][-1] == {"date": "2026-03-10", "scans": 1, "unique_students": 1}
    assert data["daily"][-2] == {"date": "2026-03-09", "scans": 2, "unique_students": 1}
    assert data["late_arrivals_by_grade"] == {"5": 2}
    assert [r["student_id"] for r in data["missed_days"]] == ["STU003", "STU002", "STU001"]
    assert data["missed_days"][0]["missed_days"] == 7
    assert data["missed_days"][2]["attendance_rate"] == 28.6
    assert data["total_scans"] == 4
    assert data["average_scans_per_day"] == 0.6
    assert data["attendance_rate"] == 66.7


def test_scan_history_filters_and_sorts():
    scans = [
        make_scan("STU001", datetime(2026, 3, 10, 8, 0), location="Bus #1", scanned_by="Driver User"),
        make_scan("STU002", datetime(2026, 3, 10, 8, 30), location="Main Entrance"),
        make_scan("STU404", datetime(2026, 3, 10, 9, 0), location="Cafeteria"),
        make_scan("STU003", datetime(2026, 3, 9, 9, 0)),
    ]
    svc = _service(_roster(), scans)

    rows = svc.scan_history(DAY)
    assert [r.student_id for r in rows] == ["STU404", "STU002", "STU001"]
    assert rows[0].student_name == "Unknown Student"

    assert [r.student_id for r in svc.scan_history(DAY, search="DRIVER")] == ["STU001"]
    assert [r.student_id for r in svc.scan_history(DAY, search="ben")] == ["STU002"]
    assert [r.student_name for r in svc.scan_history(DAY, sort_field="studentName", direction="asc")] == [
        "Ava Brown",
        "Ben Carter",
        "Unknown Student",
    ]


def test_scan_history_rejects_unknown_sort():
    with pytest.raises(ValidationError):
        _service([], []).scan_history(DAY, sort_field="grade")


def test_scan_history_csv_quotes_every_cell():
    svc = _service(_roster(), [make_scan("STU001", datetime(2026, 3, 10, 8, 0), location="Bus #1")])

    lines = scan_history_csv(svc.scan_history(DAY)).splitlines()

    assert lines[0] == '"Timestamp","Student Name","Grade","Action","Location","Scanned By"'
    assert lines[1] == '"2026-03-10 08:00:00","Ava Brown","5","IN","Bus #1","Teacher User"'
