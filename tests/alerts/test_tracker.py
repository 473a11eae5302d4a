from __future__ import annotations

from datetime import datetime

from src.safepass.safepass.alerts.derivation import bus_status, student_status, tracker_snapshot
from src.safepass.safepass.core.enums import BusStatus, ScanAction, TrackerStatus
from tests.helpers import make_scan, make_student

NOW = datetime(2026, 3, 10, 9, 0)


def test_student_status_uses_latest_scan_today():
    scans = [
        make_scan("STU001", datetime(2026, 3, 10, 7, 40), location="Bus #1"),
        make_scan("STU001", datetime(2026, 3, 10, 8, 5), location="Classroom 101"),
    ]

    assert student_status("STU001", scans, NOW) == TrackerStatus.ON_CAMPUS
    assert student_status("STU001", scans[:1], NOW) == TrackerStatus.ON_BUS


def test_student_status_unaccounted_cases():
    assert student_status("STU001", [], NOW) == TrackerStatus.UNACCOUNTED
    assert student_status("STU001", [make_scan("STU001", datetime(2026, 3, 10, 8), action=ScanAction.OUT)], NOW) == (
        TrackerStatus.UNACCOUNTED
    )
    assert student_status("STU001", [make_scan("STU001", datetime(2026, 3, 10, 8), location="Mobile Device")], NOW) == (
        TrackerStatus.UNACCOUNTED
    )
    assert student_status("STU001", [make_scan("STU001", datetime(2026, 3, 9, 8), location="Bus #1")], NOW) == (
        TrackerStatus.UNACCOUNTED
    )


def test_manual_entry_counts_as_on_campus():
    scans = [make_scan("STU001", datetime(2026, 3, 10, 8, 45), location="Manual Entry")]

    assert student_status("STU001", scans, NOW) == TrackerStatus.ON_CAMPUS


def test_bus_status():
    assert bus_status([], NOW) == BusStatus.MISSING_SCANS
    assert bus_status([make_scan("STU001", datetime(2026, 3, 10, 8, 40), location="Bus #2")], NOW) == BusStatus.IN_TRANSIT
    assert bus_status([make_scan("STU001", datetime(2026, 3, 10, 7, 40), location="Bus #2")], NOW) == BusStatus.ARRIVED


def test_snapshot_filters_by_grade():
    students = [make_student("STU001", "Ava", "5"), make_student("STU002", "Ben", "3")]
    scans = [make_scan("STU001", datetime(2026, 3, 10, 8, 50), location="Bus #1")]

    everyone = tracker_snapshot(students, scans, NOW)
    third_grade = tracker_snapshot(students, scans, NOW, grade="3")

    assert [s.student_id for s in everyone.on_bus] == ["STU001"]
    assert [s.student_id for s in everyone.unaccounted] == ["STU002"]
    assert everyone.bus_status == BusStatus.IN_TRANSIT
    assert third_grade.on_bus == []
    assert [s.student_id for s in third_grade.unaccounted] == ["STU002"]
