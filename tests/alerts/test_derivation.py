from __future__ import annotations

from datetime import datetime

from src.safepass.safepass.alerts.derivation import derive_alerts, driver_alerts, find_unscanned_students
from src.safepass.safepass.core.enums import AlertType, MissedType, ScanAction, Severity, TransportationStatus
from tests.helpers import make_scan, make_student

DAY = (2026, 3, 10)


def at(hour, minute=0, day=DAY):
    return datetime(*day, hour, minute)


def roster():
    return [
        make_student("STU001", "Ava Brown", allergies=("Peanuts",)),
        make_student("STU002", "Ben Carter"),
        make_student("STU003", "Cara Diaz", transportation_status=TransportationStatus.WALKER),
        make_student("STU004", "Dan Evans", transportation_status=TransportationStatus.PICKUP),
    ]


def test_nobody_is_unscanned_before_morning_cutoff():
    assert find_unscanned_students(roster(), [], at(8, 30)) == []


def test_unscanned_after_morning_cutoff_skips_walkers():
    result = find_unscanned_students(roster(), [make_scan("STU002", at(8, 10))], at(9))

    assert [u.student.student_id for u in result] == ["STU001", "STU004"]
    assert all(u.missed_type == MissedType.MORNING for u in result)


def test_morning_out_scan_and_yesterday_scan_do_not_count():
    scans = [
        make_scan("STU001", at(8, 5), action=ScanAction.OUT),
        make_scan("STU002", at(8, 5, day=(2026, 3, 9))),
    ]

    ids = [u.student.student_id for u in find_unscanned_students(roster(), scans, at(9))]

    assert "STU001" in ids
    assert "STU002" in ids


def test_afternoon_check():
    scans = [
        make_scan("STU001", at(8, 0)),
        make_scan("STU002", at(8, 0)),
        make_scan("STU002", at(15, 0), action=ScanAction.OUT),
    ]

    result = find_unscanned_students(roster(), scans, at(16))

    by_id = {u.student.student_id: u.missed_type for u in result}
    assert by_id == {"STU001": MissedType.AFTERNOON, "STU004": MissedType.MORNING}


def test_derive_alerts_orders_by_severity():
    scans = [make_scan("STU001", at(8, 40))]

    alerts = derive_alerts(roster(), scans, at(9))

    assert [a.alert_id for a in alerts] == ["allergy-STU001", "missed-STU002", "missed-STU004", "late-STU001"]
    assert [a.severity for a in alerts] == [Severity.HIGH, Severity.MEDIUM, Severity.MEDIUM, Severity.LOW]
    assert alerts[0].message == "Ava Brown has allergies: Peanuts. Recently scanned in."
    assert alerts[0].timestamp == at(8, 40)
    assert alerts[-1].message == "Ava Brown arrived late at 08:40:00."
    assert all(not a.resolved for a in alerts)


def test_derive_alerts_is_deterministic():
    scans = [make_scan("STU001", at(8, 40)), make_scan("STU002", at(8, 45))]

    assert derive_alerts(roster(), scans, at(9)) == derive_alerts(roster(), scans, at(9))


def test_no_missed_scan_alerts_before_school_starts():
    alerts = derive_alerts(roster(), [], at(7, 59))

    assert [a for a in alerts if a.alert_type == AlertType.MISSED_SCAN] == []


def test_allergy_alert_only_for_recent_scans():
    alerts = derive_alerts(roster(), [make_scan("STU001", at(7, 30))], at(9))

    assert [a for a in alerts if a.alert_type == AlertType.ALLERGY] == []


def test_on_time_check_in_is_not_late():
    alerts = derive_alerts(roster(), [make_scan("STU002", at(8, 29)), make_scan("STU002", at(8, 50))], at(9))

    assert "late-STU002" not in {a.alert_id for a in alerts}


def test_driver_alerts_only_cover_the_drivers_bus():
    students = [
        make_student("STU001", "Ava Brown", allergies=("Peanuts",), bus_route="Bus #1"),
        make_student("STU002", "Ben Carter", bus_route="Bus #1"),
        make_student("STU005", "Eve Fox", allergies=("Latex",), bus_route="Bus #2"),
    ]
    scans = [make_scan("STU002", at(7, 45), location="Bus #1")]

    alerts = driver_alerts(students, scans, at(9), bus_id="Bus #1")

    assert [a.alert_id for a in alerts] == ["allergy-STU001", "unscanned-STU001"]
    assert driver_alerts(students, scans, at(9), bus_id=None) == []
