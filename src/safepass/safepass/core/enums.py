from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles gating which endpoints and data subsets a user reaches."""

    ADMIN = "admin"
    TEACHER = "teacher"
    DRIVER = "driver"
    MONITOR = "monitor"
    NURSE = "nurse"


class UserStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    SUSPENDED = "suspended"


class TransportationStatus(str, Enum):
    BUS = "bus"
    PICKUP = "pickup"
    WALKER = "walker"


class ScanAction(str, Enum):
    IN = "in"
    OUT = "out"


class AlertType(str, Enum):
    ALLERGY = "allergy"
    MISSED_SCAN = "missed_scan"
    LATE_ARRIVAL = "late_arrival"


class Severity(str, Enum):
    """Only used to order alerts for display."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return {Severity.HIGH: 0, Severity.MEDIUM: 1, Severity.LOW: 2}[self]


class MissedType(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"


class TrackerStatus(str, Enum):
    ON_BUS = "on-bus"
    ON_CAMPUS = "on-campus"
    UNACCOUNTED = "unaccounted"


class BusStatus(str, Enum):
    IN_TRANSIT = "in-transit"
    ARRIVED = "arrived"
    MISSING_SCANS = "missing-scans"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    LATE = "late"
    MISSING = "missing"


class UploadType(str, Enum):
    STUDENTS = "students"
    SCHEDULES = "schedules"
