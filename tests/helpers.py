"""In-memory repositories, a recording functions transport and small factories for tests."""

from __future__ import annotations

import json
from dataclasses import replace
from datetime import datetime
from typing import Optional

import httpx
from werkzeug.security import generate_password_hash

from src.safepass.safepass.core.enums import Role, ScanAction, TransportationStatus, UserStatus
from src.safepass.safepass.core.exceptions import RemoteServiceError
from src.safepass.safepass.scans.model import ScanEvent
from src.safepass.safepass.students.model import Student
from src.safepass.safepass.users.model import User
from src.safepass.safepass.users.service import SessionUser

LOCATIONS = ("Bus #1", "Bus #2", "Classroom 101", "Classroom 205", "Main Entrance", "Cafeteria")


class InMemoryUsers:
    def __init__(self, users=()):
        self._users: dict[str, User] = {u.user_id: u for u in users}

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        for u in self._users.values():
            if u.email.lower() == email.lower():
                return u
        return None

    def create_user(self, user: User) -> User:
        self._users[user.user_id] = user
        return user

    def update_profile(self, user_id: str, *, name, phone, school_id, bus_id) -> bool:
        self._users[user_id] = replace(self._users[user_id], name=name, phone=phone, school_id=school_id, bus_id=bus_id)
        return True

    def set_role(self, user_id: str, role: Role) -> bool:
        self._users[user_id] = replace(self._users[user_id], role=role)
        return True

    def set_status(self, user_id: str, status: UserStatus) -> bool:
        self._users[user_id] = replace(self._users[user_id], status=status)
        return True

    def set_password_hash(self, user_id: str, password_hash: str) -> bool:
        self._users[user_id] = replace(self._users[user_id], password_hash=password_hash)
        return True

    def delete_by_id(self, user_id: str) -> bool:
        return self._users.pop(user_id, None) is not None

    def list_all(self):
        return sorted(self._users.values(), key=lambda u: u.name)


class InMemoryStudents:
    def __init__(self, students=()):
        self._students: dict[str, Student] = {s.student_id: s for s in students}
        self.fail = False

    def list_all(self):
        if self.fail:
            raise RemoteServiceError("Database is unavailable")
        return sorted(self._students.values(), key=lambda s: s.name)

    def get_by_id(self, student_id: str) -> Optional[Student]:
        return self._students.get(student_id)

    def create(self, student: Student) -> Student:
        self._students[student.student_id] = student
        return student


class InMemoryScans:
    def __init__(self, events=()):
        self._events: list[ScanEvent] = list(events)
        self._id = len(self._events)
        self.fail = False

    def list_all(self):
        if self.fail:
            raise RemoteServiceError("Database is unavailable")
        return sorted(self._events, key=lambda e: e.timestamp, reverse=True)

    def append(self, event: ScanEvent) -> ScanEvent:
        if self.fail:
            raise RemoteServiceError("Database is unavailable")
        self._id += 1
        saved = replace(event, event_id=self._id)
        self._events.append(saved)
        return saved


class InMemorySchedules:
    def __init__(self):
        self._entries = {}

    def upsert(self, entry):
        self._entries[(entry.student_id, entry.period)] = entry
        return entry

    def list_for_student(self, student_id: str):
        return sorted((e for (sid, _), e in self._entries.items() if sid == student_id), key=lambda e: e.period)


class InMemorySettings:
    def __init__(self, rows=None):
        self.rows = dict(rows or {})

    def get_all(self):
        return dict(self.rows)

    def put(self, key, value):
        self.rows[key] = value


class FunctionsRecorder:
    """httpx MockTransport handler that records each serverless function call."""

    def __init__(self):
        self.calls: list[tuple[str, dict]] = []
        self.failing: set[str] = set()
        self.responses: dict[str, dict] = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        name = request.url.path.rsplit("/", 1)[-1]
        self.calls.append((name, json.loads(request.content or b"{}")))
        if name in self.failing:
            return httpx.Response(500, json={"error": "boom"})
        return httpx.Response(200, json=self.responses.get(name, {"success": True}))

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


def make_student(student_id: str, name: str, grade: str = "5", **kwargs) -> Student:
    kwargs.setdefault("transportation_status", TransportationStatus.BUS)
    kwargs.setdefault("emergency_contact", "555-0100")
    return Student(student_id=student_id, name=name, grade=grade, **kwargs)


def make_scan(student_id: str, ts: datetime, action=ScanAction.IN, location="Main Entrance", scanned_by="Teacher User") -> ScanEvent:
    return ScanEvent(student_id=student_id, location=location, action=action, timestamp=ts, scanned_by=scanned_by)


def make_user(user_id: str, role: Role, *, status=UserStatus.APPROVED, password="secret1", email=None, **kwargs) -> User:
    return User(
        user_id=user_id,
        name=kwargs.pop("name", f"{role.value.title()} {user_id}"),
        email=email or f"{user_id}@school.test",
        phone=kwargs.pop("phone", "555-0000"),
        role=role,
        status=status,
        password_hash=generate_password_hash(password),
        **kwargs,
    )


def session_user(user: User) -> SessionUser:
    return SessionUser.from_user(user)


