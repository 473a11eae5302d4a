from __future__ import annotations

from datetime import datetime

import httpx
import pytest

from src.safepass.safepass.container import wire
from src.safepass.safepass.core.enums import Role, TransportationStatus
from src.safepass.safepass.notifications.client import FunctionsClient
from tests.helpers import (
    LOCATIONS,
    FunctionsRecorder,
    InMemorySchedules,
    InMemoryScans,
    InMemorySettings,
    InMemoryStudents,
    InMemoryUsers,
    make_student,
    make_user,
)


@pytest.fixture
def fixed_now():
    # a Tuesday, after the 08:30 morning cutoff
    return datetime(2026, 3, 10, 9, 0)


@pytest.fixture
def functions_recorder():
    return FunctionsRecorder()


@pytest.fixture
def functions(functions_recorder):
    return FunctionsClient("http://functions.test", api_key="test-key", transport=httpx.MockTransport(functions_recorder))


@pytest.fixture
def admin():
    return make_user("admin-1", Role.ADMIN, name="Admin User", email="admin@test.com")


@pytest.fixture
def teacher():
    return make_user("teacher-1", Role.TEACHER, name="Teacher User", email="teacher@test.com", school_id="SCH-1")


@pytest.fixture
def driver():
    return make_user("driver-1", Role.DRIVER, name="Driver User", email="driver@test.com", bus_id="Bus #1")


@pytest.fixture
def users_repo(admin, teacher, driver):
    return InMemoryUsers([admin, teacher, driver])


@pytest.fixture
def students_repo():
    return InMemoryStudents(
        [
            make_student("STU001", "Ava Brown", "5", allergies=("Peanuts", "Shellfish"), bus_route="Bus #1", parent_email="brown@home.test"),
            make_student("STU002", "Ben Carter", "5", bus_route="Bus #1"),
            make_student("STU003", "Cara Diaz", "3", transportation_status=TransportationStatus.WALKER),
        ]
    )


@pytest.fixture
def scans_repo():
    return InMemoryScans()


@pytest.fixture
def settings_repo():
    return InMemorySettings()


@pytest.fixture
def container(users_repo, students_repo, scans_repo, settings_repo, functions, fixed_now):
    c = wire(
        users_repo=users_repo,
        students_repo=students_repo,
        scans_repo=scans_repo,
        schedules_repo=InMemorySchedules(),
        settings_repo=settings_repo,
        functions=functions,
        locations=LOCATIONS,
        refresh_interval_seconds=0,
        clock=lambda: fixed_now,
    )
    c.state.refresh()
    return c


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.safepass.safepass.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(email: str, password: str = "secret1"):
        resp = client.post("/api/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return resp

    return _login
