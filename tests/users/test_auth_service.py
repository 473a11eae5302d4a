from __future__ import annotations

import pytest

from src.safepass.safepass.core.enums import Role, UserStatus
from src.safepass.safepass.core.exceptions import AuthenticationError, ValidationError
from src.safepass.safepass.users.service import AuthService
from tests.helpers import InMemoryUsers, make_user


def test_login_with_valid_password_returns_session_user(users_repo):
    auth = AuthService(users_repo)

    s_user = auth.login("Teacher@Test.com", "secret1")

    assert s_user.user_id == "teacher-1"
    assert s_user.role == Role.TEACHER
    assert s_user.is_approved


def test_login_wrong_password_raises(users_repo):
    auth = AuthService(users_repo)

    with pytest.raises(AuthenticationError):
        auth.login("teacher@test.com", "wrong")


def test_login_requires_both_fields(users_repo):
    with pytest.raises(ValidationError):
        AuthService(users_repo).login("", "secret1")


def test_pending_user_can_sign_in_but_is_not_approved():
    pending = make_user("u-9", Role.NURSE, status=UserStatus.PENDING, school_id="SCH-1")
    auth = AuthService(InMemoryUsers([pending]))

    s_user = auth.login(pending.email, "secret1")

    assert s_user.status == UserStatus.PENDING
    assert not s_user.is_approved


def test_demo_login_only_when_enabled():
    users = InMemoryUsers()

    with pytest.raises(AuthenticationError):
        AuthService(users).login("driver", "password")

    s_user = AuthService(users, demo_login_enabled=True).login("driver", "password")
    assert s_user.role == Role.DRIVER
    assert s_user.bus_id == "Bus #1"
    assert s_user.demo


def test_sign_up_creates_pending_account():
    users = InMemoryUsers()
    auth = AuthService(users)

    user = auth.sign_up(
        {
            "name": "New Driver",
            "email": "New.Driver@School.test",
            "password": "secret1",
            "phone": "555-1111",
            "role": "driver",
            "bus_id": "Bus #2",
        }
    )

    assert user.status == UserStatus.PENDING
    assert users.get_by_email("new.driver@school.test") is not None


@pytest.mark.parametrize(
    "form, message",
    [
        ({"role": "admin"}, "Admin accounts"),
        ({"role": "teacher"}, "School ID"),
        ({"role": "driver"}, "Bus ID"),
        ({"password": "123"}, "Password"),
    ],
)
def test_sign_up_rejects_invalid_forms(form, message):
    base = {"name": "X", "email": "x@school.test", "password": "secret1", "phone": "555", "role": "nurse", "school_id": "S"}
    base.update(form)
    if form.get("role") in {"teacher", "driver"}:
        base.pop("school_id")

    with pytest.raises(ValidationError, match=message):
        AuthService(InMemoryUsers()).sign_up(base)


def test_sign_up_rejects_duplicate_email(users_repo):
    with pytest.raises(ValidationError, match="already exists"):
        AuthService(users_repo).sign_up(
            {"name": "T", "email": "teacher@test.com", "password": "secret1", "phone": "1", "role": "monitor", "school_id": "S"}
        )


def test_reload_picks_up_approval():
    pending = make_user("u-9", Role.NURSE, status=UserStatus.PENDING, school_id="SCH-1")
    users = InMemoryUsers([pending])
    auth = AuthService(users)
    s_user = auth.login(pending.email, "secret1")

    users.set_status("u-9", UserStatus.APPROVED)

    assert auth.reload(s_user).is_approved
