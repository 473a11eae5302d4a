from __future__ import annotations

import pytest

from src.safepass.safepass.core.enums import Role, UserStatus
from src.safepass.safepass.core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from src.safepass.safepass.users.service import UserService
from tests.helpers import session_user


def test_non_admin_cannot_list_users(users_repo, teacher):
    with pytest.raises(AuthorizationError):
        UserService(users_repo).list_users(current=session_user(teacher))


def test_admin_created_user_is_approved(users_repo, admin):
    svc = UserService(users_repo)

    user = svc.create_user(
        current=session_user(admin),
        form={"name": "Nina Nurse", "email": "nina@school.test", "password": "secret1", "role": "nurse", "school_id": "SCH-1"},
    )

    assert user.status == UserStatus.APPROVED
    assert users_repo.get_by_id(user.user_id) is not None


def test_approve_and_suspend(users_repo, admin, teacher):
    svc = UserService(users_repo)
    users_repo.set_status(teacher.user_id, UserStatus.PENDING)

    assert svc.approve(current=session_user(admin), user_id=teacher.user_id).status == UserStatus.APPROVED
    assert svc.suspend(current=session_user(admin), user_id=teacher.user_id).status == UserStatus.SUSPENDED


def test_admin_cannot_suspend_or_delete_self(users_repo, admin):
    svc = UserService(users_repo)

    with pytest.raises(ValidationError):
        svc.suspend(current=session_user(admin), user_id=admin.user_id)
    with pytest.raises(ValidationError):
        svc.delete_user(current=session_user(admin), user_id=admin.user_id)


def test_admin_cannot_drop_own_admin_role(users_repo, admin):
    with pytest.raises(ValidationError):
        UserService(users_repo).change_role(current=session_user(admin), user_id=admin.user_id, role="teacher")


def test_change_role(users_repo, admin, driver):
    user = UserService(users_repo).change_role(current=session_user(admin), user_id=driver.user_id, role="monitor")

    assert user.role == Role.MONITOR


def test_delete_unknown_user(users_repo, admin):
    with pytest.raises(NotFoundError):
        UserService(users_repo).delete_user(current=session_user(admin), user_id="missing")


def test_delete_user(users_repo, admin, driver):
    UserService(users_repo).delete_user(current=session_user(admin), user_id=driver.user_id)

    assert users_repo.get_by_id(driver.user_id) is None


def test_change_password_requires_matching_confirmation(users_repo, teacher):
    svc = UserService(users_repo)

    with pytest.raises(ValidationError, match="don't match"):
        svc.change_password(current=session_user(teacher), current_password="secret1", new_password="abcdef", confirm_password="abcdeg")
    with pytest.raises(AuthenticationError):
        svc.change_password(current=session_user(teacher), current_password="nope", new_password="abcdef", confirm_password="abcdef")

    svc.change_password(current=session_user(teacher), current_password="secret1", new_password="abcdef", confirm_password="abcdef")


def test_update_profile(users_repo, driver):
    user = UserService(users_repo).update_profile(current=session_user(driver), form={"name": "Dee Driver", "bus_id": "Bus #2"})

    assert user.name == "Dee Driver"
    assert user.bus_id == "Bus #2"
