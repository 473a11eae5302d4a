from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import parse_enum, require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role, UserStatus
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)

SCHOOL_ROLES = {Role.TEACHER, Role.MONITOR, Role.NURSE}

# Canned accounts accepted only when demo login is switched on in settings.
DEMO_PASSWORD = "password"
DEMO_USERS = {
    "admin": ("admin-1", "Admin User", "admin@test.com", "555-0001", Role.ADMIN),
    "teacher": ("teacher-1", "Teacher User", "teacher@test.com", "555-0002", Role.TEACHER),
    "driver": ("driver-1", "Driver User", "driver@test.com", "555-0003", Role.DRIVER),
    "monitor": ("monitor-1", "Monitor User", "monitor@test.com", "555-0004", Role.MONITOR),
    "nurse": ("nurse-1", "Nurse User", "nurse@test.com", "555-0005", Role.NURSE),
}


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: str
    name: str
    email: str
    role: Role
    status: UserStatus
    school_id: Optional[str] = None
    bus_id: Optional[str] = None
    demo: bool = False

    @property
    def is_approved(self) -> bool:
        return self.status == UserStatus.APPROVED

    @classmethod
    def from_user(cls, user: User) -> "SessionUser":
        return cls(
            user_id=user.user_id,
            name=user.name,
            email=user.email,
            role=user.role,
            status=user.status,
            school_id=user.school_id,
            bus_id=user.bus_id,
        )

    def to_session(self) -> dict:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "status": self.status.value,
            "school_id": self.school_id,
            "bus_id": self.bus_id,
            "demo": self.demo,
        }

    @classmethod
    def from_session(cls, data: Mapping) -> "SessionUser":
        return cls(
            user_id=str(data["user_id"]),
            name=data.get("name") or "",
            email=data.get("email") or "",
            role=Role(data["role"]),
            status=UserStatus(data["status"]),
            school_id=data.get("school_id"),
            bus_id=data.get("bus_id"),
            demo=bool(data.get("demo")),
        )


def _validate_affiliation(role: Role, school_id: Optional[str], bus_id: Optional[str]) -> tuple[Optional[str], Optional[str]]:
    school_id = (school_id or "").strip() or None
    bus_id = (bus_id or "").strip() or None
    if role in SCHOOL_ROLES and not school_id:
        raise ValidationError("School ID is required for this role")
    if role == Role.DRIVER and not bus_id:
        raise ValidationError("Bus ID is required for drivers")
    return school_id, bus_id


class AuthService:
    """Use case: sign in, sign up."""

    def __init__(self, users: UserRepository, *, demo_login_enabled: bool = False):
        self._users = users
        self._demo_login_enabled = bool(demo_login_enabled)

    def login(self, identifier: str, secret: str) -> SessionUser:
        identifier = (identifier or "").strip()
        if not identifier or not secret:
            raise ValidationError("Email and password are required")

        user = self._users.get_by_email(identifier)
        if user:
            try:
                ok = check_password_hash(user.password_hash, secret)
            except ValueError:
                # e.g. placeholder or corrupted hashes
                ok = False
            if ok:
                logger.info("User %s signed in (status=%s)", user.user_id, user.status.value)
                return SessionUser.from_user(user)

        demo = self._demo_login(identifier, secret)
        if demo:
            logger.warning("Demo login used for %r", identifier)
            return demo

        raise AuthenticationError("Invalid email or password")

    def _demo_login(self, identifier: str, secret: str) -> Optional[SessionUser]:
        if not self._demo_login_enabled or secret != DEMO_PASSWORD:
            return None
        entry = DEMO_USERS.get(identifier.lower())
        if not entry:
            return None
        user_id, name, email, _phone, role = entry
        return SessionUser(
            user_id=user_id,
            name=name,
            email=email,
            role=role,
            status=UserStatus.APPROVED,
            bus_id="Bus #1" if role == Role.DRIVER else None,
            demo=True,
        )

    def reload(self, current: SessionUser) -> SessionUser:
        """Pick up approval or role changes made since the session was created."""

        if current.demo:
            return current
        user = self._users.get_by_id(current.user_id)
        if not user:
            raise AuthenticationError("Your account no longer exists")
        return SessionUser.from_user(user)

    def sign_up(self, form: Mapping) -> User:
        """Register a new account; it stays pending until an admin approves it."""

        name = require_non_empty(form.get("name"), "Name")
        email = require_email(form.get("email"))
        password = require_min_length(form.get("password"), "Password", MIN_PASSWORD_LENGTH)
        phone = require_non_empty(form.get("phone"), "Phone")
        role = parse_enum(Role, form.get("role") or "", "Role")
        if role == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be requested through sign-up")
        school_id, bus_id = _validate_affiliation(role, form.get("school_id"), form.get("bus_id"))

        if self._users.get_by_email(email):
            raise ValidationError("An account with this email already exists")

        user = self._users.create_user(
            User(
                user_id=uuid.uuid4().hex,
                name=name,
                email=email,
                phone=phone,
                role=role,
                status=UserStatus.PENDING,
                password_hash=generate_password_hash(password),
                school_id=school_id,
                bus_id=bus_id,
            )
        )
        logger.info("Sign-up received for %s as %s (pending approval)", email, role.value)
        return user


class UserService:
    """Use case: manage users (admin) and own profile."""

    def __init__(self, users: UserRepository):
        self._users = users

    def _require_admin(self, current: SessionUser) -> None:
        if current.role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to manage users")

    def _get(self, user_id: str) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_users(self, *, current: SessionUser) -> Sequence[User]:
        self._require_admin(current)
        return self._users.list_all()

    def create_user(self, *, current: SessionUser, form: Mapping) -> User:
        self._require_admin(current)

        name = require_non_empty(form.get("name"), "Name")
        email = require_email(form.get("email"))
        password = require_min_length(form.get("password"), "Password", MIN_PASSWORD_LENGTH)
        phone = (form.get("phone") or "").strip() or None
        role = parse_enum(Role, form.get("role") or "", "Role")
        school_id, bus_id = _validate_affiliation(role, form.get("school_id"), form.get("bus_id"))

        if self._users.get_by_email(email):
            raise ValidationError("An account with this email already exists")

        return self._users.create_user(
            User(
                user_id=uuid.uuid4().hex,
                name=name,
                email=email,
                phone=phone,
                role=role,
                status=UserStatus.APPROVED,
                password_hash=generate_password_hash(password),
                school_id=school_id,
                bus_id=bus_id,
            )
        )

    def update_profile(self, *, current: SessionUser, form: Mapping) -> User:
        user = self._get(current.user_id)
        name = require_non_empty(form.get("name", user.name), "Name")
        phone = (form.get("phone", user.phone) or "").strip() or None
        school_id = (form.get("school_id", user.school_id) or "").strip() or None
        bus_id = (form.get("bus_id", user.bus_id) or "").strip() or None

        self._users.update_profile(user.user_id, name=name, phone=phone, school_id=school_id, bus_id=bus_id)
        return self._get(user.user_id)

    def change_password(self, *, current: SessionUser, current_password: str, new_password: str, confirm_password: str) -> None:
        user = self._get(current.user_id)
        if new_password != confirm_password:
            raise ValidationError("New passwords don't match")
        require_min_length(new_password, "Password", MIN_PASSWORD_LENGTH)
        if not check_password_hash(user.password_hash, current_password or ""):
            raise AuthenticationError("Current password is incorrect")

        self._users.set_password_hash(user.user_id, generate_password_hash(new_password))

    def change_role(self, *, current: SessionUser, user_id: str, role: str) -> User:
        self._require_admin(current)
        new_role = parse_enum(Role, role, "Role")
        user = self._get(user_id)
        if user.user_id == current.user_id and new_role != Role.ADMIN:
            raise ValidationError("You cannot remove your own admin role")

        self._users.set_role(user.user_id, new_role)
        logger.info("Admin %s changed role of %s to %s", current.user_id, user.user_id, new_role.value)
        return self._get(user.user_id)

    def approve(self, *, current: SessionUser, user_id: str) -> User:
        return self._set_status(current, user_id, UserStatus.APPROVED)

    def suspend(self, *, current: SessionUser, user_id: str) -> User:
        if user_id == current.user_id:
            raise ValidationError("You cannot suspend your own account")
        return self._set_status(current, user_id, UserStatus.SUSPENDED)

    def _set_status(self, current: SessionUser, user_id: str, status: UserStatus) -> User:
        self._require_admin(current)
        user = self._get(user_id)
        self._users.set_status(user.user_id, status)
        logger.info("Admin %s set status of %s to %s", current.user_id, user.user_id, status.value)
        return self._get(user.user_id)

    def delete_user(self, *, current: SessionUser, user_id: str) -> None:
        self._require_admin(current)
        user = self._get(user_id)
        if user.user_id == current.user_id:
            raise ValidationError("You cannot delete your own account")

        if not self._users.delete_by_id(user.user_id):
            raise ValidationError("Failed to delete user")
        logger.info("Admin %s deleted user %s", current.user_id, user.user_id)
