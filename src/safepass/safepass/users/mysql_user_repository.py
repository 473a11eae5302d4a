from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role, UserStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "id, name, email, phone, role, status, school_id, bus_id, password_hash, created_at"


def _to_user(row: dict) -> User:
    return User(
        user_id=str(row["id"]),
        name=row["name"],
        email=row["email"],
        phone=row.get("phone"),
        role=Role(row["role"]),
        status=UserStatus(row["status"]),
        password_hash=row["password_hash"],
        school_id=row.get("school_id"),
        bus_id=row.get("bus_id"),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM user_profiles WHERE id=%s", (user_id,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM user_profiles WHERE LOWER(email)=LOWER(%s)", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(self, user: User) -> User:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO user_profiles(id, name, email, phone, role, status, school_id, bus_id, password_hash)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    user.user_id,
                    user.name,
                    user.email,
                    user.phone,
                    user.role.value,
                    user.status.value,
                    user.school_id,
                    user.bus_id,
                    user.password_hash,
                ),
            )
        return self.get_by_id(user.user_id) or user

    def update_profile(self, user_id: str, *, name: str, phone, school_id, bus_id) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE user_profiles SET name=%s, phone=%s, school_id=%s, bus_id=%s WHERE id=%s",
                (name, phone, school_id, bus_id, user_id),
            )
            return cur.rowcount > 0

    def set_role(self, user_id: str, role: Role) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE user_profiles SET role=%s WHERE id=%s", (role.value, user_id))
            return cur.rowcount > 0

    def set_status(self, user_id: str, status: UserStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE user_profiles SET status=%s WHERE id=%s", (status.value, user_id))
            return cur.rowcount > 0

    def set_password_hash(self, user_id: str, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE user_profiles SET password_hash=%s WHERE id=%s", (password_hash, user_id))
            return cur.rowcount > 0

    def delete_by_id(self, user_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM user_profiles WHERE id=%s", (user_id,))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM user_profiles ORDER BY created_at DESC, name")
            return [_to_user(r) for r in fetchall(cur)]
