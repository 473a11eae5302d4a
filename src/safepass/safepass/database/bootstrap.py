from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from ..settings.model import SystemSettings
from .connection import DatabaseConnection
from .mysql_base import dump_json


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for the schema file (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{conn_factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: str | Path) -> None:
    ensure_database_exists(conn_factory)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_default_settings(conn_factory: DatabaseConnection) -> None:
    """Insert missing system_settings rows; existing admin choices are kept."""

    defaults = SystemSettings.defaults().to_rows()
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for key, value in defaults.items():
            cur.execute(
                "INSERT IGNORE INTO system_settings(setting_key, setting_value) VALUES(%s, %s)",
                (key, dump_json(value)),
            )
        conn.commit()
    finally:
        conn.close()


DEMO_ACCOUNTS = (
    ("admin-1", "Admin User", "admin@test.com", "555-0001", "admin"),
    ("teacher-1", "Teacher User", "teacher@test.com", "555-0002", "teacher"),
    ("driver-1", "Driver User", "driver@test.com", "555-0003", "driver"),
    ("monitor-1", "Monitor User", "monitor@test.com", "555-0004", "monitor"),
    ("nurse-1", "Nurse User", "nurse@test.com", "555-0005", "nurse"),
)


def ensure_demo_users(conn_factory: DatabaseConnection, *, password: str = "password") -> None:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        password_hash = generate_password_hash(password)
        for user_id, name, email, phone, role in DEMO_ACCOUNTS:
            cur.execute(
                """
                INSERT INTO user_profiles(id, name, email, phone, role, status, bus_id, password_hash)
                VALUES(%s, %s, %s, %s, %s, 'approved', %s, %s)
                ON DUPLICATE KEY UPDATE name=VALUES(name), role=VALUES(role), status='approved',
                                        password_hash=VALUES(password_hash)
                """,
                (user_id, name, email, phone, role, "Bus #1" if role == "driver" else None, password_hash),
            )
        conn.commit()
    finally:
        conn.close()


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
