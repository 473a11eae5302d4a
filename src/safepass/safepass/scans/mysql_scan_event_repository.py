from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from ..core.enums import ScanAction
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import ScanEvent
from .repository import ScanEventRepository


class MySQLScanEventRepository(ScanEventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[ScanEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, student_id, location, action, timestamp, scanned_by
                FROM scan_events
                ORDER BY timestamp DESC, id DESC
                """
            )
            return [
                ScanEvent(
                    event_id=int(r["id"]),
                    student_id=str(r["student_id"]),
                    location=r["location"],
                    action=ScanAction(r["action"]),
                    timestamp=r["timestamp"],
                    scanned_by=r["scanned_by"],
                )
                for r in fetchall(cur)
            ]

    def append(self, event: ScanEvent) -> ScanEvent:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO scan_events(student_id, location, action, timestamp, scanned_by)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (event.student_id, event.location, event.action.value, event.timestamp, event.scanned_by),
            )
            return replace(event, event_id=int(cur.lastrowid))
