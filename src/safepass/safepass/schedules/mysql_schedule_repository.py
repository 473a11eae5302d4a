from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import ScheduleEntry
from .repository import ScheduleRepository


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, entry: ScheduleEntry) -> ScheduleEntry:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO student_schedules(student_id, period, subject, room, teacher)
                VALUES(%s, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE subject=VALUES(subject), room=VALUES(room), teacher=VALUES(teacher)
                """,
                (entry.student_id, entry.period, entry.subject, entry.room, entry.teacher),
            )
        return entry

    def list_for_student(self, student_id: str) -> Sequence[ScheduleEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, period, subject, room, teacher
                FROM student_schedules
                WHERE student_id=%s
                ORDER BY period
                """,
                (student_id,),
            )
            return [
                ScheduleEntry(
                    student_id=str(r["student_id"]),
                    period=str(r["period"]),
                    subject=r["subject"],
                    room=r["room"],
                    teacher=r.get("teacher"),
                )
                for r in fetchall(cur)
            ]
