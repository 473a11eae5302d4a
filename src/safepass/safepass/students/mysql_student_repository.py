from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import TransportationStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import Student
from .repository import StudentRepository

_COLUMNS = """
    id, name, grade, student_number, allergies, medical_notes, emergency_contact, emergency_phone,
    parent_email, parent_phone, transportation_status, bus_route, teacher_name, classroom_number, custom_fields
"""


def _to_student(row: dict) -> Student:
    return Student(
        student_id=str(row["id"]),
        name=row["name"],
        grade=str(row["grade"]),
        student_number=row.get("student_number"),
        allergies=tuple(load_json(row.get("allergies"), [])),
        medical_notes=row.get("medical_notes"),
        emergency_contact=row.get("emergency_contact"),
        emergency_phone=row.get("emergency_phone"),
        parent_email=row.get("parent_email"),
        parent_phone=row.get("parent_phone"),
        transportation_status=TransportationStatus(row.get("transportation_status") or "walker"),
        bus_route=row.get("bus_route"),
        teacher_name=row.get("teacher_name"),
        classroom_number=row.get("classroom_number"),
        custom_fields=load_json(row.get("custom_fields"), {}),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY name")
            return [_to_student(r) for r in fetchall(cur)]

    def get_by_id(self, student_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s", (student_id,))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def create(self, student: Student) -> Student:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(
                    id, name, grade, student_number, allergies, medical_notes, emergency_contact,
                    emergency_phone, parent_email, parent_phone, transportation_status, bus_route,
                    teacher_name, classroom_number, custom_fields
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    student.student_id,
                    student.name,
                    student.grade,
                    student.student_number,
                    dump_json(list(student.allergies)),
                    student.medical_notes,
                    student.emergency_contact,
                    student.emergency_phone,
                    student.parent_email,
                    student.parent_phone,
                    student.transportation_status.value,
                    student.bus_route,
                    student.teacher_name,
                    student.classroom_number,
                    dump_json(student.custom_fields),
                ),
            )
        return student
