from __future__ import annotations

import csv
import io

from ..core.enums import UploadType

_TEMPLATES = {
    UploadType.STUDENTS: (
        ["name", "student_id", "grade", "allergies", "parent_contact", "emergency_contact", "medical_notes", "bus_route"],
        [
            ["John Doe", "12345", "5", "None", "555-1234", "555-5678", "None", "Route A"],
            ["Jane Smith", "12346", "3", "Peanuts", "555-2345", "555-6789", "Inhaler needed", "Route B"],
        ],
    ),
    UploadType.SCHEDULES: (
        ["Student ID", "Period", "Subject", "Room", "Teacher"],
        [
            ["STU001", "1st", "Mathematics", "205", "Ms. Johnson"],
            ["STU001", "2nd", "Science", "301", "Mr. Smith"],
            ["STU001", "3rd", "English", "102", "Mrs. Davis"],
        ],
    ),
}


def csv_template(upload_type: UploadType) -> str:
    header, rows = _TEMPLATES[upload_type]
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buf.getvalue()


def template_filename(upload_type: UploadType) -> str:
    return f"{upload_type.value}_template.csv"
