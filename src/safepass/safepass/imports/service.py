from __future__ import annotations

import logging

from ..common.validators import parse_enum, require_non_empty
from ..core.enums import Role, UploadType
from ..core.exceptions import AuthorizationError
from ..notifications.client import FunctionsClient
from ..schedules.service import ScheduleService
from ..state.app_state import AppState
from ..students.model import ImportResult
from ..students.service import StudentService
from ..users.service import SessionUser
from .templates import csv_template

logger = logging.getLogger(__name__)


class ImportService:
    """Bulk CSV uploads, either parsed here or handed to the csv-processor function."""

    def __init__(
        self,
        functions: FunctionsClient,
        state: AppState,
        students: StudentService,
        schedules: ScheduleService,
    ):
        self._functions = functions
        self._state = state
        self._students = students
        self._schedules = schedules

    def import_local(self, *, current: SessionUser, text: str, upload_type) -> ImportResult:
        kind = parse_enum(UploadType, upload_type, "Upload type")
        require_non_empty(text, "CSV data")
        if kind == UploadType.STUDENTS:
            return self._students.import_csv(current=current, text=text)
        return self._schedules.import_csv(current=current, text=text)

    def process_remote(self, *, current: SessionUser, text: str, upload_type) -> ImportResult:
        if current.role != Role.ADMIN:
            raise AuthorizationError("Admin access required")
        kind = parse_enum(UploadType, upload_type, "Upload type")
        require_non_empty(text, "CSV data")

        data = self._functions.process_csv(csv_data=text, upload_type=kind.value)
        result = ImportResult(processed=data["processed"], errors=data["errors"])
        logger.info("Remote %s import: %d processed, %d errors", kind.value, result.processed, len(result.errors))
        if kind == UploadType.STUDENTS and result.processed:
            # rows were written server-side; pull them into the cache
            self._state.refresh()
        return result

    def template(self, upload_type) -> str:
        return csv_template(parse_enum(UploadType, upload_type, "Upload type"))
