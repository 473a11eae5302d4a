from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Sequence

from ..core.exceptions import RemoteServiceError
from ..scans.model import ScanEvent
from ..scans.repository import ScanEventRepository
from ..students.model import Student
from ..students.repository import StudentRepository

logger = logging.getLogger(__name__)

Listener = Callable[["AppState"], None]


class AppState:
    """Cached roster and scan log shared by every view.

    The only writer of the cache: all mutation goes through refresh(),
    add_scan_log() and add_student(). Listeners are told after each change
    so derived views (alerts, tracker) recompute instead of polling.
    """

    def __init__(self, students: StudentRepository, scans: ScanEventRepository):
        self._students_repo = students
        self._scans_repo = scans
        self._lock = threading.RLock()
        self._students: tuple[Student, ...] = ()
        self._scan_events: tuple[ScanEvent, ...] = ()
        self._listeners: list[Listener] = []
        self._loaded = False

    @property
    def students(self) -> tuple[Student, ...]:
        return self._students

    @property
    def scan_events(self) -> tuple[ScanEvent, ...]:
        """Newest first."""
        return self._scan_events

    @property
    def loaded(self) -> bool:
        return self._loaded

    def find_student(self, student_id: str) -> Optional[Student]:
        for student in self._students:
            if student.student_id == student_id:
                return student
        return None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def refresh(self) -> None:
        """Reload the full roster and scan log, replacing the cached copies."""

        students: Sequence[Student] = self._students_repo.list_all()
        events: Sequence[ScanEvent] = self._scans_repo.list_all()
        with self._lock:
            self._students = tuple(students)
            self._scan_events = tuple(events)
            self._loaded = True
        logger.debug("Cache refreshed: %d students, %d scan events", len(students), len(events))
        self._notify()

    def ensure_loaded(self) -> None:
        if not self._loaded:
            self.refresh()

    def add_scan_log(self, event: ScanEvent) -> ScanEvent:
        """Persist remotely, then prepend locally; the cache is untouched if the write fails."""

        try:
            saved = self._scans_repo.append(event)
        except RemoteServiceError:
            logger.exception("Failed to save scan event for %s", event.student_id)
            raise
        with self._lock:
            self._scan_events = (saved,) + self._scan_events
        self._notify()
        return saved

    def add_student(self, student: Student) -> Student:
        saved = self._students_repo.create(student)
        with self._lock:
            self._students = self._students + (saved,)
        self._notify()
        return saved

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(self)
            except Exception:
                logger.exception("State listener %r failed", listener)
