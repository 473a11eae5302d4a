from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional

from .alerts.service import AlertService
from .common.datetime_utils import now_local
from .core.constants import DEFAULT_REFRESH_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .imports.service import ImportService
from .notifications.client import FunctionsClient
from .reports.service import ReportService
from .scanning.allergy_alerts import AllergyAlertBoard
from .scanning.service import ScanService
from .scans.mysql_scan_event_repository import MySQLScanEventRepository
from .scans.repository import ScanEventRepository
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository
from .settings.service import SettingsService
from .state.app_state import AppState
from .state.refresher import RefreshScheduler
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    clock: Callable[[], datetime]

    users_repo: UserRepository
    students_repo: StudentRepository
    scans_repo: ScanEventRepository
    schedules_repo: ScheduleRepository
    settings_repo: SettingsRepository

    state: AppState
    refresher: RefreshScheduler
    functions: FunctionsClient
    allergy_board: AllergyAlertBoard

    auth_service: AuthService
    user_service: UserService
    scan_service: ScanService
    alert_service: AlertService
    report_service: ReportService
    settings_service: SettingsService
    student_service: StudentService
    schedule_service: ScheduleService
    import_service: ImportService


def wire(
    *,
    users_repo: UserRepository,
    students_repo: StudentRepository,
    scans_repo: ScanEventRepository,
    schedules_repo: ScheduleRepository,
    settings_repo: SettingsRepository,
    functions: FunctionsClient,
    locations: Iterable[str],
    demo_login_enabled: bool = False,
    refresh_interval_seconds: float = DEFAULT_REFRESH_SECONDS,
    clock: Callable[[], datetime] = now_local,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Assemble services over the given repositories."""

    state = AppState(students_repo, scans_repo)
    allergy_board = AllergyAlertBoard()

    settings_service = SettingsService(settings_repo)
    scan_service = ScanService(state, functions, allergy_board, locations=locations, clock=clock)
    student_service = StudentService(state, settings_service)
    schedule_service = ScheduleService(schedules_repo, state)

    return Container(
        conn=conn,
        clock=clock,
        users_repo=users_repo,
        students_repo=students_repo,
        scans_repo=scans_repo,
        schedules_repo=schedules_repo,
        settings_repo=settings_repo,
        state=state,
        refresher=RefreshScheduler(state, interval_seconds=refresh_interval_seconds),
        functions=functions,
        allergy_board=allergy_board,
        auth_service=AuthService(users_repo, demo_login_enabled=demo_login_enabled),
        user_service=UserService(users_repo),
        scan_service=scan_service,
        alert_service=AlertService(state, functions, scan_service, settings=settings_service, clock=clock),
        report_service=ReportService(state, clock=clock),
        settings_service=settings_service,
        student_service=student_service,
        schedule_service=schedule_service,
        import_service=ImportService(functions, state, student_service, schedule_service),
    )


def build_container(
    *,
    db_config: dict,
    functions_url: str,
    functions_key: str = "",
    functions_timeout: float = 10.0,
    locations: Iterable[str],
    demo_login_enabled: bool = False,
    refresh_interval_seconds: float = DEFAULT_REFRESH_SECONDS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        users_repo=MySQLUserRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        scans_repo=MySQLScanEventRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        functions=FunctionsClient(functions_url, api_key=functions_key, timeout=functions_timeout),
        locations=locations,
        demo_login_enabled=demo_login_enabled,
        refresh_interval_seconds=refresh_interval_seconds,
        conn=conn,
    )
