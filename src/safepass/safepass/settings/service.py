from __future__ import annotations

import logging
import re
from typing import Mapping

from ..common.validators import require_in_range, require_non_empty
from ..core.constants import REQUIRED_PROFILE_FIELDS
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.service import SessionUser
from .model import (
    ALERT_THRESHOLDS,
    NOTIFICATION_SETTINGS,
    STUDENT_PROFILE_FIELDS,
    AlertThresholds,
    NotificationSettings,
    SystemSettings,
)
from .repository import SettingsRepository

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def _to_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def normalize_field_name(raw: str) -> str:
    return _WHITESPACE.sub("_", require_non_empty(raw, "Field name").lower())


class SettingsService:
    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def _require_admin(self, current: SessionUser) -> None:
        if current.role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

    def get(self) -> SystemSettings:
        return SystemSettings.from_rows(self._settings.get_all())

    def update_alert_thresholds(self, *, current: SessionUser, form: Mapping) -> AlertThresholds:
        self._require_admin(current)
        d = self.get().alert_thresholds
        thresholds = AlertThresholds(
            unscanned_minutes=require_in_range(form.get("unscanned_minutes", d.unscanned_minutes), "Unscanned minutes", 1, 120),
            late_arrival_minutes=require_in_range(
                form.get("late_arrival_minutes", d.late_arrival_minutes), "Late arrival minutes", 1, 60
            ),
            missed_scan_hours=require_in_range(form.get("missed_scan_hours", d.missed_scan_hours), "Missed scan hours", 1, 24),
        )
        self._settings.put(ALERT_THRESHOLDS, thresholds.to_public())
        logger.info("Alert thresholds updated by %s", current.user_id)
        return thresholds

    def update_notification_settings(self, *, current: SessionUser, form: Mapping) -> NotificationSettings:
        self._require_admin(current)
        d = self.get().notification_settings
        settings = NotificationSettings(
            email_enabled=_to_bool(form.get("email_enabled", d.email_enabled)),
            sms_enabled=_to_bool(form.get("sms_enabled", d.sms_enabled)),
            push_enabled=_to_bool(form.get("push_enabled", d.push_enabled)),
        )
        self._settings.put(NOTIFICATION_SETTINGS, settings.to_public())
        logger.info("Notification settings updated by %s", current.user_id)
        return settings

    def add_profile_field(self, *, current: SessionUser, name: str) -> tuple[str, ...]:
        self._require_admin(current)
        field_name = normalize_field_name(name)
        fields = self.get().student_profile_fields
        if field_name in fields:
            raise ValidationError("This field already exists")

        updated = fields + (field_name,)
        self._settings.put(STUDENT_PROFILE_FIELDS, list(updated))
        return updated

    def remove_profile_field(self, *, current: SessionUser, name: str) -> tuple[str, ...]:
        self._require_admin(current)
        if name in REQUIRED_PROFILE_FIELDS:
            raise ValidationError("Required fields cannot be removed")
        fields = self.get().student_profile_fields
        if name not in fields:
            raise ValidationError("Unknown profile field")

        updated = tuple(f for f in fields if f != name)
        self._settings.put(STUDENT_PROFILE_FIELDS, list(updated))
        return updated
