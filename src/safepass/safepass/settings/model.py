from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from ..core.constants import REQUIRED_PROFILE_FIELDS

ALERT_THRESHOLDS = "alert_thresholds"
NOTIFICATION_SETTINGS = "notification_settings"
STUDENT_PROFILE_FIELDS = "student_profile_fields"


@dataclass(frozen=True)
class AlertThresholds:
    unscanned_minutes: int = 30
    late_arrival_minutes: int = 15
    missed_scan_hours: int = 2

    def to_public(self) -> dict:
        return {
            "unscanned_minutes": self.unscanned_minutes,
            "late_arrival_minutes": self.late_arrival_minutes,
            "missed_scan_hours": self.missed_scan_hours,
        }

    @classmethod
    def from_value(cls, value: Mapping[str, Any]) -> "AlertThresholds":
        d = cls()
        return cls(
            unscanned_minutes=int(value.get("unscanned_minutes", d.unscanned_minutes)),
            late_arrival_minutes=int(value.get("late_arrival_minutes", d.late_arrival_minutes)),
            missed_scan_hours=int(value.get("missed_scan_hours", d.missed_scan_hours)),
        )


@dataclass(frozen=True)
class NotificationSettings:
    email_enabled: bool = True
    sms_enabled: bool = False
    push_enabled: bool = True

    def to_public(self) -> dict:
        return {
            "email_enabled": self.email_enabled,
            "sms_enabled": self.sms_enabled,
            "push_enabled": self.push_enabled,
        }

    @classmethod
    def from_value(cls, value: Mapping[str, Any]) -> "NotificationSettings":
        d = cls()
        return cls(
            email_enabled=bool(value.get("email_enabled", d.email_enabled)),
            sms_enabled=bool(value.get("sms_enabled", d.sms_enabled)),
            push_enabled=bool(value.get("push_enabled", d.push_enabled)),
        )


@dataclass(frozen=True)
class SystemSettings:
    """Admin-editable settings, one system_settings row per attribute."""

    alert_thresholds: AlertThresholds = field(default_factory=AlertThresholds)
    notification_settings: NotificationSettings = field(default_factory=NotificationSettings)
    student_profile_fields: tuple[str, ...] = REQUIRED_PROFILE_FIELDS

    @classmethod
    def defaults(cls) -> "SystemSettings":
        return cls()

    def to_rows(self) -> dict[str, Any]:
        return {
            ALERT_THRESHOLDS: self.alert_thresholds.to_public(),
            NOTIFICATION_SETTINGS: self.notification_settings.to_public(),
            STUDENT_PROFILE_FIELDS: list(self.student_profile_fields),
        }

    @classmethod
    def from_rows(cls, rows: Mapping[str, Any]) -> "SystemSettings":
        """Missing keys fall back to defaults."""

        d = cls.defaults()
        fields = rows.get(STUDENT_PROFILE_FIELDS)
        return cls(
            alert_thresholds=AlertThresholds.from_value(rows.get(ALERT_THRESHOLDS) or {}),
            notification_settings=NotificationSettings.from_value(rows.get(NOTIFICATION_SETTINGS) or {}),
            student_profile_fields=tuple(fields) if fields else d.student_profile_fields,
        )

    def to_public(self) -> dict:
        return self.to_rows()
