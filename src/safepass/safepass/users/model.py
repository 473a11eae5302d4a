from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role, UserStatus


@dataclass(frozen=True)
class User:
    """Domain entity: a staff account from user_profiles.

    Plain data object, no DB access.
    """

    user_id: str
    name: str
    email: str
    phone: Optional[str]
    role: Role
    status: UserStatus
    password_hash: str
    school_id: Optional[str] = None
    bus_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_approved(self) -> bool:
        return self.status == UserStatus.APPROVED

    def to_public(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "role": self.role.value,
            "status": self.status.value,
            "school_id": self.school_id,
            "bus_id": self.bus_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
