from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role, UserStatus
from .model import User


class UserRepository(Protocol):
    """Repository interface for user_profiles.

    Services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, user: User) -> User:
        raise NotImplementedError

    def update_profile(
        self,
        user_id: str,
        *,
        name: str,
        phone: Optional[str],
        school_id: Optional[str],
        bus_id: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def set_role(self, user_id: str, role: Role) -> bool:
        raise NotImplementedError

    def set_status(self, user_id: str, status: UserStatus) -> bool:
        raise NotImplementedError

    def set_password_hash(self, user_id: str, password_hash: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: str) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError
