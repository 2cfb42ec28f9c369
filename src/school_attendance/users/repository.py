from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for users.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_id_and_role(self, user_id: str, role: Role) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        user_id: str,
        password_hash: str,
        role: Role,
        name: str,
        email: Optional[str] = None,
        class_name: Optional[str] = None,
        subject: Optional[str] = None,
    ) -> User:
        raise NotImplementedError

    def list_active(self, *, role: Role, class_names: Optional[Sequence[str]] = None) -> Sequence[User]:
        """Active users of a role; ``class_names=None`` means any class."""

        raise NotImplementedError

    def count_by_role(self, role: Role, *, active_only: bool = True) -> int:
        raise NotImplementedError

    def set_active(self, user_id: str, *, role: Role, is_active: bool) -> bool:
        raise NotImplementedError

    def set_class_name(self, user_id: str, class_name: Optional[str]) -> bool:
        raise NotImplementedError

    def update_profile(
        self,
        user_id: str,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password_hash: Optional[str] = None,
    ) -> None:
        raise NotImplementedError
