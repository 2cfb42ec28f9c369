from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an account of any role.

    Note: Plain data object, no DB access here. ``class_name`` is the cached
    copy of the student's ClassRoom membership.
    """

    user_id: str
    password_hash: str
    role: Role
    name: str
    email: Optional[str] = None
    class_name: Optional[str] = None
    subject: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    def to_public(self) -> dict:
        return {
            "userId": self.user_id,
            "name": self.name,
            "role": self.role.value,
            "email": self.email,
            "class": self.class_name,
            "subject": self.subject,
            "isActive": self.is_active,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
