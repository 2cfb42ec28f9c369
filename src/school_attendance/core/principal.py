from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import Role


@dataclass(frozen=True)
class Principal:
    """The authenticated actor, rebuilt from verified token claims."""

    user_id: str
    role: Role
    name: str
    class_name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_teacher(self) -> bool:
        return self.role == Role.TEACHER

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT
