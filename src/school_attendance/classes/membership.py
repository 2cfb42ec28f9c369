from __future__ import annotations

import logging
from typing import Optional

from ..core.exceptions import ValidationError
from ..users.repository import UserRepository
from .repository import ClassRepository

logger = logging.getLogger(__name__)


class ClassMembership:
    """The only write path for "which class is a student in".

    ClassRoom membership is authoritative; ``User.class_name`` is a cache that
    is rewritten here and nowhere else.
    """

    def __init__(self, classes: ClassRepository, users: UserRepository):
        self._classes = classes
        self._users = users

    def require_class(self, class_name: str):
        room = self._classes.get_by_name(class_name)
        if not room or not room.is_active:
            raise ValidationError(f"Class '{class_name}' does not exist")
        return room

    def enroll(self, student_id: str, class_name: Optional[str]) -> None:
        if not class_name:
            return
        room = self.require_class(class_name)
        self._classes.remove_student_everywhere(student_id)
        self._classes.add_student(room.class_id, student_id)
        self._users.set_class_name(student_id, room.class_name)
        logger.info("Enrolled student %s in %s", student_id, room.class_name)

    def withdraw(self, student_id: str) -> int:
        """Drop the student from every class; the cached class name is kept for history."""

        return self._classes.remove_student_everywhere(student_id)
