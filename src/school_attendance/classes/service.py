from __future__ import annotations

import logging
from typing import Optional, Sequence, Union

from ..access.policy import AccessPolicy, Operation, ResourceKind
from ..common.validators import optional_text, require_non_empty
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..core.principal import Principal
from ..users.repository import UserRepository
from .model import ClassRoom
from .repository import ClassRepository

logger = logging.getLogger(__name__)


def parse_subjects(subjects: Union[str, Sequence[str], None]) -> list[str]:
    """Accept a list or a comma separated string; keep order, drop blanks and repeats."""

    if subjects is None:
        return []
    items = subjects.split(",") if isinstance(subjects, str) else list(subjects)
    out: list[str] = []
    for s in items:
        s = str(s).strip()
        if s and s not in out:
            out.append(s)
    return out


class ClassService:
    def __init__(self, classes: ClassRepository, users: UserRepository, policy: AccessPolicy):
        self._classes = classes
        self._users = users
        self._policy = policy

    def list_classes(self, principal: Principal) -> Sequence[ClassRoom]:
        filters = self._policy.authorize(principal, ResourceKind.ROSTER, Operation.READ)
        return self._classes.list_active(teacher_id=filters["teacher_id"])

    def create_class(
        self,
        principal: Principal,
        *,
        class_name: str,
        teacher_id: Optional[str] = None,
        subjects: Union[str, Sequence[str], None] = None,
    ) -> ClassRoom:
        filters = self._policy.authorize(
            principal, ResourceKind.ROSTER, Operation.WRITE, {"teacher_id": optional_text(teacher_id)}
        )
        class_name = require_non_empty(class_name, "Class name")
        owner_id = require_non_empty(filters.get("teacher_id"), "Teacher")

        owner = self._users.get_by_id_and_role(owner_id, Role.TEACHER)
        if not owner or not owner.is_active:
            raise ValidationError("Teacher not found")
        if self._classes.get_by_name(class_name):
            raise ValidationError("Class name already exists")

        room = self._classes.create_class(class_name=class_name, teacher_id=owner_id, subjects=parse_subjects(subjects))
        logger.info("Class %s created for teacher %s by %s", class_name, owner_id, principal.user_id)
        return room

    def delete_class(self, principal: Principal, class_id: int) -> None:
        room = self._classes.get_by_id(int(class_id))
        if not room or not room.is_active:
            raise NotFoundError("Class not found")

        self._policy.authorize(principal, ResourceKind.ROSTER, Operation.DELETE, {"teacher_id": room.teacher_id})
        self._classes.set_active(room.class_id, is_active=False)
        logger.info("Class %s deactivated by %s", room.class_name, principal.user_id)
