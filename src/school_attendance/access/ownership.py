from __future__ import annotations

from typing import Protocol, Sequence

from ..classes.repository import ClassRepository


class OwnershipLookup(Protocol):
    """Read-only view of the teacher -> class -> student ownership edges."""

    def owned_class_names(self, teacher_id: str) -> Sequence[str]:
        raise NotImplementedError

    def active_class_names(self, teacher_id: str) -> Sequence[str]:
        raise NotImplementedError

    def owns_class(self, teacher_id: str, class_name: str) -> bool:
        raise NotImplementedError

    def teacher_has_student(self, teacher_id: str, student_id: str) -> bool:
        raise NotImplementedError


class ClassOwnershipLookup(OwnershipLookup):
    """Ownership edges answered by the roster store.

    Inactive classes still count for ownership: historical attendance of a
    soft-deleted class stays readable by the teacher who owned it. Rosters
    use :meth:`active_class_names`.
    """

    def __init__(self, classes: ClassRepository):
        self._classes = classes

    def owned_class_names(self, teacher_id: str) -> Sequence[str]:
        return self._classes.list_names_for_teacher(teacher_id)

    def active_class_names(self, teacher_id: str) -> Sequence[str]:
        return [room.class_name for room in self._classes.list_active(teacher_id=teacher_id)]

    def owns_class(self, teacher_id: str, class_name: str) -> bool:
        room = self._classes.get_by_name(class_name)
        return bool(room and room.teacher_id == teacher_id)

    def teacher_has_student(self, teacher_id: str, student_id: str) -> bool:
        return self._classes.teacher_has_student(teacher_id, student_id)
