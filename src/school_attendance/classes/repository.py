from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ClassRoom


class ClassRepository(Protocol):
    def get_by_id(self, class_id: int) -> Optional[ClassRoom]:
        raise NotImplementedError

    def get_by_name(self, class_name: str) -> Optional[ClassRoom]:
        raise NotImplementedError

    def list_active(self, *, teacher_id: Optional[str] = None) -> Sequence[ClassRoom]:
        raise NotImplementedError

    def list_names_for_teacher(self, teacher_id: str) -> Sequence[str]:
        """Every class the teacher owns, active or not."""

        raise NotImplementedError

    def create_class(self, *, class_name: str, teacher_id: str, subjects: Sequence[str]) -> ClassRoom:
        raise NotImplementedError

    def set_active(self, class_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def deactivate_for_teacher(self, teacher_id: str) -> int:
        raise NotImplementedError

    def add_student(self, class_id: int, student_id: str) -> None:
        raise NotImplementedError

    def remove_student_everywhere(self, student_id: str) -> int:
        raise NotImplementedError

    def teacher_has_student(self, teacher_id: str, student_id: str) -> bool:
        raise NotImplementedError

    def count_classes(self, *, active_only: bool = True) -> int:
        raise NotImplementedError
