from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class ClassRoom:
    """Domain entity: a class with its owning teacher, members and subjects.

    ``student_ids`` is the authoritative membership of the class.
    """

    class_id: int
    class_name: str
    teacher_id: str
    student_ids: Tuple[str, ...] = field(default_factory=tuple)
    subjects: Tuple[str, ...] = field(default_factory=tuple)
    is_active: bool = True
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.class_id,
            "className": self.class_name,
            "teacher": self.teacher_id,
            "students": list(self.student_ids),
            "subjects": list(self.subjects),
            "isActive": self.is_active,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
