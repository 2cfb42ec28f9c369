from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's status for a day, class and subject.

    ``student_name`` is a snapshot taken at marking time and is never
    rewritten when the profile name changes.
    """

    student_id: str
    student_name: str
    class_name: str
    date: date
    status: AttendanceStatus
    marked_by: str
    subject: str = ""
    marked_at: Optional[datetime] = None
    record_id: Optional[int] = None

    @property
    def key(self) -> tuple:
        return (self.student_id, self.date, self.subject, self.class_name)

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "studentId": self.student_id,
            "studentName": self.student_name,
            "class": self.class_name,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "markedBy": self.marked_by,
            "subject": self.subject,
            "markedAt": self.marked_at.isoformat() if self.marked_at else None,
        }


@dataclass(frozen=True)
class TeacherAttendanceRecord:
    teacher_id: str
    teacher_name: str
    date: date
    status: AttendanceStatus
    notes: Optional[str] = None
    marked_at: Optional[datetime] = None
    record_id: Optional[int] = None

    @property
    def key(self) -> tuple:
        return (self.teacher_id, self.date)

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "teacherId": self.teacher_id,
            "teacherName": self.teacher_name,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "notes": self.notes or "",
            "markedAt": self.marked_at.isoformat() if self.marked_at else None,
        }


@dataclass(frozen=True)
class AttendanceQuery:
    """Read filters after access narrowing. ``class_names=None`` means any class."""

    class_names: Optional[Sequence[str]] = None
    on_date: Optional[date] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    student_id: Optional[str] = None
    marked_by: Optional[str] = None
