from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceQuery, AttendanceRecord, TeacherAttendanceRecord


class AttendanceRepository(Protocol):
    def upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        """Insert or replace the record sharing its natural key, atomically."""

        raise NotImplementedError

    def find(self, query: AttendanceQuery) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def recent_for_student(self, student_id: str, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def recent_marked_by(self, teacher_id: str, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_marks(self, *, start: date, end: Optional[date] = None) -> int:
        """Records dated ``start`` .. ``end`` inclusive (open ended when ``end`` is None)."""

        raise NotImplementedError


class TeacherAttendanceRepository(Protocol):
    def upsert(self, record: TeacherAttendanceRecord) -> TeacherAttendanceRecord:
        raise NotImplementedError

    def find(
        self,
        *,
        teacher_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[TeacherAttendanceRecord]:
        raise NotImplementedError
