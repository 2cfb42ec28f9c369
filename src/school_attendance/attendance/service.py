from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..access.policy import AccessPolicy, Operation, ResourceKind
from ..common.datetime_utils import now_local, parse_iso_date, parse_optional_date
from ..common.validators import optional_text, parse_enum, require_non_empty
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..core.principal import Principal
from ..users.repository import UserRepository
from .export import export_sort_key
from .model import AttendanceQuery, AttendanceRecord, TeacherAttendanceRecord
from .repository import AttendanceRepository, TeacherAttendanceRepository

logger = logging.getLogger(__name__)


def _list_sort_key(r: AttendanceRecord):
    return (-r.date.toordinal(), r.student_name, r.student_id)


class AttendanceService:
    """Student attendance: reading, marking and exporting the ledger."""

    def __init__(self, attendance: AttendanceRepository, users: UserRepository, policy: AccessPolicy):
        self._attendance = attendance
        self._users = users
        self._policy = policy

    def list_records(
        self,
        principal: Principal,
        *,
        class_name: Optional[str] = None,
        on_date: Optional[str] = None,
        student_id: Optional[str] = None,
        marked_by: Optional[str] = None,
    ) -> list[AttendanceRecord]:
        filters = self._policy.authorize(
            principal,
            ResourceKind.ATTENDANCE,
            Operation.READ,
            {"class_name": optional_text(class_name), "student_id": optional_text(student_id)},
        )
        query = AttendanceQuery(
            class_names=filters["class_names"],
            on_date=parse_optional_date(on_date),
            student_id=filters.get("student_id"),
            marked_by=optional_text(marked_by),
        )
        return sorted(self._attendance.find(query), key=_list_sort_key)

    def _snapshot_name(self, student_id: str, fallback: Optional[str]) -> Optional[str]:
        student = self._users.get_by_id_and_role(student_id, Role.STUDENT)
        if student:
            return student.name
        return optional_text(fallback)

    def mark(
        self,
        principal: Principal,
        *,
        class_name: str,
        date: str,
        subject: Optional[str] = None,
        students: Sequence[Mapping[str, Any]] = (),
    ) -> int:
        """Mark a whole class for one day and subject. Returns the number of rows written."""

        class_name = optional_text(class_name) or ""
        self._policy.authorize(principal, ResourceKind.ATTENDANCE, Operation.WRITE, {"class_name": class_name})

        day = parse_iso_date(require_non_empty(date, "Date"))
        subject = optional_text(subject) or ""
        if not isinstance(students, (list, tuple)) or not students:
            raise ValidationError("Students list is required")

        now = now_local()
        records: list[AttendanceRecord] = []
        for entry in students:
            if not isinstance(entry, Mapping):
                raise ValidationError("Invalid student entry")
            student_id = require_non_empty(entry.get("studentId"), "Student ID")
            name = self._snapshot_name(student_id, entry.get("studentName"))
            if not name:
                raise ValidationError(f"Unknown student: {student_id}")
            records.append(
                AttendanceRecord(
                    student_id=student_id,
                    student_name=name,
                    class_name=class_name,
                    date=day,
                    status=parse_enum(AttendanceStatus, entry.get("status"), "status"),
                    marked_by=principal.user_id,
                    subject=subject,
                    marked_at=now,
                )
            )

        for record in records:
            self._attendance.upsert(record)

        logger.info("%s marked %d students in %s for %s", principal.user_id, len(records), class_name, day)
        return len(records)

    def bulk_mark(self, principal: Principal, entries: Any) -> int:
        """Mark rows of possibly different classes.

        Rows the teacher may not write, rows for unknown students and
        malformed rows are skipped; the caller gets the processed count.
        """

        self._policy.authorize(principal, ResourceKind.ATTENDANCE, Operation.BULK_WRITE)
        if not isinstance(entries, list) or not entries:
            raise ValidationError("Invalid attendance data")

        processed = 0
        for entry in entries:
            if not isinstance(entry, Mapping):
                continue
            class_name = optional_text(entry.get("class")) or ""
            decision = self._policy.check(
                principal, ResourceKind.ATTENDANCE, Operation.WRITE, {"class_name": class_name}
            )
            if not decision.allowed:
                continue

            student_id = optional_text(entry.get("studentId"))
            student = self._users.get_by_id_and_role(student_id, Role.STUDENT) if student_id else None
            if not student:
                continue

            try:
                record = AttendanceRecord(
                    student_id=student.user_id,
                    student_name=student.name,
                    class_name=class_name,
                    date=parse_iso_date(entry.get("date")),
                    status=parse_enum(AttendanceStatus, entry.get("status"), "status"),
                    marked_by=principal.user_id,
                    subject=optional_text(entry.get("subject")) or "",
                    marked_at=now_local(),
                )
            except DomainError:
                continue

            self._attendance.upsert(record)
            processed += 1

        skipped = len(entries) - processed
        if skipped:
            logger.info("Bulk mark by %s: %d processed, %d skipped", principal.user_id, processed, skipped)
        return processed

    def export(
        self,
        principal: Principal,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        class_name: Optional[str] = None,
    ) -> list[AttendanceRecord]:
        filters = self._policy.authorize(
            principal, ResourceKind.ATTENDANCE, Operation.EXPORT, {"class_name": optional_text(class_name)}
        )
        query = AttendanceQuery(
            class_names=filters["class_names"],
            start_date=parse_optional_date(start_date),
            end_date=parse_optional_date(end_date),
        )
        return sorted(self._attendance.find(query), key=export_sort_key)

    def recent_for_student(self, student_id: str, limit: int) -> Sequence[AttendanceRecord]:
        return self._attendance.recent_for_student(student_id, limit)

    def recent_marked_by(self, teacher_id: str, limit: int) -> Sequence[AttendanceRecord]:
        return self._attendance.recent_marked_by(teacher_id, limit)


class TeacherAttendanceService:
    def __init__(self, attendance: TeacherAttendanceRepository, users: UserRepository, policy: AccessPolicy):
        self._attendance = attendance
        self._users = users
        self._policy = policy

    def list_records(
        self,
        principal: Principal,
        *,
        teacher_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Sequence[TeacherAttendanceRecord]:
        filters = self._policy.authorize(
            principal, ResourceKind.TEACHER_ATTENDANCE, Operation.READ, {"teacher_id": optional_text(teacher_id)}
        )
        return self._attendance.find(
            teacher_id=filters["teacher_id"],
            start_date=parse_optional_date(start_date),
            end_date=parse_optional_date(end_date),
        )

    def mark(
        self,
        principal: Principal,
        *,
        date: str,
        status: str,
        teacher_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> TeacherAttendanceRecord:
        filters = self._policy.authorize(
            principal, ResourceKind.TEACHER_ATTENDANCE, Operation.WRITE, {"teacher_id": optional_text(teacher_id)}
        )
        target_id = filters["teacher_id"]

        teacher = self._users.get_by_id_and_role(target_id, Role.TEACHER)
        if not teacher:
            raise NotFoundError("Teacher not found")

        record = self._attendance.upsert(
            TeacherAttendanceRecord(
                teacher_id=teacher.user_id,
                teacher_name=teacher.name,
                date=parse_iso_date(require_non_empty(date, "Date")),
                status=parse_enum(AttendanceStatus, status, "status"),
                notes=optional_text(notes),
                marked_at=now_local(),
            )
        )
        logger.info("Teacher attendance %s %s marked by %s", teacher.user_id, record.date, principal.user_id)
        return record


