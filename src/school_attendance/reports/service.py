from __future__ import annotations

from datetime import timedelta
from typing import Optional

from ..access.policy import AccessPolicy, Operation, ResourceKind
from ..attendance.model import AttendanceQuery
from ..attendance.repository import AttendanceRepository, TeacherAttendanceRepository
from ..classes.repository import ClassRepository
from ..common.datetime_utils import parse_optional_date, today_local
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_HISTORY_LIMIT, RECENT_MARKS_LIMIT, TREND_DAYS
from ..core.enums import Role
from ..core.exceptions import NotFoundError
from ..core.principal import Principal
from ..users.repository import UserRepository
from .aggregation import summarize, summarize_by_status, summarize_by_student


class ReportService:
    """Read-only statistics built on top of the attendance ledger."""

    def __init__(
        self,
        *,
        attendance: AttendanceRepository,
        teacher_attendance: TeacherAttendanceRepository,
        classes: ClassRepository,
        users: UserRepository,
        policy: AccessPolicy,
    ):
        self._attendance = attendance
        self._teacher_attendance = teacher_attendance
        self._classes = classes
        self._users = users
        self._policy = policy

    def attendance_report(
        self,
        principal: Principal,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        class_name: Optional[str] = None,
    ) -> list[dict]:
        filters = self._policy.authorize(
            principal, ResourceKind.REPORT, Operation.READ, {"class_name": optional_text(class_name)}
        )
        rows = self._attendance.find(
            AttendanceQuery(
                class_names=filters["class_names"],
                start_date=parse_optional_date(start_date),
                end_date=parse_optional_date(end_date),
            )
        )
        return [s.to_dict() for s in summarize_by_student(rows)]

    def teacher_attendance_report(
        self,
        principal: Principal,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        teacher_id: Optional[str] = None,
    ) -> dict:
        filters = self._policy.authorize(
            principal, ResourceKind.TEACHER_ATTENDANCE, Operation.READ, {"teacher_id": optional_text(teacher_id)}
        )

        records = self._teacher_attendance.find(
            teacher_id=filters["teacher_id"],
            start_date=parse_optional_date(start_date),
            end_date=parse_optional_date(end_date),
        )
        return {
            "attendance": [r.to_dict() for r in records],
            "stats": summarize(records).to_dict(),
        }

    def class_stats(
        self,
        principal: Principal,
        class_name: str,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> dict:
        class_name = require_non_empty(class_name, "Class name")
        self._policy.authorize(principal, ResourceKind.REPORT, Operation.READ, {"class_name": class_name})

        room = self._classes.get_by_name(class_name)
        if not room:
            raise NotFoundError("Class not found")

        rows = self._attendance.find(
            AttendanceQuery(
                class_names=[class_name],
                start_date=parse_optional_date(start_date),
                end_date=parse_optional_date(end_date),
            )
        )
        return {
            "className": room.class_name,
            "totalStudents": len(room.student_ids),
            "subjects": list(room.subjects),
            "overallStats": summarize_by_status(rows),
            "studentStats": [s.to_dict() for s in summarize_by_student(rows)],
        }

    def dashboard(self, principal: Principal) -> dict:
        if principal.is_student:
            recent = self._attendance.recent_for_student(principal.user_id, DEFAULT_HISTORY_LIMIT)
            return {
                "role": principal.role.value,
                "attendance": [r.to_dict() for r in recent],
                "stats": summarize(recent).to_dict(),
            }

        if principal.is_teacher:
            classes = self._classes.list_active(teacher_id=principal.user_id)
            recent = self._attendance.recent_marked_by(principal.user_id, RECENT_MARKS_LIMIT)
            return {
                "role": principal.role.value,
                "classes": [c.to_dict() for c in classes],
                "recentAttendance": [r.to_dict() for r in recent],
                "stats": {
                    "totalClasses": len(classes),
                    "totalStudents": sum(len(c.student_ids) for c in classes),
                },
            }

        return {
            "role": principal.role.value,
            "stats": {
                "totalStudents": self._users.count_by_role(Role.STUDENT),
                "totalTeachers": self._users.count_by_role(Role.TEACHER),
                "totalClasses": self._classes.count_classes(),
                "todayAttendance": self._attendance.count_marks(start=today_local()),
            },
        }

    def system_statistics(self, principal: Principal) -> dict:
        self._policy.authorize(principal, ResourceKind.STATISTICS, Operation.READ)

        today = today_local()
        trend = []
        for offset in range(TREND_DAYS - 1, -1, -1):
            day = today - timedelta(days=offset)
            trend.append({"date": day.isoformat(), "attendance": self._attendance.count_marks(start=day, end=day)})

        return {
            "totals": {
                "students": self._users.count_by_role(Role.STUDENT, active_only=False),
                "teachers": self._users.count_by_role(Role.TEACHER, active_only=False),
                "classes": self._classes.count_classes(active_only=False),
            },
            "active": {
                "students": self._users.count_by_role(Role.STUDENT),
                "teachers": self._users.count_by_role(Role.TEACHER),
                "classes": self._classes.count_classes(),
            },
            "attendance": {
                "today": self._attendance.count_marks(start=today),
                "thisWeek": self._attendance.count_marks(start=today - timedelta(days=7)),
                "thisMonth": self._attendance.count_marks(start=today - timedelta(days=30)),
            },
            "trends": {"last7Days": trend},
        }
