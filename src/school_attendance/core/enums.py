from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class AttendanceStatus(str, Enum):
    """Attendance status stored for both students and teachers."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class NoticeType(str, Enum):
    HOMEWORK = "homework"
    ANNOUNCEMENT = "announcement"
    EVENT = "event"
    GENERAL = "general"


class TargetRole(str, Enum):
    """Audience of a notice."""

    STUDENT = "student"
    TEACHER = "teacher"
    ALL = "all"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
