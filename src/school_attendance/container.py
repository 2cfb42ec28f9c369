from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .access.ownership import ClassOwnershipLookup
from .access.policy import AccessPolicy
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository, MySQLTeacherAttendanceRepository
from .attendance.repository import AttendanceRepository, TeacherAttendanceRepository
from .attendance.service import AttendanceService, TeacherAttendanceService
from .classes.membership import ClassMembership
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.repository import ClassRepository
from .classes.service import ClassService
from .database.connection import DBConfig, DatabaseConnection
from .notices.mysql_notice_repository import MySQLNoticeRepository
from .notices.repository import NoticeRepository
from .notices.service import NoticeService
from .reports.service import ReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    classes_repo: ClassRepository
    attendance_repo: AttendanceRepository
    teacher_attendance_repo: TeacherAttendanceRepository
    notices_repo: NoticeRepository

    policy: AccessPolicy
    membership: ClassMembership

    auth_service: AuthService
    user_service: UserService
    class_service: ClassService
    attendance_service: AttendanceService
    teacher_attendance_service: TeacherAttendanceService
    notice_service: NoticeService
    report_service: ReportService


def assemble(
    *,
    users_repo: UserRepository,
    classes_repo: ClassRepository,
    attendance_repo: AttendanceRepository,
    teacher_attendance_repo: TeacherAttendanceRepository,
    notices_repo: NoticeRepository,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any set of repositories (MySQL or in-memory)."""

    policy = AccessPolicy(ClassOwnershipLookup(classes_repo))
    membership = ClassMembership(classes_repo, users_repo)

    return Container(
        conn=conn,
        users_repo=users_repo,
        classes_repo=classes_repo,
        attendance_repo=attendance_repo,
        teacher_attendance_repo=teacher_attendance_repo,
        notices_repo=notices_repo,
        policy=policy,
        membership=membership,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo, classes_repo, policy, membership),
        class_service=ClassService(classes_repo, users_repo, policy),
        attendance_service=AttendanceService(attendance_repo, users_repo, policy),
        teacher_attendance_service=TeacherAttendanceService(teacher_attendance_repo, users_repo, policy),
        notice_service=NoticeService(notices_repo, policy),
        report_service=ReportService(
            attendance=attendance_repo,
            teacher_attendance=teacher_attendance_repo,
            classes=classes_repo,
            users=users_repo,
            policy=policy,
        ),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return assemble(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        classes_repo=MySQLClassRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        teacher_attendance_repo=MySQLTeacherAttendanceRepository(conn),
        notices_repo=MySQLNoticeRepository(conn),
    )
