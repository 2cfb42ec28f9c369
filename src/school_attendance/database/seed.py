"""Default accounts and sample data.

``seed_defaults`` is safe to run on every start: each group of entities is
only created when its marker row is missing.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional

from werkzeug.security import generate_password_hash

from ..attendance.model import AttendanceRecord, TeacherAttendanceRecord
from ..common.datetime_utils import now_local, today_local
from ..core.enums import AttendanceStatus, Role
from ..container import Container

logger = logging.getLogger(__name__)

DEFAULT_ADMIN = ("admin", "admin123", "System Administrator")

SAMPLE_TEACHERS = [
    ("teacher1", "Ram Prakash Sharma", "Mathematics"),
    ("teacher2", "Sunita Devi", "Science"),
    ("teacher3", "Ajay Kumar", "Hindi"),
]
TEACHER_PASSWORD = "teacher123"

SAMPLE_CLASSES = [
    ("Class-10", "teacher1", ["Mathematics", "Science", "Hindi", "English"]),
    ("Class-9", "teacher2", ["Mathematics", "Science", "Hindi", "English"]),
]

SAMPLE_STUDENTS = [
    ("student1", "Amit Kumar", "Class-10"),
    ("student2", "Sunita Devi", "Class-10"),
    ("student3", "Rahul Singh", "Class-10"),
    ("student4", "Priya Sharma", "Class-9"),
    ("student5", "Vikas Gupta", "Class-9"),
]
STUDENT_PASSWORD = "student123"

STUDENT_HISTORY_DAYS = 5
TEACHER_HISTORY_DAYS = 10


def _seed_admin(c: Container) -> None:
    if c.users_repo.count_by_role(Role.ADMIN, active_only=False):
        return
    user_id, password, name = DEFAULT_ADMIN
    c.users_repo.create_user(
        user_id=user_id,
        password_hash=generate_password_hash(password),
        role=Role.ADMIN,
        name=name,
        email="admin@school.com",
    )
    logger.info("Default admin created: %s", user_id)


def _seed_teachers(c: Container) -> None:
    if c.users_repo.get_by_id(SAMPLE_TEACHERS[0][0]):
        return
    for user_id, name, subject in SAMPLE_TEACHERS:
        c.users_repo.create_user(
            user_id=user_id,
            password_hash=generate_password_hash(TEACHER_PASSWORD),
            role=Role.TEACHER,
            name=name,
            email=f"{user_id}@school.com",
            subject=subject,
        )
    logger.info("Sample teachers created")


def _seed_classes(c: Container) -> None:
    if c.classes_repo.get_by_name(SAMPLE_CLASSES[0][0]):
        return
    for class_name, teacher_id, subjects in SAMPLE_CLASSES:
        c.classes_repo.create_class(class_name=class_name, teacher_id=teacher_id, subjects=subjects)
    logger.info("Sample classes created")


def _seed_students(c: Container) -> None:
    if c.users_repo.get_by_id(SAMPLE_STUDENTS[0][0]):
        return
    for user_id, name, class_name in SAMPLE_STUDENTS:
        c.users_repo.create_user(
            user_id=user_id,
            password_hash=generate_password_hash(STUDENT_PASSWORD),
            role=Role.STUDENT,
            name=name,
            email=f"{user_id}@school.com",
        )
        c.membership.enroll(user_id, class_name)
    logger.info("Sample students created")


def _seed_attendance(c: Container, today: date) -> None:
    if c.attendance_repo.count_marks(start=date.min):
        return
    class_name, teacher_id, subjects = SAMPLE_CLASSES[0]
    students = [s for s in SAMPLE_STUDENTS if s[2] == class_name]
    for day_offset in range(STUDENT_HISTORY_DAYS):
        day = today - timedelta(days=day_offset)
        for idx, (student_id, name, _) in enumerate(students):
            # one absence in five, spread over students and days
            absent = (day_offset + idx) % 5 == 4
            c.attendance_repo.upsert(
                AttendanceRecord(
                    student_id=student_id,
                    student_name=name,
                    class_name=class_name,
                    date=day,
                    status=AttendanceStatus.ABSENT if absent else AttendanceStatus.PRESENT,
                    marked_by=teacher_id,
                    subject=subjects[0],
                    marked_at=now_local(),
                )
            )
    logger.info("Sample attendance created")


def _seed_teacher_attendance(c: Container, today: date) -> None:
    if c.teacher_attendance_repo.find(teacher_id=SAMPLE_TEACHERS[0][0]):
        return
    for day_offset in range(TEACHER_HISTORY_DAYS):
        day = today - timedelta(days=day_offset)
        for idx, (teacher_id, name, _) in enumerate(SAMPLE_TEACHERS):
            absent = (day_offset + idx) % 10 == 9
            c.teacher_attendance_repo.upsert(
                TeacherAttendanceRecord(
                    teacher_id=teacher_id,
                    teacher_name=name,
                    date=day,
                    status=AttendanceStatus.ABSENT if absent else AttendanceStatus.PRESENT,
                    notes="Late due to transport issue" if day_offset == 0 and idx == 0 else None,
                    marked_at=now_local(),
                )
            )
    logger.info("Sample teacher attendance created")


def seed_defaults(c: Container, *, today: Optional[date] = None) -> None:
    today = today or today_local()
    _seed_admin(c)
    _seed_teachers(c)
    _seed_classes(c)
    _seed_students(c)
    _seed_attendance(c, today)
    _seed_teacher_attendance(c, today)
