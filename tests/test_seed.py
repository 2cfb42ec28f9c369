from __future__ import annotations

from datetime import date

from school_attendance.attendance.model import AttendanceQuery
from school_attendance.core.enums import AttendanceStatus, Role
from school_attendance.database.seed import seed_defaults


def test_seed_creates_default_accounts(container):
    seed_defaults(container, today=date(2024, 5, 10))

    assert container.users_repo.get_by_id_and_role("admin", Role.ADMIN)
    assert container.users_repo.count_by_role(Role.TEACHER) == 3
    assert container.users_repo.count_by_role(Role.STUDENT) == 5

    room = container.classes_repo.get_by_name("Class-10")
    assert room.teacher_id == "teacher1"
    assert set(room.student_ids) == {"student1", "student2", "student3"}
    assert container.users_repo.get_by_id("student4").class_name == "Class-9"


def test_seed_is_idempotent(container):
    seed_defaults(container, today=date(2024, 5, 10))
    marks = container.attendance_repo.count_marks(start=date.min)

    seed_defaults(container, today=date(2024, 5, 11))

    assert container.users_repo.count_by_role(Role.STUDENT) == 5
    assert container.classes_repo.count_classes() == 2
    assert container.attendance_repo.count_marks(start=date.min) == marks == 15
    assert len(container.teacher_attendance_repo.find(teacher_id="teacher1")) == 10


def test_seed_attendance_has_absences(container):
    seed_defaults(container, today=date(2024, 5, 10))
    rows = container.attendance_repo.find(AttendanceQuery(class_names=["Class-10"]))
    statuses = {r.status for r in rows}
    assert statuses == {AttendanceStatus.PRESENT, AttendanceStatus.ABSENT}
    assert all(r.marked_by == "teacher1" for r in rows)
