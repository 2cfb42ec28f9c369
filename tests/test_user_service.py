from __future__ import annotations

import pytest

from school_attendance.core.enums import Role
from school_attendance.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)


def register(svc, principal, user_id, role="student", **kw):
    kw.setdefault("password", "secret1")
    kw.setdefault("name", user_id.title())
    return svc.register(principal, user_id=user_id, role=role, **kw)


def test_authenticate_ok(school):
    user = school.auth_service.authenticate("t1", "secret1", "teacher")
    assert user.user_id == "t1"


@pytest.mark.parametrize(
    "user_id,password,role",
    [("t1", "wrong", "teacher"), ("t1", "secret1", "student"), ("ghost", "secret1", "teacher"), ("t1", "secret1", "boss")],
)
def test_authenticate_rejects(school, user_id, password, role):
    with pytest.raises(AuthenticationError):
        school.auth_service.authenticate(user_id, password, role)


def test_authenticate_requires_all_fields(school):
    with pytest.raises(ValidationError):
        school.auth_service.authenticate("t1", "", "teacher")


def test_inactive_user_cannot_login(school, admin):
    school.user_service.delete_student(admin, "s1")
    with pytest.raises(AuthenticationError):
        school.auth_service.authenticate("s1", "secret1", "student")


def test_principal_carries_student_class(school):
    user = school.auth_service.authenticate("s1", "secret1", "student")
    assert school.auth_service.principal_for(user).class_name == "C1"


def test_register_student_enrolls_in_class(school, teacher1):
    register(school.user_service, teacher1, "s9", class_name="C1")
    room = school.classes_repo.get_by_name("C1")
    assert "s9" in room.student_ids
    assert school.users_repo.get_by_id("s9").class_name == "C1"


def test_register_into_missing_class_fails(school, admin):
    with pytest.raises(ValidationError):
        register(school.user_service, admin, "s9", class_name="Nope")
    assert school.users_repo.get_by_id("s9") is None


def test_teacher_cannot_create_teacher(school, teacher1):
    with pytest.raises(AuthorizationError):
        register(school.user_service, teacher1, "t9", role="teacher")


def test_student_cannot_register_anyone(school, student1):
    with pytest.raises(AuthorizationError):
        register(school.user_service, student1, "s9")


def test_duplicate_id_rejected_across_roles(school, admin):
    with pytest.raises(ValidationError, match="User ID already exists"):
        register(school.user_service, admin, "t1", role="student")


def test_short_password_rejected(school, admin):
    with pytest.raises(ValidationError):
        register(school.user_service, admin, "s9", password="123")


def test_teacher_lists_only_own_students(school, teacher1):
    names = [u.name for u in school.user_service.list_students(teacher1)]
    assert names == ["Alice", "Bob"]
    with pytest.raises(AuthorizationError):
        school.user_service.list_students(teacher1, class_filter="C2")
    with pytest.raises(AuthorizationError):
        school.user_service.list_students_in_class(teacher1, "C2")


def test_soft_deleted_student_hidden_but_history_kept(school, admin, teacher1):
    school.attendance_service.mark(
        teacher1, class_name="C1", date="2024-05-10", subject="Math", students=[{"studentId": "s1", "status": "present"}]
    )
    school.user_service.delete_student(admin, "s1")

    assert "s1" not in [u.user_id for u in school.user_service.list_students(admin)]
    assert "s1" not in school.classes_repo.get_by_name("C1").student_ids
    assert [r.student_id for r in school.attendance_service.list_records(admin)] == ["s1"]


def test_teacher_deletes_only_students_in_own_classes(school, teacher1):
    with pytest.raises(AuthorizationError):
        school.user_service.delete_student(teacher1, "s3")
    school.user_service.delete_student(teacher1, "s2")
    assert not school.users_repo.get_by_id("s2").is_active


def test_delete_missing_student(school, admin):
    with pytest.raises(NotFoundError):
        school.user_service.delete_student(admin, "ghost")


def test_only_admin_deletes_teachers(school, admin, teacher1):
    with pytest.raises(AuthorizationError, match="Only admin can delete teachers"):
        school.user_service.delete_teacher(teacher1, "t2")
    school.user_service.delete_teacher(admin, "t2")
    assert [u.user_id for u in school.user_service.list_teachers(admin)] == ["t1"]
    assert school.classes_repo.get_by_name("C2").is_active is False


def test_profile_password_change_needs_current(school, teacher1):
    svc = school.user_service
    with pytest.raises(ValidationError):
        svc.update_profile(teacher1, new_password="newsecret")
    with pytest.raises(AuthenticationError):
        svc.update_profile(teacher1, current_password="wrong", new_password="newsecret")

    svc.update_profile(teacher1, current_password="secret1", new_password="newsecret", email="t1@new.test")
    assert school.auth_service.authenticate("t1", "newsecret", "teacher").email == "t1@new.test"
    assert school.users_repo.get_by_id_and_role("t1", Role.TEACHER).name == "Teacher One"


def test_closed_class_drops_out_of_teacher_roster(school, teacher1, admin):
    c1 = school.classes_repo.get_by_name("C1")
    school.class_service.delete_class(admin, c1.class_id)

    assert list(school.user_service.list_students(teacher1)) == []
    with pytest.raises(AuthorizationError):
        school.user_service.list_students_in_class(teacher1, "C1")
