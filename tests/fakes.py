from __future__ import annotations

import dataclasses
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from werkzeug.security import generate_password_hash

from school_attendance.attendance.model import AttendanceQuery, AttendanceRecord, TeacherAttendanceRecord
from school_attendance.classes.model import ClassRoom
from school_attendance.container import Container, assemble
from school_attendance.core.enums import NoticeType, Priority, Role, TargetRole
from school_attendance.notices.model import Notice, NoticeQuery
from school_attendance.users.model import User


class InMemoryUsers:
    def __init__(self):
        self.users: dict[str, User] = {}

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def get_by_id_and_role(self, user_id: str, role: Role) -> Optional[User]:
        u = self.users.get(user_id)
        return u if u and u.role == role else None

    def create_user(self, *, user_id, password_hash, role, name, email=None, class_name=None, subject=None) -> User:
        u = User(
            user_id=user_id,
            password_hash=password_hash,
            role=role,
            name=name,
            email=email,
            class_name=class_name,
            subject=subject,
            created_at=datetime(2024, 1, 1, 8, 0),
        )
        self.users[user_id] = u
        return u

    def list_active(self, *, role: Role, class_names: Optional[Sequence[str]] = None) -> Sequence[User]:
        out = [u for u in self.users.values() if u.role == role and u.is_active]
        if class_names is not None:
            out = [u for u in out if u.class_name in class_names]
        return sorted(out, key=lambda u: (u.name, u.user_id))

    def count_by_role(self, role: Role, *, active_only: bool = True) -> int:
        return sum(1 for u in self.users.values() if u.role == role and (u.is_active or not active_only))

    def set_active(self, user_id: str, *, role: Role, is_active: bool) -> bool:
        u = self.get_by_id_and_role(user_id, role)
        if not u:
            return False
        self.users[user_id] = dataclasses.replace(u, is_active=is_active)
        return True

    def set_class_name(self, user_id: str, class_name: Optional[str]) -> bool:
        u = self.users.get(user_id)
        if not u:
            return False
        self.users[user_id] = dataclasses.replace(u, class_name=class_name)
        return True

    def update_profile(self, user_id: str, *, name=None, email=None, password_hash=None) -> None:
        u = self.users[user_id]
        self.users[user_id] = dataclasses.replace(
            u,
            name=name or u.name,
            email=email or u.email,
            password_hash=password_hash or u.password_hash,
        )


class InMemoryClasses:
    def __init__(self):
        self.rooms: dict[int, ClassRoom] = {}
        self._id = 0

    def get_by_id(self, class_id: int) -> Optional[ClassRoom]:
        return self.rooms.get(class_id)

    def get_by_name(self, class_name: str) -> Optional[ClassRoom]:
        for r in self.rooms.values():
            if r.class_name == class_name:
                return r
        return None

    def list_active(self, *, teacher_id: Optional[str] = None) -> Sequence[ClassRoom]:
        out = [r for r in self.rooms.values() if r.is_active and (teacher_id is None or r.teacher_id == teacher_id)]
        return sorted(out, key=lambda r: r.class_name)

    def list_names_for_teacher(self, teacher_id: str) -> Sequence[str]:
        return sorted(r.class_name for r in self.rooms.values() if r.teacher_id == teacher_id)

    def create_class(self, *, class_name: str, teacher_id: str, subjects: Sequence[str]) -> ClassRoom:
        self._id += 1
        room = ClassRoom(class_id=self._id, class_name=class_name, teacher_id=teacher_id, subjects=tuple(subjects))
        self.rooms[self._id] = room
        return room

    def set_active(self, class_id: int, *, is_active: bool) -> bool:
        room = self.rooms.get(class_id)
        if not room:
            return False
        self.rooms[class_id] = dataclasses.replace(room, is_active=is_active)
        return True

    def deactivate_for_teacher(self, teacher_id: str) -> int:
        n = 0
        for cid, r in list(self.rooms.items()):
            if r.teacher_id == teacher_id and r.is_active:
                self.rooms[cid] = dataclasses.replace(r, is_active=False)
                n += 1
        return n

    def add_student(self, class_id: int, student_id: str) -> None:
        r = self.rooms[class_id]
        if student_id not in r.student_ids:
            self.rooms[class_id] = dataclasses.replace(r, student_ids=r.student_ids + (student_id,))

    def remove_student_everywhere(self, student_id: str) -> int:
        n = 0
        for cid, r in list(self.rooms.items()):
            if student_id in r.student_ids:
                self.rooms[cid] = dataclasses.replace(r, student_ids=tuple(s for s in r.student_ids if s != student_id))
                n += 1
        return n

    def teacher_has_student(self, teacher_id: str, student_id: str) -> bool:
        return any(r.teacher_id == teacher_id and student_id in r.student_ids for r in self.rooms.values())

    def count_classes(self, *, active_only: bool = True) -> int:
        return sum(1 for r in self.rooms.values() if r.is_active or not active_only)


class InMemoryAttendance:
    """Keyed by the natural key, so a re-mark replaces the previous row."""

    def __init__(self):
        self.by_key: dict[tuple, AttendanceRecord] = {}
        self._id = 0

    def upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        existing = self.by_key.get(record.key)
        if existing:
            record = dataclasses.replace(record, record_id=existing.record_id)
        else:
            self._id += 1
            record = dataclasses.replace(record, record_id=self._id)
        self.by_key[record.key] = record
        return record

    def find(self, query: AttendanceQuery) -> Sequence[AttendanceRecord]:
        out = list(self.by_key.values())
        if query.class_names is not None:
            out = [r for r in out if r.class_name in query.class_names]
        if query.on_date is not None:
            out = [r for r in out if r.date == query.on_date]
        if query.start_date is not None:
            out = [r for r in out if r.date >= query.start_date]
        if query.end_date is not None:
            out = [r for r in out if r.date <= query.end_date]
        if query.student_id is not None:
            out = [r for r in out if r.student_id == query.student_id]
        if query.marked_by is not None:
            out = [r for r in out if r.marked_by == query.marked_by]
        return sorted(out, key=lambda r: (-r.date.toordinal(), r.student_name))

    def recent_for_student(self, student_id: str, limit: int) -> Sequence[AttendanceRecord]:
        out = [r for r in self.by_key.values() if r.student_id == student_id]
        out.sort(key=lambda r: (r.date, r.marked_at or datetime.min), reverse=True)
        return out[:limit]

    def recent_marked_by(self, teacher_id: str, limit: int) -> Sequence[AttendanceRecord]:
        out = [r for r in self.by_key.values() if r.marked_by == teacher_id]
        out.sort(key=lambda r: r.marked_at or datetime.min, reverse=True)
        return out[:limit]

    def count_marks(self, *, start: date, end: Optional[date] = None) -> int:
        return sum(1 for r in self.by_key.values() if r.date >= start and (end is None or r.date <= end))


class InMemoryTeacherAttendance:
    def __init__(self):
        self.by_key: dict[tuple, TeacherAttendanceRecord] = {}
        self._id = 0

    def upsert(self, record: TeacherAttendanceRecord) -> TeacherAttendanceRecord:
        existing = self.by_key.get(record.key)
        if existing:
            record = dataclasses.replace(record, record_id=existing.record_id)
        else:
            self._id += 1
            record = dataclasses.replace(record, record_id=self._id)
        self.by_key[record.key] = record
        return record

    def find(self, *, teacher_id: str, start_date=None, end_date=None) -> Sequence[TeacherAttendanceRecord]:
        out = [r for r in self.by_key.values() if r.teacher_id == teacher_id]
        if start_date is not None:
            out = [r for r in out if r.date >= start_date]
        if end_date is not None:
            out = [r for r in out if r.date <= end_date]
        return sorted(out, key=lambda r: r.date, reverse=True)


class InMemoryNotices:
    def __init__(self):
        self.notices: dict[int, Notice] = {}
        self._id = 0

    def get_by_id(self, notice_id: int) -> Optional[Notice]:
        return self.notices.get(int(notice_id))

    def create(
        self,
        *,
        title: str,
        content: str,
        notice_type: NoticeType,
        posted_by: str,
        posted_by_name: str,
        target_class: str,
        target_role: TargetRole,
        priority: Priority,
        expiry_date: Optional[date],
    ) -> Notice:
        self._id += 1
        notice = Notice(
            notice_id=self._id,
            title=title,
            content=content,
            notice_type=notice_type,
            posted_by=posted_by,
            posted_by_name=posted_by_name,
            target_class=target_class,
            target_role=target_role,
            priority=priority,
            created_at=datetime(2024, 1, 1) + timedelta(minutes=self._id),
            expiry_date=expiry_date,
        )
        self.notices[self._id] = notice
        return notice

    def save(self, notice: Notice) -> Notice:
        self.notices[notice.notice_id] = notice
        return notice

    def set_active(self, notice_id: int, *, is_active: bool) -> bool:
        n = self.notices.get(int(notice_id))
        if not n:
            return False
        self.notices[n.notice_id] = dataclasses.replace(n, is_active=is_active)
        return True

    def find(self, query: NoticeQuery) -> Sequence[Notice]:
        out = [n for n in self.notices.values() if n.is_active == query.active]
        if query.target_classes is not None:
            out = [n for n in out if n.target_class in query.target_classes]
        if query.target_roles is not None:
            out = [n for n in out if n.target_role in query.target_roles]
        if query.notice_type is not None:
            out = [n for n in out if n.notice_type == query.notice_type]
        out.sort(key=lambda n: (n.created_at, n.notice_id), reverse=True)
        return out[: query.limit]


def build_fake_container() -> Container:
    return assemble(
        users_repo=InMemoryUsers(),
        classes_repo=InMemoryClasses(),
        attendance_repo=InMemoryAttendance(),
        teacher_attendance_repo=InMemoryTeacherAttendance(),
        notices_repo=InMemoryNotices(),
    )


def add_user(
    container: Container,
    user_id: str,
    role: Role,
    *,
    name: Optional[str] = None,
    password: str = "secret1",
    class_name: Optional[str] = None,
    subject: Optional[str] = None,
) -> User:
    user = container.users_repo.create_user(
        user_id=user_id,
        password_hash=generate_password_hash(password),
        role=role,
        name=name or user_id.title(),
        email=f"{user_id}@school.test",
        subject=subject,
    )
    if class_name:
        container.membership.enroll(user_id, class_name)
        user = container.users_repo.get_by_id(user_id)
    return user
