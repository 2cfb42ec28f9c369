from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone, in_clause
from .model import AttendanceQuery, AttendanceRecord, TeacherAttendanceRecord
from .repository import AttendanceRepository, TeacherAttendanceRepository

_COLUMNS = "record_id, student_id, student_name, class_name, attendance_date, status, marked_by, subject, marked_at"
_TEACHER_COLUMNS = "record_id, teacher_id, teacher_name, attendance_date, status, notes, marked_at"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        student_id=str(r["student_id"]),
        student_name=r["student_name"],
        class_name=r["class_name"],
        date=as_date(r["attendance_date"]),
        status=AttendanceStatus(r["status"]),
        marked_by=str(r["marked_by"]),
        subject=r.get("subject") or "",
        marked_at=r.get("marked_at"),
    )


def _to_teacher_record(r: dict) -> TeacherAttendanceRecord:
    return TeacherAttendanceRecord(
        record_id=int(r["record_id"]),
        teacher_id=str(r["teacher_id"]),
        teacher_name=r["teacher_name"],
        date=as_date(r["attendance_date"]),
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
        marked_at=r.get("marked_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        marked_at = record.marked_at or now_local()
        with db_cursor(self._conn_factory) as (_, cur):
            # Single statement on the unique natural key: no window where the
            # previous mark is gone and the new one is not yet visible.
            cur.execute(
                """
                INSERT INTO attendance_records
                    (student_id, student_name, class_name, attendance_date, status, marked_by, subject, marked_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    student_name=VALUES(student_name),
                    status=VALUES(status),
                    marked_by=VALUES(marked_by),
                    marked_at=VALUES(marked_at)
                """,
                (
                    record.student_id,
                    record.student_name,
                    record.class_name,
                    record.date,
                    record.status.value,
                    record.marked_by,
                    record.subject or "",
                    marked_at,
                ),
            )
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_records
                WHERE student_id=%s AND attendance_date=%s AND subject=%s AND class_name=%s
                """,
                (record.student_id, record.date, record.subject or "", record.class_name),
            )
            return _to_record(fetchone(cur))

    def find(self, query: AttendanceQuery) -> Sequence[AttendanceRecord]:
        where: list[str] = []
        params: list = []

        if query.class_names is not None:
            if not query.class_names:
                return []
            where.append(f"class_name IN ({in_clause(query.class_names)})")
            params.extend(query.class_names)
        if query.on_date:
            where.append("attendance_date=%s")
            params.append(query.on_date)
        if query.start_date:
            where.append("attendance_date>=%s")
            params.append(query.start_date)
        if query.end_date:
            where.append("attendance_date<=%s")
            params.append(query.end_date)
        if query.student_id:
            where.append("student_id=%s")
            params.append(query.student_id)
        if query.marked_by:
            where.append("marked_by=%s")
            params.append(query.marked_by)

        sql = f"SELECT {_COLUMNS} FROM attendance_records"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY attendance_date DESC, student_name ASC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def recent_for_student(self, student_id: str, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_records
                WHERE student_id=%s
                ORDER BY attendance_date DESC, marked_at DESC
                LIMIT %s
                """,
                (student_id, int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def recent_marked_by(self, teacher_id: str, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_records
                WHERE marked_by=%s
                ORDER BY marked_at DESC
                LIMIT %s
                """,
                (teacher_id, int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_marks(self, *, start: date, end: Optional[date] = None) -> int:
        sql = "SELECT COUNT(*) AS n FROM attendance_records WHERE attendance_date>=%s"
        params: list = [start]
        if end is not None:
            sql += " AND attendance_date<=%s"
            params.append(end)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            row = fetchone(cur)
            return int(row["n"]) if row else 0


class MySQLTeacherAttendanceRepository(TeacherAttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, record: TeacherAttendanceRecord) -> TeacherAttendanceRecord:
        marked_at = record.marked_at or now_local()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO teacher_attendance(teacher_id, teacher_name, attendance_date, status, notes, marked_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    teacher_name=VALUES(teacher_name),
                    status=VALUES(status),
                    notes=VALUES(notes),
                    marked_at=VALUES(marked_at)
                """,
                (record.teacher_id, record.teacher_name, record.date, record.status.value, record.notes, marked_at),
            )
            cur.execute(
                f"SELECT {_TEACHER_COLUMNS} FROM teacher_attendance WHERE teacher_id=%s AND attendance_date=%s",
                (record.teacher_id, record.date),
            )
            return _to_teacher_record(fetchone(cur))

    def find(
        self,
        *,
        teacher_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[TeacherAttendanceRecord]:
        sql = f"SELECT {_TEACHER_COLUMNS} FROM teacher_attendance WHERE teacher_id=%s"
        params: list = [teacher_id]
        if start_date:
            sql += " AND attendance_date>=%s"
            params.append(start_date)
        if end_date:
            sql += " AND attendance_date<=%s"
            params.append(end_date)
        sql += " ORDER BY attendance_date DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_teacher_record(r) for r in fetchall(cur)]
