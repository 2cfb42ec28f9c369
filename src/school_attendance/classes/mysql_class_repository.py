from __future__ import annotations

import json
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, load_json_list
from .model import ClassRoom
from .repository import ClassRepository

_COLUMNS = "class_id, class_name, teacher_id, subjects, is_active, created_at"


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _members(self, cur, class_ids: Sequence[int]) -> dict[int, tuple[str, ...]]:
        if not class_ids:
            return {}
        cur.execute(
            f"SELECT class_id, student_id FROM class_students WHERE class_id IN ({in_clause(class_ids)}) ORDER BY id",
            tuple(class_ids),
        )
        members: dict[int, list[str]] = {}
        for r in fetchall(cur):
            members.setdefault(int(r["class_id"]), []).append(str(r["student_id"]))
        return {k: tuple(v) for k, v in members.items()}

    def _hydrate(self, cur, rows: list[dict]) -> list[ClassRoom]:
        members = self._members(cur, [int(r["class_id"]) for r in rows])
        return [
            ClassRoom(
                class_id=int(r["class_id"]),
                class_name=r["class_name"],
                teacher_id=str(r["teacher_id"]),
                student_ids=members.get(int(r["class_id"]), ()),
                subjects=tuple(load_json_list(r.get("subjects"))),
                is_active=bool(r.get("is_active", True)),
                created_at=r.get("created_at"),
            )
            for r in rows
        ]

    def get_by_id(self, class_id: int) -> Optional[ClassRoom]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM classes WHERE class_id=%s", (int(class_id),))
            row = fetchone(cur)
            return self._hydrate(cur, [row])[0] if row else None

    def get_by_name(self, class_name: str) -> Optional[ClassRoom]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM classes WHERE class_name=%s", (class_name,))
            row = fetchone(cur)
            return self._hydrate(cur, [row])[0] if row else None

    def list_active(self, *, teacher_id: Optional[str] = None) -> Sequence[ClassRoom]:
        sql = f"SELECT {_COLUMNS} FROM classes WHERE is_active=1"
        params: tuple = ()
        if teacher_id is not None:
            sql += " AND teacher_id=%s"
            params = (teacher_id,)
        sql += " ORDER BY class_name"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return self._hydrate(cur, fetchall(cur))

    def list_names_for_teacher(self, teacher_id: str) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT class_name FROM classes WHERE teacher_id=%s ORDER BY class_name", (teacher_id,))
            return [r["class_name"] for r in fetchall(cur)]

    def create_class(self, *, class_name: str, teacher_id: str, subjects: Sequence[str]) -> ClassRoom:
        created_at = now_local()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO classes(class_name, teacher_id, subjects, is_active, created_at)
                VALUES(%s,%s,%s,1,%s)
                """,
                (class_name, teacher_id, json.dumps(list(subjects)), created_at),
            )
            class_id = int(cur.lastrowid)
        return ClassRoom(
            class_id=class_id,
            class_name=class_name,
            teacher_id=teacher_id,
            subjects=tuple(subjects),
            created_at=created_at,
        )

    def set_active(self, class_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE classes SET is_active=%s WHERE class_id=%s", (1 if is_active else 0, int(class_id)))
            return cur.rowcount > 0

    def deactivate_for_teacher(self, teacher_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE classes SET is_active=0 WHERE teacher_id=%s AND is_active=1", (teacher_id,))
            return int(cur.rowcount)

    def add_student(self, class_id: int, student_id: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO class_students(class_id, student_id) VALUES(%s,%s)",
                (int(class_id), student_id),
            )

    def remove_student_everywhere(self, student_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM class_students WHERE student_id=%s", (student_id,))
            return int(cur.rowcount)

    def teacher_has_student(self, teacher_id: str, student_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS ok
                FROM class_students cs
                JOIN classes c ON c.class_id = cs.class_id
                WHERE c.teacher_id=%s AND cs.student_id=%s
                LIMIT 1
                """,
                (teacher_id, student_id),
            )
            return fetchone(cur) is not None

    def count_classes(self, *, active_only: bool = True) -> int:
        sql = "SELECT COUNT(*) AS n FROM classes"
        if active_only:
            sql += " WHERE is_active=1"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql)
            row = fetchone(cur)
            return int(row["n"]) if row else 0
