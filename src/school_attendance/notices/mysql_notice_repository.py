from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import NoticeType, Priority, TargetRole
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone, in_clause
from .model import Notice, NoticeQuery
from .repository import NoticeRepository

_COLUMNS = (
    "notice_id, title, content, notice_type, posted_by, posted_by_name, target_class, "
    "target_role, priority, is_active, created_at, expiry_date"
)


def _to_notice(r: dict) -> Notice:
    return Notice(
        notice_id=int(r["notice_id"]),
        title=r["title"],
        content=r["content"],
        notice_type=NoticeType(r["notice_type"]),
        posted_by=str(r["posted_by"]),
        posted_by_name=r["posted_by_name"],
        target_class=r.get("target_class") or "",
        target_role=TargetRole(r["target_role"]),
        priority=Priority(r["priority"]),
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
        expiry_date=as_date(r.get("expiry_date")),
    )


class MySQLNoticeRepository(NoticeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, notice_id: int) -> Optional[Notice]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM notices WHERE notice_id=%s", (int(notice_id),))
            row = fetchone(cur)
            return _to_notice(row) if row else None

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
        created_at = now_local()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notices(title, content, notice_type, posted_by, posted_by_name, target_class,
                                    target_role, priority, is_active, created_at, expiry_date)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,1,%s,%s)
                """,
                (
                    title,
                    content,
                    notice_type.value,
                    posted_by,
                    posted_by_name,
                    target_class,
                    target_role.value,
                    priority.value,
                    created_at,
                    expiry_date,
                ),
            )
            notice_id = int(cur.lastrowid)
        return Notice(
            notice_id=notice_id,
            title=title,
            content=content,
            notice_type=notice_type,
            posted_by=posted_by,
            posted_by_name=posted_by_name,
            target_class=target_class,
            target_role=target_role,
            priority=priority,
            created_at=created_at,
            expiry_date=expiry_date,
        )

    def save(self, notice: Notice) -> Notice:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE notices
                SET title=%s, content=%s, notice_type=%s, target_class=%s, target_role=%s,
                    priority=%s, is_active=%s, expiry_date=%s
                WHERE notice_id=%s
                """,
                (
                    notice.title,
                    notice.content,
                    notice.notice_type.value,
                    notice.target_class,
                    notice.target_role.value,
                    notice.priority.value,
                    1 if notice.is_active else 0,
                    notice.expiry_date,
                    notice.notice_id,
                ),
            )
        return notice

    def set_active(self, notice_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE notices SET is_active=%s WHERE notice_id=%s", (1 if is_active else 0, int(notice_id)))
            return cur.rowcount > 0

    def find(self, query: NoticeQuery) -> Sequence[Notice]:
        where = ["is_active=%s"]
        params: list = [1 if query.active else 0]

        if query.target_classes is not None:
            classes = sorted(set(query.target_classes))
            if not classes:
                return []
            where.append(f"target_class IN ({in_clause(classes)})")
            params.extend(classes)
        if query.target_roles is not None:
            roles = [r.value for r in query.target_roles]
            if not roles:
                return []
            where.append(f"target_role IN ({in_clause(roles)})")
            params.extend(roles)
        if query.notice_type is not None:
            where.append("notice_type=%s")
            params.append(query.notice_type.value)

        params.append(int(query.limit))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM notices
                WHERE {' AND '.join(where)}
                ORDER BY created_at DESC, notice_id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_to_notice(r) for r in fetchall(cur)]
