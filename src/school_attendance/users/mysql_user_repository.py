from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, password_hash, role, name, email, class_name, subject, is_active, created_at"


def _to_user(row: dict) -> User:
    return User(
        user_id=str(row["user_id"]),
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        name=row["name"],
        email=row.get("email"),
        class_name=row.get("class_name"),
        subject=row.get("subject"),
        is_active=bool(row.get("is_active", True)),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (user_id,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_id_and_role(self, user_id: str, role: Role) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s AND role=%s", (user_id, role.value))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(
        self,
        *,
        user_id: str,
        password_hash: str,
        role: Role,
        name: str,
        email: Optional[str] = None,
        class_name: Optional[str] = None,
        subject: Optional[str] = None,
    ) -> User:
        created_at = now_local()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(user_id, password_hash, role, name, email, class_name, subject, is_active, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,1,%s)
                """,
                (user_id, password_hash, role.value, name, email, class_name, subject, created_at),
            )
        return User(
            user_id=user_id,
            password_hash=password_hash,
            role=role,
            name=name,
            email=email,
            class_name=class_name,
            subject=subject,
            is_active=True,
            created_at=created_at,
        )

    def list_active(self, *, role: Role, class_names: Optional[Sequence[str]] = None) -> Sequence[User]:
        sql = f"SELECT {_COLUMNS} FROM users WHERE role=%s AND is_active=1"
        params: list = [role.value]
        if class_names is not None:
            if not class_names:
                return []
            sql += f" AND class_name IN ({in_clause(class_names)})"
            params.extend(class_names)
        sql += " ORDER BY name, user_id"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_user(r) for r in fetchall(cur)]

    def count_by_role(self, role: Role, *, active_only: bool = True) -> int:
        sql = "SELECT COUNT(*) AS n FROM users WHERE role=%s"
        if active_only:
            sql += " AND is_active=1"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (role.value,))
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def set_active(self, user_id: str, *, role: Role, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET is_active=%s WHERE user_id=%s AND role=%s",
                (1 if is_active else 0, user_id, role.value),
            )
            return cur.rowcount > 0

    def set_class_name(self, user_id: str, class_name: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET class_name=%s WHERE user_id=%s", (class_name, user_id))
            return cur.rowcount > 0

    def update_profile(
        self,
        user_id: str,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password_hash: Optional[str] = None,
    ) -> None:
        assignments: list[str] = []
        params: list = []
        for column, value in (("name", name), ("email", email), ("password_hash", password_hash)):
            if value is not None:
                assignments.append(f"{column}=%s")
                params.append(value)
        if not assignments:
            return

        params.append(user_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE users SET {', '.join(assignments)} WHERE user_id=%s", tuple(params))
