from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import NoticeType, Priority, TargetRole
from .model import Notice, NoticeQuery


class NoticeRepository(Protocol):
    def get_by_id(self, notice_id: int) -> Optional[Notice]:
        raise NotImplementedError

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
        raise NotImplementedError

    def save(self, notice: Notice) -> Notice:
        """Persist the mutable fields of an existing notice in place."""

        raise NotImplementedError

    def set_active(self, notice_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def find(self, query: NoticeQuery) -> Sequence[Notice]:
        """Matching notices, newest first, at most ``query.limit``."""

        raise NotImplementedError
