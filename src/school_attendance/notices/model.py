from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.constants import NOTICE_LIST_LIMIT
from ..core.enums import NoticeType, Priority, TargetRole


@dataclass(frozen=True)
class Notice:
    """Announcement on the notice board. Empty ``target_class`` means every class."""

    notice_id: int
    title: str
    content: str
    notice_type: NoticeType
    posted_by: str
    posted_by_name: str
    target_class: str = ""
    target_role: TargetRole = TargetRole.STUDENT
    priority: Priority = Priority.MEDIUM
    is_active: bool = True
    created_at: Optional[datetime] = None
    expiry_date: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            "id": self.notice_id,
            "title": self.title,
            "content": self.content,
            "type": self.notice_type.value,
            "postedBy": self.posted_by,
            "postedByName": self.posted_by_name,
            "targetClass": self.target_class,
            "targetRole": self.target_role.value,
            "priority": self.priority.value,
            "isActive": self.is_active,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "expiryDate": self.expiry_date.isoformat() if self.expiry_date else None,
        }


@dataclass(frozen=True)
class NoticeQuery:
    active: bool = True
    target_classes: Optional[Sequence[str]] = None
    target_roles: Optional[Sequence[TargetRole]] = None
    notice_type: Optional[NoticeType] = None
    limit: int = NOTICE_LIST_LIMIT
