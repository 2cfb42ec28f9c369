from __future__ import annotations

import dataclasses
import logging
from typing import Any, Mapping, Optional, Sequence

from ..access.policy import AccessPolicy, Operation, ResourceKind
from ..common.datetime_utils import parse_optional_date
from ..common.validators import optional_text, parse_enum, require_non_empty
from ..core.enums import NoticeType, Priority, TargetRole
from ..core.exceptions import NotFoundError
from ..core.principal import Principal
from .model import Notice, NoticeQuery
from .repository import NoticeRepository

logger = logging.getLogger(__name__)


def parse_active_flag(value: Any) -> bool:
    # "true"/"false" arrive as text from query strings and some JSON clients.
    if value is None or value == "":
        return True
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() != "false"


class NoticeService:
    """Use case: notice board for staff announcements."""

    def __init__(self, notices: NoticeRepository, policy: AccessPolicy):
        self._notices = notices
        self._policy = policy

    def list_notices(
        self,
        principal: Principal,
        *,
        target_class: Optional[str] = None,
        notice_type: Optional[str] = None,
        active: Any = None,
    ) -> Sequence[Notice]:
        filters = self._policy.authorize(
            principal, ResourceKind.NOTICE, Operation.READ, {"target_class": optional_text(target_class)}
        )
        query = NoticeQuery(
            active=parse_active_flag(active),
            target_classes=filters["target_classes"],
            target_roles=filters["target_roles"],
            notice_type=parse_enum(NoticeType, notice_type, "type") if optional_text(notice_type) else None,
        )
        return self._notices.find(query)

    def create_notice(
        self,
        principal: Principal,
        *,
        title: str,
        content: str,
        notice_type: str,
        target_class: Optional[str] = None,
        target_role: Optional[str] = None,
        priority: Optional[str] = None,
        expiry_date: Optional[str] = None,
    ) -> Notice:
        target_class = optional_text(target_class) or ""
        self._policy.authorize(principal, ResourceKind.NOTICE, Operation.WRITE, {"target_class": target_class})

        notice = self._notices.create(
            title=require_non_empty(title, "Title"),
            content=require_non_empty(content, "Content"),
            notice_type=parse_enum(NoticeType, notice_type, "type"),
            posted_by=principal.user_id,
            posted_by_name=principal.name,
            target_class=target_class,
            target_role=parse_enum(TargetRole, target_role, "targetRole", default=TargetRole.STUDENT),
            priority=parse_enum(Priority, priority, "priority", default=Priority.MEDIUM),
            expiry_date=parse_optional_date(expiry_date),
        )
        logger.info("Notice %s posted by %s", notice.notice_id, principal.user_id)
        return notice

    def _existing(self, notice_id: int) -> Notice:
        notice = self._notices.get_by_id(notice_id)
        if not notice:
            raise NotFoundError("Notice not found")
        return notice

    def update_notice(self, principal: Principal, notice_id: int, changes: Mapping[str, Any]) -> Notice:
        """Apply the fields present in ``changes``; absent keys keep their value."""

        notice = self._existing(notice_id)

        target_class = notice.target_class
        if "targetClass" in changes:
            target_class = optional_text(changes.get("targetClass")) or ""

        self._policy.authorize(
            principal,
            ResourceKind.NOTICE,
            Operation.UPDATE,
            {"posted_by": notice.posted_by, "target_class": target_class if target_class != notice.target_class else None},
        )

        updates: dict = {"target_class": target_class}
        if changes.get("title") is not None:
            updates["title"] = require_non_empty(changes["title"], "Title")
        if changes.get("content") is not None:
            updates["content"] = require_non_empty(changes["content"], "Content")
        if changes.get("type") is not None:
            updates["notice_type"] = parse_enum(NoticeType, changes["type"], "type")
        if changes.get("targetRole") is not None:
            updates["target_role"] = parse_enum(TargetRole, changes["targetRole"], "targetRole")
        if changes.get("priority") is not None:
            updates["priority"] = parse_enum(Priority, changes["priority"], "priority")
        if changes.get("isActive") is not None:
            updates["is_active"] = parse_active_flag(changes["isActive"])
        if optional_text(changes.get("expiryDate")):
            updates["expiry_date"] = parse_optional_date(changes["expiryDate"])

        saved = self._notices.save(dataclasses.replace(notice, **updates))
        logger.info("Notice %s updated by %s", notice_id, principal.user_id)
        return saved

    def delete_notice(self, principal: Principal, notice_id: int) -> None:
        notice = self._existing(notice_id)
        self._policy.authorize(principal, ResourceKind.NOTICE, Operation.DELETE, {"posted_by": notice.posted_by})
        self._notices.set_active(notice.notice_id, is_active=False)
        logger.info("Notice %s deactivated by %s", notice_id, principal.user_id)
