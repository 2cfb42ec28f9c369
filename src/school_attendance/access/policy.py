"""Role based access rules.

Every permission decision of the API lives in :data:`RULES`, a table keyed by
``(ResourceKind, Operation)``. A rule is a pure function of the principal, the
requested filters and an :class:`OwnershipLookup`; it never touches a store
directly. The result is either :class:`Allowed` carrying the narrowed filters
or :class:`Denied` carrying a human readable reason.

Filter keys understood by the rules:

``class_name``     single class requested by the caller
``class_names``    narrowed set of classes (output only, ``None`` = any)
``student_id``     student requested by the caller
``teacher_id``     teacher requested by the caller
``target_role``    role of an account being created
``target_class``   class a notice is aimed at
``posted_by``      author of an existing notice
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Union

from ..core.enums import Role, TargetRole
from ..core.exceptions import AuthorizationError
from ..core.principal import Principal
from .ownership import OwnershipLookup


class ResourceKind(str, Enum):
    ATTENDANCE = "attendance"
    TEACHER_ATTENDANCE = "teacher_attendance"
    ROSTER = "roster"
    STUDENT_ROSTER = "student_roster"
    TEACHER_ROSTER = "teacher_roster"
    NOTICE = "notice"
    REPORT = "report"
    USER = "user"
    STATISTICS = "statistics"


class Operation(str, Enum):
    READ = "read"
    WRITE = "write"
    BULK_WRITE = "bulk_write"
    UPDATE = "update"
    DELETE = "delete"
    EXPORT = "export"


@dataclass(frozen=True)
class Allowed:
    filters: Dict[str, Any] = field(default_factory=dict)

    allowed = True

    def unwrap(self) -> Dict[str, Any]:
        return self.filters


@dataclass(frozen=True)
class Denied:
    reason: str = "Access denied"

    allowed = False

    def unwrap(self) -> Dict[str, Any]:
        raise AuthorizationError(self.reason)


Decision = Union[Allowed, Denied]
Rule = Callable[[Principal, Dict[str, Any], OwnershipLookup], Decision]


def _narrow_to_owned_classes(
    principal: Principal, filters: Dict[str, Any], lookup: OwnershipLookup, *, active_only: bool = False
) -> Decision:
    """Teacher may only see classes they own; no class filter means all of them."""

    if active_only:
        owned = list(lookup.active_class_names(principal.user_id))
    else:
        owned = list(lookup.owned_class_names(principal.user_id))
    class_name = filters.get("class_name")
    if class_name:
        if class_name not in owned:
            return Denied("Access denied to this class")
        return Allowed({**filters, "class_names": [class_name]})
    return Allowed({**filters, "class_names": owned})


def _with_requested_class(filters: Dict[str, Any]) -> Dict[str, Any]:
    class_name = filters.get("class_name")
    return {**filters, "class_names": [class_name] if class_name else None}


def attendance_read(principal: Principal, filters: Dict[str, Any], lookup: OwnershipLookup) -> Decision:
    if principal.is_admin:
        return Allowed(_with_requested_class(filters))
    if principal.is_teacher:
        return _narrow_to_owned_classes(principal, filters, lookup)
    if principal.is_student:
        # Any student_id in the request is overridden, never denied.
        return Allowed({**_with_requested_class(filters), "student_id": principal.user_id})
    return Denied()


def attendance_aggregate(principal: Principal, filters: Dict[str, Any], lookup: OwnershipLookup) -> Decision:
    """Exports and reports: staff only, teachers narrowed to their classes."""

    if principal.is_student:
        return Denied()
    return attendance_read(principal, filters, lookup)


def attendance_write(principal: Principal, filters: Dict[str, Any], lookup: OwnershipLookup) -> Decision:
    if not principal.is_teacher:
        return Denied("Only teachers can mark attendance")
    class_name = filters.get("class_name")
    if not class_name or not lookup.owns_class(principal.user_id, class_name):
        return Denied("You do not have access to this class")
    return Allowed(dict(filters))


def attendance_bulk_write(principal: Principal, filters: Dict[str, Any], lookup: OwnershipLookup) -> Decision:
    """Gate for batches; each row is then checked against :func:`attendance_write`."""

    if not principal.is_teacher:
        return Denied("Only teachers can mark attendance")
    return Allowed(dict(filters))


def teacher_attendance_read(principal: Principal, filters: Dict[str, Any], lookup: OwnershipLookup) -> Decision:
    teacher_id = filters.get("teacher_id") or principal.user_id
    if principal.is_admin:
        return Allowed({**filters, "teacher_id": teacher_id})
    if principal.is_teacher and teacher_id == principal.user_id:
        return Allowed({**filters, "teacher_id": teacher_id})
    if principal.is_teacher:
        return Denied("You can only view your own attendance")
    return Denied()


def teacher_attendance_write(principal: Principal, filters: Dict[str, Any], lookup: OwnershipLookup) -> Decision:
    if not (principal.is_teacher or principal.is_admin):
        return Denied("Only teachers can mark their attendance")
    teacher_id = filters.get("teacher_id") or principal.user_id
    if principal.is_teacher and teacher_id != principal.user_id:
        return Denied("You can only mark your own attendance")
    return Allowed({**filters, "teacher_id": teacher_id})


def roster_read(principal: Principal, filters: Dict[str, Any], lookup: OwnershipLookup) -> Decision:
    if principal.is_admin:
        return Allowed({**filters, "teacher_id": None})
    if principal.is_teacher:
        return Allowed({**filters, "teacher_id": principal.user_id})
    return Denied()


def roster_write(principal: Principal, filters: Dict[str, Any], lookup: OwnershipLookup) -> Decision:
    if principal.is_teacher:
        # A teacher always creates classes for themselves, whatever the payload says.
        return Allowed({**filters, "teacher_id": principal.user_id})
    if principal.is_admin:
        return Allowed(dict(filters))
    return Denied()


def roster_delete(principal: Principal, filters: Dict[str, Any], lookup: OwnershipLookup) -> Decision:
    if principal.is_admin:
        return Allowed(dict(filters))
    if principal.is_teacher:
        if filters.get("teacher_id") != principal.user_id:
            return Denied("You do not have access to this class")
        return Allowed(dict(filters))
    return Denied()


def student_roster_read(principal: Principal, filters: Dict[str, Any], lookup: OwnershipLookup) -> Decision:
    if principal.is_admin:
        return Allowed(_with_requested_class(filters))
    if principal.is_teacher:
        return _narrow_to_owned_classes(principal, filters, lookup, active_only=True)
    return Denied()


def student_roster_delete(principal: Principal, filters: Dict[str, Any], lookup: OwnershipLookup) -> Decision:
    if principal.is_admin:
        return Allowed(dict(filters))
    if principal.is_teacher:
        if not lookup.teacher_has_student(principal.user_id, filters.get("student_id") or ""):
            return Denied("You do not have access to this student")
        return Allowed(dict(filters))
    return Denied()


def teacher_roster_read(principal: Principal, filters: Dict[str, Any], lookup: OwnershipLookup) -> Decision:
    if principal.is_admin or principal.is_teacher:
        return Allowed(dict(filters))
    return Denied()


def statistics_read(principal: Principal, filters: Dict[str, Any], lookup: OwnershipLookup) -> Decision:
    if principal.is_admin:
        return Allowed(dict(filters))
    return Denied()


def teacher_roster_delete(principal: Principal, filters: Dict[str, Any], lookup: OwnershipLookup) -> Decision:
    if principal.is_admin:
        return Allowed(dict(filters))
    return Denied("Only admin can delete teachers")


def user_write(principal: Principal, filters: Dict[str, Any], lookup: OwnershipLookup) -> Decision:
    if principal.is_admin:
        return Allowed(dict(filters))
    if principal.is_teacher:
        if filters.get("target_role") != Role.STUDENT:
            return Denied("Teachers can only create student accounts")
        return Allowed(dict(filters))
    return Denied()


def notice_read(principal: Principal, filters: Dict[str, Any], lookup: OwnershipLookup) -> Decision:
    if principal.is_admin:
        target_class = filters.get("target_class")
        return Allowed({**filters, "target_classes": [target_class] if target_class else None, "target_roles": None})
    if principal.is_student:
        # Own class or untargeted notices, addressed to students or everyone.
        return Allowed(
            {
                **filters,
                "target_classes": [principal.class_name or "", ""],
                "target_roles": [TargetRole.STUDENT, TargetRole.ALL],
            }
        )
    if principal.is_teacher:
        owned = list(lookup.owned_class_names(principal.user_id))
        target_class = filters.get("target_class")
        if target_class:
            if target_class not in owned:
                return Denied("Access denied to this class")
            return Allowed({**filters, "target_classes": [target_class], "target_roles": None})
        return Allowed({**filters, "target_classes": owned + [""], "target_roles": None})
    return Denied()


def notice_write(principal: Principal, filters: Dict[str, Any], lookup: OwnershipLookup) -> Decision:
    if not (principal.is_teacher or principal.is_admin):
        return Denied("Only teachers and admins can create notices")
    target_class = filters.get("target_class")
    if principal.is_teacher and target_class and not lookup.owns_class(principal.user_id, target_class):
        return Denied("You do not have access to this class")
    return Allowed(dict(filters))


def _notice_owner_only(action: str) -> Rule:
    def rule(principal: Principal, filters: Dict[str, Any], lookup: OwnershipLookup) -> Decision:
        if principal.is_admin:
            return Allowed(dict(filters))
        if filters.get("posted_by") != principal.user_id:
            return Denied(f"You can only {action} your own notices")
        target_class = filters.get("target_class")
        if principal.is_teacher and target_class and not lookup.owns_class(principal.user_id, target_class):
            return Denied("You do not have access to this class")
        return Allowed(dict(filters))

    return rule


RULES: Mapping[tuple, Rule] = {
    (ResourceKind.ATTENDANCE, Operation.READ): attendance_read,
    (ResourceKind.ATTENDANCE, Operation.WRITE): attendance_write,
    (ResourceKind.ATTENDANCE, Operation.BULK_WRITE): attendance_bulk_write,
    (ResourceKind.ATTENDANCE, Operation.EXPORT): attendance_aggregate,
    (ResourceKind.REPORT, Operation.READ): attendance_aggregate,
    (ResourceKind.TEACHER_ATTENDANCE, Operation.READ): teacher_attendance_read,
    (ResourceKind.TEACHER_ATTENDANCE, Operation.WRITE): teacher_attendance_write,
    (ResourceKind.ROSTER, Operation.READ): roster_read,
    (ResourceKind.ROSTER, Operation.WRITE): roster_write,
    (ResourceKind.ROSTER, Operation.DELETE): roster_delete,
    (ResourceKind.STUDENT_ROSTER, Operation.READ): student_roster_read,
    (ResourceKind.STUDENT_ROSTER, Operation.DELETE): student_roster_delete,
    (ResourceKind.TEACHER_ROSTER, Operation.READ): teacher_roster_read,
    (ResourceKind.TEACHER_ROSTER, Operation.DELETE): teacher_roster_delete,
    (ResourceKind.USER, Operation.WRITE): user_write,
    (ResourceKind.STATISTICS, Operation.READ): statistics_read,
    (ResourceKind.NOTICE, Operation.READ): notice_read,
    (ResourceKind.NOTICE, Operation.WRITE): notice_write,
    (ResourceKind.NOTICE, Operation.UPDATE): _notice_owner_only("update"),
    (ResourceKind.NOTICE, Operation.DELETE): _notice_owner_only("delete"),
}


class AccessPolicy:
    """Looks up the rule for a (resource, operation) pair and applies it."""

    def __init__(self, lookup: OwnershipLookup, rules: Optional[Mapping[tuple, Rule]] = None):
        self._lookup = lookup
        self._rules = rules or RULES

    def check(
        self,
        principal: Principal,
        kind: ResourceKind,
        operation: Operation,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> Decision:
        rule = self._rules.get((kind, operation))
        if rule is None:
            return Denied()
        return rule(principal, dict(filters or {}), self._lookup)

    def authorize(
        self,
        principal: Principal,
        kind: ResourceKind,
        operation: Operation,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Like :meth:`check` but raises ``AuthorizationError`` on denial."""

        return self.check(principal, kind, operation, filters).unwrap()
