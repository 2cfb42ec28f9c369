from __future__ import annotations

import logging
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..access.policy import AccessPolicy, Operation, ResourceKind
from ..classes.membership import ClassMembership
from ..classes.repository import ClassRepository
from ..common.validators import optional_text, parse_enum, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..core.principal import Principal
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, user_id: str, password: str, role: str) -> User:
        if not user_id or not password or not role:
            raise ValidationError("All fields are required")

        try:
            wanted_role = Role(str(role).strip().lower())
        except ValueError:
            raise AuthenticationError("Invalid credentials")

        user = self._users.get_by_id_and_role(str(user_id).strip(), wanted_role)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password)
        except Exception:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")
        return user

    @staticmethod
    def principal_for(user: User) -> Principal:
        return Principal(
            user_id=user.user_id,
            role=user.role,
            name=user.name,
            class_name=user.class_name if user.role == Role.STUDENT else None,
        )


class UserService:
    """Use case: manage accounts of every role."""

    def __init__(
        self,
        users: UserRepository,
        classes: ClassRepository,
        policy: AccessPolicy,
        membership: Optional[ClassMembership] = None,
    ):
        self._users = users
        self._classes = classes
        self._policy = policy
        self._membership = membership or ClassMembership(classes, users)

    def register(
        self,
        principal: Principal,
        *,
        user_id: str,
        password: str,
        role: str,
        name: str,
        email: Optional[str] = None,
        class_name: Optional[str] = None,
        subject: Optional[str] = None,
    ) -> User:
        target_role = parse_enum(Role, role, "role")
        self._policy.authorize(principal, ResourceKind.USER, Operation.WRITE, {"target_role": target_role})

        user_id = require_non_empty(user_id, "User ID")
        name = require_non_empty(name, "Name")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        class_name = optional_text(class_name) if target_role == Role.STUDENT else None

        if self._users.get_by_id(user_id):
            raise ValidationError("User ID already exists")
        if class_name:
            self._membership.require_class(class_name)

        user = self._users.create_user(
            user_id=user_id,
            password_hash=generate_password_hash(password),
            role=target_role,
            name=name,
            email=optional_text(email),
            class_name=class_name,
            subject=optional_text(subject) if target_role == Role.TEACHER else None,
        )
        if class_name:
            self._membership.enroll(user.user_id, class_name)

        logger.info("User %s (%s) created by %s", user.user_id, target_role.value, principal.user_id)
        return user

    def list_students(self, principal: Principal, *, class_filter: Optional[str] = None) -> Sequence[User]:
        filters = self._policy.authorize(
            principal, ResourceKind.STUDENT_ROSTER, Operation.READ, {"class_name": optional_text(class_filter)}
        )
        return self._users.list_active(role=Role.STUDENT, class_names=filters["class_names"])

    def list_students_in_class(self, principal: Principal, class_name: str) -> Sequence[User]:
        class_name = require_non_empty(class_name, "Class name")
        return self.list_students(principal, class_filter=class_name)

    def delete_student(self, principal: Principal, student_id: str) -> None:
        student = self._users.get_by_id_and_role(student_id, Role.STUDENT)
        if not student:
            raise NotFoundError("Student not found")

        self._policy.authorize(principal, ResourceKind.STUDENT_ROSTER, Operation.DELETE, {"student_id": student_id})

        # Soft delete keeps the historical attendance rows intact.
        self._users.set_active(student_id, role=Role.STUDENT, is_active=False)
        self._membership.withdraw(student_id)
        logger.info("Student %s deactivated by %s", student_id, principal.user_id)

    def list_teachers(self, principal: Principal) -> Sequence[User]:
        self._policy.authorize(principal, ResourceKind.TEACHER_ROSTER, Operation.READ)
        return self._users.list_active(role=Role.TEACHER)

    def delete_teacher(self, principal: Principal, teacher_id: str) -> None:
        self._policy.authorize(principal, ResourceKind.TEACHER_ROSTER, Operation.DELETE, {"teacher_id": teacher_id})

        teacher = self._users.get_by_id_and_role(teacher_id, Role.TEACHER)
        if not teacher:
            raise NotFoundError("Teacher not found")

        self._users.set_active(teacher_id, role=Role.TEACHER, is_active=False)
        closed = self._classes.deactivate_for_teacher(teacher_id)
        logger.info("Teacher %s deactivated by %s (%d classes closed)", teacher_id, principal.user_id, closed)

    def get_profile(self, principal: Principal) -> User:
        user = self._users.get_by_id(principal.user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_profile(
        self,
        principal: Principal,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        current_password: Optional[str] = None,
        new_password: Optional[str] = None,
    ) -> User:
        user = self.get_profile(principal)

        password_hash = None
        if new_password:
            if not current_password:
                raise ValidationError("Current password required for password change")
            if not check_password_hash(user.password_hash, current_password):
                raise AuthenticationError("Invalid current password")
            require_min_length(new_password, "New password", MIN_PASSWORD_LENGTH)
            password_hash = generate_password_hash(new_password)

        # Name snapshots on attendance rows and notices are left untouched.
        self._users.update_profile(
            user.user_id,
            name=optional_text(name),
            email=optional_text(email),
            password_hash=password_hash,
        )
        return self.get_profile(principal)
