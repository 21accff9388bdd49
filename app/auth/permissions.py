"""Role-based capability checks.

``authorize`` is the single place that answers "may this principal do this";
routes reach it through the ``RequirePermission`` dependency and services call
it directly when the decision depends on a loaded resource.
"""

import enum
from typing import Any

from app.auth.models.user import User, UserRole


class Action(str, enum.Enum):
    ENROLL = "enroll"
    WRITE_REVIEW = "write_review"
    APPLY_INSTRUCTOR = "apply_instructor"
    CREATE_COURSE = "create_course"
    MANAGE_COURSE = "manage_course"
    VIEW_COURSE_ENROLLMENTS = "view_course_enrollments"
    MANAGE_CATEGORIES = "manage_categories"
    REVIEW_APPLICATIONS = "review_applications"
    REVIEW_APPEALS = "review_appeals"
    MANAGE_USERS = "manage_users"
    MANAGE_ADMINS = "manage_admins"


_STUDENT = frozenset({Action.ENROLL, Action.WRITE_REVIEW, Action.APPLY_INSTRUCTOR})

_INSTRUCTOR = (_STUDENT - {Action.APPLY_INSTRUCTOR}) | {
    Action.CREATE_COURSE,
    Action.MANAGE_COURSE,
    Action.VIEW_COURSE_ENROLLMENTS,
}

_ADMIN = _INSTRUCTOR | {
    Action.MANAGE_CATEGORIES,
    Action.REVIEW_APPLICATIONS,
    Action.REVIEW_APPEALS,
    Action.MANAGE_USERS,
}

ROLE_CAPABILITIES: dict[UserRole, frozenset[Action]] = {
    UserRole.STUDENT: _STUDENT,
    UserRole.INSTRUCTOR: _INSTRUCTOR,
    UserRole.ADMIN: _ADMIN,
    UserRole.SUPER_ADMIN: _ADMIN | {Action.MANAGE_ADMINS},
}

# Actions an instructor may only perform on courses they own
_OWNED_ACTIONS = frozenset({Action.MANAGE_COURSE, Action.VIEW_COURSE_ENROLLMENTS})

# Accounts an admin may moderate through the user management endpoints
_MANAGEABLE_BY_ADMIN = frozenset({UserRole.STUDENT, UserRole.INSTRUCTOR})


def is_admin(user: User) -> bool:
    return user.role in (UserRole.ADMIN, UserRole.SUPER_ADMIN)


def authorize(principal: User, action: Action, resource: Any = None) -> bool:
    """Return True when ``principal`` may perform ``action`` on ``resource``.

    ``resource`` is a Course for course-scoped actions and a User for
    MANAGE_USERS; it may be omitted for a role-only check.
    """
    if action not in ROLE_CAPABILITIES.get(principal.role, frozenset()):
        return False

    if resource is None:
        return True

    if action in _OWNED_ACTIONS:
        return is_admin(principal) or resource.instructor_id == principal.id

    if action is Action.MANAGE_USERS:
        if resource.id == principal.id:
            return False
        if principal.role is UserRole.SUPER_ADMIN:
            return resource.role is not UserRole.SUPER_ADMIN
        return resource.role in _MANAGEABLE_BY_ADMIN

    return True
