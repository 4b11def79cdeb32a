"""Role-based authorization decisions."""

import enum
from typing import Iterable

from backend.app.models.enums import Role
from backend.app.models.user import User

STAFF_ROLES = frozenset({Role.HEAD, Role.TEACHER})


class Action(str, enum.Enum):
    MANAGE_ACADEMIC_DATA = "MANAGE_ACADEMIC_DATA"
    MANAGE_MODULES = "MANAGE_MODULES"
    MANAGE_STUDENTS = "MANAGE_STUDENTS"
    MANAGE_USERS = "MANAGE_USERS"
    RECORD_MARKS = "RECORD_MARKS"
    VIEW_ALL_REPORTS = "VIEW_ALL_REPORTS"
    PRINT_TEMPLATE = "PRINT_TEMPLATE"
    VIEW_PUBLISHED = "VIEW_PUBLISHED"


_HEAD_ONLY = frozenset({Role.HEAD})

ALLOWED_ROLES = {
    Action.MANAGE_ACADEMIC_DATA: _HEAD_ONLY,
    Action.MANAGE_MODULES: _HEAD_ONLY,
    Action.MANAGE_STUDENTS: _HEAD_ONLY,
    Action.MANAGE_USERS: _HEAD_ONLY,
    Action.RECORD_MARKS: STAFF_ROLES,
    Action.VIEW_ALL_REPORTS: STAFF_ROLES,
    Action.PRINT_TEMPLATE: STAFF_ROLES,
    Action.VIEW_PUBLISHED: frozenset(Role),
}


def is_allowed(roles: Iterable[Role], action: Action) -> bool:
    return bool(ALLOWED_ROLES[action].intersection(roles))


def is_staff(user: User) -> bool:
    return bool(STAFF_ROLES.intersection(user.roles))


def can_view_student(user: User, student_id: int) -> bool:
    """Staff see every student; parents only their linked children."""
    if is_staff(user):
        return True
    if Role.PARENTS in user.roles:
        return any(link.student_id == student_id for link in user.parent_links)
    return False
