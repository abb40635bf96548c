"""
Task Service Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class TaskSortBy(str, Enum):
    """Field a task listing is ordered by"""

    created_at = "createdAt"
    updated_at = "updatedAt"
    title = "title"


class TaskSortOrder(str, Enum):
    """Direction of a task listing"""

    asc = "asc"
    desc = "desc"


class TaskStatusFilter(str, Enum):
    """Completion filter of a task listing"""

    all = "all"
    todo = "todo"
    done = "done"


class PrincipalRole(str, Enum):
    """Role claim accepted on bearer tokens"""

    authenticated = "authenticated"
