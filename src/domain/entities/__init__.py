"""
Task Service Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    PrincipalRole,
    TaskSortBy,
    TaskSortOrder,
    TaskStatusFilter,
)

# Export all entities
from .auth_principal import AuthPrincipal
from .task import (
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
    UNSET,
    Task,
    TaskListPage,
    TaskListQuery,
    TaskPatch,
    is_valid_title,
    total_pages_for,
)

__all__ = [
    # Enums
    "PrincipalRole",
    "TaskSortBy",
    "TaskSortOrder",
    "TaskStatusFilter",
    # Entities
    "AuthPrincipal",
    "Task",
    "TaskListPage",
    "TaskListQuery",
    "TaskPatch",
    "UNSET",
    "TITLE_MIN_LENGTH",
    "TITLE_MAX_LENGTH",
    "is_valid_title",
    "total_pages_for",
]
