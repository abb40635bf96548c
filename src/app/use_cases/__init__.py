"""
Use Cases

Organized into domain folders:
- tasks/: Task listing and mutation
"""

from .tasks import (
    CreateTaskUseCase,
    DeleteTaskUseCase,
    ListTasksUseCase,
    UpdateTaskUseCase,
)

__all__ = [
    "ListTasksUseCase",
    "CreateTaskUseCase",
    "UpdateTaskUseCase",
    "DeleteTaskUseCase",
]
