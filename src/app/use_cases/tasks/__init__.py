"""
Task Management Use Cases

All task-related business logic.
"""

from .dtos import ListTasksCommand, MutationResponse, TaskListPageResponse, TaskResponse
from .list_tasks_use_case import ListTasksUseCase, normalize_task_list_query
from .create_task_use_case import CreateTaskUseCase
from .update_task_use_case import UpdateTaskUseCase
from .delete_task_use_case import DeleteTaskUseCase

__all__ = [
    "ListTasksUseCase",
    "CreateTaskUseCase",
    "UpdateTaskUseCase",
    "DeleteTaskUseCase",
    "normalize_task_list_query",
    # DTOs
    "ListTasksCommand",
    "MutationResponse",
    "TaskListPageResponse",
    "TaskResponse",
]
