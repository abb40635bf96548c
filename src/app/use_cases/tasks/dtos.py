"""
Task Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the task domain.
Responses serialize with camelCase aliases, the field names clients see.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.domain.entities import Task, TaskListPage


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Command DTOs
# ============================================================================


class ListTasksCommand(_CamelModel):
    """
    Raw listing parameters as received from the caller.

    Any field may be missing; ListTasksUseCase applies defaults.
    """

    page: Optional[int] = None
    page_size: Optional[int] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    status: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


def _isoformat(value) -> str:
    return value.isoformat(timespec="microseconds") + "Z"


class TaskResponse(_CamelModel):
    """Single task as returned to clients"""

    id: str
    title: str
    is_done: bool
    created_at: str
    updated_at: str

    @classmethod
    def from_entity(cls, task: Task) -> "TaskResponse":
        return cls(
            id=str(task.id),
            title=task.title,
            is_done=task.is_done,
            created_at=_isoformat(task.created_at),
            updated_at=_isoformat(task.updated_at),
        )


class TaskListPageResponse(_CamelModel):
    """One page of tasks with the normalized query echoed back"""

    items: List[TaskResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    sort_by: str
    sort_order: str
    status: str

    @classmethod
    def from_page(cls, page: TaskListPage) -> "TaskListPageResponse":
        return cls(
            items=[TaskResponse.from_entity(task) for task in page.items],
            total=page.total,
            page=page.query.page,
            page_size=page.query.page_size,
            total_pages=page.total_pages,
            sort_by=page.query.sort_by.value,
            sort_order=page.query.sort_order.value,
            status=page.query.status.value,
        )


class MutationResponse(BaseModel):
    """Acknowledgement for update and delete"""

    ok: bool = True
