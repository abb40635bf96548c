"""
Task Entity

A single to-do item owned by exactly one tenant.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Union
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now

from .enums import TaskSortBy, TaskSortOrder, TaskStatusFilter

TITLE_MIN_LENGTH = 1
TITLE_MAX_LENGTH = 200


class Task(SQLModel, table=True):
    """
    Task entity - a to-do item owned by one tenant.

    Business Rules:
    - tenant_id is always set; every query and mutation filters on it
    - Title is 1-200 characters
    - updated_at advances on every patch
    """

    __tablename__ = "tasks"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: str = Field(nullable=False, index=True, max_length=255)

    title: str = Field(max_length=TITLE_MAX_LENGTH)
    is_done: bool = Field(default=False)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime, nullable=False))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime, nullable=False))

    __table_args__ = (Index("idx_task_tenant_created_at", "tenant_id", "created_at"),)


def is_valid_title(title: object) -> bool:
    return isinstance(title, str) and TITLE_MIN_LENGTH <= len(title) <= TITLE_MAX_LENGTH


class _Unset:
    """Marker for a patch field the caller did not supply"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset()


@dataclass(frozen=True)
class TaskPatch:
    """
    Partial update of a task.

    Each field is either UNSET (leave unchanged) or the new value.
    """

    title: Union[str, _Unset] = UNSET
    is_done: Union[bool, _Unset] = UNSET

    def is_empty(self) -> bool:
        return self.title is UNSET and self.is_done is UNSET

    def changes(self) -> dict:
        """Column values to write, only for supplied fields"""
        values = {}
        if self.title is not UNSET:
            values["title"] = self.title
        if self.is_done is not UNSET:
            values["is_done"] = self.is_done
        return values


@dataclass(frozen=True)
class TaskListQuery:
    """Fully normalized listing parameters"""

    page: int = 1
    page_size: int = 10
    sort_by: TaskSortBy = TaskSortBy.created_at
    sort_order: TaskSortOrder = TaskSortOrder.desc
    status: TaskStatusFilter = TaskStatusFilter.all

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def total_pages_for(total: int, page_size: int) -> int:
    return max(1, math.ceil(total / page_size))


@dataclass(frozen=True)
class TaskListPage:
    """One page of a tenant's tasks plus the query that produced it"""

    items: List[Task]
    total: int
    query: TaskListQuery = field(default_factory=TaskListQuery)

    @property
    def total_pages(self) -> int:
        return total_pages_for(self.total, self.query.page_size)
