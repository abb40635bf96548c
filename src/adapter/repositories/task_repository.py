from uuid import UUID

from sqlalchemy import func, true
from sqlmodel import delete, select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.task_repository import ITaskRepository
from src.domain.base import utc_now
from src.domain.entities import (
    Task,
    TaskListPage,
    TaskListQuery,
    TaskPatch,
    TaskSortBy,
    TaskSortOrder,
    TaskStatusFilter,
)

# OFFSET + LIMIT must fit a signed 64-bit SQL integer
MAX_SQL_OFFSET = 2**63 - 1

SORT_COLUMNS = {
    TaskSortBy.created_at: "created_at",
    TaskSortBy.updated_at: "updated_at",
    TaskSortBy.title: "title",
}


def _tenant_filters(tenant_id: str, status: TaskStatusFilter) -> list:
    filters = [Task.tenant_id == tenant_id]
    if status == TaskStatusFilter.todo:
        filters.append(Task.is_done == False)  # noqa: E712
    elif status == TaskStatusFilter.done:
        filters.append(Task.is_done == True)  # noqa: E712
    return filters


def _ordered(column, order: TaskSortOrder):
    return column.asc() if order == TaskSortOrder.asc else column.desc()


class TaskRepository(ITaskRepository):
    """Task repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_by_tenant(self, tenant_id: str, query: TaskListQuery) -> TaskListPage:
        """
        Get one page of tasks plus the total count in a single statement.

        The count subquery is LEFT JOINed to the page subquery so both come
        from the same snapshot; an empty page still yields one row carrying
        the total.
        """
        filters = _tenant_filters(tenant_id, query.status)
        if query.offset + query.page_size > MAX_SQL_OFFSET:
            return await self._count_only(filters, query)

        sort_name = SORT_COLUMNS[query.sort_by]

        counted = (
            select(func.count().label("total"))
            .select_from(Task)
            .where(*filters)
            .subquery("counted")
        )
        page = (
            select(Task)
            .where(*filters)
            .order_by(_ordered(getattr(Task, sort_name), query.sort_order))
            .offset(query.offset)
            .limit(query.page_size)
            .subquery("page")
        )
        stmt = (
            select(counted.c.total, *page.c)
            .select_from(counted.outerjoin(page, true()))
            .order_by(_ordered(page.c[sort_name], query.sort_order))
        )

        result = await self.session.execute(stmt)
        rows = result.all()

        total = rows[0].total if rows else 0
        items = [
            Task(**{column.name: row._mapping[column] for column in page.c})
            for row in rows
            if row._mapping[page.c.id] is not None
        ]
        return TaskListPage(items=items, total=total, query=query)

    async def _count_only(self, filters: list, query: TaskListQuery) -> TaskListPage:
        """Page far beyond any stored row: no items, real total"""
        stmt = select(func.count()).select_from(Task).where(*filters)
        result = await self.session.execute(stmt)
        return TaskListPage(items=[], total=result.scalar_one(), query=query)

    async def create(self, tenant_id: str, title: str) -> Task:
        """Create a new task"""
        now = utc_now()
        task = Task(tenant_id=tenant_id, title=title, is_done=False, created_at=now, updated_at=now)
        self.session.add(task)
        await self.session.flush()
        await self.session.refresh(task)
        return task

    async def update_for_tenant(self, tenant_id: str, task_id: UUID, patch: TaskPatch) -> bool:
        """Conditional update keyed by (id, tenant_id)"""
        values = patch.changes()
        values["updated_at"] = utc_now()
        stmt = (
            update(Task)
            .where(Task.id == task_id, Task.tenant_id == tenant_id)
            .values(**values)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def delete_for_tenant(self, tenant_id: str, task_id: UUID) -> bool:
        """Conditional delete keyed by (id, tenant_id)"""
        stmt = delete(Task).where(Task.id == task_id, Task.tenant_id == tenant_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0
