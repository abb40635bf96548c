"""
Unit tests for List Tasks Use Case
"""

import pytest
from datetime import datetime
from uuid import uuid4

from src.app.use_cases.tasks import ListTasksCommand, ListTasksUseCase, normalize_task_list_query
from src.domain.entities import (
    Task,
    TaskListPage,
    TaskListQuery,
    TaskSortBy,
    TaskSortOrder,
    TaskStatusFilter,
)
from src.domain.errors import ErrorCode


def _task(title: str, is_done: bool = False) -> Task:
    now = datetime(2026, 1, 1, 12, 0, 0)
    return Task(id=uuid4(), tenant_id="tenant-a", title=title, is_done=is_done, created_at=now, updated_at=now)


def test_normalize_applies_defaults():
    result = normalize_task_list_query(ListTasksCommand())

    assert result.is_ok()
    assert result.value == TaskListQuery(
        page=1,
        page_size=10,
        sort_by=TaskSortBy.created_at,
        sort_order=TaskSortOrder.desc,
        status=TaskStatusFilter.all,
    )


def test_normalize_keeps_supplied_values():
    command = ListTasksCommand(page=3, page_size=25, sort_by="title", sort_order="asc", status="done")

    result = normalize_task_list_query(command)

    assert result.is_ok()
    query = result.value
    assert query.page == 3
    assert query.page_size == 25
    assert query.sort_by == TaskSortBy.title
    assert query.sort_order == TaskSortOrder.asc
    assert query.status == TaskStatusFilter.done
    assert query.offset == 50


@pytest.mark.parametrize(
    "command",
    [
        ListTasksCommand(page=0),
        ListTasksCommand(page_size=0),
        ListTasksCommand(page_size=101),
        ListTasksCommand(sort_by="priority"),
        ListTasksCommand(sort_order="sideways"),
        ListTasksCommand(status="archived"),
    ],
)
def test_normalize_rejects_out_of_range(command):
    result = normalize_task_list_query(command)

    assert result.is_err()
    assert result.error.code == ErrorCode.VALIDATION_ERROR.value
    assert len(result.error.details) == 1


@pytest.mark.asyncio
async def test_list_tasks_passes_normalized_query(mock_uow):
    """Defaults are applied before the repository is called"""
    items = [_task("alpha"), _task("bravo", is_done=True)]
    mock_uow.tasks.list_by_tenant.return_value = TaskListPage(items=items, total=2, query=TaskListQuery())

    use_case = ListTasksUseCase(mock_uow)
    result = await use_case.execute("tenant-a", ListTasksCommand())

    assert result.is_ok()
    mock_uow.tasks.list_by_tenant.assert_called_once_with("tenant-a", TaskListQuery())

    page = result.value
    assert page.total == 2
    assert page.total_pages == 1
    assert page.page == 1
    assert page.page_size == 10
    assert page.sort_by == "createdAt"
    assert page.sort_order == "desc"
    assert page.status == "all"
    assert [item.title for item in page.items] == ["alpha", "bravo"]
    assert page.items[1].is_done is True


@pytest.mark.asyncio
async def test_list_tasks_total_pages_rounds_up(mock_uow):
    query = TaskListQuery(page_size=2)
    mock_uow.tasks.list_by_tenant.return_value = TaskListPage(
        items=[_task("alpha"), _task("bravo")], total=3, query=query
    )

    use_case = ListTasksUseCase(mock_uow)
    result = await use_case.execute("tenant-a", ListTasksCommand(page_size=2))

    assert result.is_ok()
    assert result.value.total_pages == 2


@pytest.mark.asyncio
async def test_list_tasks_empty_has_one_page(mock_uow):
    mock_uow.tasks.list_by_tenant.return_value = TaskListPage(items=[], total=0, query=TaskListQuery())

    use_case = ListTasksUseCase(mock_uow)
    result = await use_case.execute("tenant-a", ListTasksCommand())

    assert result.is_ok()
    assert result.value.items == []
    assert result.value.total_pages == 1


@pytest.mark.asyncio
async def test_list_tasks_invalid_query_skips_repository(mock_uow):
    use_case = ListTasksUseCase(mock_uow)
    result = await use_case.execute("tenant-a", ListTasksCommand(page_size=500))

    assert result.is_err()
    assert result.error.code == ErrorCode.VALIDATION_ERROR.value
    mock_uow.tasks.list_by_tenant.assert_not_called()
