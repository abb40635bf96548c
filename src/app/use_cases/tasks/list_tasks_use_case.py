"""
List Tasks Use Case

Returns one page of the caller's tasks, filtered and sorted.
"""

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import TaskListQuery, TaskSortBy, TaskSortOrder, TaskStatusFilter
from src.domain.errors import ErrorCode

from .dtos import ListTasksCommand, TaskListPageResponse

MAX_PAGE_SIZE = 100


def normalize_task_list_query(command: ListTasksCommand) -> Result[TaskListQuery]:
    """
    Apply defaults and range checks to raw listing parameters.

    Returns:
        Result with a complete TaskListQuery, or Error(VALIDATION_ERROR)
    """
    defaults = TaskListQuery()
    problems = []

    page = defaults.page if command.page is None else command.page
    if page < 1:
        problems.append({"field": "page", "message": "must be >= 1"})

    page_size = defaults.page_size if command.page_size is None else command.page_size
    if not 1 <= page_size <= MAX_PAGE_SIZE:
        problems.append({"field": "pageSize", "message": f"must be between 1 and {MAX_PAGE_SIZE}"})

    enum_fields = (
        ("sortBy", command.sort_by, TaskSortBy, defaults.sort_by),
        ("sortOrder", command.sort_order, TaskSortOrder, defaults.sort_order),
        ("status", command.status, TaskStatusFilter, defaults.status),
    )
    resolved = {}
    for name, raw, enum_cls, default in enum_fields:
        if raw is None:
            resolved[name] = default
            continue
        try:
            resolved[name] = enum_cls(raw)
        except ValueError:
            allowed = ", ".join(member.value for member in enum_cls)
            problems.append({"field": name, "message": f"must be one of: {allowed}"})

    if problems:
        return Return.err(
            Error(ErrorCode.VALIDATION_ERROR.value, "Invalid list query", details=problems)
        )

    return Return.ok(
        TaskListQuery(
            page=page,
            page_size=page_size,
            sort_by=resolved["sortBy"],
            sort_order=resolved["sortOrder"],
            status=resolved["status"],
        )
    )


class ListTasksUseCase:
    """
    Use case for listing a tenant's tasks.

    Business Rules:
    - Only tasks owned by tenant_id are visible
    - Defaults: page 1, 10 per page, newest first, all statuses
    - total always counts every matching task, independent of sorting
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, tenant_id: str, command: ListTasksCommand
    ) -> Result[TaskListPageResponse]:
        """
        Execute list tasks use case.

        Args:
            tenant_id: Tenant from the verified token
            command: Raw listing parameters

        Returns:
            Result with TaskListPageResponse DTO, or Error
        """
        query_result = normalize_task_list_query(command)
        if query_result.is_err():
            return query_result

        async with self.uow:
            page = await self.uow.tasks.list_by_tenant(tenant_id, query_result.value)

        return Return.ok(TaskListPageResponse.from_page(page))
