"""
Task API Routes

CRUD and listing for the caller's own tasks. Every endpoint requires a
bearer token; the tenant is always taken from the verified token.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.api.envelope import ERROR_RESPONSES, SuccessEnvelope, success_envelope
from src.api.error import raise_for_error
from src.api.middleware import get_request_id
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.tasks import (
    CreateTaskUseCase,
    DeleteTaskUseCase,
    ListTasksCommand,
    ListTasksUseCase,
    MutationResponse,
    TaskListPageResponse,
    TaskResponse,
    UpdateTaskUseCase,
)
from src.depends import get_current_principal, get_unit_of_work
from src.domain.entities import (
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
    UNSET,
    AuthPrincipal,
    TaskPatch,
    TaskSortBy,
    TaskSortOrder,
    TaskStatusFilter,
)

router = APIRouter(prefix="/tasks", tags=["Tasks"], responses=ERROR_RESPONSES)


class CreateTaskRequest(BaseModel):
    """Create task HTTP request payload"""

    title: str = Field(..., min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)


class UpdateTaskRequest(BaseModel):
    """
    Patch task HTTP request payload

    Both fields are optional but at least one must be present, and an
    explicit null is rejected rather than treated as "unchanged".
    """

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(None, min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    is_done: Optional[bool] = Field(None, alias="isDone")

    @model_validator(mode="after")
    def check_fields(self):
        if not self.model_fields_set:
            raise ValueError("At least one of title or isDone is required")
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{name} must not be null")
        return self

    def to_patch(self) -> TaskPatch:
        fields = self.model_fields_set
        return TaskPatch(
            title=self.title if "title" in fields else UNSET,
            is_done=self.is_done if "is_done" in fields else UNSET,
        )


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=SuccessEnvelope[TaskListPageResponse],
)
async def list_tasks(
    request: Request,
    principal: AuthPrincipal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    page: Optional[int] = Query(None, ge=1),
    page_size: Optional[int] = Query(None, alias="pageSize", ge=1, le=100),
    sort_by: Optional[TaskSortBy] = Query(None, alias="sortBy"),
    sort_order: Optional[TaskSortOrder] = Query(None, alias="sortOrder"),
    task_status: Optional[TaskStatusFilter] = Query(None, alias="status"),
):
    """
    List Tasks

    Query Parameters (all optional):
        - page: 1-based page number (default 1)
        - pageSize: 1-100 (default 10)
        - sortBy: createdAt | updatedAt | title (default createdAt)
        - sortOrder: asc | desc (default desc)
        - status: all | todo | done (default all)
    """
    command = ListTasksCommand(
        page=page,
        page_size=page_size,
        sort_by=sort_by.value if sort_by else None,
        sort_order=sort_order.value if sort_order else None,
        status=task_status.value if task_status else None,
    )

    use_case = ListTasksUseCase(uow)
    result = await use_case.execute(principal.tenant_id, command)
    if result.is_err():
        raise_for_error(result.error)

    return success_envelope(result.value, get_request_id(request))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=SuccessEnvelope[TaskResponse],
)
async def create_task(
    request: Request,
    body: CreateTaskRequest,
    principal: AuthPrincipal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Create Task - new tasks start with isDone=false"""
    use_case = CreateTaskUseCase(uow)
    result = await use_case.execute(principal.tenant_id, body.title)
    if result.is_err():
        raise_for_error(result.error)

    return success_envelope(result.value, get_request_id(request))


@router.patch(
    "/{task_id}",
    status_code=status.HTTP_200_OK,
    response_model=SuccessEnvelope[MutationResponse],
)
async def update_task(
    request: Request,
    task_id: UUID,
    body: UpdateTaskRequest,
    principal: AuthPrincipal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update Task

    Raises:
        - 404 TASK_NOT_FOUND: No task with this id belongs to the caller
    """
    use_case = UpdateTaskUseCase(uow)
    result = await use_case.execute(principal.tenant_id, task_id, body.to_patch())
    if result.is_err():
        raise_for_error(result.error)

    return success_envelope(result.value, get_request_id(request))


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_200_OK,
    response_model=SuccessEnvelope[MutationResponse],
)
async def delete_task(
    request: Request,
    task_id: UUID,
    principal: AuthPrincipal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Delete Task

    Raises:
        - 404 TASK_NOT_FOUND: No task with this id belongs to the caller
    """
    use_case = DeleteTaskUseCase(uow)
    result = await use_case.execute(principal.tenant_id, task_id)
    if result.is_err():
        raise_for_error(result.error)

    return success_envelope(result.value, get_request_id(request))
