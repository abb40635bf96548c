"""
Update Task Use Case

Applies a partial patch to one of the caller's tasks.
"""

from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import TITLE_MAX_LENGTH, UNSET, TaskPatch, is_valid_title
from src.domain.errors import ErrorCode

from .dtos import MutationResponse


class UpdateTaskUseCase:
    """
    Use case for patching a task.

    Business Rules:
    - At least one of title / is_done must be supplied
    - Only supplied fields change; updated_at always advances
    - A task owned by another tenant is reported as TASK_NOT_FOUND,
      identical to a task that never existed
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, tenant_id: str, task_id: UUID, patch: TaskPatch
    ) -> Result[MutationResponse]:
        """
        Execute update task use case.

        Args:
            tenant_id: Tenant from the verified token
            task_id: Task to patch
            patch: Fields to change (UNSET fields are left alone)

        Returns:
            Result with MutationResponse, or Error
        """
        if patch.is_empty():
            return Return.err(
                Error(ErrorCode.VALIDATION_ERROR.value, "Patch must contain title or isDone")
            )

        if patch.title is not UNSET and not is_valid_title(patch.title):
            return Return.err(
                Error(
                    ErrorCode.VALIDATION_ERROR.value,
                    f"Title must be between 1 and {TITLE_MAX_LENGTH} characters",
                )
            )

        async with self.uow:
            updated = await self.uow.tasks.update_for_tenant(tenant_id, task_id, patch)
            if not updated:
                return Return.err(Error(ErrorCode.TASK_NOT_FOUND.value, "Task not found"))

            await self.uow.commit()

        return Return.ok(MutationResponse())
