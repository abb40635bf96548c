"""
Delete Task Use Case
"""

from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import ErrorCode

from .dtos import MutationResponse


class DeleteTaskUseCase:
    """
    Use case for deleting a task.

    Business Rules:
    - Deletes only when (task_id, tenant_id) match
    - Missing and foreign tasks both yield TASK_NOT_FOUND
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, tenant_id: str, task_id: UUID) -> Result[MutationResponse]:
        async with self.uow:
            deleted = await self.uow.tasks.delete_for_tenant(tenant_id, task_id)
            if not deleted:
                return Return.err(Error(ErrorCode.TASK_NOT_FOUND.value, "Task not found"))

            await self.uow.commit()

        return Return.ok(MutationResponse())
