"""
Create Task Use Case
"""

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import TITLE_MAX_LENGTH, is_valid_title
from src.domain.errors import ErrorCode

from .dtos import TaskResponse


class CreateTaskUseCase:
    """
    Use case for creating a task.

    Business Rules:
    - Title must be 1-200 characters
    - New tasks start open (is_done=False) with created_at == updated_at
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, tenant_id: str, title: str) -> Result[TaskResponse]:
        if not is_valid_title(title):
            return Return.err(
                Error(
                    ErrorCode.VALIDATION_ERROR.value,
                    f"Title must be between 1 and {TITLE_MAX_LENGTH} characters",
                )
            )

        async with self.uow:
            task = await self.uow.tasks.create(tenant_id, title)
            await self.uow.commit()

        return Return.ok(TaskResponse.from_entity(task))
