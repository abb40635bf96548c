from abc import ABC, abstractmethod
from uuid import UUID

from src.domain.entities import Task, TaskListPage, TaskListQuery, TaskPatch


class ITaskRepository(ABC):
    """Task repository interface - application layer

    Every method is scoped to one tenant. Mutations match on (id, tenant_id)
    in a single statement, so a task owned by another tenant behaves exactly
    like a task that does not exist.
    """

    @abstractmethod
    async def list_by_tenant(self, tenant_id: str, query: TaskListQuery) -> TaskListPage:
        """Get one page of the tenant's tasks; total and items from one read"""
        pass

    @abstractmethod
    async def create(self, tenant_id: str, title: str) -> Task:
        """Create a new open task"""
        pass

    @abstractmethod
    async def update_for_tenant(self, tenant_id: str, task_id: UUID, patch: TaskPatch) -> bool:
        """Apply patch and refresh updated_at. Returns True if a row matched."""
        pass

    @abstractmethod
    async def delete_for_tenant(self, tenant_id: str, task_id: UUID) -> bool:
        """Delete task. Returns True if a row matched."""
        pass
