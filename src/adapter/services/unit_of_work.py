import logging

from sqlalchemy import exc as sa_exc
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.task_repository import TaskRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import InfraFault, InfraFaultError, InfraFaultKind

logger = logging.getLogger(__name__)


def to_infra_fault(error: BaseException) -> InfraFault:
    """
    Translate a raw persistence exception into an InfraFault.

    This is the only place driver and SQLAlchemy exception types are
    inspected.
    """
    message = str(error) or error.__class__.__name__

    if isinstance(error, (sa_exc.TimeoutError, sa_exc.DisconnectionError, OSError)):
        return InfraFault(InfraFaultKind.connection, message)

    if isinstance(error, sa_exc.DBAPIError):
        # No statement means the failure happened while connecting
        if error.connection_invalidated or error.statement is None:
            return InfraFault(InfraFaultKind.connection, message)
        return InfraFault(InfraFaultKind.query, message)

    if isinstance(error, sa_exc.SQLAlchemyError):
        return InfraFault(InfraFaultKind.query, message)

    return InfraFault(InfraFaultKind.unknown, message)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.tasks = TaskRepository(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        try:
            await self.rollback()
        except sa_exc.SQLAlchemyError as rollback_error:
            logger.warning(f"Rollback failed: {rollback_error.__class__.__name__}")
            if exc is None:
                raise InfraFaultError(to_infra_fault(rollback_error)) from rollback_error

        if isinstance(exc, (sa_exc.SQLAlchemyError, OSError)):
            raise InfraFaultError(to_infra_fault(exc)) from exc
        return False

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
