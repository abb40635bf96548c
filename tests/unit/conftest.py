import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    # Mock repositories
    uow.tasks = MagicMock()
    uow.tasks.list_by_tenant = AsyncMock()
    uow.tasks.create = AsyncMock()
    uow.tasks.update_for_tenant = AsyncMock()
    uow.tasks.delete_for_tenant = AsyncMock()
    return uow
