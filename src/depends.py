import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import invalid_token_error, missing_token_error
from src.app.services.token_verifier import InvalidTokenError, ITokenVerifier
from src.domain.entities import AuthPrincipal

logger = logging.getLogger(__name__)

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

# auto_error=False so a missing header is reported as AUTH_MISSING_TOKEN (401)
security = HTTPBearer(auto_error=False)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_token_verifier(request: Request) -> ITokenVerifier:
    """The single verifier built in create_app"""
    return request.app.state.token_verifier


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    verifier: ITokenVerifier = Depends(get_token_verifier),
) -> AuthPrincipal:
    """
    Dependency to extract and verify the bearer token from the Authorization header.

    Args:
        credentials: Bearer token from Authorization header (scheme is case-insensitive)
        verifier: Token verifier owned by the application

    Returns:
        AuthPrincipal for this request

    Raises:
        ClientError: 401 AUTH_MISSING_TOKEN if no bearer token was sent,
            401 AUTH_INVALID_TOKEN if verification fails
    """
    if credentials is None or not credentials.credentials:
        raise missing_token_error()

    try:
        return await verifier.verify(credentials.credentials)
    except InvalidTokenError:
        raise invalid_token_error() from None
    except Exception as e:
        logger.warning(f"Token verification failed unexpectedly: {e.__class__.__name__}")
        raise invalid_token_error() from None
