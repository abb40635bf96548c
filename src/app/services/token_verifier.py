from abc import ABC, abstractmethod

from src.domain.entities import AuthPrincipal


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be trusted, for any reason"""

    pass


class ITokenVerifier(ABC):
    """Bearer token verifier interface - application layer"""

    @abstractmethod
    async def verify(self, token: str) -> AuthPrincipal:
        """Verify token and return the caller identity, or raise InvalidTokenError"""
        pass
