"""
AuthPrincipal Value Object

Identity of the caller for the duration of one request.
"""

from dataclasses import dataclass, field

from .enums import PrincipalRole


@dataclass(frozen=True)
class AuthPrincipal:
    """
    Verified caller identity.

    Business Rules:
    - tenant_id is the token subject and scopes every task operation
    - Built fresh for every request, never persisted or cached
    """

    tenant_id: str
    raw_token: str = field(repr=False)
    role: PrincipalRole = PrincipalRole.authenticated
