"""JWT bearer token verification.

Shared-secret (HS*) tokens are checked against the configured secret;
asymmetric (RS*/ES*) tokens against a remote key set.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from typing import Any, Callable

from jose import jwt
from jose.constants import ALGORITHMS
from jose.exceptions import ExpiredSignatureError, JOSEError, JWTClaimsError

from src.adapter.services.key_set_client import RemoteKeySetClient
from src.app.services.token_verifier import InvalidTokenError, ITokenVerifier
from src.domain.entities import AuthPrincipal, PrincipalRole

logger = logging.getLogger(__name__)

SHARED_SECRET_ALGORITHMS = frozenset({ALGORITHMS.HS256, ALGORITHMS.HS384, ALGORITHMS.HS512})
KEY_SET_ALGORITHMS = frozenset(
    {
        ALGORITHMS.RS256,
        ALGORITHMS.RS384,
        ALGORITHMS.RS512,
        ALGORITHMS.ES256,
        ALGORITHMS.ES384,
        ALGORITHMS.ES512,
    }
)


def derive_jwks_url(issuer: str | None, jwks_url: str | None) -> str | None:
    """Explicit JWKS URL wins; otherwise the issuer's well-known path."""
    if jwks_url:
        return jwks_url
    if not issuer:
        return None
    return f"{issuer.rstrip('/')}/.well-known/jwks.json"


class JwtTokenVerifier(ITokenVerifier):
    """Verifies bearer JWTs and turns them into an AuthPrincipal.

    The remote key set client is built on the first asymmetric token and
    reused for the lifetime of the verifier.
    """

    def __init__(
        self,
        jwt_secret: str | None = None,
        issuer: str | None = None,
        audience: str | None = None,
        jwks_url: str | None = None,
        jwks_timeout: float = 5.0,
        jwks_cache_ttl: timedelta = timedelta(minutes=10),
        jwks_cooldown: timedelta = timedelta(seconds=30),
        key_set_client_factory: Callable[..., RemoteKeySetClient] = RemoteKeySetClient,
    ):
        self._jwt_secret = jwt_secret or None
        self._issuer = issuer or None
        self._audience = audience or None
        self._jwks_url = derive_jwks_url(self._issuer, jwks_url or None)
        self._jwks_timeout = jwks_timeout
        self._jwks_cache_ttl = jwks_cache_ttl
        self._jwks_cooldown = jwks_cooldown
        self._key_set_client_factory = key_set_client_factory

        self._key_set_client: RemoteKeySetClient | None = None
        self._key_set_client_lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config) -> "JwtTokenVerifier":
        return cls(
            jwt_secret=config.JWT_SECRET,
            issuer=config.JWT_ISSUER,
            audience=config.JWT_AUDIENCE,
            jwks_url=config.JWKS_URL,
            jwks_timeout=float(config.JWKS_TIMEOUT_SECONDS),
            jwks_cache_ttl=timedelta(seconds=config.JWKS_CACHE_TTL_SECONDS),
            jwks_cooldown=timedelta(seconds=config.JWKS_COOLDOWN_SECONDS),
        )

    @property
    def jwks_url(self) -> str | None:
        return self._jwks_url

    async def verify(self, token: str) -> AuthPrincipal:
        """Verify token and return the caller identity.

        Raises:
            InvalidTokenError: If the token is malformed, uses an unsupported
                algorithm, fails signature or claim checks, or its key set
                cannot be obtained.
        """
        try:
            header = jwt.get_unverified_header(token)
        except JOSEError as e:
            self._reject("Malformed token", e)

        algorithm = header.get("alg")
        if not isinstance(algorithm, str) or not algorithm:
            self._reject("Missing algorithm")

        if algorithm in SHARED_SECRET_ALGORITHMS:
            if self._jwt_secret is None:
                self._reject("Shared secret not configured")
            key: Any = self._jwt_secret
        elif algorithm in KEY_SET_ALGORITHMS:
            key = await self._key_for(header.get("kid"))
        else:
            self._reject(f"Unsupported algorithm {algorithm}")

        claims = self._decode(token, key, algorithm)

        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject.strip():
            self._reject("Missing subject")

        if claims.get("role") != PrincipalRole.authenticated.value:
            self._reject("Invalid role")

        return AuthPrincipal(tenant_id=subject, raw_token=token)

    async def _key_for(self, kid: str | None) -> Any:
        client = await self._get_key_set_client()
        jwks = await client.get_key_set(kid)
        if kid is None:
            return jwks

        for candidate in jwks.get("keys", []):
            if candidate.get("kid") == kid:
                return candidate
        self._reject("No key in key set matches token kid")

    async def _get_key_set_client(self) -> RemoteKeySetClient:
        if self._key_set_client is not None:
            return self._key_set_client

        async with self._key_set_client_lock:
            if self._key_set_client is None:
                if self._jwks_url is None:
                    self._reject("Key set URL not configured")
                self._key_set_client = self._key_set_client_factory(
                    self._jwks_url,
                    timeout=self._jwks_timeout,
                    cache_ttl=self._jwks_cache_ttl,
                    cooldown=self._jwks_cooldown,
                )
            return self._key_set_client

    def _decode(self, token: str, key: Any, algorithm: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                key,
                algorithms=[algorithm],
                issuer=self._issuer,
                audience=self._audience,
                options=self._decode_options(),
            )
        except ExpiredSignatureError as e:
            self._reject("Token expired", e)
        except JWTClaimsError as e:
            self._reject(f"Claims error: {e}", e)
        except (JOSEError, ValueError, TypeError) as e:
            self._reject(f"Verification failed: {e.__class__.__name__}", e)

    def _decode_options(self) -> dict[str, bool]:
        # python-jose skips the audience check when the claim is absent
        if self._audience is None:
            return {"verify_aud": False}
        return {"verify_aud": True, "require_aud": True}

    @staticmethod
    def _reject(reason: str, cause: Exception | None = None):
        logger.warning(f"Token rejected: {reason}")
        raise InvalidTokenError(reason) from cause
