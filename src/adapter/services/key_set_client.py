"""Remote key set client.

Fetches the published JSON Web Key Set used to verify asymmetrically signed
bearer tokens and memoizes it for reuse across requests.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx

from src.app.services.token_verifier import InvalidTokenError

logger = logging.getLogger(__name__)


class RemoteKeySetClient:
    """Fetches and caches a JWKS document.

    The key set is fetched on first use and kept for ``cache_ttl``. A token
    naming a ``kid`` missing from the cached set triggers an early refetch,
    at most once per ``cooldown``. Concurrent callers share a single fetch.
    """

    def __init__(
        self,
        jwks_url: str,
        timeout: float = 5.0,
        cache_ttl: timedelta = timedelta(minutes=10),
        cooldown: timedelta = timedelta(seconds=30),
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the key set client.

        Args:
            jwks_url: URL of the published key set document.
            timeout: Seconds allowed for one fetch (connect and read).
            cache_ttl: How long a fetched key set is reused.
            cooldown: Minimum age of the cache before an unknown kid forces a refetch.
            transport: Optional httpx transport, used by tests.
        """
        self._jwks_url = jwks_url
        self._timeout = timeout
        self._cache_ttl = cache_ttl
        self._cooldown = cooldown
        self._transport = transport

        self._jwks: dict[str, Any] | None = None
        self._fetched_at: datetime | None = None
        self._lock = asyncio.Lock()

    @property
    def jwks_url(self) -> str:
        return self._jwks_url

    async def get_key_set(self, kid: str | None = None) -> dict[str, Any]:
        """Return the key set, fetching it if needed.

        Raises:
            InvalidTokenError: If the key set cannot be fetched.
        """
        if self._is_cache_valid() and self._has_key(kid):
            return self._jwks  # type: ignore[return-value]

        async with self._lock:
            # Double-check after acquiring lock
            if self._is_cache_valid():
                if self._has_key(kid) or self._age() < self._cooldown:
                    return self._jwks  # type: ignore[return-value]

            return await self._fetch()

    def _age(self) -> timedelta:
        if self._fetched_at is None:
            return timedelta.max
        return datetime.now(tz=timezone.utc) - self._fetched_at

    def _is_cache_valid(self) -> bool:
        return self._jwks is not None and self._age() < self._cache_ttl

    def _has_key(self, kid: str | None) -> bool:
        if kid is None:
            return True
        return any(key.get("kid") == kid for key in self._jwks.get("keys", []))  # type: ignore[union-attr]

    async def _fetch(self) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self._jwks_url)
                response.raise_for_status()
                jwks = response.json()
        except httpx.HTTPError as e:
            logger.warning(f"Key set fetch failed: {e.__class__.__name__}")
            raise InvalidTokenError(f"Failed to fetch key set: {e}") from e
        except ValueError as e:
            logger.warning("Key set response is not valid JSON")
            raise InvalidTokenError("Key set response is not valid JSON") from e

        if not isinstance(jwks, dict) or not isinstance(jwks.get("keys"), list):
            logger.warning("Key set response has no keys list")
            raise InvalidTokenError("Key set document has no keys")

        if not all(isinstance(key, dict) for key in jwks["keys"]):
            logger.warning("Key set response has non-object keys")
            raise InvalidTokenError("Key set document has malformed keys")

        self._jwks = jwks
        self._fetched_at = datetime.now(tz=timezone.utc)
        logger.info(f"Fetched key set with {len(jwks['keys'])} key(s)")
        return jwks
