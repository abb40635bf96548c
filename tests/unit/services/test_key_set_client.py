"""Unit tests for the remote key set client."""

import asyncio
from datetime import timedelta

import httpx
import pytest

from src.adapter.services.key_set_client import RemoteKeySetClient
from src.app.services.token_verifier import InvalidTokenError

from tests.unit.services.keys import TEST_KID, jwks_for

JWKS_URL = "https://issuer.example.com/.well-known/jwks.json"


class CountingTransport:
    """httpx MockTransport that records how often the key set was fetched"""

    def __init__(self, responder):
        self.calls = 0
        self._responder = responder
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        return self._responder(request)


def _client(counting: CountingTransport, **kwargs) -> RemoteKeySetClient:
    return RemoteKeySetClient(JWKS_URL, transport=counting.transport, **kwargs)


@pytest.mark.asyncio
async def test_key_set_is_memoized():
    counting = CountingTransport(lambda request: httpx.Response(200, json=jwks_for()))
    client = _client(counting)

    first = await client.get_key_set(TEST_KID)
    second = await client.get_key_set(TEST_KID)

    assert first == second
    assert first["keys"][0]["kid"] == TEST_KID
    assert counting.calls == 1


@pytest.mark.asyncio
async def test_concurrent_first_use_fetches_once():
    counting = CountingTransport(lambda request: httpx.Response(200, json=jwks_for()))
    client = _client(counting)

    results = await asyncio.gather(*(client.get_key_set(TEST_KID) for _ in range(10)))

    assert all(result == results[0] for result in results)
    assert counting.calls == 1


@pytest.mark.asyncio
async def test_unknown_kid_refetches_after_cooldown():
    counting = CountingTransport(lambda request: httpx.Response(200, json=jwks_for()))
    client = _client(counting, cooldown=timedelta(0))

    await client.get_key_set(TEST_KID)
    await client.get_key_set("rotated-key")

    assert counting.calls == 2


@pytest.mark.asyncio
async def test_unknown_kid_within_cooldown_uses_cache():
    counting = CountingTransport(lambda request: httpx.Response(200, json=jwks_for()))
    client = _client(counting, cooldown=timedelta(minutes=5))

    await client.get_key_set(TEST_KID)
    jwks = await client.get_key_set("rotated-key")

    assert counting.calls == 1
    assert jwks["keys"][0]["kid"] == TEST_KID


@pytest.mark.asyncio
async def test_expired_cache_refetches():
    counting = CountingTransport(lambda request: httpx.Response(200, json=jwks_for()))
    client = _client(counting, cache_ttl=timedelta(0))

    await client.get_key_set(TEST_KID)
    await client.get_key_set(TEST_KID)

    assert counting.calls == 2


@pytest.mark.asyncio
async def test_timeout_raises_invalid_token():
    def responder(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    client = _client(CountingTransport(responder))

    with pytest.raises(InvalidTokenError):
        await client.get_key_set(TEST_KID)


@pytest.mark.asyncio
async def test_error_status_raises_invalid_token():
    client = _client(CountingTransport(lambda request: httpx.Response(503)))

    with pytest.raises(InvalidTokenError):
        await client.get_key_set(TEST_KID)


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [b"not json", b'{"no_keys": []}', b"[]"])
async def test_malformed_document_raises_invalid_token(body):
    client = _client(CountingTransport(lambda request: httpx.Response(200, content=body)))

    with pytest.raises(InvalidTokenError):
        await client.get_key_set(TEST_KID)


@pytest.mark.asyncio
@pytest.mark.parametrize("keys", [["not-a-jwk"], [{"kid": "kid-1"}, 5], [None]])
async def test_non_object_keys_raise_invalid_token(keys):
    counting = CountingTransport(lambda request: httpx.Response(200, json={"keys": keys}))
    client = _client(counting)

    with pytest.raises(InvalidTokenError):
        await client.get_key_set(TEST_KID)

    # Nothing cached, the next call fetches again
    with pytest.raises(InvalidTokenError):
        await client.get_key_set(TEST_KID)
    assert counting.calls == 2


@pytest.mark.asyncio
async def test_failed_fetch_is_not_cached():
    responses = [httpx.Response(503), httpx.Response(200, json=jwks_for())]
    counting = CountingTransport(lambda request: responses.pop(0))
    client = _client(counting)

    with pytest.raises(InvalidTokenError):
        await client.get_key_set(TEST_KID)
    jwks = await client.get_key_set(TEST_KID)

    assert jwks["keys"][0]["kid"] == TEST_KID
    assert counting.calls == 2
