import uuid

import pytest
from sqlalchemy import exc as sa_exc

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from tests.utils.tokens import bearer, make_token


def _faulty_unit_of_work(error: BaseException):
    class FailingTasks:
        async def list_by_tenant(self, tenant_id, query):
            raise error

    class FaultyUnitOfWork(SqlAlchemyUnitOfWork):
        async def __aenter__(self):
            await super().__aenter__()
            self.tasks = FailingTasks()
            return self

    return FaultyUnitOfWork


def _assert_correlated(response, request_id: str = None):
    header = response.headers["x-request-id"]
    body = response.json()
    body_id = body["meta"]["requestId"] if "data" in body else body["error"]["requestId"]
    assert header == body_id
    if request_id is not None:
        assert header == request_id
    return header


@pytest.mark.asyncio
async def test_supplied_request_id_is_echoed(client):
    response = await client.get(
        "/tasks", headers={**bearer(make_token()), "x-request-id": "req-123"}
    )

    assert response.status_code == 200
    _assert_correlated(response, "req-123")


@pytest.mark.asyncio
async def test_request_id_is_generated(client):
    first = await client.get("/tasks", headers=bearer(make_token()))
    second = await client.get("/tasks", headers=bearer(make_token()))

    generated = _assert_correlated(first)
    uuid.UUID(generated)
    assert _assert_correlated(second) != generated


@pytest.mark.asyncio
async def test_empty_request_id_is_replaced(client):
    response = await client.get("/", headers={"x-request-id": ""})

    uuid.UUID(_assert_correlated(response))


@pytest.mark.asyncio
async def test_request_id_on_auth_failure(client):
    response = await client.get("/tasks", headers={"x-request-id": "req-401"})

    assert response.status_code == 401
    _assert_correlated(response, "req-401")


@pytest.mark.asyncio
@pytest.mark.parametrize("method, path", [("GET", "/nowhere"), ("PUT", "/tasks")])
async def test_unknown_route(client, method, path):
    response = await client.request(method, path, headers={"x-request-id": "req-404"})

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "ROUTE_NOT_FOUND"
    _assert_correlated(response, "req-404")


@pytest.mark.asyncio
async def test_request_id_on_validation_failure(client):
    response = await client.post(
        "/tasks", json={"title": ""}, headers={**bearer(make_token()), "x-request-id": "req-400"}
    )

    assert response.status_code == 400
    _assert_correlated(response, "req-400")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "unit_of_work_class, status_code, code",
    [
        (
            _faulty_unit_of_work(sa_exc.OperationalError(None, None, Exception("unable to open database"))),
            503,
            "DATABASE_UNAVAILABLE",
        ),
        (
            _faulty_unit_of_work(sa_exc.IntegrityError("INSERT INTO tasks", {}, Exception("constraint"))),
            500,
            "DATABASE_ERROR",
        ),
        (
            _faulty_unit_of_work(RuntimeError("driver exploded")),
            500,
            "INTERNAL_ERROR",
        ),
    ],
    ids=["connection", "query", "unexpected"],
)
async def test_failures_are_enveloped(client, unit_of_work_class, status_code, code):
    response = await client.get(
        "/tasks", headers={**bearer(make_token()), "x-request-id": "req-5xx"}
    )

    assert response.status_code == status_code
    error = response.json()["error"]
    assert error["code"] == code
    # Driver details stay in the logs
    assert "constraint" not in error["message"]
    assert "exploded" not in error["message"]
    assert "unable to open" not in error["message"]
    _assert_correlated(response, "req-5xx")
