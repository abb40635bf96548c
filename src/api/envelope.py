"""
Response Envelope

Every body is either {"data", "meta": {"requestId"}} or
{"error": {"code", "message", "requestId", "details"?}}.
"""

from typing import Any, Generic, Optional, TypeVar

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.requests import Request

from src.api.middleware import REQUEST_ID_HEADER, get_request_id
from src.domain.errors import DEFAULT_STATUS, ErrorCode

T = TypeVar("T")


class ResponseMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    request_id: str = Field(..., alias="requestId")


class SuccessEnvelope(BaseModel, Generic[T]):
    """Success response wrapper"""

    data: T
    meta: ResponseMeta


class ErrorBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code: ErrorCode
    message: str
    request_id: str = Field(..., alias="requestId")
    details: Optional[Any] = None


class ErrorEnvelope(BaseModel):
    """Error response wrapper"""

    error: ErrorBody


def success_envelope(data: Any, request_id: str) -> dict:
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json", by_alias=True)
    return {"data": data, "meta": {"requestId": request_id}}


def error_envelope(code: str, message: str, request_id: str, details: Any = None) -> dict:
    body = {"code": code, "message": message, "requestId": request_id}
    if details is not None:
        body["details"] = details
    return {"error": body}


def error_response(
    request: Request,
    code: ErrorCode,
    message: str,
    status_code: Optional[int] = None,
    details: Any = None,
) -> JSONResponse:
    """Error envelope response with the request's correlation id in body and header"""
    request_id = get_request_id(request)
    return JSONResponse(
        status_code=status_code or DEFAULT_STATUS[code],
        content=jsonable_encoder(error_envelope(code.value, message, request_id, details)),
        headers={REQUEST_ID_HEADER: request_id},
    )


ERROR_RESPONSES = {
    status: {"model": ErrorEnvelope}
    for status in (400, 401, 404, 500, 503)
}
