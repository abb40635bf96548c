import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.adapter.services.jwt_token_verifier import JwtTokenVerifier
from src.app.services.token_verifier import ITokenVerifier
from src.domain.errors import DEFAULT_MESSAGE, ErrorCode, InfraFaultError, classify_infra_fault

from .envelope import error_response
from .error import ClientError, ServerError
from .middleware import RequestContextMiddleware, get_request_id

logger = logging.getLogger(__name__)


def _error_code(code: str) -> ErrorCode:
    try:
        return ErrorCode(code)
    except ValueError:
        return ErrorCode.INTERNAL_ERROR


async def handle_client_error(request: Request, exc: ClientError):
    error = exc.base_error
    logger.warning(
        f"Client error: code={error.code} status={exc.status_code} "
        f"request_id={get_request_id(request)}"
    )
    return error_response(
        request, _error_code(error.code), error.message, exc.status_code, error.details
    )


async def handle_server_error(request: Request, exc: ServerError):
    code = _error_code(exc.base_error.code)
    logger.error(
        f"Server error: code={exc.base_error.code} message={exc.base_error.message} "
        f"request_id={get_request_id(request)}"
    )
    return error_response(request, code, DEFAULT_MESSAGE[code], exc.status_code)


async def handle_infra_fault(request: Request, exc: InfraFaultError):
    code = classify_infra_fault(exc.fault)
    logger.error(
        f"Database fault: kind={exc.fault.kind.value} code={code.value} "
        f"message={exc.fault.message} request_id={get_request_id(request)}"
    )
    return error_response(request, code, DEFAULT_MESSAGE[code])


async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if any(error.get("type") == "json_invalid" for error in errors):
        code = ErrorCode.PARSE_ERROR
        details = None
    else:
        code = ErrorCode.VALIDATION_ERROR
        details = [
            {
                "loc": list(error.get("loc", ())),
                "msg": error.get("msg", ""),
                "type": error.get("type", ""),
            }
            for error in errors
        ]
    logger.warning(f"Request rejected: code={code.value} request_id={get_request_id(request)}")
    return error_response(request, code, DEFAULT_MESSAGE[code], details=details)


async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        code = ErrorCode.ROUTE_NOT_FOUND
    elif exc.status_code < 500:
        code = ErrorCode.VALIDATION_ERROR
    else:
        code = ErrorCode.INTERNAL_ERROR
    logger.warning(
        f"HTTP error: status={exc.status_code} code={code.value} "
        f"path={request.url.path} request_id={get_request_id(request)}"
    )
    return error_response(request, code, DEFAULT_MESSAGE[code])


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(
        f"Unhandled error: {exc.__class__.__name__} request_id={get_request_id(request)}"
    )
    code = ErrorCode.INTERNAL_ERROR
    return error_response(request, code, DEFAULT_MESSAGE[code])


def create_app(ApplicationConfig, token_verifier: ITokenVerifier = None) -> FastAPI:
    app = FastAPI(title="Task API", version="0.1.0")

    # One verifier per process; it owns the memoized key set client
    app.state.token_verifier = token_verifier or JwtTokenVerifier.from_config(ApplicationConfig)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["x-request-id"],
    )
    app.add_middleware(RequestContextMiddleware)

    from src.api.routes import health_check, tasks

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(tasks.router, tags=["Tasks"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(InfraFaultError, handle_infra_fault)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)

    return app
