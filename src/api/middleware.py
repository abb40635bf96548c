"""
API Middleware: correlation id propagation and request logging.
"""

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


def resolve_request_id(request: Request) -> str:
    """Caller-supplied non-empty x-request-id, otherwise a fresh uuid4"""
    supplied = request.headers.get(REQUEST_ID_HEADER)
    if supplied:
        return supplied
    return str(uuid.uuid4())


def get_request_id(request: Request) -> str:
    """
    Correlation id of the request.

    Exception handlers that run outside the middleware stack still get the
    id the middleware assigned; if it never ran, one is resolved and stored.
    """
    request_id = getattr(request.state, "request_id", None)
    if not request_id:
        request_id = resolve_request_id(request)
        request.state.request_id = request_id
    return request_id


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Assigns the correlation id, echoes it as x-request-id and logs the
    request duration.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = get_request_id(request)
        token = request_id_var.set(request_id)
        start = time.time()
        try:
            response: Response = await call_next(request)
            elapsed = (time.time() - start) * 1000

            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                "%s %s → %d (%.0fms)",
                request.method, request.url.path, response.status_code, elapsed,
            )
            return response
        finally:
            request_id_var.reset(token)


class RequestIdLogFilter(logging.Filter):
    """Adds request_id to every record so formats can include it"""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        return True


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] request_id=%(request_id)s %(message)s"


def configure_logging(level: str = "INFO"):
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIdLogFilter())

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level.upper())
