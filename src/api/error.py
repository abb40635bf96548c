from typing import Optional

from libs.result import Error
from src.domain.errors import ErrorCode, status_for


class ClientError(Exception):
    """Failure attributable to the caller's input or credentials (4xx)"""

    def __init__(self, base_error: Error, status_code: Optional[int] = None):
        self.base_error = base_error
        self.status_code = status_code or status_for(base_error.code)
        super().__init__(base_error.message)


class ServerError(Exception):
    """Failure attributable to the system (5xx); message is not exposed"""

    def __init__(self, base_error: Error, status_code: Optional[int] = None):
        self.base_error = base_error
        self.status_code = status_code or status_for(base_error.code)
        super().__init__(base_error.message)


def raise_for_error(error: Error):
    """Raise the API exception matching a use case Error"""
    if status_for(error.code) < 500:
        raise ClientError(error)
    raise ServerError(error)


def missing_token_error() -> ClientError:
    return ClientError(Error(ErrorCode.AUTH_MISSING_TOKEN.value, "Missing bearer token"))


def invalid_token_error() -> ClientError:
    return ClientError(Error(ErrorCode.AUTH_INVALID_TOKEN.value, "Invalid bearer token"))
