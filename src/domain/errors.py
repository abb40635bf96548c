"""
Error Taxonomy

Closed set of error codes every failure is reported with, their default HTTP
statuses, and the tagged model used for persistence-store faults.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(str, Enum):
    """Every code a client can observe in an error envelope"""

    AUTH_MISSING_TOKEN = "AUTH_MISSING_TOKEN"
    AUTH_INVALID_TOKEN = "AUTH_INVALID_TOKEN"
    TASK_NOT_FOUND = "TASK_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    ROUTE_NOT_FOUND = "ROUTE_NOT_FOUND"
    DATABASE_UNAVAILABLE = "DATABASE_UNAVAILABLE"
    DATABASE_ERROR = "DATABASE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


DEFAULT_STATUS = {
    ErrorCode.AUTH_MISSING_TOKEN: 401,
    ErrorCode.AUTH_INVALID_TOKEN: 401,
    ErrorCode.TASK_NOT_FOUND: 404,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.PARSE_ERROR: 400,
    ErrorCode.ROUTE_NOT_FOUND: 404,
    ErrorCode.DATABASE_UNAVAILABLE: 503,
    ErrorCode.DATABASE_ERROR: 500,
    ErrorCode.INTERNAL_ERROR: 500,
}

DEFAULT_MESSAGE = {
    ErrorCode.AUTH_MISSING_TOKEN: "Missing bearer token",
    ErrorCode.AUTH_INVALID_TOKEN: "Invalid bearer token",
    ErrorCode.TASK_NOT_FOUND: "Task not found",
    ErrorCode.VALIDATION_ERROR: "Invalid request",
    ErrorCode.PARSE_ERROR: "Malformed request",
    ErrorCode.ROUTE_NOT_FOUND: "Not found",
    ErrorCode.DATABASE_UNAVAILABLE: "Database unavailable",
    ErrorCode.DATABASE_ERROR: "Database operation failed",
    ErrorCode.INTERNAL_ERROR: "Internal server error",
}


def status_for(code: str) -> int:
    """Default HTTP status of a code; unknown codes are server faults"""
    try:
        return DEFAULT_STATUS[ErrorCode(code)]
    except ValueError:
        return 500


class InfraFaultKind(str, Enum):
    """Where a persistence-store fault happened"""

    connection = "connection"  # store could not be reached, retryable
    query = "query"  # statement failed once connected, not retryable as is
    unknown = "unknown"


@dataclass(frozen=True)
class InfraFault:
    kind: InfraFaultKind
    message: str


class InfraFaultError(Exception):
    """Raised by the persistence layer in place of driver exceptions"""

    def __init__(self, fault: InfraFault):
        self.fault = fault
        super().__init__(fault.message)


def classify_infra_fault(fault: InfraFault) -> ErrorCode:
    if fault.kind == InfraFaultKind.connection:
        return ErrorCode.DATABASE_UNAVAILABLE
    if fault.kind == InfraFaultKind.query:
        return ErrorCode.DATABASE_ERROR
    return ErrorCode.INTERNAL_ERROR
