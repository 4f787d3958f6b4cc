"""
Centralized error handling for the build proxy.

Every way a build request can fail is named by an ErrorCode and raised as a
BuildError subclass. The endpoint turns any BuildError into a JSON body of the
form ``{"error": "<message>"}`` via create_error_response.
"""

import logging
from enum import Enum
from typing import Dict, Optional, Union

from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Standardized error codes for the build endpoint."""

    # Client input errors
    UNREADABLE_REQUEST = "UNREADABLE_REQUEST"
    MISSING_FILE = "MISSING_FILE"
    MISSING_INSTRUCTIONS = "MISSING_INSTRUCTIONS"
    MALFORMED_INSTRUCTIONS = "MALFORMED_INSTRUCTIONS"
    INVALID_INSTRUCTIONS = "INVALID_INSTRUCTIONS"

    # Output validation
    OUTPUT_TOO_SMALL = "OUTPUT_TOO_SMALL"

    # Server-side errors
    SERVICE_MISCONFIGURED = "SERVICE_MISCONFIGURED"
    UPSTREAM_FAILED = "UPSTREAM_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorSeverity(str, Enum):
    """Error severity levels for logging."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Error code to HTTP status code mapping
ERROR_STATUS_MAP: Dict[ErrorCode, int] = {
    ErrorCode.UNREADABLE_REQUEST: 400,
    ErrorCode.MISSING_FILE: 400,
    ErrorCode.MISSING_INSTRUCTIONS: 400,
    ErrorCode.MALFORMED_INSTRUCTIONS: 400,
    ErrorCode.INVALID_INSTRUCTIONS: 400,
    ErrorCode.OUTPUT_TOO_SMALL: 400,
    ErrorCode.SERVICE_MISCONFIGURED: 500,
    ErrorCode.UPSTREAM_FAILED: 502,
    ErrorCode.INTERNAL_ERROR: 500,
}

# Error code to severity mapping
ERROR_SEVERITY_MAP: Dict[ErrorCode, ErrorSeverity] = {
    ErrorCode.UNREADABLE_REQUEST: ErrorSeverity.LOW,
    ErrorCode.MISSING_FILE: ErrorSeverity.LOW,
    ErrorCode.MISSING_INSTRUCTIONS: ErrorSeverity.LOW,
    ErrorCode.MALFORMED_INSTRUCTIONS: ErrorSeverity.LOW,
    ErrorCode.INVALID_INSTRUCTIONS: ErrorSeverity.LOW,
    ErrorCode.OUTPUT_TOO_SMALL: ErrorSeverity.MEDIUM,
    ErrorCode.SERVICE_MISCONFIGURED: ErrorSeverity.CRITICAL,
    ErrorCode.UPSTREAM_FAILED: ErrorSeverity.HIGH,
    ErrorCode.INTERNAL_ERROR: ErrorSeverity.CRITICAL,
}


class BuildError(Exception):
    """Base class for every expected failure of a build request."""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        self._status_code = status_code
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        if self._status_code is not None:
            return self._status_code
        return ERROR_STATUS_MAP.get(self.error_code, 500)


class UnreadableRequestError(BuildError):
    """Raised when the multipart body cannot be parsed or breaks a parser limit."""

    error_code = ErrorCode.UNREADABLE_REQUEST

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Unreadable request body: {detail}")


class MissingFileError(BuildError):
    error_code = ErrorCode.MISSING_FILE
    default_message = "Missing file in request"


class MissingInstructionsError(BuildError):
    error_code = ErrorCode.MISSING_INSTRUCTIONS
    default_message = "Missing instructions in request"


class MalformedInstructionsError(BuildError):
    error_code = ErrorCode.MALFORMED_INSTRUCTIONS
    default_message = "Invalid JSON in instructions"


class InvalidInstructionsError(BuildError):
    error_code = ErrorCode.INVALID_INSTRUCTIONS
    default_message = "Invalid instructions format: missing parts or output"


class ServiceMisconfiguredError(BuildError):
    error_code = ErrorCode.SERVICE_MISCONFIGURED
    default_message = "Service not configured"


class OutputTooSmallError(BuildError):
    """Raised when the upstream reported success but produced an undersized document."""

    error_code = ErrorCode.OUTPUT_TOO_SMALL

    def __init__(self, size: int, minimum: int):
        self.size = size
        self.minimum = minimum
        super().__init__(
            f"PDF too small: {size} bytes (minimum {minimum // 1024} KB required)"
        )


class UpstreamError(BuildError):
    """
    Raised when the upstream conversion service does not report success.

    The caller sees the upstream status code mirrored back with a generic
    message; the upstream body is kept for server-side diagnostics only.
    """

    error_code = ErrorCode.UPSTREAM_FAILED

    def __init__(self, status_code: int, body: str = "", message: Optional[str] = None):
        self.upstream_status = status_code
        self.body = body
        super().__init__(
            message or f"Upstream conversion error: {status_code}",
            status_code=status_code,
        )


def create_error_response(
    error_code: Union[ErrorCode, str],
    message: str,
    status_code: Optional[int] = None,
) -> JSONResponse:
    """
    Create a consistent JSON error response and log it.

    Args:
        error_code: Error code from ErrorCode enum or custom string
        message: Human-readable message returned to the caller
        status_code: Override the default HTTP status code

    Returns:
        JSONResponse with body {"error": message}
    """
    if isinstance(error_code, ErrorCode):
        if status_code is None:
            status_code = ERROR_STATUS_MAP.get(error_code, 500)
        severity = ERROR_SEVERITY_MAP.get(error_code, ErrorSeverity.MEDIUM)
        code = error_code.value
    else:
        if status_code is None:
            status_code = 500
        severity = ErrorSeverity.MEDIUM
        code = str(error_code)

    log_message = f"Error response: code={code} status={status_code} message={message}"
    if severity == ErrorSeverity.CRITICAL:
        logger.critical(log_message)
    elif severity == ErrorSeverity.HIGH:
        logger.error(log_message)
    elif severity == ErrorSeverity.MEDIUM:
        logger.warning(log_message)
    else:
        logger.info(log_message)

    return JSONResponse(status_code=status_code, content={"error": message})


def build_error_response(error: BuildError) -> JSONResponse:
    """Convert a raised BuildError into its JSON response."""
    return create_error_response(error.error_code, error.message, status_code=error.status_code)


def internal_error_response() -> JSONResponse:
    """Generic 500 that exposes no internal detail."""
    return create_error_response(ErrorCode.INTERNAL_ERROR, "Internal server error")
