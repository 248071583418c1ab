"""
Error taxonomy for the BLT MCP server.

Every fallible operation raises exactly one of these typed exceptions. The
tool dispatcher translates them into labelled ``isError`` content, while the
resource router and prompt renderer let them reach the protocol layer.

Key features:
- Error code enum (avoid typos)
- Pydantic model for structured error details
- Boundary helpers that turn any exception into a user-facing label
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# Error Codes
# ============================================================================


class ErrorCode(str, Enum):
    """Enumeration of all error kinds surfaced by the server."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    HTTP_ERROR = "HTTP_ERROR"
    UNKNOWN = "UNKNOWN"


# ============================================================================
# Pydantic Error Models
# ============================================================================


class ErrorDetails(BaseModel):
    """Structured error details for serialization."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    code: ErrorCode = Field(..., description="Error code enum")
    message: str = Field(..., description="Human-readable error message")
    context: dict[str, Any] = Field(default_factory=dict, description="Additional context")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return self.model_dump()


# ============================================================================
# Base Exception Class
# ============================================================================


class BLTError(Exception):
    """Base class for all BLT MCP server errors."""

    code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_details(self) -> ErrorDetails:
        """Convert to structured ErrorDetails."""
        return ErrorDetails(code=self.code, message=self.message, context=self.details)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "error": self.code.value,
            "message": self.message,
            "details": self.details,
        }


# ============================================================================
# Validation Errors
# ============================================================================


class ValidationError(BLTError):
    """Caller-supplied input failed a local contract."""

    code = ErrorCode.VALIDATION_ERROR

    def __init__(
        self,
        message: str,
        field: str | None = None,
        expected: str | None = None,
        received: Any | None = None,
    ) -> None:
        details = {}
        if field:
            details["field"] = field
        if expected:
            details["expected"] = expected
        if received is not None:
            details["received"] = str(received)
        super().__init__(message, details)
        self.field = field


# ============================================================================
# Outbound Call Errors
# ============================================================================


class NetworkError(BLTError):
    """The remote API could not be reached (DNS, connection, TLS)."""

    code = ErrorCode.NETWORK_ERROR

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        details = {}
        if cause:
            details["cause_type"] = type(cause).__name__
        super().__init__(message, details)


class RequestTimeoutError(BLTError):
    """The outbound call exceeded the fixed bound and was aborted."""

    code = ErrorCode.TIMEOUT

    def __init__(self, message: str, timeout_seconds: float | None = None) -> None:
        details = {}
        if timeout_seconds:
            details["timeout_seconds"] = timeout_seconds
        super().__init__(message, details)
        self.timeout_seconds = timeout_seconds


class HttpError(BLTError):
    """The remote API answered with a non-success status code."""

    code = ErrorCode.HTTP_ERROR

    def __init__(self, status_code: int, reason: str) -> None:
        super().__init__(
            f"API request failed: {status_code} {reason}".rstrip(),
            {"status_code": status_code, "reason": reason},
        )
        self.status_code = status_code
        self.reason = reason


# ============================================================================
# Protocol-level Errors
# ============================================================================


class ProtocolError(BLTError):
    """Protocol contract violation (bad URI, unknown resource or prompt)."""

    code = ErrorCode.UNKNOWN


class ResourceReadError(ProtocolError):
    """Reading a resource failed; wraps the underlying cause."""

    def __init__(self, uri: str, cause: Exception) -> None:
        cause_message = cause.message if isinstance(cause, BLTError) else str(cause)
        super().__init__(
            f"Failed to read resource {uri}: {cause_message}",
            {"uri": uri, "cause_type": type(cause).__name__},
        )
        self.uri = uri
        self.cause = cause


# ============================================================================
# Boundary Translation Functions
# ============================================================================


def error_label(exc: Exception) -> str:
    """Return the human-readable label for an exception's failure kind.

    Args:
        exc: Any exception

    Returns:
        Label used as the prefix of error content
    """
    if isinstance(exc, ValidationError):
        return "Validation error"
    if isinstance(exc, RequestTimeoutError):
        return "Request timed out"
    if isinstance(exc, HttpError):
        return f"HTTP {exc.status_code}"
    if isinstance(exc, NetworkError):
        return "Network error"
    return "Error"


def format_error(exc: Exception) -> str:
    """Render an exception as ``"<label>: <message>"`` for error content."""
    message = exc.message if isinstance(exc, BLTError) else str(exc)
    return f"{error_label(exc)}: {message}"


__all__ = [
    "BLTError",
    "ErrorCode",
    "ErrorDetails",
    "HttpError",
    "NetworkError",
    "ProtocolError",
    "RequestTimeoutError",
    "ResourceReadError",
    "ValidationError",
    "error_label",
    "format_error",
]
