"""Tests for the error taxonomy and boundary helpers."""

import pytest

from blt_mcp.errors import (
    BLTError,
    ErrorCode,
    HttpError,
    NetworkError,
    ProtocolError,
    RequestTimeoutError,
    ResourceReadError,
    ValidationError,
    error_label,
    format_error,
)


class TestErrorKinds:
    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (ValidationError("bad"), ErrorCode.VALIDATION_ERROR),
            (NetworkError("down"), ErrorCode.NETWORK_ERROR),
            (RequestTimeoutError("slow", timeout_seconds=10), ErrorCode.TIMEOUT),
            (HttpError(502, "Bad Gateway"), ErrorCode.HTTP_ERROR),
            (ProtocolError("weird"), ErrorCode.UNKNOWN),
        ],
    )
    def test_codes(self, error: BLTError, code: ErrorCode) -> None:
        assert error.code is code
        assert error.to_details().code is code

    def test_kinds_are_distinct(self) -> None:
        """Timeouts and network failures are never confused."""
        assert not issubclass(RequestTimeoutError, NetworkError)
        assert not issubclass(NetworkError, RequestTimeoutError)

    def test_http_error_fields(self) -> None:
        error = HttpError(403, "Forbidden")
        assert error.status_code == 403
        assert error.to_dict() == {
            "error": "HTTP_ERROR",
            "message": "API request failed: 403 Forbidden",
            "details": {"status_code": 403, "reason": "Forbidden"},
        }

    def test_validation_details(self) -> None:
        error = ValidationError("bad", field="points", expected="> 0", received=-1)
        assert error.details == {"field": "points", "expected": "> 0", "received": "-1"}

    def test_resource_read_error_wraps_cause(self) -> None:
        cause = HttpError(500, "Internal Server Error")
        error = ResourceReadError("blt://issues", cause)
        assert error.cause is cause
        assert error.message == (
            "Failed to read resource blt://issues: API request failed: 500 Internal Server Error"
        )


class TestLabels:
    @pytest.mark.parametrize(
        ("error", "label"),
        [
            (ValidationError("x"), "Validation error"),
            (RequestTimeoutError("x"), "Request timed out"),
            (HttpError(404, "Not Found"), "HTTP 404"),
            (NetworkError("x"), "Network error"),
            (ProtocolError("x"), "Error"),
            (RuntimeError("x"), "Error"),
        ],
    )
    def test_error_label(self, error: Exception, label: str) -> None:
        assert error_label(error) == label

    def test_format_error(self) -> None:
        assert format_error(ValidationError("title must not be blank")) == (
            "Validation error: title must not be blank"
        )
        assert format_error(ValueError("plain")) == "Error: plain"
