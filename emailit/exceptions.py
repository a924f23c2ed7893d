"""Exception hierarchy for the Emailit client."""

from __future__ import annotations

import enum
from datetime import timedelta
from typing import Mapping, Sequence

from emailit.models import RateLimitInfo, time_until_daily_reset


class ErrorKind(str, enum.Enum):
    """Closed set of failure kinds surfaced by the client."""

    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    RATE_LIMITED = "rate_limited"
    DAILY_LIMIT_EXCEEDED = "daily_limit_exceeded"
    SERVER_ERROR = "server_error"
    DESERIALIZATION = "deserialization"
    GENERIC = "generic"


class EmailitError(Exception):
    """Base exception for all Emailit API errors.

    ``status_code`` is ``None`` when no HTTP response was received.
    """

    kind: ErrorKind = ErrorKind.GENERIC

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        *,
        error_code: str | None = None,
        kind: ErrorKind | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        if kind is not None:
            self.kind = kind
        super().__init__(message)


class ValidationError(EmailitError):
    """Raised on 400 responses; ``field_errors`` maps field names to messages."""

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str,
        field_errors: Mapping[str, Sequence[str]] | None = None,
        *,
        error_code: str | None = None,
    ) -> None:
        super().__init__(message, 400, error_code=error_code)
        self.field_errors: dict[str, list[str]] = {
            field: list(messages) for field, messages in (field_errors or {}).items()
        }


class AuthenticationError(EmailitError):
    """Raised on 401 responses."""

    kind = ErrorKind.AUTHENTICATION

    def __init__(
        self,
        message: str = "Invalid or missing API key.",
        *,
        error_code: str | None = None,
    ) -> None:
        super().__init__(message, 401, error_code=error_code)


class NotFoundError(EmailitError):
    """Raised on 404 responses."""

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        resource_type: str | None = None,
        resource_id: str | None = None,
    ) -> None:
        super().__init__(message, 404, error_code=error_code)
        self.resource_type = resource_type
        self.resource_id = resource_id

    @classmethod
    def for_resource(cls, resource_type: str, resource_id: str) -> NotFoundError:
        return cls(
            f"{resource_type} with ID '{resource_id}' was not found.",
            resource_type=resource_type,
            resource_id=resource_id,
        )


class PayloadTooLargeError(EmailitError):
    """Raised on 413 responses (message exceeds the size limit)."""

    kind = ErrorKind.PAYLOAD_TOO_LARGE
    MAX_SIZE_MB = 40

    def __init__(self, message: str | None = None, *, error_code: str | None = None) -> None:
        if message is None:
            message = f"Message size exceeds maximum allowed size of {self.MAX_SIZE_MB}MB"
        super().__init__(message, 413, error_code=error_code)


class RateLimitError(EmailitError):
    """Raised on 429 responses when the per-second limit is hit."""

    kind = ErrorKind.RATE_LIMITED

    def __init__(
        self,
        rate_limit_info: RateLimitInfo | None = None,
        message: str = "Rate limit exceeded. Too many requests per second.",
    ) -> None:
        super().__init__(message, 429)
        self.rate_limit_info = rate_limit_info

    @property
    def retry_after(self) -> int | None:
        """Seconds to wait before retrying, from the ``Retry-After`` header."""
        if self.rate_limit_info is None:
            return None
        return self.rate_limit_info.retry_after_seconds


class DailyLimitExceededError(EmailitError):
    """Raised on 429 responses once the daily sending quota is exhausted."""

    kind = ErrorKind.DAILY_LIMIT_EXCEEDED

    def __init__(
        self,
        rate_limit_info: RateLimitInfo | None = None,
        message: str = "Daily sending limit exceeded.",
    ) -> None:
        super().__init__(message, 429)
        self.rate_limit_info = rate_limit_info

    @property
    def time_until_reset(self) -> timedelta:
        return time_until_daily_reset()


class DeserializationError(EmailitError):
    """Raised when a successful response body cannot be decoded."""

    kind = ErrorKind.DESERIALIZATION
