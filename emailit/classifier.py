"""Map an HTTP failure (status + body) onto the client's error taxonomy."""

from __future__ import annotations

from emailit.exceptions import (
    AuthenticationError,
    DailyLimitExceededError,
    EmailitError,
    ErrorKind,
    NotFoundError,
    PayloadTooLargeError,
    RateLimitError,
    ValidationError,
)
from emailit.models import RateLimitInfo
from emailit.schemas import ErrorEnvelope


def parse_error_envelope(raw_body: str) -> ErrorEnvelope:
    """Parse an error body. Raises ``ValueError`` if it is not an envelope."""
    return ErrorEnvelope.model_validate_json(raw_body or "")


def classify_error(
    status_code: int,
    raw_body: str,
    rate_limit_info: RateLimitInfo | None = None,
    *,
    fallback_message: str | None = None,
) -> EmailitError:
    """Build (but do not raise) the exception for a failed response.

    The body is parsed best-effort. When it is not a valid error envelope,
    classification uses the status code alone and the message becomes
    *fallback_message*, or the parse error text if none was given.
    """
    envelope: ErrorEnvelope | None
    try:
        envelope = parse_error_envelope(raw_body)
        message = envelope.resolved_message()
    except ValueError as exc:
        envelope = None
        message = fallback_message or str(exc)

    error_code = envelope.code if envelope is not None else None

    if status_code == 400:
        return ValidationError(
            message,
            envelope.errors if envelope is not None else None,
            error_code=error_code,
        )
    if status_code == 401:
        return AuthenticationError(message, error_code=error_code)
    if status_code == 403:
        # Not a dedicated subclass; only the kind tag distinguishes it.
        return EmailitError(
            message, 403, error_code=error_code, kind=ErrorKind.FORBIDDEN
        )
    if status_code == 404:
        return NotFoundError(message, error_code=error_code)
    if status_code == 413:
        details = envelope.details if envelope is not None else None
        return PayloadTooLargeError(details or message, error_code=error_code)
    if status_code == 429:
        if rate_limit_info is not None and rate_limit_info.is_daily_limit_reached:
            return DailyLimitExceededError(rate_limit_info)
        return RateLimitError(rate_limit_info)
    if status_code >= 500:
        return EmailitError(
            f"Server error: {message}",
            status_code,
            error_code=error_code,
            kind=ErrorKind.SERVER_ERROR,
        )
    return EmailitError(message, status_code, error_code=error_code)
