"""Emailit Python client: typed async access to the Emailit v2 API."""

from __future__ import annotations

import logging

from emailit.classifier import classify_error
from emailit.client import AsyncEmailitClient
from emailit.config import EmailitSettings
from emailit.exceptions import (
    AuthenticationError,
    DailyLimitExceededError,
    DeserializationError,
    EmailitError,
    ErrorKind,
    NotFoundError,
    PayloadTooLargeError,
    RateLimitError,
    ValidationError,
)
from emailit.factory import EmailitClientFactory
from emailit.logging_config import setup_logging
from emailit.models import RateLimitInfo, time_until_daily_reset

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AsyncEmailitClient",
    "EmailitClientFactory",
    "EmailitSettings",
    "EmailitError",
    "ErrorKind",
    "AuthenticationError",
    "DailyLimitExceededError",
    "DeserializationError",
    "NotFoundError",
    "PayloadTooLargeError",
    "RateLimitError",
    "ValidationError",
    "RateLimitInfo",
    "classify_error",
    "setup_logging",
    "time_until_daily_reset",
]
