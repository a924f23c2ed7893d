"""Lightweight models used by the client: the rate-limit snapshot."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Mapping

LIMIT_HEADER = "ratelimit-limit"
REMAINING_HEADER = "ratelimit-remaining"
DAILY_LIMIT_HEADER = "ratelimit-daily-limit"
DAILY_REMAINING_HEADER = "ratelimit-daily-remaining"
RETRY_AFTER_HEADER = "retry-after"

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _find_header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is not None:
        return value
    # Plain dicts are case-sensitive; fall back to a linear scan.
    for key, candidate in headers.items():
        if key.lower() == name:
            return candidate
    return None


def _parse_int(raw: str | None) -> int | None:
    if raw is None:
        return None
    # Multi-valued headers arrive comma-joined; the first value wins.
    first = raw.split(",", 1)[0].strip()
    # ASCII digits only; int() would also take "1_000" and non-Latin digits.
    if not _INTEGER.fullmatch(first):
        return None
    return int(first)


def time_until_daily_reset(now: datetime | None = None) -> timedelta:
    """Return the time left until the daily quota resets at UTC midnight."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)
    midnight = datetime.combine(
        now.date() + timedelta(days=1), datetime.min.time(), tzinfo=timezone.utc
    )
    return midnight - now


@dataclass(frozen=True)
class RateLimitInfo:
    """Rate-limit metadata parsed from response headers."""

    limit: int = 0
    remaining: int = 0
    daily_limit: int = 0
    daily_remaining: int = 0
    retry_after_seconds: int | None = None

    @property
    def is_rate_limit_reached(self) -> bool:
        return self.remaining <= 0 and self.limit > 0

    @property
    def is_daily_limit_reached(self) -> bool:
        return self.daily_remaining <= 0 and self.daily_limit > 0

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> RateLimitInfo:
        """Parse the ``ratelimit-*`` and ``retry-after`` headers.

        Missing or non-numeric counters become ``0`` and a missing retry hint
        becomes ``None``; this never raises.
        """

        def counter(name: str) -> int:
            value = _parse_int(_find_header(headers, name))
            return 0 if value is None else value

        return cls(
            limit=counter(LIMIT_HEADER),
            remaining=counter(REMAINING_HEADER),
            daily_limit=counter(DAILY_LIMIT_HEADER),
            daily_remaining=counter(DAILY_REMAINING_HEADER),
            retry_after_seconds=_parse_int(_find_header(headers, RETRY_AFTER_HEADER)),
        )
