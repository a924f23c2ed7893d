"""Single request path shared by every Emailit endpoint."""

from __future__ import annotations

import logging
from typing import Any, Mapping, TypeVar

import httpx
from pydantic import BaseModel

from emailit.classifier import classify_error
from emailit.config import EmailitSettings
from emailit.exceptions import DeserializationError, EmailitError
from emailit.models import RateLimitInfo
from emailit.request_context import bind_request_id
from emailit.schemas import EmailResponse, RequestModel

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _serialize_body(body: RequestModel | Mapping[str, Any] | None) -> Any:
    if body is None:
        return None
    if isinstance(body, RequestModel):
        return body.to_payload()
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", by_alias=True, exclude_none=True)
    return dict(body)


class RequestExecutor:
    """Owns the HTTP connection pool, auth headers and the rate-limit snapshot.

    Every call records the rate-limit headers of its response (success or
    failure) into :attr:`last_rate_limit` and turns non-2xx responses into a
    single :class:`~emailit.exceptions.EmailitError`.
    """

    def __init__(
        self,
        settings: EmailitSettings,
        *,
        _transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {
            "Authorization": f"Bearer {settings.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        kwargs: dict[str, Any] = {
            "base_url": settings.base_url,
            "headers": headers,
            "timeout": settings.timeout,
        }
        if _transport is not None:
            kwargs["transport"] = _transport
        self._client = httpx.AsyncClient(**kwargs)
        self._last_rate_limit: RateLimitInfo | None = None

    @property
    def last_rate_limit(self) -> RateLimitInfo | None:
        """Snapshot from the most recently completed call, if any."""
        return self._last_rate_limit

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def aclose(self) -> None:
        if not self._client.is_closed:
            await self._client.aclose()

    # -- internal ------------------------------------------------------------

    def _record_rate_limit(self, response: httpx.Response) -> RateLimitInfo:
        info = RateLimitInfo.from_headers(response.headers)
        # Reference swap of a frozen snapshot; readers never see a partial update.
        self._last_rate_limit = info
        return info

    def _raise_for_status(self, response: httpx.Response, info: RateLimitInfo) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            error = classify_error(
                response.status_code,
                response.text,
                info,
                fallback_message=str(exc),
            )
            logger.warning(
                "Emailit request failed",
                extra={
                    "method": response.request.method,
                    "path": response.request.url.path,
                    "status_code": response.status_code,
                    "error_kind": error.kind.value,
                },
            )
            raise error from None

    # -- public --------------------------------------------------------------

    async def send(
        self,
        method: str,
        path: str,
        *,
        body: RequestModel | Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
        idempotency_key: str | None = None,
        follow_redirects: bool = False,
    ) -> httpx.Response:
        """Send one request and return the raw 2xx response.

        Non-2xx responses raise the classified error. Request failures
        (network errors, redirect loops, undecodable content) raise a generic
        :class:`EmailitError` with no status code.
        """
        headers: dict[str, str] = {}
        if idempotency_key:
            headers["Idempotency-Key"] = idempotency_key

        with bind_request_id():
            try:
                response = await self._client.request(
                    method,
                    path,
                    json=_serialize_body(body),
                    params=params,
                    headers=headers,
                    follow_redirects=follow_redirects,
                )
            except httpx.RequestError as exc:
                logger.warning(
                    "Emailit request error",
                    extra={"method": method, "path": path, "error": str(exc)},
                )
                raise EmailitError(f"Request error: {exc}") from exc

            info = self._record_rate_limit(response)
            logger.debug(
                "%s %s -> %d",
                method,
                path,
                response.status_code,
                extra={"remaining": info.remaining, "daily_remaining": info.daily_remaining},
            )
            self._raise_for_status(response, info)
            return response

    async def execute(
        self,
        method: str,
        path: str,
        response_model: type[M],
        *,
        body: RequestModel | Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
        idempotency_key: str | None = None,
    ) -> M:
        """Send a request and decode the JSON body into *response_model*."""
        response = await self.send(
            method,
            path,
            body=body,
            params=params,
            idempotency_key=idempotency_key,
        )
        try:
            result = response_model.model_validate(response.json())
        except ValueError as exc:
            raise DeserializationError(
                f"Failed to deserialize response: {exc}", response.status_code
            ) from exc

        if isinstance(result, EmailResponse):
            # Snapshot of this response, not whatever call finished last.
            result = result.model_copy(
                update={"rate_limit_info": RateLimitInfo.from_headers(response.headers)}
            )
        return result
