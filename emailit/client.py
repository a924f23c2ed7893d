"""Async client for the Emailit v2 API."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from emailit.config import EmailitSettings
from emailit.exceptions import EmailitError
from emailit.executor import RequestExecutor
from emailit.models import RateLimitInfo
from emailit.schemas import (
    AddSubscriberRequest,
    ApiKeyResponse,
    AudienceResponse,
    CancelEmailResponse,
    CreateApiKeyRequest,
    CreateAudienceRequest,
    CreateDomainRequest,
    CreateSuppressionRequest,
    CreateTemplateRequest,
    CreateVerificationListRequest,
    CursorPaginatedResponse,
    DeleteResponse,
    DomainResponse,
    EmailResponse,
    EmailVerificationResponse,
    ListEmailsRequest,
    PaginatedResponse,
    SendEmailRequest,
    SubscriberResponse,
    SuppressionResponse,
    TemplateResponse,
    UpdateApiKeyRequest,
    UpdateAudienceRequest,
    UpdateDomainRequest,
    UpdateScheduledEmailRequest,
    UpdateSubscriberRequest,
    UpdateSuppressionRequest,
    UpdateTemplateRequest,
    VerificationListResponse,
    VerificationListResultsResponse,
    VerifyEmailRequest,
)

logger = logging.getLogger(__name__)

EMAILS = "/v2/emails"
DOMAINS = "/v2/domains"
API_KEYS = "/v2/api-keys"
AUDIENCES = "/v2/audiences"
TEMPLATES = "/v2/templates"
SUPPRESSIONS = "/v2/suppressions"
VERIFICATIONS = "/v2/email-verifications"
VERIFICATION_LISTS = "/v2/email-verification-lists"


def _path(base: str, *segments: str) -> str:
    """Join *base* with URL-quoted ID segments."""
    return "/".join([base, *(quote(str(segment), safe="") for segment in segments)])


def _page_params(page: int, limit: int) -> dict[str, Any]:
    return {"page": page, "limit": limit}


class AsyncEmailitClient:
    """Async client for the Emailit API (backed by ``httpx.AsyncClient``).

    The configuration is validated here, so a bad API key, base URL or
    timeout fails at construction rather than on the first call.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        settings: EmailitSettings | None = None,
        _transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if settings is None:
            overrides: dict[str, Any] = {
                "api_key": api_key,
                "base_url": base_url,
                "timeout": timeout,
            }
            settings = EmailitSettings(
                **{key: value for key, value in overrides.items() if value is not None}
            )
        self.settings = settings
        self._executor = RequestExecutor(settings, _transport=_transport)

    # -- context manager -----------------------------------------------------

    async def __aenter__(self) -> AsyncEmailitClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._executor.aclose()

    @property
    def is_closed(self) -> bool:
        return self._executor.is_closed

    @property
    def last_rate_limit(self) -> RateLimitInfo | None:
        """Rate-limit snapshot from the most recent completed call."""
        return self._executor.last_rate_limit

    # -- emails --------------------------------------------------------------

    async def send_email(
        self,
        request: SendEmailRequest,
        idempotency_key: str | None = None,
    ) -> EmailResponse:
        """Send an email.

        Pass *idempotency_key* to let the server deduplicate a retried send.
        The result carries the rate-limit snapshot of this response.
        """
        return await self._executor.execute(
            "POST",
            EMAILS,
            EmailResponse,
            body=request,
            idempotency_key=idempotency_key,
        )

    async def get_email(self, email_id: str) -> EmailResponse:
        return await self._executor.execute("GET", _path(EMAILS, email_id), EmailResponse)

    async def update_scheduled_email(
        self, email_id: str, request: UpdateScheduledEmailRequest
    ) -> EmailResponse:
        return await self._executor.execute(
            "POST", _path(EMAILS, email_id), EmailResponse, body=request
        )

    async def cancel_email(self, email_id: str) -> bool:
        """Cancel a scheduled email.

        Returns ``False`` instead of raising when the API refuses, e.g. because
        the email has already been sent.
        """
        try:
            response = await self._executor.execute(
                "POST", _path(EMAILS, email_id, "cancel"), CancelEmailResponse
            )
        except EmailitError as exc:
            logger.info(
                "Cancel of email %s refused: %s",
                email_id,
                exc.message,
                extra={"status_code": exc.status_code},
            )
            return False
        return response.cancelled

    async def list_emails(
        self, request: ListEmailsRequest | None = None
    ) -> CursorPaginatedResponse[EmailResponse]:
        params = request.to_params() if request is not None else None
        return await self._executor.execute(
            "GET", EMAILS, CursorPaginatedResponse[EmailResponse], params=params
        )

    async def resend_email(self, email_id: str) -> EmailResponse:
        return await self._executor.execute(
            "POST", _path(EMAILS, email_id, "resend"), EmailResponse
        )

    # -- domains -------------------------------------------------------------

    async def create_domain(self, request: CreateDomainRequest) -> DomainResponse:
        return await self._executor.execute("POST", DOMAINS, DomainResponse, body=request)

    async def get_domain(self, domain_id: str) -> DomainResponse:
        return await self._executor.execute("GET", _path(DOMAINS, domain_id), DomainResponse)

    async def list_domains(
        self, page: int = 1, limit: int = 100
    ) -> PaginatedResponse[DomainResponse]:
        return await self._executor.execute(
            "GET",
            DOMAINS,
            PaginatedResponse[DomainResponse],
            params=_page_params(page, limit),
        )

    async def update_domain(
        self, domain_id: str, request: UpdateDomainRequest
    ) -> DomainResponse:
        return await self._executor.execute(
            "POST", _path(DOMAINS, domain_id), DomainResponse, body=request
        )

    async def verify_domain(self, domain_id: str) -> DomainResponse:
        return await self._executor.execute(
            "POST", _path(DOMAINS, domain_id, "verify"), DomainResponse
        )

    async def delete_domain(self, domain_id: str) -> DeleteResponse:
        return await self._executor.execute(
            "DELETE", _path(DOMAINS, domain_id), DeleteResponse
        )

    # -- api keys ------------------------------------------------------------

    async def create_api_key(self, request: CreateApiKeyRequest) -> ApiKeyResponse:
        return await self._executor.execute("POST", API_KEYS, ApiKeyResponse, body=request)

    async def get_api_key(self, api_key_id: str) -> ApiKeyResponse:
        return await self._executor.execute(
            "GET", _path(API_KEYS, api_key_id), ApiKeyResponse
        )

    async def list_api_keys(
        self, page: int = 1, limit: int = 100
    ) -> PaginatedResponse[ApiKeyResponse]:
        return await self._executor.execute(
            "GET",
            API_KEYS,
            PaginatedResponse[ApiKeyResponse],
            params=_page_params(page, limit),
        )

    async def update_api_key(
        self, api_key_id: str, request: UpdateApiKeyRequest
    ) -> ApiKeyResponse:
        return await self._executor.execute(
            "POST", _path(API_KEYS, api_key_id), ApiKeyResponse, body=request
        )

    async def delete_api_key(self, api_key_id: str) -> DeleteResponse:
        return await self._executor.execute(
            "DELETE", _path(API_KEYS, api_key_id), DeleteResponse
        )

    # -- audiences -----------------------------------------------------------

    async def create_audience(self, request: CreateAudienceRequest) -> AudienceResponse:
        return await self._executor.execute(
            "POST", AUDIENCES, AudienceResponse, body=request
        )

    async def get_audience(self, audience_id: str) -> AudienceResponse:
        return await self._executor.execute(
            "GET", _path(AUDIENCES, audience_id), AudienceResponse
        )

    async def list_audiences(
        self, page: int = 1, limit: int = 100
    ) -> PaginatedResponse[AudienceResponse]:
        return await self._executor.execute(
            "GET",
            AUDIENCES,
            PaginatedResponse[AudienceResponse],
            params=_page_params(page, limit),
        )

    async def update_audience(
        self, audience_id: str, request: UpdateAudienceRequest
    ) -> AudienceResponse:
        return await self._executor.execute(
            "POST", _path(AUDIENCES, audience_id), AudienceResponse, body=request
        )

    async def delete_audience(self, audience_id: str) -> DeleteResponse:
        return await self._executor.execute(
            "DELETE", _path(AUDIENCES, audience_id), DeleteResponse
        )

    # -- subscribers ---------------------------------------------------------

    async def add_subscriber(
        self, audience_id: str, request: AddSubscriberRequest
    ) -> SubscriberResponse:
        return await self._executor.execute(
            "POST",
            _path(AUDIENCES, audience_id, "subscribers"),
            SubscriberResponse,
            body=request,
        )

    async def get_subscriber(
        self, audience_id: str, subscriber_id: str
    ) -> SubscriberResponse:
        return await self._executor.execute(
            "GET",
            _path(AUDIENCES, audience_id, "subscribers", subscriber_id),
            SubscriberResponse,
        )

    async def list_subscribers(
        self, audience_id: str, page: int = 1, limit: int = 100
    ) -> PaginatedResponse[SubscriberResponse]:
        return await self._executor.execute(
            "GET",
            _path(AUDIENCES, audience_id, "subscribers"),
            PaginatedResponse[SubscriberResponse],
            params=_page_params(page, limit),
        )

    async def update_subscriber(
        self,
        audience_id: str,
        subscriber_id: str,
        request: UpdateSubscriberRequest,
    ) -> SubscriberResponse:
        return await self._executor.execute(
            "POST",
            _path(AUDIENCES, audience_id, "subscribers", subscriber_id),
            SubscriberResponse,
            body=request,
        )

    async def delete_subscriber(
        self, audience_id: str, subscriber_id: str
    ) -> DeleteResponse:
        return await self._executor.execute(
            "DELETE",
            _path(AUDIENCES, audience_id, "subscribers", subscriber_id),
            DeleteResponse,
        )

    # -- templates -----------------------------------------------------------

    async def create_template(self, request: CreateTemplateRequest) -> TemplateResponse:
        return await self._executor.execute(
            "POST", TEMPLATES, TemplateResponse, body=request
        )

    async def get_template(self, template_id: str) -> TemplateResponse:
        return await self._executor.execute(
            "GET", _path(TEMPLATES, template_id), TemplateResponse
        )

    async def list_templates(
        self, page: int = 1, limit: int = 100
    ) -> PaginatedResponse[TemplateResponse]:
        return await self._executor.execute(
            "GET",
            TEMPLATES,
            PaginatedResponse[TemplateResponse],
            params=_page_params(page, limit),
        )

    async def update_template(
        self, template_id: str, request: UpdateTemplateRequest
    ) -> TemplateResponse:
        return await self._executor.execute(
            "POST", _path(TEMPLATES, template_id), TemplateResponse, body=request
        )

    async def publish_template(self, template_id: str) -> TemplateResponse:
        return await self._executor.execute(
            "POST", _path(TEMPLATES, template_id, "publish"), TemplateResponse
        )

    async def delete_template(self, template_id: str) -> DeleteResponse:
        return await self._executor.execute(
            "DELETE", _path(TEMPLATES, template_id), DeleteResponse
        )

    # -- suppressions --------------------------------------------------------

    async def create_suppression(
        self, request: CreateSuppressionRequest
    ) -> SuppressionResponse:
        return await self._executor.execute(
            "POST", SUPPRESSIONS, SuppressionResponse, body=request
        )

    async def get_suppression(self, suppression_id: str) -> SuppressionResponse:
        return await self._executor.execute(
            "GET", _path(SUPPRESSIONS, suppression_id), SuppressionResponse
        )

    async def list_suppressions(
        self, page: int = 1, limit: int = 100
    ) -> PaginatedResponse[SuppressionResponse]:
        return await self._executor.execute(
            "GET",
            SUPPRESSIONS,
            PaginatedResponse[SuppressionResponse],
            params=_page_params(page, limit),
        )

    async def update_suppression(
        self, suppression_id: str, request: UpdateSuppressionRequest
    ) -> SuppressionResponse:
        return await self._executor.execute(
            "POST", _path(SUPPRESSIONS, suppression_id), SuppressionResponse, body=request
        )

    async def delete_suppression(self, suppression_id: str) -> DeleteResponse:
        return await self._executor.execute(
            "DELETE", _path(SUPPRESSIONS, suppression_id), DeleteResponse
        )

    # -- email verification --------------------------------------------------

    async def verify_email(self, request: VerifyEmailRequest) -> EmailVerificationResponse:
        return await self._executor.execute(
            "POST", VERIFICATIONS, EmailVerificationResponse, body=request
        )

    async def create_verification_list(
        self, request: CreateVerificationListRequest
    ) -> VerificationListResponse:
        return await self._executor.execute(
            "POST", VERIFICATION_LISTS, VerificationListResponse, body=request
        )

    async def get_verification_list(self, list_id: str) -> VerificationListResponse:
        return await self._executor.execute(
            "GET", _path(VERIFICATION_LISTS, list_id), VerificationListResponse
        )

    async def list_verification_lists(
        self, page: int = 1, limit: int = 100
    ) -> PaginatedResponse[VerificationListResponse]:
        return await self._executor.execute(
            "GET",
            VERIFICATION_LISTS,
            PaginatedResponse[VerificationListResponse],
            params=_page_params(page, limit),
        )

    async def get_verification_results(
        self, list_id: str, page: int = 1, limit: int = 100
    ) -> VerificationListResultsResponse:
        return await self._executor.execute(
            "GET",
            _path(VERIFICATION_LISTS, list_id, "results"),
            VerificationListResultsResponse,
            params=_page_params(page, limit),
        )

    async def export_verification_results(self, list_id: str) -> str:
        """Return the download URL of a verification list export."""
        response = await self._executor.send(
            "GET",
            _path(VERIFICATION_LISTS, list_id, "export"),
            follow_redirects=True,
        )
        return str(response.url)

    # -- connectivity --------------------------------------------------------

    async def test_connection(self) -> RateLimitInfo | None:
        """Best-effort reachability check.

        Returns the rate-limit snapshot on success and ``None`` on any
        failure, including bad credentials and network errors.
        """
        try:
            response = await self._executor.send("GET", DOMAINS)
        except Exception as exc:
            logger.info("Emailit connectivity check failed: %s", exc)
            return None
        return RateLimitInfo.from_headers(response.headers)
