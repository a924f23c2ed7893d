"""Pydantic request and response models for the Emailit v2 API.

Field names match the lower snake_case wire names. The two Python keywords
used by the API (``from`` and ``template``) are exposed as ``from_`` and
``template_id`` and serialized under their wire aliases.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from emailit.models import RateLimitInfo

T = TypeVar("T")


class ApiModel(BaseModel):
    """Base for every wire model: keys are matched case-insensitively."""

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _lowercase_keys(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                key.lower() if isinstance(key, str) else key: value
                for key, value in data.items()
            }
        return data


class RequestModel(ApiModel):
    """Base for request bodies; optional fields left unset are omitted."""

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------


class ErrorEnvelope(ApiModel):
    """Error body returned by non-2xx responses (every field optional)."""

    error: str | None = None
    message: str | None = None
    code: str | None = None
    details: str | None = None
    errors: dict[str, list[str]] | None = Field(
        None, description="Per-field validation messages"
    )

    @field_validator("errors", mode="before")
    @classmethod
    def _normalize_errors(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return None
        return {
            str(field): [messages] if isinstance(messages, str) else messages
            for field, messages in value.items()
        }

    def resolved_message(self) -> str:
        """First field that is present, even if empty: message, error, code, details."""
        for candidate in (self.message, self.error, self.code, self.details):
            if candidate is not None:
                return candidate
        return "Unknown error"


class PaginatedResponse(ApiModel, Generic[T]):
    """Page-number pagination envelope."""

    data: list[T] = Field(default_factory=list)
    next_page_url: str | None = None
    previous_page_url: str | None = None

    @property
    def has_next_page(self) -> bool:
        return bool(self.next_page_url)

    @property
    def has_previous_page(self) -> bool:
        return bool(self.previous_page_url)


class CursorPaginatedResponse(ApiModel, Generic[T]):
    """Cursor pagination envelope (used by the email listing)."""

    data: list[T] = Field(default_factory=list)
    has_more: bool = False
    next_cursor: str | None = None


class DeleteResponse(ApiModel):
    object: str | None = None
    id: str
    deleted: bool = False


# ---------------------------------------------------------------------------
# /v2/emails
# ---------------------------------------------------------------------------


class EmailAttachment(RequestModel):
    """File attached inline (base64 ``content``) or by ``url``."""

    filename: str
    content_type: str
    content: str | None = None
    url: str | None = None


class SendEmailRequest(RequestModel):
    from_: str = Field(..., alias="from")
    to: list[str]
    subject: str
    cc: list[str] | None = None
    bcc: list[str] | None = None
    reply_to: list[str] | None = None
    html: str | None = None
    text: str | None = None
    template_id: str | None = Field(None, alias="template")
    variables: dict[str, Any] | None = None
    attachments: list[EmailAttachment] | None = None
    scheduled_at: str | None = Field(
        None, description="ISO 8601 timestamp or natural-language schedule"
    )
    track_opens: bool | None = None
    track_clicks: bool | None = None
    metadata: dict[str, str] | None = None


class UpdateScheduledEmailRequest(RequestModel):
    scheduled_at: str


class ListEmailsRequest(RequestModel):
    """Filters for the email listing; empty filters are never sent."""

    limit: int = 25
    after: str | None = None
    status: str | None = None
    tag: str | None = None
    from_: str | None = Field(None, alias="from")
    to: str | None = None
    subject: str | None = None
    created_after: str | None = None
    created_before: str | None = None

    def to_params(self) -> dict[str, Any]:
        return {key: value for key, value in self.to_payload().items() if value != ""}


class EmailResponse(ApiModel):
    """An email as returned by the API.

    ``rate_limit_info`` is not part of the body; the client fills it with the
    snapshot taken from the response that produced this object.
    """

    object: str = "email"
    id: str
    status: str
    from_: str | None = Field(None, alias="from")
    to: list[str] | None = None
    subject: str | None = None
    created_at: datetime | None = None
    sent_at: datetime | None = None
    delivered_at: datetime | None = None
    bounced_at: datetime | None = None
    bounce_type: str | None = None
    bounce_reason: str | None = None
    scheduled_at: datetime | None = None
    metadata: dict[str, str] | None = None
    updated_at: datetime | None = None
    rate_limit_info: RateLimitInfo | None = Field(None, exclude=True)


class CancelEmailResponse(ApiModel):
    object: str = "email"
    id: str | None = None
    cancelled: bool = False


# ---------------------------------------------------------------------------
# /v2/domains
# ---------------------------------------------------------------------------


class DnsRecord(ApiModel):
    type: str
    name: str
    value: str
    ttl: int | None = None
    status: str | None = None


class CreateDomainRequest(RequestModel):
    name: str
    from_email: str


class UpdateDomainRequest(RequestModel):
    from_email: str | None = None
    track_opens: bool | None = None
    track_clicks: bool | None = None


class DomainResponse(ApiModel):
    object: str = "domain"
    id: str
    name: str
    status: str
    from_email: str | None = None
    dns_records: list[DnsRecord] | None = None
    track_opens: bool | None = None
    track_clicks: bool | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# /v2/api-keys
# ---------------------------------------------------------------------------


class CreateApiKeyRequest(RequestModel):
    name: str
    scope: str | None = None
    sending_domain_id: str | None = None


class UpdateApiKeyRequest(RequestModel):
    name: str


class ApiKeyResponse(ApiModel):
    object: str = "api_key"
    id: str
    name: str
    scope: str | None = None
    sending_domain_id: str | None = None
    key: str | None = Field(None, description="Only returned on creation")
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# /v2/audiences and subscribers
# ---------------------------------------------------------------------------


class CreateAudienceRequest(RequestModel):
    name: str


class UpdateAudienceRequest(RequestModel):
    name: str


class AudienceResponse(ApiModel):
    object: str = "audience"
    id: str
    name: str
    token: str | None = None
    subscriber_count: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AddSubscriberRequest(RequestModel):
    email: str
    first_name: str | None = None
    last_name: str | None = None
    custom_fields: dict[str, Any] | None = None


class UpdateSubscriberRequest(RequestModel):
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    custom_fields: dict[str, Any] | None = None


class SubscriberResponse(ApiModel):
    object: str = "subscriber"
    id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    status: str | None = None
    custom_fields: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# /v2/templates
# ---------------------------------------------------------------------------


class CreateTemplateRequest(RequestModel):
    name: str
    subject: str | None = None
    html: str | None = None
    text: str | None = None


class UpdateTemplateRequest(RequestModel):
    name: str | None = None
    subject: str | None = None
    html: str | None = None
    text: str | None = None


class TemplateResponse(ApiModel):
    object: str = "template"
    id: str
    name: str
    subject: str | None = None
    html: str | None = None
    text: str | None = None
    version: int | None = None
    published: bool | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# /v2/suppressions
# ---------------------------------------------------------------------------


class CreateSuppressionRequest(RequestModel):
    email: str
    type: str | None = None
    reason: str | None = None


class UpdateSuppressionRequest(RequestModel):
    type: str | None = None
    reason: str | None = None


class SuppressionResponse(ApiModel):
    object: str = "suppression"
    id: str
    email: str
    type: str | None = None
    reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# /v2/email-verifications and /v2/email-verification-lists
# ---------------------------------------------------------------------------


class VerifyEmailRequest(RequestModel):
    email: str


class CreateVerificationListRequest(RequestModel):
    emails: list[str]
    name: str | None = None


class EmailVerificationResponse(ApiModel):
    object: str = "email_verification"
    id: str
    email: str
    result: str
    risk_score: int | None = None
    is_deliverable: bool | None = None
    is_disposable: bool | None = None
    is_role_account: bool | None = None
    is_free_provider: bool | None = None
    has_mx_records: bool | None = None
    smtp_provider: str | None = None
    verified_at: datetime | None = None


class VerificationListResponse(ApiModel):
    object: str = "email_verification_list"
    id: str
    status: str
    name: str | None = None
    total_count: int | None = None
    processed_count: int | None = None
    valid_count: int | None = None
    invalid_count: int | None = None
    risky_count: int | None = None
    unknown_count: int | None = None
    created_at: datetime | None = None
    completed_at: datetime | None = None


class VerificationListResultsResponse(ApiModel):
    object: str = "email_verification_list_results"
    list_id: str
    data: list[EmailVerificationResponse] = Field(default_factory=list)
    next_page_url: str | None = None
    previous_page_url: str | None = None
