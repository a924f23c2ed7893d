from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.emailit.com"
DEFAULT_TIMEOUT = 30.0


class EmailitSettings(BaseSettings):
    """Client configuration, validated once when constructed.

    Values come from keyword arguments first, then ``EMAILIT_*`` environment
    variables, then a local ``.env`` file.
    """

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0)
    log_format: str = "text"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="EMAILIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    @field_validator("api_key")
    @classmethod
    def _require_api_key(cls, value: str) -> str:
        if not value.strip():
            raise ValueError(
                "Emailit API key is required. Pass api_key or set EMAILIT_API_KEY."
            )
        return value

    @field_validator("base_url")
    @classmethod
    def _require_base_url(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Emailit base_url cannot be empty.")
        return value

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        if value.lower() not in ("text", "json"):
            raise ValueError("log_format must be 'text' or 'json'.")
        return value.lower()
