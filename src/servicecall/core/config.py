"""Client configuration.

Why here:
- Centralizes every knob (discovery host, identity, secrets, timeouts) in one
  typed object validated by pydantic-settings.
- `ServiceCall` receives an explicit instance; the environment is only read
  when a caller builds the settings with defaults.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOCAL_ENVIRONMENT = "local"


class ServiceCallSettings(BaseSettings):
    """Central configuration for the service-call client.

    Why pydantic-settings:
    - Typing and validation at the edge (env vars, `.env`) without leaking
      process state into the resolver or the normalizer.
    - A single contract shared by the library and the CLI.
    """

    model_config = SettingsConfigDict(
        env_prefix="SERVICE_CALL_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    discovery_host: str | None = Field(
        default=None,
        description="Base URL of the HTTP discovery service (e.g. https://discovery.internal/).",
    )
    service_name: str | None = Field(
        default=None,
        description="Identity of the calling service; used in the api-key header and as secret name.",
    )
    service_secret: str | None = Field(
        default=None,
        description="Literal api secret. When set, the secret store is never queried.",
    )
    environment: str = Field(
        default="production",
        min_length=1,
        description="Runtime environment. 'local' bypasses the secret store.",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout per request (seconds), for discovery and remote calls.",
    )
    user_agent: str = Field(
        default="servicecall/0.1",
        min_length=1,
        description="User-Agent for outbound requests.",
    )
    default_page_size: int = Field(
        default=60,
        ge=1,
        le=10_000,
        description="Page size used by list/safe_list when none is given.",
    )

    log_level: str = Field(
        default="WARNING",
        description="Level of the stderr log sink installed by the CLI.",
    )

    @field_validator("discovery_host")
    @classmethod
    def _blank_host_is_missing(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @property
    def is_local(self) -> bool:
        return self.environment.strip().lower() == LOCAL_ENVIRONMENT
