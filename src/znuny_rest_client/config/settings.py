from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic.networks import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

from znuny_rest_client.config.env_aliases import get_flat_env_settings_source
from znuny_rest_client.domain.payloads import (
    DEFAULT_COMMUNICATION_CHANNEL,
    DEFAULT_CONTENT_TYPE,
)


class _BaseSection(BaseModel):
    model_config = {"extra": "forbid"}


class ZnunySettings(_BaseSection):
    # Web service root, e.g. .../nph-genericinterface.pl/Webservice/GenericTicketConnectorREST
    base_url: AnyHttpUrl
    username: str = Field(min_length=1)
    password: SecretStr
    timeout_seconds: float = Field(default=10.0, gt=0)
    verify_tls: bool = True


class DefaultsSettings(_BaseSection):
    content_type: str = DEFAULT_CONTENT_TYPE
    communication_channel: str = DEFAULT_COMMUNICATION_CHANNEL
    queue_id: int | None = Field(default=None, ge=1)
    queue_name: str | None = None


class ObservabilitySettings(_BaseSection):
    log_level: str = "INFO"
    log_format: str | None = None  # json|human (overrides LOG_FORMAT/env when set)
    json_logs: bool = False

    @field_validator("log_format")
    @classmethod
    def _validate_log_format(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip().lower()
        if normalized in {"json", "human"}:
            return normalized
        raise ValueError("observability.log_format must be 'json' or 'human'")


class TransportHardeningSettings(_BaseSection):
    # If true, allow httpx to read HTTP_PROXY/HTTPS_PROXY/NO_PROXY and other env settings.
    trust_env: bool = False
    # Credentials travel in the payload, so plaintext HTTP exposes the password.
    allow_insecure_http: bool = False
    # Allow disabling TLS verification for upstream requests. Strongly discouraged.
    allow_insecure_tls: bool = False


class HardeningSettings(_BaseSection):
    transport: TransportHardeningSettings = Field(default_factory=TransportHardeningSettings)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="forbid",
    )

    znuny: ZnunySettings
    defaults: DefaultsSettings = Field(default_factory=DefaultsSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)
    hardening: HardeningSettings = Field(default_factory=HardeningSettings)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Settings:
        """
        Construct Settings from a mapping without reading environment variables.

        Useful in tests where we want to pass nested dicts and keep mypy happy.
        """
        class _InitOnlySettings(Settings):
            @classmethod
            def settings_customise_sources(
                cls,
                settings_cls,
                init_settings,
                env_settings,
                dotenv_settings,
                file_secret_settings,
            ):
                return (init_settings,)

        return _InitOnlySettings(**dict(data))

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            env_settings,
            get_flat_env_settings_source,
            init_settings,
            dotenv_settings,
            file_secret_settings,
        )
