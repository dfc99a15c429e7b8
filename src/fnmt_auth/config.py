"""
Configuration — typed, validated settings loaded from environment/.env.

Uses pydantic-settings to:
  - Load from environment variables (12-factor app)
  - Fall back to .env file
  - Validate types and constraints at startup

All configuration errors are caught at startup, never per request.

Architecture: Only AppSettings is a BaseSettings instance. Sub-settings are plain
BaseModel classes populated by AppSettings via env_nested_delimiter="__", so the env
var FNMT__NAMES maps to fnmt.names, SERVER__PORT maps to server.port, etc.

Example:
  FNMT__NAMES='["Juan Pérez García"]'
  FNMT__DNIS='["123456789"]'
  FNMT__NAMEDNIS='["Juan Pérez García - 123456789"]'
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from railway import ResultFailures
from railway.result import Result

from fnmt_auth.domain.models import VerifierConfig

# Resolve the .env file relative to the project root (two levels above this file),
# so settings load correctly regardless of the working directory at runtime.
_ENV_FILE = Path(__file__).parent.parent.parent / ".env"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class FnmtSettings(BaseModel):
    """
    The three allow-lists.

    Every key is optional, but a key that is given must carry at least one
    entry. Unknown keys are rejected.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    names: list[str] | None = Field(default=None, description="Allowed full names")
    dnis: list[str] | None = Field(default=None, description="Allowed DNIs")
    namednis: list[str] | None = Field(
        default=None,
        description="Allowed '<full name> - <DNI>' common names",
    )

    @field_validator("names", "dnis", "namednis")
    @classmethod
    def require_entries(cls, value: list[str] | None) -> list[str] | None:
        """Reject an explicitly empty list and blank entries."""
        if value is None:
            return None
        if len(value) == 0:
            raise ValueError("requires at least one argument")
        if any(entry == "" for entry in value):
            raise ValueError("entries must not be empty strings")
        return value

    def to_config(self) -> VerifierConfig:
        return VerifierConfig(
            full_names=tuple(self.names or ()),
            national_ids=tuple(self.dnis or ()),
            combined_tokens=tuple(self.namednis or ()),
        )


class ServerSettings(BaseModel):
    """HTTP listener and the header a TLS-terminating proxy forwards the client cert in."""

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8000, ge=1, le=65535, description="Bind port")
    client_cert_header: str = Field(
        default="x-ssl-client-cert",
        description="Header carrying the URL-escaped PEM (or base64 DER) client certificate",
    )

    @field_validator("client_cert_header")
    @classmethod
    def normalize_header(cls, value: str) -> str:
        """Header lookups are case-insensitive; store the lowercase form."""
        value = value.strip().lower()
        if not value:
            raise ValueError("client_cert_header must not be empty")
        return value


class AppSettings(BaseSettings):
    """
    Root application settings — aggregates all sub-settings.

    Load order (highest priority first):
      1. Environment variables
      2. .env file
      3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    fnmt: FnmtSettings = Field(default_factory=lambda: FnmtSettings())
    server: ServerSettings = Field(default_factory=lambda: ServerSettings())

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {value!r}")
        return level


def load_verifier_config(raw: Mapping[str, Any]) -> Result[VerifierConfig]:
    """
    Validate a plain mapping shaped like the module's JSON configuration.

        load_verifier_config({"names": ["Juan Pérez García"], "dnis": ["123456789"]})

    Returns Result.failure(CONFIGURATION_ERROR, ...) with the validation
    detail when a key is empty or unknown.
    """
    try:
        settings = FnmtSettings.model_validate(dict(raw))
    except ValidationError as e:
        return ResultFailures.configuration_error(f"Invalid fnmt configuration: {e}", e)
    return Result.success(settings.to_config())
