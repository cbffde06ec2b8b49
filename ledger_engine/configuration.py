"""Mini README: Centralised configuration models and helpers for the ledger engine.

Structure:
    * LedgerSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read environment variables prefixed with
    ``LEDGER_ENGINE_``, choose the duplicate insert policy, and specify the
    service address. The configuration is cached so validation runs once per
    process.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, validator
from pydantic_settings import BaseSettings

from .ledger.engine import DuplicatePolicy


class LedgerSettings(BaseSettings):
    """Runtime configuration for the ledger engine."""

    environment: str = Field(
        "development",
        description="Environment label; auto-reload in `run` is only enabled for 'development'.",
    )
    log_level: str = Field(
        "INFO",
        description="Root logging level applied by the CLI entry points.",
    )
    interface_host: str = Field(
        "127.0.0.1",
        description="Network interface for the HTTP service to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Port the HTTP service exposes.",
        ge=1,
        le=65535,
    )
    duplicate_policy: DuplicatePolicy = Field(
        DuplicatePolicy.OVERWRITE,
        description=(
            "Behaviour when an insert reuses a live transaction id: 'overwrite'"
            " replaces the record with a warning, 'reject' raises an error."
        ),
    )

    class Config:
        env_prefix = "LEDGER_ENGINE_"
        env_file = ".env"
        case_sensitive = False

    @validator("log_level", pre=True)
    def _normalise_level(cls, value: str) -> str:
        """Store level names upper-cased so logging accepts them."""

        return str(value).strip().upper()

    @validator("duplicate_policy", pre=True)
    def _normalise_policy(cls, value: object) -> object:
        """Accept policy names in any casing."""

        if isinstance(value, str):
            return value.strip().lower()
        return value


@lru_cache()
def get_settings() -> LedgerSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return LedgerSettings()
