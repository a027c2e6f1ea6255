"""Mini README: Centralised configuration models and helpers for TrackEase.

Structure:
    * TrackEaseSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read environment variables (prefixed with
    ``TRACKEASE_``), choose the storage backend, toggle bearer-token
    authentication and specify service ports. ``DATABASE_URL`` and
    ``JWT_SECRET`` are honoured without the prefix so deployments that
    already export them keep working. The configuration is cached so the
    cost of validation is incurred only once per process.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, validator
from pydantic_settings import BaseSettings

SUPPORTED_BACKENDS = ("file", "memory", "sql", "postgres")


class TrackEaseSettings(BaseSettings):
    """Runtime configuration for the TrackEase tracker."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    log_level: str = Field("INFO", description="Root logging level name.")
    data_directory: Path = Field(
        Path("data"),
        description="Directory holding the JSON transaction file for the file backend.",
    )
    storage_backend: str = Field(
        "file",
        description="Persistence backend: 'file' (JSON document), 'memory' or 'sql'/'postgres'.",
    )
    transactions_file: Optional[Path] = Field(
        None,
        description="Explicit JSON store path. Defaults to <data_directory>/transactions.json.",
    )
    database_url: Optional[str] = Field(
        None,
        description="SQLAlchemy database URL used by the relational backend.",
        validation_alias=AliasChoices("TRACKEASE_DATABASE_URL", "DATABASE_URL", "database_url"),
    )
    auth_enabled: bool = Field(
        False,
        description="Require JWT bearer tokens on every transaction endpoint.",
    )
    jwt_secret: str = Field(
        "change-me",
        description="Secret used to sign access tokens.",
        validation_alias=AliasChoices("TRACKEASE_JWT_SECRET", "JWT_SECRET", "jwt_secret"),
    )
    jwt_algorithm: str = Field("HS256", description="Signing algorithm for access tokens.")
    token_expiry_minutes: int = Field(
        60,
        description="Lifetime of issued access tokens in minutes.",
        ge=1,
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the web service to bind to.",
    )
    interface_port: int = Field(
        3000,
        description="Default port the web service exposes.",
        ge=1,
        le=65535,
    )
    currency_symbol: str = Field("₱", description="Symbol prefixed to formatted amounts.")

    class Config:
        env_prefix = "TRACKEASE_"
        env_file = ".env"
        case_sensitive = False
        populate_by_name = True
        extra = "ignore"

    @validator("data_directory", pre=True)
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Ensure configured paths expand user directories and exist."""

        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @validator("storage_backend", pre=True)
    def _normalise_backend(cls, value: str) -> str:
        """Accept any casing but only the supported backend names."""

        normalised = str(value).strip().lower()
        if normalised not in SUPPORTED_BACKENDS:
            raise ValueError(
                f"Unsupported storage backend '{value}'. Choose from {', '.join(SUPPORTED_BACKENDS)}."
            )
        return normalised

    def resolved_transactions_file(self) -> Path:
        """Return the JSON store path, falling back to the data directory."""

        if self.transactions_file is not None:
            return Path(self.transactions_file).expanduser()
        return Path(self.data_directory) / "transactions.json"


@lru_cache()
def get_settings() -> TrackEaseSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return TrackEaseSettings()
