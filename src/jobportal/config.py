"""Configuration management for the application."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SameSite = Literal["lax", "strict", "none"]


class PipelineConfig(BaseModel):
    """
    Explicit, validated options consumed by the request pipeline.

    Built once at startup from ``Settings``; stages never look at the
    environment themselves.
    """

    model_config = ConfigDict(frozen=True)

    allowed_origins: tuple[str, ...] = ()
    cookie_secure: bool = False
    cookie_samesite: SameSite = "lax"
    session_max_age: int = Field(default=86400, gt=0)
    session_secret: str = Field(min_length=16)
    session_cookie_name: str = "connect.sid"
    uploads_dir: Path = Path("uploads")
    uploads_prefix: str = "/uploads"
    body_limit: int = Field(default=102400, gt=0)

    @model_validator(mode="after")
    def check_cookie_flags(self) -> "PipelineConfig":
        """Browsers drop ``SameSite=None`` cookies that are not ``Secure``."""
        if self.cookie_samesite == "none" and not self.cookie_secure:
            raise ValueError("SameSite=None session cookies must also be Secure")
        return self

    def is_allowed_origin(self, origin: str) -> bool:
        return origin.rstrip("/") in self.allowed_origins


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database: required, there is no built-in fallback connection string
    database_url: str

    # Sessions
    session_secret: str = Field(min_length=16)
    session_max_age_seconds: int = Field(default=86400, gt=0)
    session_store: Literal["database", "memory"] = "database"

    # CORS
    frontend_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("FRONTEND_URL", "REACT_APP_FRONTEND_URL"),
    )
    cors_origins: list[str] = Field(default_factory=list)

    environment: Literal["development", "production", "test"] = Field(
        default="development",
        validation_alias=AliasChoices("NODE_ENV", "ENVIRONMENT"),
    )

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)

    uploads_dir: str = Field(default="uploads")
    body_limit_bytes: int = Field(default=102400, gt=0)
    log_level: str = Field(default="INFO")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def allowed_origins(self) -> tuple[str, ...]:
        """
        Build the CORS allow-list.

        Returns:
            Origins without trailing slashes, frontend URL first, duplicates removed
        """
        candidates = [self.frontend_url, *self.cors_origins]
        origins: list[str] = []
        for origin in candidates:
            if not origin:
                continue
            origin = origin.rstrip("/")
            if origin not in origins:
                origins.append(origin)
        return tuple(origins)

    def pipeline_config(self) -> PipelineConfig:
        """
        Resolve the pipeline configuration for this deployment.

        Production deployments serve the frontend from another site, so the
        session cookie must be ``Secure`` with ``SameSite=None``. Everywhere
        else a plain ``SameSite=Lax`` cookie is used.

        Returns:
            Frozen PipelineConfig

        Raises:
            pydantic.ValidationError: If the resolved options are inconsistent
        """
        return PipelineConfig(
            allowed_origins=self.allowed_origins(),
            cookie_secure=self.is_production,
            cookie_samesite="none" if self.is_production else "lax",
            session_max_age=self.session_max_age_seconds,
            session_secret=self.session_secret,
            uploads_dir=Path(self.uploads_dir).expanduser().resolve(),
            body_limit=self.body_limit_bytes,
        )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    return Settings()
