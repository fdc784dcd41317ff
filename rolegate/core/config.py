"""
Role engine configuration using Pydantic Settings.
"""

from functools import lru_cache
from typing import Literal
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration."""

    model_config = SettingsConfigDict(env_prefix="ROLEGATE_DB_")

    url: str = Field(
        default="sqlite+aiosqlite:///./rolegate.db",
        description="SQLAlchemy async connection URL",
    )
    pool_size: int = Field(default=5, ge=1, le=100)
    pool_overflow: int = Field(default=10, ge=0, le=100)
    pool_timeout: int = Field(default=30, ge=1)
    echo: bool = Field(default=False, description="Echo SQL queries")

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class RoleSettings(BaseSettings):
    """Role evaluation and membership behaviour."""

    model_config = SettingsConfigDict(env_prefix="ROLEGATE_ROLES_")

    # Containment checks compare slugs exactly; lookups by slug are always
    # case-insensitive.
    case_sensitive_slugs: bool = Field(
        default=True,
        description="Compare slugs case-sensitively in has() checks",
    )
    serialize_mutations: bool = Field(
        default=False,
        description="Serialize attach/detach per principal with an in-process lock",
    )
    default_mode: Literal["any", "all"] = Field(
        default="any",
        description="Match mode used when has() is called without one",
    )


class Settings(BaseSettings):
    """Main settings."""

    model_config = SettingsConfigDict(
        env_prefix="ROLEGATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    service_name: str = Field(default="rolegate")
    environment: str = Field(default="development")

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json", description="json or text")

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    roles: RoleSettings = Field(default_factory=RoleSettings)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        allowed = {"development", "staging", "production", "testing"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in {"json", "text"}:
            raise ValueError("log_format must be 'json' or 'text'")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
