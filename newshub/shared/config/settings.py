# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from newshub.shared.logging import logger

_SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    validate_by_name=True,
    extra="ignore",
)


def _parse_bool(value: str | bool | None) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        stripped = value.strip().lower()
        if stripped == "":
            return None
        return stripped in ("1", "true", "yes", "on")
    return bool(value)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///newshub.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")
    echo: bool = Field(False, alias="DATABASE_ECHO")

    model_config = _SECTION_CONFIG


class SecurityConfig(BaseSettings):
    secret_key: str = Field("dev", alias="SECRET_KEY")

    # Session cookie
    session_cookie_name: str = Field("sid", alias="SESSION_COOKIE_NAME")
    session_ttl_days: int = Field(7, ge=1, alias="SESSION_TTL_DAYS")
    # None: Secure flag follows the request scheme
    cookie_secure: bool | None = Field(None, alias="COOKIE_SECURE")
    trust_proxy: bool = Field(False, alias="TRUST_PROXY")

    # Password hashing
    bcrypt_rounds: int = Field(12, ge=4, le=31, alias="PASSWORD_BCRYPT_ROUNDS")

    # CORS
    client_origin: Annotated[list[str], NoDecode] = Field(
        ["http://localhost:5173"], alias="CLIENT_ORIGIN"
    )

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, ge=1, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, ge=0.1, alias="RL_WINDOW")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _SECTION_CONFIG

    @property
    def session_ttl_seconds(self) -> int:
        return self.session_ttl_days * 24 * 60 * 60

    @field_validator("client_origin", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator(
        "cookie_secure", "trust_proxy", "enable_rate_limit", "enable_hsts", mode="before"
    )
    @classmethod
    def _parse_flags(cls, value: str | bool | None) -> bool | None:
        return _parse_bool(value)


class NewsApiConfig(BaseSettings):
    base_url: str = Field("https://newsapi.org", alias="NEWS_API_BASE")
    api_key: str | None = Field(None, alias="NEWS_API_KEY")
    timeout: float = Field(10.0, ge=0.1, alias="NEWS_API_TIMEOUT")
    max_retries: int = Field(2, ge=0, alias="NEWS_API_RETRIES")
    backoff_base: float = Field(0.2, ge=0.0, alias="NEWS_API_BACKOFF_BASE")
    headlines_ttl: float = Field(30.0, ge=0.0, alias="NEWS_HEADLINES_TTL")
    sources_ttl: float = Field(3600.0, ge=0.0, alias="NEWS_SOURCES_TTL")

    model_config = _SECTION_CONFIG

    @field_validator("api_key", mode="before")
    @classmethod
    def _blank_is_missing(cls, value: str | None) -> str | None:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_file: str | None = Field(None, alias="LOG_FILE")
    max_content_length: int = Field(1024 * 1024, ge=1, alias="MAX_CONTENT_LENGTH")

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    news: NewsApiConfig = Field(default_factory=NewsApiConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_by_name=True,
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return bool(_parse_bool(value))

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.security.secret_key in ("dev", "development", "test", ""):
            raise ValueError("SECRET_KEY must be a strong random value in production")

        warnings = []
        if self.security.cookie_secure is False:
            warnings.append("COOKIE_SECURE is forced off")
        if "*" in self.security.client_origin:
            warnings.append("CORS allows wildcard (*) origins")
        if not self.security.enable_hsts:
            warnings.append("HSTS is disabled")
        if not self.news.api_key:
            warnings.append("NEWS_API_KEY is not set, /api/news/* will answer 503")

        for warning in warnings:
            logger.warning(f"config: {warning}")

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = ["AppConfig", "DatabaseConfig", "NewsApiConfig", "SecurityConfig", "load_config"]
