"""Configuration helpers for the news reader proxy and terminal client."""

from __future__ import annotations

import logging

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CORS_ORIGINS = (
    "http://localhost:8000,http://127.0.0.1:8000,http://127.0.0.1:5500"
)
DEFAULT_MODELS = {"gemini": "gemini-2.0-flash", "openai": "gpt-4o-mini"}
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseSettings):
    """Proxy settings loaded from environment variables or `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    gnews_api_key: SecretStr | None = Field(None, alias="GNEWS_API_KEY")
    gnews_base_url: str = Field(
        "https://gnews.io/api/v4/top-headlines", alias="GNEWS_BASE_URL"
    )
    generation_provider: str = Field(
        "gemini",
        alias="GENERATION_PROVIDER",
        description="Text generation backend: 'gemini' or 'openai'.",
    )
    gemini_api_key: SecretStr | None = Field(None, alias="GEMINI_API_KEY")
    openai_api_key: SecretStr | None = Field(None, alias="OPENAI_API_KEY")
    generation_model: str | None = Field(
        None,
        alias="GENERATION_MODEL",
        description="Model name; defaults depend on the provider.",
    )
    cors_allow_origins: str = Field(
        DEFAULT_CORS_ORIGINS,
        alias="CORS_ALLOW_ORIGINS",
        description="Comma-separated list of browser origins allowed to call the proxy.",
    )
    upstream_timeout: float = Field(
        15.0,
        alias="UPSTREAM_TIMEOUT",
        description="Seconds to wait on the headlines and generation providers.",
    )
    scrape_timeout: float = Field(10.0, alias="SCRAPE_TIMEOUT")
    host: str = Field("0.0.0.0", alias="PROXY_HOST")
    port: int = Field(3001, alias="PROXY_PORT")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]

    @property
    def provider(self) -> str:
        return self.generation_provider.strip().lower()

    @property
    def model_name(self) -> str:
        return self.generation_model or DEFAULT_MODELS.get(self.provider, "")

    def require_credentials(self) -> None:
        """Fail fast when the proxy would start without the keys it needs."""
        if self.provider not in DEFAULT_MODELS:
            raise ValueError(
                f"GENERATION_PROVIDER must be one of {', '.join(DEFAULT_MODELS)}; "
                f"got {self.generation_provider!r}."
            )
        missing = []
        if not _has_secret(self.gnews_api_key):
            missing.append("GNEWS_API_KEY")
        if self.provider == "gemini" and not _has_secret(self.gemini_api_key):
            missing.append("GEMINI_API_KEY")
        if self.provider == "openai" and not _has_secret(self.openai_api_key):
            missing.append("OPENAI_API_KEY")
        if missing:
            raise ValueError(
                f"Missing required settings: {', '.join(missing)}. "
                "Set them in the environment or .env file."
            )


class ClientSettings(BaseSettings):
    """Terminal reader settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    proxy_url: str = Field("http://localhost:3001", alias="NEWS_PROXY_URL")
    topic: str = Field("breaking-news", alias="NEWS_TOPIC")
    page_size: int = Field(10, alias="NEWS_PAGE_SIZE", gt=0)


def _has_secret(value: SecretStr | None) -> bool:
    return value is not None and bool(value.get_secret_value().strip())


def get_settings() -> Settings:
    """Return a fresh settings instance."""
    return Settings()


def get_client_settings() -> ClientSettings:
    return ClientSettings()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
