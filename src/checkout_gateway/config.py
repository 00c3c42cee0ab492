"""Configuration management using Pydantic Settings."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_API_KEY = "sk_test_..."


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Processor (Primer) Configuration
    processor_api_url: str = "https://api.sandbox.primer.io"
    processor_api_version: str = "2.4"
    processor_timeout: float = 10.0  # Per-call timeout in seconds
    primer_api_key: str = ""

    # Retry Configuration
    retry_max_attempts: int = 3
    retry_base_delay: float = 1.0  # Initial delay in seconds, doubled per attempt
    retry_client_errors: bool = True  # Also retry 4xx responses from the processor

    # Webhook Configuration
    primer_webhook_secret: str = ""
    verify_webhooks: bool = True

    # CORS
    allowed_origins: list[str] | str = []

    # Application
    environment: str = "development"
    app_version: str = "2.1.0"
    log_level: str = "INFO"

    @field_validator("allowed_origins")
    @classmethod
    def split_origins(cls, v: list[str] | str) -> list[str]:
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("processor_api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def api_key_configured(self) -> bool:
        return bool(self.primer_api_key) and self.primer_api_key != PLACEHOLDER_API_KEY

    @property
    def client_session_url(self) -> str:
        return f"{self.processor_api_url}/client-session"

    @property
    def payments_url(self) -> str:
        return f"{self.processor_api_url}/payments"

    @property
    def cors_origins(self) -> list[str]:
        """Origins allowed by CORS; everything outside production when unset."""
        if self.allowed_origins:
            return list(self.allowed_origins)
        return [] if self.is_production else ["*"]


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, read once at startup."""
    return Settings()
