# Central place for all configurable settings. We use Pydantic's
# BaseSettings so values can be read from env vars or a .env file.
# Nothing here is cached at import time: create_app() receives a
# Settings instance and hands it to the application context.

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # SQLAlchemy connection string, like sqlite:///./orderhub.db or a
    # postgresql:// URL.
    DATABASE_URL: str

    # Signing key for session tokens. Must be kept private in production.
    SECRET_KEY: str

    ALGORITHM: str = "HS256"

    # Session tokens live for seven days. Expiry is the only way a
    # session ends.
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=7 * 24 * 60, gt=0)

    # Fernet key (or any 32 byte string) used to encrypt upstream tokens
    # at rest.
    INTEGRATION_ENCRYPTION_KEY: Optional[str] = None

    # Upstream analytics API
    UPSTREAM_URL: str = "https://api.utmify.com.br/api-credentials/orders"
    UPSTREAM_TOKEN_HEADER: str = "x-api-token"
    UPSTREAM_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)

    # Webhook normalisation defaults
    DEFAULT_CURRENCY: str = "BRL"
    DEFAULT_PLATFORM: str = "Custom"
    HOOK_SECRET_HEADER: str = "X-Hook-Secret"

    ENVIRONMENT: str = "development"

    # Toggle SQLAlchemy echo logs. Useful for debugging queries locally.
    DB_ECHO: bool = False

    # Comma separated list of origins allowed by CORS.
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"

    @property
    def allowed_origins(self) -> List[str]:
        return [p.strip() for p in self.ALLOWED_ORIGINS.split(",") if p.strip()]

    @field_validator("DEFAULT_CURRENCY")
    @classmethod
    def _normalize_currency(cls, value: str) -> str:
        value = (value or "").strip().upper()
        if not value:
            raise ValueError("DEFAULT_CURRENCY must not be empty")
        return value


def get_settings() -> Settings:
    return Settings()
