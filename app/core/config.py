"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (e.g. SECRET_KEY) are validated at
load time. An empty DATABASE_URL means storage is not configured: the app
still starts, and operations that need the database return 503.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

IPV4_MODES = ("prefer", "force", "off")
EMAIL_PROVIDERS = ("log", "sendgrid")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except those validated in
    validate_required (secret_key, and sendgrid_api_key when the SendGrid
    provider is selected).
    """

    # App
    app_name: str = "ats-backend"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (PostgreSQL via SQLAlchemy async + asyncpg)
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int = 20
    db_max_overflow: int = 0
    db_pool_timeout: float = 15.0
    db_pool_recycle: int = 30
    db_command_timeout: float = 15.0
    db_connect_timeout: float = 15.0
    db_statement_timeout_ms: int = 15_000
    db_ssl: bool = False
    # prefer: resolve IPv4 first, fall back to any family; force: IPv4 only; off: no resolution.
    db_ipv4_mode: str = "prefer"
    db_query_retries: int = 2
    db_retry_backoff_seconds: float = 1.0

    # Security
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days
    bcrypt_rounds: int = 12
    min_password_length: int = 8

    # Account lifecycle
    approval_token_ttl_minutes: int = 60
    password_reset_token_ttl_minutes: int = 60
    staff_requires_approval: bool = False
    supersede_prior_tokens: bool = True

    # Links placed in outbound email
    api_public_url: str = "http://localhost:8000/api/v1"
    frontend_url: str = "http://localhost:3000"

    # Email
    approval_notification_email: str | None = None
    email_provider: str = "log"
    sendgrid_api_key: SecretStr | None = None
    email_from: str = "no-reply@localhost"

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Request / middleware
    request_id_header: str = "X-Request-ID"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def database_configured(self) -> bool:
        return bool(self.database_url.strip())

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required env and enumerated options.

        - SECRET_KEY is always required (session credentials are signed with it).
        - DB_IPV4_MODE must be one of prefer, force, off.
        - EMAIL_PROVIDER must be log or sendgrid; sendgrid needs SENDGRID_API_KEY.
        """
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        if self.db_ipv4_mode not in IPV4_MODES:
            raise ValueError(
                f"db_ipv4_mode must be one of {', '.join(IPV4_MODES)}, got: {self.db_ipv4_mode!r}"
            )
        if self.email_provider not in EMAIL_PROVIDERS:
            raise ValueError(
                f"Invalid email_provider '{self.email_provider}'. "
                f"Must be one of: {', '.join(EMAIL_PROVIDERS)}"
            )
        if self.email_provider == "sendgrid":
            has_key = self.sendgrid_api_key and self.sendgrid_api_key.get_secret_value()
            if not has_key:
                raise ValueError(
                    "SENDGRID_API_KEY is required when email_provider is 'sendgrid'."
                )
        if self.db_query_retries < 0:
            raise ValueError("db_query_retries must be >= 0")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
