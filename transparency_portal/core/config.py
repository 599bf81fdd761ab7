"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (DATABASE_URL, SECRET_KEY) are
validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_UPLOAD_EXTENSIONS = (
    ".pdf,.doc,.docx,.xls,.xlsx,.ppt,.pptx,.txt,.csv,.json,.xml,.zip,.rar,.7z"
)


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except database_url and
    secret_key, checked in validate_required_and_storage.
    """

    # App
    app_name: str = "transparency-portal"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (async SQLAlchemy URL, e.g. postgresql+asyncpg://...)
    database_url: str = ""
    database_echo: bool = False
    # Pool overrides; only applied to server databases (not SQLite)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None

    # Security
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 480  # 8 hours

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Storage
    storage_backend: str = "local"
    storage_root: str = "/var/transparency/storage"
    max_upload_size: int = 50 * 1024 * 1024  # 50MB
    allowed_upload_extensions: str = DEFAULT_UPLOAD_EXTENSIONS

    # Documents
    default_issuing_institution: str = "Gobierno del Estado de Morelos"

    # Request / middleware
    request_id_header: str = "X-Request-ID"

    # Rate limits (slowapi syntax)
    rate_limit_writes: str = "60/minute"
    rate_limit_login: str = "10/minute"

    # Cache: Redis when enabled, in-process expiring map otherwise
    redis_enabled: bool = False
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    redis_max_connections: int = 10
    cache_ttl_permissions: int = 300
    descendant_cache_ttl: int = 300

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required_and_storage(self) -> "Settings":
        """Validate required env and storage backend."""
        if not self.database_url:
            raise ValueError(
                "DATABASE_URL is required. Set in environment or .env file."
            )
        secret = self.secret_key.get_secret_value()
        if not secret:
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        if len(secret) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters long.")
        if self.storage_backend != "local":
            raise ValueError(
                f"Invalid storage_backend '{self.storage_backend}'. "
                "Must be one of: 'local'"
            )
        return self

    @property
    def upload_extensions(self) -> frozenset[str]:
        """Allowed upload extensions, lowercased, each with a leading dot."""
        result = set()
        for raw in self.allowed_upload_extensions.split(","):
            ext = raw.strip().lower()
            if not ext:
                continue
            result.add(ext if ext.startswith(".") else f".{ext}")
        return frozenset(result)

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.
    """
    return Settings()
