"""
Portal configuration.

Every tunable of the API (storage backend, token signing, the default
admin account, CORS, logging) is read here with pydantic-settings and
passed down by injection instead of calling os.getenv().
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_JWT_SECRET = "kare-acm-sigbed-jwt-secret"


class Settings(BaseSettings):
    """
    Environment-driven settings for the portal API.

    Names are case-insensitive and may also come from a .env file. The
    defaults run a local instance against MongoDB on localhost, falling
    back to in-memory storage when it is not running.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage Backend Selection
    # "mongodb" tries the database first and falls back to memory when it
    # cannot be reached; "memory" skips the connection attempt entirely.
    storage_backend: Literal["mongodb", "memory"] = "mongodb"

    # MongoDB Configuration
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "kare_acm_sigbed"
    mongodb_connect_timeout_ms: int = 3000

    # Fallback storage starts with demo events, news and members
    seed_fallback_data: bool = True

    # Auth
    jwt_secret_key: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expires_hours: int = 24
    bcrypt_rounds: int = 10
    session_cookie_name: str = "sigbed_session"

    # Default administrator, created once on startup
    admin_email: str = "admin@karesgbd.acm.org"
    admin_password: str = "admin123"
    admin_bootstrap_delay_seconds: float = 2.0

    # Server
    server_host: str = "0.0.0.0"
    server_port: int = 3000
    cors_origins: list[str] = ["*"]
    debug: bool = True
    log_level: str = "INFO"

    # Environment
    environment: Literal["development", "staging", "production"] = "development"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def expose_errors(self) -> bool:
        """Exception detail is only ever returned to clients in development."""
        return self.debug and self.is_development

    def validate_runtime(self) -> None:
        """Refuse to serve production traffic with the development JWT secret."""
        if self.is_production and self.jwt_secret_key == DEFAULT_JWT_SECRET:
            raise RuntimeError("JWT_SECRET_KEY must be set in production.")


@lru_cache
def get_settings() -> Settings:
    """Settings parsed once per process."""
    return Settings()


settings = get_settings()
