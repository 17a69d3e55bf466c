"""
Application configuration using pydantic-settings.
Loads from environment variables with .env file support.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from user_accounts.kernel.identity.errors import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./user_accounts.db"

    # Security
    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    bcrypt_rounds: int = 10
    # Collapse "unknown email" into "invalid credentials" on login
    uniform_login_errors: bool = False
    # Take the client address from X-Forwarded-For (only behind a trusted proxy)
    trust_proxy_headers: bool = False

    # Application
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR
    host: str = "0.0.0.0"
    port: int = 5000

    # API Settings
    api_prefix: str = "/api/users"
    project_name: str = "User Management Service"
    version: str = "1.0.0"

    # CORS
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://127.0.0.1:3000",
    ]
    cors_origin_regex: Optional[str] = None

    def require_jwt_secret(self) -> str:
        """Return the signing secret or fail when it is not configured."""
        secret = (self.jwt_secret or "").strip()
        if not secret:
            raise ConfigurationError("JWT_SECRET is not set")
        return secret


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
