# storefront/core/config.py
import logging
from typing import Dict, List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings, loaded from the environment or a .env file"""
    APP_NAME: str = "Storefront"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Session credential
    SESSION_COOKIE_NAME: str = "session"
    SESSION_SECRET_KEY: Optional[str] = Field(default=None)
    SESSION_MAX_AGE_SECONDS: int = 24 * 60 * 60

    # CSRF
    CSRF_HEADER_NAME: str = "X-CSRF-Token"
    CSRF_COOKIE_NAME: str = "csrf_token"
    CSRF_MAX_TOKENS_PER_SESSION: int = 10
    CSRF_TOKEN_TTL_SECONDS: int = 24 * 60 * 60

    # Path classification for the authorization gate
    PUBLIC_PATHS: List[str] = Field(default_factory=lambda: [
        "/login",
        "/api/auth/login",
        "/sample/login",
        "/sample/api/auth/login",
        "/_next",
        "/favicon.ico",
        "/health",
    ])
    ADMIN_PATHS: List[str] = Field(default_factory=lambda: ["/admin", "/sample/admin"])
    # Admin prefixes that take precedence over a matching public prefix
    ADMIN_PATHS_OVERRIDE_PUBLIC: List[str] = Field(default_factory=list)

    # Redirect targets
    LOGIN_PATH: str = "/login"
    SECTION_LOGIN_PATHS: Dict[str, str] = Field(default_factory=lambda: {"/sample/": "/sample/login"})
    FORBIDDEN_PATH: str = "/forbidden"
    CALLBACK_PARAM: str = "callbackUrl"
    LOGOUT_REDIRECT_PATH: str = "/catalog"

    # Shared store
    REDIS_URL: Optional[str] = Field(default=None)

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    LOGIN_RATE_LIMIT: str = "10/minute"

    # CORS
    ALLOWED_ORIGINS: List[str] = Field(default_factory=lambda: [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ])

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"
    }

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


# Settings singleton for the default application
settings = Settings()


def validate_required_settings(current: Optional[Settings] = None) -> bool:
    """Check production-relevant settings; warns but never fails startup"""
    current = current or settings
    if not current.is_production:
        return True

    missing = []

    if not current.SESSION_SECRET_KEY:
        missing.append("SESSION_SECRET_KEY")

    if not current.REDIS_URL:
        missing.append("REDIS_URL")

    if missing:
        logger.warning(f"Missing environment variables: {', '.join(missing)}")
        logger.warning("Session cookies are unsigned or CSRF tokens are process-local.")
        return False

    return True
