import json
import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # API settings
    PROJECT_NAME: str = "Storefront API"
    VERSION: str = "0.1.0"
    API_PREFIX: str = "/api"
    DEBUG: bool = False

    # CORS settings, comma-separated or a JSON array
    BACKEND_CORS_ORIGINS: str = "http://localhost:3000"

    # Database settings
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = "storefront"
    MONGODB_POOL_SIZE: int = 10
    MONGODB_TIMEOUT_MS: int = 5000
    MONGODB_CONNECT_RETRIES: int = 3

    # Cache settings
    REDIS_HOST: Optional[str] = None
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: Optional[str] = None
    REDIS_PREFIX: str = "storefront"
    CART_CACHE_TTL: int = 3600
    USER_DETAILS_CACHE_TTL: int = 3600

    # Authentication settings
    JWT_SECRET_KEY: str = "CHANGEME_IN_PRODUCTION"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Upload settings
    MEDIA_ROOT: str = "./media"
    MEDIA_URL: str = "/uploads"
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024

    # Catalogue settings
    CATEGORY_PAGE_SIZE: int = 12

    # Logging settings
    LOG_LEVEL: str = "INFO"
    ENABLE_STRUCTURED_LOGGING: bool = True

    # Gateway settings
    STOREFRONT_API_URL: str = "http://localhost:8000"
    GATEWAY_PAGE_SIZE: int = 10
    GATEWAY_TIMEOUT: float = 10.0
    AUTH_COOKIE_NAME: str = "token"

    @field_validator("STOREFRONT_API_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Upstream URLs are joined with absolute paths."""
        return v.rstrip("/")

    @field_validator("CATEGORY_PAGE_SIZE", "GATEWAY_PAGE_SIZE")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("page size must be positive")
        return v

    def get_cors_origins(self) -> List[str]:
        """Parse BACKEND_CORS_ORIGINS into a list of origins."""
        if not self.BACKEND_CORS_ORIGINS:
            return ["http://localhost:3000"]

        try:
            origins = json.loads(self.BACKEND_CORS_ORIGINS)
            if isinstance(origins, list):
                return [str(origin) for origin in origins]
        except (json.JSONDecodeError, ValueError):
            pass

        return [origin.strip() for origin in self.BACKEND_CORS_ORIGINS.split(",") if origin.strip()]


def load_env_file(env_file: str = ".env") -> None:
    """
    Load environment variables from specified .env file.

    Args:
        env_file: Path to the .env file. Defaults to ".env".
    """
    env_path = os.path.join(os.getcwd(), env_file)
    if os.path.exists(env_path):
        load_dotenv(env_path)


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings with caching for efficiency.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
