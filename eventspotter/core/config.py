from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings with type-safe configuration management."""

    # Database Configuration
    DATABASE_URL: str = "postgresql+asyncpg://postgres:postgres@db:5432/eventspotter"

    # Redis Configuration
    REDIS_URL: str = "redis://redis:6379/0"
    CACHE_ENABLED: bool = True
    FACET_CACHE_TTL: int = 300

    # Security Configuration
    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    ALGORITHM: str = "HS256"
    RATE_LIMIT_ENABLED: bool = True

    # CORS Configuration
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:8000"

    # Catalog limits (0 disables the cap)
    MAX_EVENTS: int = 500
    MAX_SAVED_EVENTS: int = 500
    DEFAULT_PAGE_LIMIT: int = 10
    MAX_PAGE_LIMIT: int = 100

    # Environment
    ENVIRONMENT: str = "development"

    # Logging (LOG_LEVEL defaults to DEBUG in development, INFO elsewhere)
    LOG_LEVEL: Optional[str] = None
    LOG_FILE: str = "logs/eventspotter.log"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def allowed_origins_list(self) -> List[str]:
        """Convert comma-separated ALLOWED_ORIGINS string to list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]


# Create a single instance to be imported throughout the app
settings = Settings()
