"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite:///./event_portal.db"
    CORS_ORIGINS: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"
    DEFAULT_TIMEZONE: str = "UTC"  # IANA tz applied to naive timestamps

    class Config:
        env_file = ".env"


settings = Settings()
