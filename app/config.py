"""Application configuration."""
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_env: str = "production"
    database_url: str

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = "app.log"

    # CORS (comma-separated origins)
    cors_origins: str = "*"

    # Upper bound for the `limit` query parameter; unset means no cap
    max_page_size: Optional[int] = None

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
