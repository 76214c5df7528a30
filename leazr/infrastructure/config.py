"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://leazr:leazr_dev_password@db:5432/leazr"

    # Authentication
    leazr_api_key: str = "dev-api-key-change-in-production"

    # Variant generation
    variant_generation_concurrency: int = 4
    variant_generation_progress_every: int = 5

    # Logging
    log_level: str = "INFO"

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
