"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Attributes:
        app_name: Name of the application.
        debug: Enable debug mode.
        database_url: Database connection URL.
        secret_key: Secret key for JWT signing.
        access_token_expire_minutes: JWT access token expiration time.
        refresh_token_expire_days: JWT refresh token expiration time.
        algorithm: JWT signing algorithm.
        max_upload_bytes: Largest spreadsheet accepted by the import routes.
        import_batch_policy: How accepted drills are written ("atomic" or "per_row").
        import_chunk_size: Rows per insert chunk under the per-row policy.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Practice Planner"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./practice_planner.db"

    # Security
    secret_key: str = "change-this-to-a-secure-secret-key"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    refresh_token_expire_days: int = 7

    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Drill import
    max_upload_bytes: int = 10 * 1024 * 1024
    import_batch_policy: Literal["atomic", "per_row"] = "per_row"
    import_chunk_size: int = 100


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings.
    """
    return Settings()
