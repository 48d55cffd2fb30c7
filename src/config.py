"""Application configuration using pydantic-settings pattern."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Meeting Markdown Export"
    app_version: str = "0.1.0"
    app_env: str = Field(default="development")
    log_level: str = Field(default="INFO")

    # Database (Turso)
    turso_database_url: str | None = Field(default=None)
    turso_auth_token: str | None = Field(default=None)

    # Attachments
    attachments_dir: str = Field(
        default="files/attachments",
        description="Directory where exported files are written",
    )

    # Rendering
    default_locale: str = Field(default="en")
    default_time_zone: str = Field(
        default="UTC",
        description="Time zone applied to meeting start times for users without one",
    )

    # Background jobs
    run_jobs_inline: bool = Field(
        default=False,
        description="Run export jobs in the request instead of the scheduler",
    )
    run_plugin_migrations: bool = Field(
        default=True,
        description="Create the meeting_markdown_exports table on startup",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
