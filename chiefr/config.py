"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from CHIEFR_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CHIEFR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Maintainers file and repository
    maintainers_file: str = ".maintainers.ini"
    repo_path: str = "."
    diff_context_lines: int | None = Field(default=None, ge=0)  # None: whole file

    # GitHub
    github_api_url: str = "https://api.github.com"
    github_token: SecretStr = Field(default=SecretStr(""))
    http_timeout: float = 30.0

    # Observability
    log_level: str = "WARNING"
    log_format: Literal["console", "json"] = "console"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
