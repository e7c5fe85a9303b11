"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    toolpath_env: str = "development"
    toolpath_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Unit context used when a request does not set its own
    default_dpi: float = 96.0
    default_font_size: float = 16.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
