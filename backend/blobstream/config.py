"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Scan defaults for API requests that omit them
    default_threshold: float = 0.0
    default_min_pixels: int = 0

    # Largest grid (width * height) the HTTP API will scan
    max_grid_cells: int = 4_000_000

    model_config = SettingsConfigDict(
        env_prefix="BLOBSTREAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
