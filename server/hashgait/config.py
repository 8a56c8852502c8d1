"""HashGait configuration module."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Server
    server_host: str = "0.0.0.0"
    server_port: int = 3000
    debug: bool = False
    app_version: str = "1.0.0"
    cors_origins: list[str] = ["*"]

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # "json" or "console"

    # Hash backend
    history_max_size: int = 5
    backend_url: str = "http://localhost:3000"
    backend_timeout_seconds: float = 10.0

    # Capture & matching
    capture_window_seconds: float = 10.0
    match_threshold: int = 70
    device_id: str = "device_001"

    class Config:
        env_prefix = "HASHGAIT_"
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
