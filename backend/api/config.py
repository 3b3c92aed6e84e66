"""
Application Configuration
Loads settings from environment variables with sensible defaults.
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
from typing import List, Optional
from pathlib import Path


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = Field(3000, validation_alias=AliasChoices("api_port", "port"))

    # CORS Configuration
    cors_origins: List[str] = ["*"]

    # Browser Configuration
    browser_executable_path: Optional[str] = "/usr/bin/google-chrome-stable"
    browser_headless: bool = True
    browser_args: List[str] = [
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-dev-shm-usage",
    ]
    browser_user_agent: str = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36"
    browser_launch_timeout: float = 30.0

    # Scraper Configuration (seconds)
    navigation_timeout: float = 30.0
    card_wait_timeout: float = 10.0
    source_timeout: float = 45.0
    request_deadline: Optional[float] = None
    max_concurrent_sources: int = 1

    # Logging Configuration
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Paths
    @property
    def log_dir(self) -> Path:
        """Get the log directory path."""
        return Path(__file__).parent.parent.parent / "logs"

    @property
    def log_file(self) -> Path:
        """Get the log file path."""
        return self.log_dir / "backend.log"

    class Config:
        # Only load .env if it exists to avoid permission errors
        env_file = ".env" if __import__("pathlib").Path(".env").exists() else None
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Ignore extra environment variables


# Global settings instance
settings = Settings()
