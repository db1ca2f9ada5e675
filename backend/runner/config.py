"""
Application Configuration
Loads settings from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings
from typing import Optional
from pathlib import Path


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Browser Configuration
    headless: bool = True
    navigation_timeout_ms: int = 30000
    cleanup_timeout_seconds: float = 2.0

    # Crawl Timing (seconds)
    page_settle_seconds: float = 2.0
    pagination_settle_min: float = 1.0
    pagination_settle_max: float = 2.0
    retry_backoff_seconds: float = 3.0
    retry_max_attempts: int = Field(default=2, ge=1)
    detail_delay_min: float = 1.5
    detail_delay_max: float = 3.0
    region_delay_seconds: float = 1.0

    # Crawl Limits
    session_recycle_threshold: int = Field(default=5, ge=1)
    max_pages: int = Field(default=60, ge=1)
    sample_max_pages: int = Field(default=3, ge=1)
    sample_listing_limit: int = Field(default=5, ge=1)
    empty_page_tolerance: int = Field(default=1, ge=1)

    # Run Modes
    sample_mode: bool = False
    debug: bool = False

    # Output Configuration
    output_dir: str = "yaml"
    export_enabled: bool = True

    # Logging Configuration
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @property
    def page_limit(self) -> int:
        """Maximum pages explored per region, including page 1."""
        return self.sample_max_pages if self.sample_mode else self.max_pages

    @property
    def listing_limit(self) -> Optional[int]:
        """Maximum detail pages fetched per region (None = all)."""
        return self.sample_listing_limit if self.sample_mode else None

    # Paths
    @property
    def log_dir(self) -> Path:
        """Get the log directory path."""
        return Path(__file__).parent.parent.parent / "logs"

    @property
    def log_file(self) -> Path:
        """Get the log file path."""
        return self.log_dir / "scraper.log"

    class Config:
        # Only load .env if it exists to avoid permission errors
        env_file = ".env" if Path(".env").exists() else None
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Ignore extra environment variables


# Global settings instance
settings = Settings()
