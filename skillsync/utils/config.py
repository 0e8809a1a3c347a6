"""
Configuration management for SkillSync.

Uses Pydantic Settings for type-safe configuration with environment variable support.
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Base paths
ROOT_DIR = Path(__file__).parent.parent.parent
PACKAGE_DIR = ROOT_DIR / "skillsync"
DATA_DIR = ROOT_DIR / "data"


class AnalysisSettings(BaseSettings):
    """AI analysis provider configuration."""

    model_config = SettingsConfigDict(env_prefix="ANALYSIS_")

    # No base URL means the offline provider is used
    base_url: Optional[str] = None
    endpoint: str = "/api/job-seeker/skill-gap-analysis"
    timeout_seconds: float = 30.0
    api_key: Optional[str] = None

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        """Normalize the base URL so endpoints can be appended."""
        if v is None:
            return None
        v = v.strip().rstrip("/")
        return v or None

    @property
    def url(self) -> Optional[str]:
        """Full URL of the analysis endpoint."""
        if not self.base_url:
            return None
        return f"{self.base_url}/{self.endpoint.lstrip('/')}"


class ExportSettings(BaseSettings):
    """CSV export configuration."""

    model_config = SettingsConfigDict(env_prefix="EXPORT_")

    output_directory: Path = DATA_DIR / "exports"
    encoding: str = "utf-8"


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"
    file_path: Path = ROOT_DIR / "logs" / "skillsync.log"
    rotation: str = "10 MB"
    retention: str = "30 days"
    console_output: bool = True
    file_output: bool = True


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    name: str = "SkillSync"
    version: str = "0.1.0"
    description: str = "Match and application lifecycle model for SkillSync"
    debug: bool = False

    # Environment
    environment: Literal["development", "production", "testing"] = "development"

    # Nested settings
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# Global settings instance (singleton pattern)
_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings


def reload_settings() -> AppSettings:
    """Force reload settings from environment."""
    global _settings
    _settings = AppSettings()
    return _settings
