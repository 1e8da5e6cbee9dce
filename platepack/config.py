"""Configuration management for platepack."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PLATEPACK_",
        extra="ignore",
    )

    # Build plate
    printer_model: Optional[str] = Field(default=None, description="Printer preset for the build plate size")
    plate_width: float = Field(default=256.0, gt=0, description="Build plate width, X axis (mm)")
    plate_depth: float = Field(default=256.0, gt=0, description="Build plate depth, Y axis (mm)")

    # Packing
    part_spacing: float = Field(default=0.0, ge=0, description="Gap added around every footprint (mm)")
    split_rule: str = Field(default="tiled", pattern="^(tiled|legacy)$", description="Leftover partition rule")
    sort_parts: bool = Field(default=True, description="Sort footprints largest first before packing")

    # Logging
    log_level: str = Field(default="WARNING", description="Log level for console output")


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure(settings: Optional[Settings]) -> None:
    """Override global settings. Passing None resets to environment defaults."""
    global _settings
    _settings = settings
