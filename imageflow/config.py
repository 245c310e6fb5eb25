# imageflow/config.py
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_CACHE_MAX_AGE,
    DEFAULT_CLIENT_METRICS_COOKIE,
    DEFAULT_ENGINE_PREFERENCE,
    GIF_SCAN_CHUNK_SIZE,
)
from .enums import LogLevel


class Settings(BaseSettings):
    environment: str = "development"

    # Engine selection
    image_engine: Optional[str] = Field(
        default=None,
        description="Explicit image engine name (pillow, opencv). Empty means auto-detect.",
    )

    # Can be set via IMAGEFLOW_ENGINE_PREFERENCE as comma-separated string
    engine_preference: Union[str, List[str]] = Field(
        default=list(DEFAULT_ENGINE_PREFERENCE),
        description="Engines probed in order when no explicit engine is configured.",
    )

    @property
    def engine_preference_list(self) -> List[str]:
        """Convert engine_preference to a list of lowercase engine names"""
        if isinstance(self.engine_preference, str):
            return [
                name.strip().lower()
                for name in self.engine_preference.split(",")
                if name.strip()
            ]
        return [name.lower() for name in self.engine_preference]

    # Image processing
    default_compression_quality: Optional[int] = Field(
        default=None,
        ge=0,
        le=100,
        description="Compression quality applied to served images (optional)",
    )
    gif_scan_chunk_size: int = Field(
        default=GIF_SCAN_CHUNK_SIZE,
        ge=1024,
        le=10 * 1024 * 1024,
        description="Bytes read per chunk when scanning GIF files for animation frames",
    )

    # HTTP surface
    api_host: str = "0.0.0.0"
    api_port: int = Field(default=8000, ge=1, le=65535)
    api_reload: bool = False
    images_directory: str = Field(
        default="./images", description="Directory served by the image endpoint"
    )
    client_metrics_cookie: str = Field(
        default=DEFAULT_CLIENT_METRICS_COOKIE,
        description="Cookie holding the 'width,height,speed' client metrics",
    )
    cache_max_age: int = Field(
        default=DEFAULT_CACHE_MAX_AGE,
        ge=0,
        description="Cache-Control max-age for transformed images, in seconds",
    )

    @property
    def images_path(self) -> Path:
        """Get images directory as Path object"""
        return Path(self.images_directory)

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_file: Optional[str] = Field(
        default=None, description="Log file path (optional)"
    )
    log_rotation: str = Field(
        default="10 MB", description="Rotation policy for the log file sink"
    )

    @field_validator("image_engine")
    @classmethod
    def validate_image_engine(cls, v: Optional[str]) -> Optional[str]:
        """Normalize engine names; blank values mean auto-detect"""
        if v is None or not v.strip():
            return None
        return v.strip().lower()

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v) -> LogLevel:
        """Validate log level is one of the allowed values"""
        if isinstance(v, LogLevel):
            return v
        allowed_levels = LogLevel.__members__.keys()
        v_upper = str(v).upper()
        if v_upper not in allowed_levels:
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of: {', '.join(allowed_levels)}"
            )
        return LogLevel[v_upper]

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is one of the allowed values"""
        allowed_envs = ["development", "staging", "production"]
        v_lower = v.lower()
        if v_lower not in allowed_envs:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {', '.join(allowed_envs)}"
            )
        return v_lower

    model_config = SettingsConfigDict(
        env_prefix="IMAGEFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return the settings loaded from the environment (cached)."""
    return Settings()
