"""
Configuration management for the oscbridge device core.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator


class DetectorConfig(BaseModel):
    """Length detector thresholds and history sizing."""

    max_samples: int = Field(default=8, ge=2, le=64)
    min_samples: int = Field(default=4, ge=2, le=64)
    absent_threshold: float = Field(default=0.01, ge=0.0, le=1.0)
    root_inside_threshold: float = Field(default=0.95, ge=0.0, le=1.0)
    min_length: float = Field(default=0.02, ge=0.0, le=1.0)
    penetrating_threshold: float = Field(default=0.99, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def check_sample_bounds(self) -> "DetectorConfig":
        if self.min_samples > self.max_samples:
            raise ValueError("min_samples cannot exceed max_samples")
        return self


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO")
    file_path: Optional[str] = Field(default=None)
    max_size: str = Field(default="10MB")
    backup_count: int = Field(default=5)


class Config(BaseModel):
    """Main configuration class."""

    detector: DetectorConfig = Field(default_factory=DetectorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load_from_env(cls, env_file: Optional[str] = None) -> "Config":
        """Load configuration from environment variables."""
        if env_file:
            load_dotenv(env_file)
        else:
            # Try to load from .env file in current directory
            env_path = Path(".env")
            if env_path.exists():
                load_dotenv(env_path)

        defaults = DetectorConfig()
        detector = DetectorConfig(
            max_samples=int(os.getenv("OSCBRIDGE_MAX_SAMPLES", str(defaults.max_samples))),
            min_samples=int(os.getenv("OSCBRIDGE_MIN_SAMPLES", str(defaults.min_samples))),
            absent_threshold=float(
                os.getenv("OSCBRIDGE_ABSENT_THRESHOLD", str(defaults.absent_threshold))
            ),
            root_inside_threshold=float(
                os.getenv("OSCBRIDGE_ROOT_INSIDE_THRESHOLD", str(defaults.root_inside_threshold))
            ),
            min_length=float(os.getenv("OSCBRIDGE_MIN_LENGTH", str(defaults.min_length))),
            penetrating_threshold=float(
                os.getenv("OSCBRIDGE_PENETRATING_THRESHOLD", str(defaults.penetrating_threshold))
            )
        )

        logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            file_path=os.getenv("LOG_FILE_PATH") or None,
            max_size=os.getenv("LOG_MAX_SIZE", "10MB"),
            backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5"))
        )

        return cls(detector=detector, logging=logging)
