"""Configuration loading for the key finder libraries.

Reads environment variables into a typed settings object using Pydantic v2.

Env variables:
- KF_LOG_LEVEL (default: INFO)
- KF_ENV (default: development)
- KF_OTEL_ENDPOINT (optional)
- KF_SILENCE_THRESHOLD (default: 1e-4)
- KF_DOWNSAMPLE_FACTOR (default: 1)
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field


class Settings(BaseModel):
    KF_LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    KF_ENV: str = Field(default="development", description="Environment name")
    KF_OTEL_ENDPOINT: Optional[str] = Field(
        default=None, description="OTLP HTTP endpoint (e.g., http://localhost:4318)"
    )

    KF_SILENCE_THRESHOLD: float = Field(
        default=1e-4, ge=0.0, description="Peak amplitude below which audio is treated as silence"
    )
    KF_DOWNSAMPLE_FACTOR: int = Field(
        default=1, ge=1, description="Integer decimation factor applied before key detection"
    )

    class Config:
        extra = "ignore"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment and memoize.

    Raises:
        pydantic.ValidationError: if a variable cannot be coerced to its type.
    """

    env = {
        "KF_LOG_LEVEL": os.getenv("KF_LOG_LEVEL", "INFO"),
        "KF_ENV": os.getenv("KF_ENV", "development"),
        "KF_OTEL_ENDPOINT": os.getenv("KF_OTEL_ENDPOINT"),
        "KF_SILENCE_THRESHOLD": os.getenv("KF_SILENCE_THRESHOLD", "1e-4"),
        "KF_DOWNSAMPLE_FACTOR": os.getenv("KF_DOWNSAMPLE_FACTOR", "1"),
    }

    return Settings.model_validate(env)


__all__ = ["Settings", "get_settings"]
