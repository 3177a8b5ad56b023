"""Analyzer pod configuration and initialization."""

import os

from dotenv import load_dotenv

from kfcore.config import get_settings

load_dotenv()


class Config:
    """Configuration for analyzer pod."""

    # Service
    SERVICE_NAME = "analyzer"
    SERVICE_VERSION = "0.1.0"
    SERVICE_PORT = int(os.getenv("ANALYZER_PORT", 8001))
    ENV = os.getenv("ENV", "dev")

    # Limits
    MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE", 10 * 1024 * 1024))  # 10 MB
    MAX_AUDIO_DURATION = int(os.getenv("MAX_AUDIO_DURATION", 600))  # 10 minutes

    # Preprocessing before key detection
    DOWNSAMPLE_FACTOR = get_settings().KF_DOWNSAMPLE_FACTOR

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO" if ENV == "prod" else "DEBUG")


__all__ = ["Config"]
