"""Application configuration using pydantic-settings."""

import logging
import sys
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables
    prefixed with LV2HOST_ (e.g., LV2HOST_CONFIG_FILE).
    """

    config_file: str = "lv2host.yaml"
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"
    evaluate_on_load: bool = True

    model_config = SettingsConfigDict(env_prefix="LV2HOST_")

    @property
    def config_path(self) -> Path:
        """Path of the host configuration document."""
        return Path(self.config_file)


def setup_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
