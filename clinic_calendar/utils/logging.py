"""Logging configuration."""

import logging
import os
import sys

from pydantic import BaseModel

from clinic_calendar.config import CalendarConfig


class LogConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_calendar_config(cls, config: CalendarConfig) -> "LogConfig":
        """Take the level from the calendar configuration."""
        return cls(level=config.log_level)


def setup_logging(config: LogConfig | None = None) -> None:
    """Set up logging for the calendar service and CLI.

    Args:
        config: Logging settings, by default derived from CalendarConfig.from_env()
    """
    if config is None:
        config = LogConfig.from_calendar_config(CalendarConfig.from_env())

    logging.basicConfig(
        level=getattr(logging, config.level.upper()),
        format=config.format,
        datefmt=config.date_format,
        stream=sys.stdout,
        force=True,  # Override any existing configuration
    )

    # Backend round-trips are logged by the client itself
    for noisy in ("httpx", "httpcore", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str, level: str | None = None) -> logging.Logger:
    """Get a logger for a specific module.

    Args:
        name: Module name (typically __name__)
        level: Optional explicit level, falls back to LOG_LEVEL

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    log_level = level if level else os.getenv("LOG_LEVEL", "INFO")
    logger.setLevel(log_level.upper())

    return logger
