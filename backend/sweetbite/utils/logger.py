"""Logging configuration."""

import logging
import sys
from typing import Any, Optional

from pythonjsonlogger import jsonlogger

from sweetbite.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Noisy libraries only log warnings and above
QUIET_LOGGERS = ("uvicorn", "httpx", "httpcore")


class StoreJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that tags every record with the app and environment."""

    def __init__(self, *args: Any, app_name: str, environment: str, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.app_name = app_name
        self.environment = environment

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.setdefault("app", self.app_name)
        log_record.setdefault("environment", self.environment)


def build_formatter(settings: Settings) -> logging.Formatter:
    if settings.log_format == "json":
        return StoreJsonFormatter(
            LOG_FORMAT,
            datefmt=DATE_FORMAT,
            app_name=settings.app_name,
            environment=settings.environment,
        )
    return logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt=DATE_FORMAT,
    )


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure the root logger to write to stdout."""
    settings = settings or get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(build_formatter(settings))
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.info("Logging configured: level=%s, format=%s", settings.log_level, settings.log_format)
