"""Logging setup for the upload service: console plus a time-rotated file."""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, Optional

from .config import Settings, get_settings

_configured = False

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s %(funcName)s:%(lineno)d - %(message)s"

# Per-request connection chatter from requests would drown the stage logs.
QUIET_LOGGERS = ("urllib3",)


def build_logging_config(settings: Settings, level: str) -> Dict[str, Any]:
    log_path = Path(settings.log_dir or "./logs") / settings.log_file
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {"format": LOG_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "detailed",
            },
            "file": {
                "class": "logging.handlers.TimedRotatingFileHandler",
                "filename": str(log_path),
                "when": settings.log_rotate_when,
                "backupCount": settings.log_backup_count,
                "encoding": "utf-8",
                "formatter": "detailed",
            },
        },
        "loggers": {name: {"level": "WARNING"} for name in QUIET_LOGGERS},
        "root": {"handlers": ["console", "file"], "level": level},
    }


def setup_logging(
    force: bool = False, log_level: Optional[str] = None, settings: Optional[Settings] = None
) -> None:
    """Configure root logging from ``Settings``.

    Idempotent unless ``force=True``; ``log_level`` overrides ``settings.log_level``.
    """

    global _configured
    if _configured and not force:
        return

    settings = settings or get_settings()
    Path(settings.log_dir or "./logs").mkdir(parents=True, exist_ok=True)

    level = (log_level or settings.log_level or "INFO").upper()
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"

    logging.config.dictConfig(build_logging_config(settings, level))
    _configured = True


__all__ = ["setup_logging", "build_logging_config"]
