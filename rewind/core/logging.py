"""Logging setup for the rewind CLI and library.

Output goes to stderr so the CLI can keep stdout for the JSON summary.
Production emits one JSON object per record (python-json-logger).
"""
import logging
import logging.config
from typing import Any, Dict, Optional

from .settings import get_settings

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logging_config(service_name: Optional[str] = None) -> Dict[str, Any]:
    """dictConfig for the ``rewind`` logger tree."""
    settings = get_settings()

    if settings.environment == "production":
        service = f"{service_name} " if service_name else ""
        formatter = {
            "class": "pythonjsonlogger.jsonlogger.JsonFormatter",
            "format": f"%(asctime)s %(levelname)s {service}%(name)s %(message)s",
        }
        formatter_name = "json"
    else:
        service = f"[{service_name}] " if service_name else ""
        formatter = {
            "format": f"%(asctime)s {service}[%(levelname)s] %(name)s: %(message)s",
            "datefmt": DATE_FORMAT,
        }
        formatter_name = "console"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {formatter_name: formatter},
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": formatter_name,
                "stream": "ext://sys.stderr",
            }
        },
        "loggers": {
            "rewind": {"level": settings.log_level, "handlers": ["stderr"], "propagate": False},
        },
        "root": {"level": "WARNING", "handlers": ["stderr"]},
    }


def setup_logging(service_name: Optional[str] = None) -> None:
    """Configure logging once at process start."""
    logging.config.dictConfig(get_logging_config(service_name))


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
