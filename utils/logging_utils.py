"""
Logging setup shared by the pool-time service and its helpers.

Usage
-----
At process start:

    from utils.logging_utils import setup_logging

    setup_logging(level="INFO", job_name="pooltime_api")

Inside a module:

    from utils.logging_utils import get_tagged_logger

    logger = get_tagged_logger(__name__, tag="engine")
    logger.info("Selected best pool hour", extra={"best_hour": 10, "score": 100})

which prints

    2025-07-01 09:00:00 INFO    [pooltime_api:engine] Selected best pool hour best_hour=10 score=100
"""

from __future__ import annotations

import logging
import logging.config
from typing import Any, Mapping, Optional


# Logs emitted before setup_logging() still get timestamps and levels.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-7s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(job_name)s:%(tag)s] %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_JOB_NAME = "pooltime"

# Attributes every LogRecord has; anything else arrived through `extra=`.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "tag", "job_name", "taskName"}

_CONFIGURED: bool = False


class RecordContextFilter(logging.Filter):
    """Stamp `job_name` and `tag` on records that lack them."""

    def __init__(self, job_name: Optional[str] = None) -> None:
        super().__init__()
        self.job_name = job_name or "-"

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "job_name"):
            record.job_name = self.job_name
        if not hasattr(record, "tag"):
            # uvicorn, requests_cache and friends log through plain loggers
            record.tag = record.name.rsplit(".", 1)[-1] if record.name else "-"
        return True


class ExtraFieldsFormatter(logging.Formatter):
    """Append `extra=` fields to the message as sorted key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}
        if not extras:
            return line
        fields = " ".join(f"{key}={extras[key]}" for key in sorted(extras))
        first, sep, rest = line.partition("\n")
        return f"{first} {fields}{sep}{rest}"


def build_logging_config(
    *,
    level: str | int = "INFO",
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    job_name: Optional[str] = DEFAULT_JOB_NAME,
) -> Mapping[str, Any]:
    """dictConfig mapping with a single stdout console handler."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "context": {"()": RecordContextFilter, "job_name": job_name},
        },
        "formatters": {
            "pooltime": {
                "()": ExtraFieldsFormatter,
                "fmt": log_format,
                "datefmt": date_format,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "pooltime",
                "filters": ["context"],
                "stream": "ext://sys.stdout",
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
    }


def setup_logging(
    *,
    level: str | int = "INFO",
    job_name: Optional[str] = DEFAULT_JOB_NAME,
    override_existing: bool = False,
) -> None:
    """Configure process logging once; later calls are no-ops unless `override_existing`."""
    global _CONFIGURED

    if _CONFIGURED and not override_existing:
        return
    logging.config.dictConfig(build_logging_config(level=level, job_name=job_name))
    _CONFIGURED = True


class _TaggedAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_tagged_logger(name: str, *, tag: Optional[str] = None) -> logging.LoggerAdapter:
    """
    LoggerAdapter whose records carry `tag`, by default the last segment of `name`.

    Caller `extra=` fields are kept alongside the tag.
    """
    return _TaggedAdapter(logging.getLogger(name), {"tag": tag or name.rsplit(".", 1)[-1]})
