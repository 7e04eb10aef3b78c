"""
Structured logging configuration
JSON records for production and pipelines, plain text for local runs.
Records always go to stderr; stdout is reserved for the audit document.
"""
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from core.config import settings

QUIET_LOGGERS = ("aiohttp", "asyncio", "playwright")


class AuditJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter stamping app, environment and schema version on every record"""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["app"] = settings.app_name
        log_record["environment"] = settings.environment
        log_record["schema_version"] = settings.schema_version
        log_record["level"] = record.levelname
        log_record["logger"] = record.name

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure the root logger

    Args:
        level: Overrides LOG_LEVEL (e.g. the CLI --verbose flag)
        log_format: "json" or "text"; overrides LOG_FORMAT
    """
    level = (level or settings.log_level).upper()
    log_format = log_format or settings.log_format

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level))
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    if log_format == "json":
        handler.setFormatter(AuditJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s", timestamp=True))
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-7s [%(name)s] %(message)s", datefmt="%H:%M:%S")
        )
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class LoggerAdapter(logging.LoggerAdapter):
    """Adapter merging bound context (domain, url, ...) into each record's extra"""

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs

    def with_context(self, **context) -> "LoggerAdapter":
        """Child adapter with additional bound context"""
        return LoggerAdapter(self.logger, {**self.extra, **context})


def get_logger(name: str, **context) -> LoggerAdapter:
    """
    Get a logger bound to optional context

    Example:
        logger = get_logger(__name__, domain="d0")
        logger.with_context(url=url).info("Lightweight fetch succeeded")
    """
    return LoggerAdapter(logging.getLogger(name), context)


setup_logging()
