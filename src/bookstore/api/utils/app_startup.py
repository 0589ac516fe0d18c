"""Loguru setup for the bookstore service.

The console always gets human-readable lines. The optional file sink writes
either the same lines or one compact JSON object per record, carrying the
request id bound by the request middleware.
"""

import json
import logging
import sys
from pathlib import Path

from loguru import logger

from src.bookstore.runtime.config.config_data import ConfigData
from src.bookstore.runtime.context import get_config

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> "
    "<level>{level: <8}</level> "
    "<magenta>{extra[request_id]}</magenta> "
    "<cyan>{extra[logger_name]}</cyan>:<cyan>{line}</cyan> "
    "<level>{message}</level>"
)

# Keys every record carries; anything else bound on the record is a field
_BASE_EXTRA = ("request_id", "logger_name")

_LOGGER_LEVELS = {
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "uvicorn": logging.INFO,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.CRITICAL,
}


def _add_defaults(record) -> None:
    record["extra"].setdefault("request_id", "-")
    record["extra"].setdefault("logger_name", record["name"])


def _json_format(record) -> str:
    entry = {
        "time": record["time"].isoformat(),
        "level": record["level"].name,
        "request_id": record["extra"]["request_id"],
        "logger": record["extra"]["logger_name"],
        "message": record["message"],
    }
    fields = {k: v for k, v in record["extra"].items() if k not in _BASE_EXTRA}
    if fields:
        entry["fields"] = fields
    if record["exception"] is not None:
        entry["exception"] = repr(record["exception"].value)

    # Stored on the record so loguru does not re-format the JSON braces
    record["extra"]["_json"] = json.dumps(entry, default=str)
    return "{extra[_json]}\n"


def _is_duplicate(record: logging.LogRecord) -> bool:
    """Uvicorn lines already covered by the request logging middleware."""
    if record.name == "uvicorn.access":
        return True
    return record.name == "uvicorn.error" and record.levelno >= logging.ERROR


class InterceptHandler(logging.Handler):
    """Forward stdlib ``logging`` records (uvicorn, SQLAlchemy) to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        if _is_duplicate(record):
            return

        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Report the frame that called logging, not the logging module itself
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).bind(
            logger_name=record.name
        ).log(level, record.getMessage())


def configure_logging(config: ConfigData | None = None) -> None:
    """Install the loguru sinks and route stdlib logging through them."""
    config = config or get_config()
    log_config = config.logging
    verbose_tracebacks = config.app.environment != "production"

    logger.remove()
    logger.configure(patcher=_add_defaults)

    logger.add(
        sys.stderr,
        level=log_config.level,
        format=CONSOLE_FORMAT,
        colorize=True,
        backtrace=verbose_tracebacks,
        diagnose=verbose_tracebacks,
    )

    if log_config.file:
        path = Path(log_config.file)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            path,
            level=log_config.level,
            format=_json_format if log_config.format == "json" else CONSOLE_FORMAT,
            colorize=False,
            rotation=f"{log_config.max_size_mb} MB",
            retention=log_config.backup_count,
            enqueue=True,
            backtrace=verbose_tracebacks,
            diagnose=verbose_tracebacks,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in list(logging.root.manager.loggerDict):
        std_logger = logging.getLogger(name)
        std_logger.handlers = []
        std_logger.propagate = True
    for name, level in _LOGGER_LEVELS.items():
        logging.getLogger(name).setLevel(level)

    logger.bind(
        log_level=log_config.level,
        log_format=log_config.format,
        log_file=log_config.file or None,
    ).info("Logging configured for {} environment", config.app.environment)
