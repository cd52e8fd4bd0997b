"""
Logging.

structlog on top of the standard logging module, configured from
config/settings/logging.yaml. Records go to stderr (so command output on
stdout stays clean) and, when enabled, to a rotating JSONL file.

Every record carries timestamp, level, logger, event, func_name and
lineno. Structured fields are passed through ``extra`` or bound with
structlog contextvars; the CLI binds ``source="cli"``.

Usage:
    from leaflet.core.logging import get_logger, setup_logging

    setup_logging(level="DEBUG", format_type="console")
    logger = get_logger(__name__)
    logger.info("Note saved", extra={"note_id": note.id})
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

import structlog
from structlog.typing import Processor

from leaflet.core.config import find_project_root, load_yaml_config

VALID_SOURCES = frozenset({"cli", "repository", "store", "cache", "remote", "internal", "tests"})

_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite")

_logging_config: dict[str, Any] | None = None


def _load_logging_config() -> dict[str, Any]:
    """Read logging.yaml once per process."""
    global _logging_config
    if _logging_config is None:
        _logging_config = load_yaml_config("logging.yaml")
    return _logging_config


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _formatter(renderer: Processor, pre_chain: list[Processor]) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)


def _file_handler(file_config: dict[str, Any], formatter: logging.Formatter) -> logging.Handler:
    """Rotating JSONL handler; relative paths are resolved against the project root."""
    log_path = find_project_root() / file_config["path"]
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=file_config["max_bytes"],
        backupCount=file_config["backup_count"],
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(level: str | None = None, format_type: str | None = None) -> None:
    """
    Configure logging from logging.yaml.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        level: Overrides the configured level (DEBUG, INFO, WARNING, ...)
        format_type: Overrides the console format, 'json' or 'console'.
            The log file is always JSON.
    """
    config = _load_logging_config()
    handlers = config["handlers"]
    log_level = getattr(logging, (level or config["level"]).upper())

    processors = _shared_processors()
    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = _formatter(structlog.processors.JSONRenderer(), processors)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if handlers["console"]["enabled"]:
        console_handler = logging.StreamHandler(sys.stderr)
        if (format_type or config["format"]) == "console":
            console_handler.setFormatter(
                _formatter(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()), processors)
            )
        else:
            console_handler.setFormatter(json_formatter)
        root_logger.addHandler(console_handler)

    if handlers["file"]["enabled"]:
        root_logger.addHandler(_file_handler(handlers["file"], json_formatter))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **fields: Any) -> None:
    """
    Log a record tagged with an explicit ``source`` field.

    Raises:
        ValueError: If source is not one of VALID_SOURCES
        AttributeError: If level is not a logger method
    """
    if source not in VALID_SOURCES:
        raise ValueError(f"Unknown log source: {source!r}")
    getattr(logger, level.lower())(message, source=source, **fields)
