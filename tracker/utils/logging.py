"""
Structured logging utilities for the time tracker.

Centralizes logging configuration so the HTTP layer, the stores and the
CLI stay consistent. Standard library logging is used throughout; the
environment picks the output backend:

- ``local``: rich console output at DEBUG
- ``dev``: JSON lines at DEBUG
- ``prod``: JSON lines at INFO
- anything else: logging disabled

Usage:
    from tracker.utils.logging import configure_for_env, get_logger

    configure_for_env("local")
    log = get_logger(__name__)
    log.info("user created", extra={"user_id": 7})
"""

from __future__ import annotations

import json
import logging
import logging.config
from typing import Any, Dict, Optional, Tuple

# Attributes every LogRecord carries; anything else arrived through `extra=`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "asctime", "extra"}

ENV_LOCAL = "local"
ENV_DEV = "dev"
ENV_PROD = "prod"

BACKEND_CONSOLE = "console"
BACKEND_JSON = "json"
BACKEND_RICH = "rich"
BACKEND_OFF = "off"

# environment -> (backend, default level)
_ENV_BACKENDS: Dict[str, Tuple[str, str]] = {
    ENV_LOCAL: (BACKEND_RICH, "DEBUG"),
    ENV_DEV: (BACKEND_JSON, "DEBUG"),
    ENV_PROD: (BACKEND_JSON, "INFO"),
}


def _json_formatter(record: logging.LogRecord) -> str:
    """Render a log record as a single JSON line."""
    payload: Dict[str, Any] = {
        "time": logging.Formatter().formatTime(record, "%Y-%m-%dT%H:%M:%S"),
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
    }
    payload.update(
        (key, value)
        for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    )
    nested = getattr(record, "extra", None)
    if isinstance(nested, dict):
        payload.update(nested)
    if record.exc_info:
        payload["exc_info"] = logging.Formatter().formatException(record.exc_info)
    if record.stack_info:
        payload["stack_info"] = record.stack_info
    return json.dumps(payload, default=str, ensure_ascii=False)


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with `extra=` fields inlined."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        return _json_formatter(record)


def _handler_config(backend: str, level: str) -> Dict[str, Any]:
    if backend == BACKEND_RICH:
        return {
            "class": "rich.logging.RichHandler",
            "level": level,
            "rich_tracebacks": True,
            "show_path": False,
        }
    if backend == BACKEND_OFF:
        return {"class": "logging.NullHandler"}
    return {
        "class": "logging.StreamHandler",
        "formatter": BACKEND_JSON if backend == BACKEND_JSON else BACKEND_CONSOLE,
        "level": level,
        "stream": "ext://sys.stdout",
    }


def configure_logging(level: str = "INFO", backend: str = BACKEND_CONSOLE) -> None:
    """
    Install a single root handler.

    Parameters
    ----------
    level : str
        Logging level name (e.g., "DEBUG", "INFO", "WARNING").
    backend : str
        One of ``console`` (plain text), ``json`` (JSON lines), ``rich``
        (colored console) or ``off`` (discard everything).
    """
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                BACKEND_CONSOLE: {
                    "format": "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
                BACKEND_JSON: {"()": JsonFormatter},
            },
            "handlers": {"default": _handler_config(backend, level)},
            "root": {
                "handlers": ["default"],
                "level": "CRITICAL" if backend == BACKEND_OFF else level,
            },
        }
    )


def configure_for_env(env: str, level: Optional[str] = None) -> None:
    """
    Pick the logging backend from the application environment.

    Unknown environments (tests included) get logging switched off. An
    explicit ``level`` overrides the environment's default level.
    """
    backend, default_level = _ENV_BACKENDS.get(env, (BACKEND_OFF, "CRITICAL"))
    configure_logging(level=level or default_level, backend=backend)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Module logger; the root logger when ``name`` is None."""
    return logging.getLogger(name)


__all__ = [
    "BACKEND_CONSOLE",
    "BACKEND_JSON",
    "BACKEND_OFF",
    "BACKEND_RICH",
    "JsonFormatter",
    "configure_for_env",
    "configure_logging",
    "get_logger",
]
