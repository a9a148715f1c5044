"""Logging setup: console + rotating file, and a context-prefixing adapter."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Any, MutableMapping

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_LOG_FILE = "powerbutton.log"


def setup_logging(
    log_level: str = "INFO",
    log_dir: str | None = "logs",
    max_bytes: int = 5 * 1024 * 1024,  # 5 MB
    backup_count: int = 3,
) -> None:
    """Route the root logger to the console and ``<log_dir>/powerbutton.log``.

    Calling it again (once config is loaded) replaces the earlier handlers.

    Args:
        log_level: One of DEBUG / INFO / WARNING / ERROR / CRITICAL.
        log_dir: Directory for the rotating log file, created if absent.
            ``None`` logs to the console only.
        max_bytes: Size at which the file rotates.
        backup_count: Rotated files kept.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    root = logging.getLogger()
    for old in root.handlers[:]:
        root.removeHandler(old)
        old.close()

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_dir is not None:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                os.path.join(log_dir, _LOG_FILE),
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        )

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level)


class ContextualLogger(logging.LoggerAdapter):
    """Prefixes ``[key=value]`` context to every message.

    Usage::

        log = ContextualLogger(logging.getLogger(__name__), control="short_pulse")
        log.info("Pulse started")  # => "[control=short_pulse] Pulse started"
    """

    def __init__(self, logger: logging.Logger, **context: Any) -> None:
        super().__init__(logger, context)
        self._prefix = " ".join(f"[{k}={v}]" for k, v in context.items())

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        return (f"{self._prefix} {msg}" if self._prefix else msg), kwargs
