"""SDKLogger — process-wide structured logger for the SDK and the bot.

Every record is rendered as one JSON line and written to stdout and to a
size-rotated ``telegram.log`` file.  Bot tokens embedded in Bot API URLs
(``/bot123456:ABC.../``) are masked before a record reaches any handler,
which matters because ``requests`` exceptions carry the full request URL.

Environment:
    TELEGRAM_LOG_DIR: directory for ``telegram.log`` (default ``logs``).
    LOG_LEVEL: level name such as ``DEBUG`` or ``WARNING`` (default ``INFO``).
"""

import json
import logging
import os
import re
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List, Optional

_TOKEN_PATTERN = re.compile(r"bot\d+:[A-Za-z0-9_-]+")
_TOKEN_MASK = "bot<redacted>"

_RECORD_ATTRS: frozenset = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "asctime"}


def redact_token(text: str) -> str:
    """Replace every ``bot<id>:<secret>`` fragment of *text* with a mask."""
    return _TOKEN_PATTERN.sub(_TOKEN_MASK, text)


class _RedactTokenFilter(logging.Filter):
    """Mask bot tokens in the message, the ``extra`` fields and any exception text."""

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            # Leave mismatched %-arguments for the handler to report.
            message = None
        if message is not None:
            record.msg = redact_token(message)
            record.args = None

        for key, value in list(record.__dict__.items()):
            if key not in _RECORD_ATTRS and isinstance(value, str):
                setattr(record, key, redact_token(value))

        if record.exc_info and not record.exc_text:
            record.exc_text = logging.Formatter().formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = redact_token(record.exc_text)
        return True


class _JsonFormatter(logging.Formatter):
    """Render a record as a single-line JSON object.

    The fixed keys are ``timestamp``, ``level``, ``logger``, ``message``,
    ``module`` and ``func_name``; whatever the caller passed through
    ``extra=`` is appended, e.g.::

        logger.info("Dispatching command", extra={"command": "start", "update_id": 42})

    becomes::

        {"timestamp": "…", "level": "INFO", …, "command": "start", "update_id": 42}
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "func_name": record.funcName,
        }
        payload.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and key not in payload
        )

        exc_text = record.exc_text
        if record.exc_info and not exc_text:
            exc_text = self.formatException(record.exc_info)
        if exc_text:
            payload["exc_info"] = exc_text

        return json.dumps(payload, ensure_ascii=False, default=str)


class SDKLogger:
    """Owner of the shared ``telegram`` logger.

    Usage::

        from core.logger import SDKLogger

        logger = SDKLogger.get_logger()
        logger.info("Bot ready", extra={"bot": "main"})
    """

    LOGGER_NAME: str = "telegram"
    LOG_FILE: str = "telegram.log"
    MAX_BYTES: int = 5 * 1024 * 1024
    BACKUP_COUNT: int = 5

    _instance: Optional["SDKLogger"] = None

    def __init__(self, level: int, log_dir: str) -> None:
        self.level = level
        self.log_dir = log_dir
        self.logger = logging.getLogger(self.LOGGER_NAME)
        self.logger.setLevel(level)
        self.logger.propagate = False
        if not any(isinstance(f, _RedactTokenFilter) for f in self.logger.filters):
            self.logger.addFilter(_RedactTokenFilter())
        # Re-importing the module must not stack a second set of handlers.
        if not self.logger.handlers:
            for handler in self._build_handlers():
                self.logger.addHandler(handler)

    def _build_handlers(self) -> List[logging.Handler]:
        os.makedirs(self.log_dir, exist_ok=True)
        console = logging.StreamHandler()
        rotating = RotatingFileHandler(
            os.path.join(self.log_dir, self.LOG_FILE),
            maxBytes=self.MAX_BYTES,
            backupCount=self.BACKUP_COUNT,
            encoding="utf-8",
        )

        formatter = _JsonFormatter()
        for handler in (console, rotating):
            handler.setLevel(self.level)
            handler.setFormatter(formatter)
        return [console, rotating]

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Return the shared logger, configuring it from the environment on first use."""
        if cls._instance is None:
            cls._instance = cls(
                level=_level_from_env(),
                log_dir=os.environ.get("TELEGRAM_LOG_DIR", "logs"),
            )
        return cls._instance.logger

    @classmethod
    def cleanup(cls) -> None:
        """Flush, close and detach every handler, and forget the singleton."""
        if cls._instance is None:
            return
        logger = cls._instance.logger
        for handler in list(logger.handlers):
            handler.flush()
            handler.close()
            logger.removeHandler(handler)
        cls._instance = None


def _level_from_env() -> int:
    """Translate ``LOG_LEVEL`` to a :mod:`logging` level; unknown names mean INFO."""
    level = logging.getLevelName(os.environ.get("LOG_LEVEL", "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO
