"""
X-Recruit API - Logging
=======================

One project logger, `xrecruit`, configured at import:

- development/testing: short console lines, detailed rotating file log
- production: one JSON object per line on console and file

Every record carries the request id, user id and client address of the
request being served (context variables set by RequestLoggingMiddleware and
AuthService). A redaction filter scrubs bearer tokens and bcrypt hashes from
messages before any handler sees them.
"""

import json
import logging
import re
import sys
import traceback
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from app.core.config import settings


LOGGER_NAME = "xrecruit"

# Per-request context
request_id_var: ContextVar[str] = ContextVar('request_id', default='')
user_id_var: ContextVar[str] = ContextVar('user_id', default='')
client_ip_var: ContextVar[str] = ContextVar('client_ip', default='')


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def set_user_id(user_id: str) -> None:
    user_id_var.set(user_id)


def set_client_ip(client_ip: str) -> None:
    client_ip_var.set(client_ip)


def clear_context() -> None:
    request_id_var.set('')
    user_id_var.set('')
    client_ip_var.set('')


def generate_request_id() -> str:
    """Short id for correlating the lines of one request"""
    return uuid.uuid4().hex[:8]


def log_context() -> Dict[str, str]:
    """Non-empty context values, keyed by their JSON field names"""
    context = {
        "request_id": request_id_var.get(),
        "user_id": user_id_var.get(),
        "client_ip": client_ip_var.get(),
    }
    return {key: value for key, value in context.items() if value}


# Bearer tokens, bare JWTs and bcrypt hashes
_SECRET_PATTERNS = (
    (re.compile(r"Bearer\s+[A-Za-z0-9_\-\.=]+"), "Bearer [REDACTED]"),
    (re.compile(r"eyJ[A-Za-z0-9_\-]*\.[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]*"), "[REDACTED_TOKEN]"),
    (re.compile(r"\$2[abxy]?\$\d{2}\$[./A-Za-z0-9]{53}"), "[REDACTED_HASH]"),
)


def redact(text: str) -> str:
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class RedactionFilter(logging.Filter):
    """
    Rewrites the rendered message so credentials never reach a handler.

    Tracebacks are formatted later, by the handler; both formatters redact them.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        cleaned = redact(message)
        if cleaned != message:
            record.msg = cleaned
            record.args = None
        return True


# Attributes every LogRecord has; anything else came in through `extra`
_STANDARD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    'message', 'asctime', 'request_id', 'user_id', 'client_ip',
}


class JSONFormatter(logging.Formatter):
    """Structured lines for log aggregation in production"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "service": settings.APP_NAME,
            "environment": settings.ENVIRONMENT,
            "message": redact(record.getMessage()),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        entry.update(log_context())

        if record.exc_info and record.exc_info[0]:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": redact(str(exc_value)),
                "traceback": [redact(line) for line in traceback.format_exception(exc_type, exc_value, exc_tb)],
            }

        entry.update({
            key: value for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and not key.startswith('_')
        })
        return json.dumps(entry, default=str)


class ContextualFormatter(logging.Formatter):
    """Plain-text formatter; exposes %(request_id)s, %(user_id)s, %(client_ip)s"""

    def format(self, record: logging.LogRecord) -> str:
        record.request_id = request_id_var.get() or '-'
        record.user_id = user_id_var.get() or '-'
        record.client_ip = client_ip_var.get() or '-'
        return super().format(record)

    def formatException(self, ei) -> str:
        return redact(super().formatException(ei))


class XRecruitLogger(logging.Logger):
    """Logger with helpers for the two kinds of event the auth core records"""

    def log_auth_event(self, event: str, success: bool, user_email: Optional[str] = None,
                       reason: Optional[str] = None, **kwargs) -> None:
        """
        Record a register/login/token outcome.

        Only identifiers and reasons belong here: never pass passwords,
        hashes or tokens.
        """
        parts = [f"Auth {event}: {'success' if success else 'failed'}"]
        if user_email:
            parts.append(user_email)
        if reason:
            parts.append(reason)

        self.log(
            logging.INFO if success else logging.WARNING,
            " - ".join(parts),
            extra={
                "event_type": "auth",
                "auth_event": event,
                "auth_success": success,
                "user_email": user_email,
                "failure_reason": reason,
                **kwargs
            }
        )

    def log_error_with_context(self, error: Exception, context: Optional[str] = None,
                               **kwargs) -> None:
        """Internal failure with traceback. Stays server-side."""
        self.error(
            f"Error in {context or 'request'}: {type(error).__name__}: {error}",
            exc_info=error,
            extra={
                "event_type": "error",
                "error_type": type(error).__name__,
                "error_context": context,
                **kwargs
            }
        )


def _build_handlers(is_production: bool) -> list:
    if is_production:
        console_formatter: logging.Formatter = JSONFormatter()
        file_formatter: logging.Formatter = JSONFormatter()
    else:
        console_formatter = ContextualFormatter("%(levelname)-8s | %(message)s")
        file_formatter = ContextualFormatter(
            "%(asctime)s | %(levelname)-8s | [%(request_id)s] [%(user_id)s] [%(client_ip)s] | "
            "%(funcName)s:%(lineno)d | %(message)s"
        )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(console_formatter)
    handlers = [console_handler]

    if settings.LOG_FILE:
        log_file = Path(settings.LOG_FILE)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=10 if is_production else 5
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_formatter)
        handlers.append(file_handler)

    return handlers


def setup_logging() -> XRecruitLogger:
    """Configure the project logger from settings (safe to call again)"""
    logging.setLoggerClass(XRecruitLogger)

    logger = logging.getLogger(LOGGER_NAME)
    logger.__class__ = XRecruitLogger
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    logger.propagate = False

    logger.handlers.clear()
    logger.filters.clear()
    logger.addFilter(RedactionFilter())

    is_production = settings.ENVIRONMENT == "production"
    for handler in _build_handlers(is_production):
        logger.addHandler(handler)

    # Third-party chatter
    for noisy in ("uvicorn.access", "sqlalchemy.engine", "aiosqlite"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.debug(
        "Logging initialized",
        extra={"log_level": settings.LOG_LEVEL, "json_logging": is_production}
    )
    return logger


logger: XRecruitLogger = setup_logging()


__all__ = [
    'logger',
    'setup_logging',
    'set_request_id',
    'set_user_id',
    'set_client_ip',
    'clear_context',
    'generate_request_id',
    'log_context',
    'redact',
    'RedactionFilter',
    'XRecruitLogger',
    'JSONFormatter',
]
