"""
Campus Events - Centralized Logging Configuration
Plain text logs in development, one JSON object per line in production.
Every record carries the request id and the authenticated principal id
bound for the current request.
"""

import logging
import sys
import json
import traceback
import uuid
from datetime import datetime
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List
from contextvars import ContextVar

from campus_events.core.config import settings


_request_id: ContextVar[str] = ContextVar('request_id', default='')
_principal_id: ContextVar[str] = ContextVar('principal_id', default='')


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def bind_request(request_id: str) -> None:
    _request_id.set(request_id)


def bind_principal(principal_id: str) -> None:
    _principal_id.set(principal_id)


def clear_context() -> None:
    _request_id.set('')
    _principal_id.set('')


def current_context() -> Dict[str, str]:
    """Bound ids for the running request; unset ids are omitted"""
    context = {"request_id": _request_id.get(), "principal_id": _principal_id.get()}
    return {key: value for key, value in context.items() if value}


# LogRecord attributes that are not caller-supplied `extra` fields
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {'message', 'asctime'}


class JSONFormatter(logging.Formatter):
    """Structured records for production log shipping"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
            **current_context(),
        }

        if record.exc_info and record.exc_info[0]:
            exc_type, exc_value, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        entry.update(
            (key, value) for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith('_')
        )
        return json.dumps(entry, default=str)


class ContextualFormatter(logging.Formatter):
    """Readable development output with `[request] [principal]` columns"""

    def format(self, record: logging.LogRecord) -> str:
        context = current_context()
        record.request_id = context.get("request_id", "-")
        record.principal_id = context.get("principal_id", "-")
        return super().format(record)


class CampusEventsLogger(logging.Logger):
    """
    Custom logger with convenience methods for structured logging
    """

    def log_request(self, method: str, path: str, status_code: int,
                    duration_ms: float, **kwargs) -> None:
        """Log HTTP request details"""
        self.info(
            f"HTTP {method} {path} - {status_code} ({duration_ms:.2f}ms)",
            extra={
                "event_type": "http_request",
                "http_method": method,
                "http_path": path,
                "http_status": status_code,
                "duration_ms": duration_ms,
                **kwargs
            }
        )

    def log_auth_event(self, event: str, success: bool, username: str = None,
                       reason: str = None, **kwargs) -> None:
        """Login outcome. `reason` is logged only, never returned to the client."""
        parts = [f"Auth {event}: {'success' if success else 'failed'}", username, reason]
        self.log(
            logging.INFO if success else logging.WARNING,
            " - ".join(part for part in parts if part),
            extra={
                "event_type": "auth",
                "auth_event": event,
                "auth_success": success,
                "username": username,
                "failure_reason": reason,
                **kwargs
            }
        )

    def log_transition(self, entity: str, entity_id: str, transition: str,
                       actor_id: str, **kwargs) -> None:
        """Log a successful state change on a registry entity"""
        self.info(
            f"{entity} {entity_id}: {transition} by {actor_id}",
            extra={
                "event_type": "transition",
                "entity": entity,
                "entity_id": entity_id,
                "transition": transition,
                "actor_id": actor_id,
                **kwargs
            }
        )

    def log_error_with_context(self, error: Exception, context: str = None,
                               **kwargs) -> None:
        """Log error with full context"""
        self.error(
            f"Error in {context}: {type(error).__name__}: {str(error)}",
            exc_info=True,
            extra={
                "event_type": "error",
                "error_type": type(error).__name__,
                "error_message": str(error),
                "error_context": context,
                **kwargs
            }
        )


DEV_CONSOLE_FORMAT = "%(levelname)-8s | %(message)s"
DEV_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | [%(request_id)s] [%(principal_id)s] | "
    "%(funcName)s:%(lineno)d | %(message)s"
)
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024


def _build_handlers(json_logs: bool) -> List[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)
    console.setFormatter(JSONFormatter() if json_logs else ContextualFormatter(DEV_CONSOLE_FORMAT))
    handlers: List[logging.Handler] = [console]

    if settings.LOG_FILE:
        log_file = Path(settings.LOG_FILE)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=10 if json_logs else 5
        )
        rotating.setLevel(logging.DEBUG)
        rotating.setFormatter(JSONFormatter() if json_logs else ContextualFormatter(DEV_FILE_FORMAT))
        handlers.append(rotating)

    return handlers


def setup_logging() -> CampusEventsLogger:
    """Configure the `campus_events` logger from settings. Safe to call again."""
    logging.setLoggerClass(CampusEventsLogger)

    app_logger = logging.getLogger("campus_events")
    app_logger.__class__ = CampusEventsLogger  # may predate setLoggerClass
    app_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    json_logs = settings.ENVIRONMENT == "production"
    app_logger.handlers.clear()
    for handler in _build_handlers(json_logs):
        app_logger.addHandler(handler)

    for noisy in ("httpx", "uvicorn.access", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    app_logger.info(
        "Logging initialized",
        extra={"environment": settings.ENVIRONMENT, "log_level": settings.LOG_LEVEL, "json_logging": json_logs},
    )
    return app_logger


logger: CampusEventsLogger = setup_logging()
