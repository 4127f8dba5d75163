"""
Project Sentinel - logging

One `sentinel` logger for the whole service. Development output is plain
text; production (`ENVIRONMENT=production`) emits one JSON object per line.
Request, user and project ids travel in context variables and are stamped on
every record.
"""

import json
import logging
import sys
import traceback
import uuid
from contextvars import ContextVar
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from sentinel.core.config import settings

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine", "aiosqlite")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
user_id_var: ContextVar[str] = ContextVar("user_id", default="")
project_id_var: ContextVar[str] = ContextVar("project_id", default="")

CONTEXT_VARS: Dict[str, ContextVar] = {
    "request_id": request_id_var,
    "user_id": user_id_var,
    "project_id": project_id_var,
}

# Attributes every LogRecord has; anything else came in through `extra=`
_STANDARD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def set_user_id(user_id: str) -> None:
    user_id_var.set(user_id)


def set_project_id(project_id: str) -> None:
    project_id_var.set(project_id)


def generate_request_id() -> str:
    return uuid.uuid4().hex[:8]


def log_context() -> Dict[str, str]:
    """Non-empty context ids for the current task"""
    return {name: var.get() for name, var in CONTEXT_VARS.items() if var.get()}


def clear_context() -> None:
    for var in CONTEXT_VARS.values():
        var.set("")


class JSONFormatter(logging.Formatter):
    """Structured records for log shippers"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
            **log_context(),
        }
        entry.update(
            (key, value) for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        )
        if record.exc_info and record.exc_info[0]:
            error_type, error, tb = record.exc_info
            entry["exception"] = {
                "type": error_type.__name__,
                "message": str(error),
                "traceback": traceback.format_exception(error_type, error, tb),
            }
        return json.dumps(entry, default=str)


class ContextualFormatter(logging.Formatter):
    """Plain text with `-` standing in for missing context ids"""

    def format(self, record: logging.LogRecord) -> str:
        for name, var in CONTEXT_VARS.items():
            setattr(record, name, var.get() or "-")
        return super().format(record)


class SentinelLogger(logging.Logger):
    """Logger with one helper per recurring event shape"""

    def log_auth_event(self, event: str, success: bool, user_email: Optional[str] = None,
                       reason: Optional[str] = None, **kwargs) -> None:
        parts = [f"Auth {event}: {'success' if success else 'failed'}"]
        parts += [p for p in (user_email, reason) if p]
        self.log(
            logging.INFO if success else logging.WARNING,
            " - ".join(parts),
            extra={"event_type": "auth", "auth_event": event, "auth_success": success,
                   "user_email": user_email, "failure_reason": reason, **kwargs},
        )

    def log_analyzer_event(self, analyzer: str, event: str, findings: int = 0, **kwargs) -> None:
        suffix = f" ({findings} findings)" if findings else ""
        self.info(
            f"[{analyzer}] {event}{suffix}",
            extra={"event_type": "analyzer", "analyzer_name": analyzer, "findings": findings, **kwargs},
        )

    def log_error_with_context(self, error: Exception, context: Optional[str] = None, **kwargs) -> None:
        """Error with traceback; `context` names the boundary that caught it"""
        self.error(
            f"Error in {context or 'unknown'}: {type(error).__name__}: {error}",
            exc_info=(type(error), error, error.__traceback__),
            extra={"event_type": "error", "error_type": type(error).__name__,
                   "error_context": context, **kwargs},
        )

    def log_performance(self, operation: str, duration_ms: float,
                        threshold_ms: float = 1000, **kwargs) -> None:
        slow = duration_ms > threshold_ms
        self.log(
            logging.WARNING if slow else logging.DEBUG,
            f"{operation} took {duration_ms:.0f}ms" + (f" (limit {threshold_ms:.0f}ms)" if slow else ""),
            extra={"event_type": "performance", "operation": operation,
                   "duration_ms": duration_ms, "threshold_ms": threshold_ms, **kwargs},
        )


def _file_handler(formatter: logging.Formatter, backups: int) -> RotatingFileHandler:
    path = Path(settings.LOG_FILE)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=backups)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def setup_logging() -> SentinelLogger:
    logging.setLoggerClass(SentinelLogger)
    log = logging.getLogger("sentinel")
    log.__class__ = SentinelLogger
    log.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    log.handlers.clear()
    log.propagate = False

    if settings.is_production:
        console_formatter = file_formatter = JSONFormatter()
        backups = 10
    else:
        console_formatter = ContextualFormatter("%(levelname)-8s | %(message)s")
        file_formatter = ContextualFormatter(
            "%(asctime)s | %(levelname)-8s | [%(request_id)s] [%(user_id)s] [%(project_id)s] | "
            "%(module)s.%(funcName)s:%(lineno)d | %(message)s"
        )
        backups = 5

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)
    console.setFormatter(console_formatter)
    log.addHandler(console)
    if settings.LOG_FILE:
        log.addHandler(_file_handler(file_formatter, backups))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    log.debug(f"Logging ready (level={settings.LOG_LEVEL}, json={settings.is_production})")
    return log


logger: SentinelLogger = setup_logging()
