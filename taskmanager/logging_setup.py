"""
Logging Setup
=============

Console and rotating-file logging for the service:
- Plain or JSON log lines
- Log rotation (10 MB x 5)
- HTTP request logging middleware

Author: jetgause
Created: 2025-12-10
"""

import json
import logging
import logging.handlers
import time
import traceback
from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5


@dataclass
class LogEntry:
    """Structured log entry."""
    timestamp: str
    level: str
    message: str
    logger_name: str
    module: str
    function: str
    line_number: int
    thread_id: int
    process_id: int
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(asdict(self), default=str)


class JSONFormatter(logging.Formatter):
    """JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            level=record.levelname,
            message=record.getMessage(),
            logger_name=record.name,
            module=record.module,
            function=record.funcName,
            line_number=record.lineno,
            thread_id=record.thread,
            process_id=record.process,
            extra=dict(getattr(record, 'extra', {}) or {})
        )

        if record.exc_info and record.exc_info[0] is not None:
            log_entry.extra['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }

        return log_entry.to_json()


def configure_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        level: Log level name
        log_file: Optional path for a rotating log file
        json_format: Emit JSON lines instead of plain text

    Returns:
        The root logger
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    # Replace handlers from an earlier call
    for handler in list(root.handlers):
        if getattr(handler, '_taskmanager', False):
            root.removeHandler(handler)
            handler.close()

    formatter = JSONFormatter() if json_format else logging.Formatter(CONSOLE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler._taskmanager = True
    root.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUP_COUNT
        )
        file_handler.setFormatter(JSONFormatter())
        file_handler._taskmanager = True
        root.addHandler(file_handler)

    return root


class RequestLogger(BaseHTTPMiddleware):
    """HTTP request/response logging."""

    def __init__(self, app, logger_name: str = "taskmanager.requests"):
        super().__init__(app)
        self.logger = logging.getLogger(logger_name)

    async def dispatch(self, request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration = time.time() - start

        self.logger.info(
            f"{request.method} {request.url.path} - {response.status_code}",
            extra={'extra': {
                'method': request.method,
                'path': request.url.path,
                'status_code': response.status_code,
                'duration_ms': round(duration * 1000, 2),
                'client_ip': request.client.host if request.client else None,
            }}
        )
        return response
