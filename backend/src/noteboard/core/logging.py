"""
Logging configuration for the Noteboard backend.
"""
import json
import logging
import logging.config
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..config import get_settings

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RESERVED_ATTRS = frozenset((
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'exc_info', 'exc_text', 'stack_info', 'lineno', 'funcName',
    'created', 'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'taskName', 'message',
))


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            log_entry['exception'] = {
                'type': exc_type.__name__ if exc_type else None,
                'message': str(exc_value) if exc_value else None,
                'traceback': self.formatException(record.exc_info),
            }

        extra = {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}
        if extra:
            log_entry['extra'] = extra

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class ColoredFormatter(logging.Formatter):
    """Colored formatter for console output in debug mode."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        # work on a copy so file handlers keep the plain level name
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, '')
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def get_log_level(level_str: Optional[str] = None) -> int:
    """Resolve a level name, falling back to INFO for unknown names."""
    level_str = level_str or get_settings().log_level
    level = logging.getLevelName(level_str.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(log_dir: Path = Path("logs")) -> None:
    """Configure console, rotating file and error-file handlers."""
    settings = get_settings()
    log_dir.mkdir(exist_ok=True)

    config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'json': {
                '()': JSONFormatter,
            },
            'colored': {
                '()': ColoredFormatter,
                'format': '%(asctime)s | %(levelname)s | %(name)s | %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S',
            },
            'file': {
                'format': '%(asctime)s | %(levelname)-8s | %(name)-28s | %(funcName)-20s:%(lineno)-4d | %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'colored' if settings.debug else 'json',
                'stream': sys.stdout,
                'level': get_log_level(),
            },
            'file': {
                'class': 'logging.handlers.RotatingFileHandler',
                'filename': log_dir / 'noteboard.log',
                'maxBytes': 10_000_000,
                'backupCount': 5,
                'formatter': 'file',
                'level': 'DEBUG',
            },
            'error_file': {
                'class': 'logging.handlers.RotatingFileHandler',
                'filename': log_dir / 'error.log',
                'maxBytes': 10_000_000,
                'backupCount': 5,
                'formatter': 'json',
                'level': 'ERROR',
            },
        },
        'loggers': {
            '': {
                'handlers': ['console', 'file'],
                'level': 'INFO',
                'propagate': False,
            },
            'noteboard': {
                'handlers': ['console', 'file', 'error_file'],
                'level': 'DEBUG',
                'propagate': False,
            },
            # one line per frame is too chatty for the console
            'noteboard.realtime.frames': {
                'handlers': ['file'],
                'level': 'DEBUG',
                'propagate': False,
            },
            'uvicorn': {
                'handlers': ['console'],
                'level': 'INFO',
                'propagate': False,
            },
            'uvicorn.access': {
                'handlers': ['console'],
                'level': 'INFO',
                'propagate': False,
            },
            'sqlalchemy': {
                'handlers': ['file'],
                'level': 'WARNING',
                'propagate': False,
            },
            'alembic': {
                'handlers': ['console', 'file'],
                'level': 'INFO',
                'propagate': False,
            },
        },
    }

    logging.config.dictConfig(config)

    logging.getLogger('noteboard.logging').info("Logging system initialized", extra={
        'log_level': settings.log_level,
        'debug': settings.debug,
        'environment': settings.environment,
        'broadcast_scope': settings.broadcast_scope,
    })


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``noteboard`` namespace."""
    return logging.getLogger(f"noteboard.{name}")


class LoggingMiddleware:
    """ASGI middleware logging HTTP requests and WebSocket sessions."""

    def __init__(self, app, logger_name: str = "http"):
        self.app = app
        self.logger = get_logger(logger_name)

    @staticmethod
    def _client_ip(scope) -> str:
        client = scope.get('client')
        return client[0] if client else 'unknown'

    async def __call__(self, scope, receive, send):
        if scope["type"] == "websocket":
            await self._handle_websocket(scope, receive, send)
            return
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = time.perf_counter()
        request_id = id(scope)

        self.logger.info("HTTP Request", extra={
            'request_id': request_id,
            'method': scope['method'],
            'path': scope['path'],
            'client_ip': self._client_ip(scope),
        })

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                self.logger.info("HTTP Response", extra={
                    'request_id': request_id,
                    'status_code': message.get('status', 0),
                    'duration_ms': round((time.perf_counter() - started) * 1000, 2),
                    'method': scope['method'],
                    'path': scope['path'],
                })
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            self.logger.error("HTTP Request Failed", extra={
                'request_id': request_id,
                'method': scope['method'],
                'path': scope['path'],
                'duration_ms': round((time.perf_counter() - started) * 1000, 2),
                'exception_type': type(exc).__name__,
                'exception_message': str(exc),
            })
            raise

    async def _handle_websocket(self, scope, receive, send):
        started = time.perf_counter()
        session_id = id(scope)
        self.logger.info("WebSocket Open", extra={
            'session_id': session_id,
            'path': scope['path'],
            'client_ip': self._client_ip(scope),
        })
        try:
            await self.app(scope, receive, send)
        finally:
            self.logger.info("WebSocket Closed", extra={
                'session_id': session_id,
                'path': scope['path'],
                'duration_ms': round((time.perf_counter() - started) * 1000, 2),
            })
