"""Structured logging with correlation IDs."""

import logging
import logging.config
import json
import traceback
import uuid
from datetime import datetime
from typing import Dict, Any, Optional, Union
from contextvars import ContextVar
from dataclasses import dataclass, asdict
from functools import wraps
from pathlib import Path

from .types import LogLevel, GuardStage

# Context variable for correlation ID tracking
correlation_id: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)


@dataclass
class LogContext:
    """Structured logging context."""
    correlation_id: Optional[str] = None
    stage: Optional[GuardStage] = None
    component: Optional[str] = None
    operation: Optional[str] = None
    operation_id: Optional[str] = None
    post_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, filtering out None values."""
        data = asdict(self)
        if self.stage is not None:
            data['stage'] = self.stage.value
        return {k: v for k, v in data.items() if v is not None}


class StructuredFormatter(logging.Formatter):
    """Formats log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        corr_id = correlation_id.get()
        if corr_id:
            log_data['correlation_id'] = corr_id

        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }

        extra_fields = getattr(record, 'extra', {})
        if extra_fields:
            log_data.update(extra_fields)

        if hasattr(record, 'context'):
            context_data = record.context.to_dict() if isinstance(record.context, LogContext) else record.context
            log_data.update(context_data)

        return json.dumps(log_data, default=str)


class ContextualLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that includes contextual information."""

    def __init__(self, logger: logging.Logger, context: LogContext):
        super().__init__(logger, {})
        self.context = context

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        if 'extra' not in kwargs:
            kwargs['extra'] = {}

        kwargs['extra']['context'] = self.context
        return msg, kwargs


class GuardLogger:
    """Logger carrying a LogContext; keyword arguments become JSON fields."""

    def __init__(self, name: str, context: Optional[LogContext] = None):
        self.logger = logging.getLogger(name)
        self.context = context or LogContext()
        self.adapter = ContextualLoggerAdapter(self.logger, self.context)

    def debug(self, msg: str, **kwargs) -> None:
        self.adapter.debug(msg, extra={'extra': kwargs})

    def info(self, msg: str, **kwargs) -> None:
        self.adapter.info(msg, extra={'extra': kwargs})

    def warning(self, msg: str, **kwargs) -> None:
        self.adapter.warning(msg, extra={'extra': kwargs})

    def error(self, msg: str, **kwargs) -> None:
        self.adapter.error(msg, extra={'extra': kwargs})

    def exception(self, msg: str, **kwargs) -> None:
        """Log exception with traceback."""
        self.adapter.exception(msg, extra={'extra': kwargs})

    def with_context(self, **kwargs) -> 'GuardLogger':
        """Create a new logger with updated context."""
        new_context = LogContext(**{**asdict(self.context), **kwargs})
        return GuardLogger(self.logger.name, new_context)

    def start_operation(self, operation: str, **kwargs) -> 'OperationLogger':
        """Start a tracked operation."""
        return OperationLogger(self, operation, **kwargs)


class OperationLogger:
    """Logger for tracking a single timed operation."""

    def __init__(self, parent_logger: GuardLogger, operation: str, **context_kwargs):
        self.operation = operation
        self.start_time = datetime.now()
        self.operation_id = context_kwargs.pop('operation_id', None) or str(uuid.uuid4())
        self.logger = parent_logger.with_context(
            operation=operation,
            operation_id=self.operation_id,
            **context_kwargs
        )
        self.logger.debug(f"Starting operation: {operation}")

    def complete(self, msg: Optional[str] = None, **kwargs) -> None:
        """Mark operation as complete."""
        duration = (datetime.now() - self.start_time).total_seconds()
        complete_msg = msg or f"Operation completed: {self.operation}"

        self.logger.info(complete_msg,
                         duration_seconds=duration,
                         operation_status="completed",
                         **kwargs)

    def fail(self, msg: Optional[str] = None, exception: Optional[Exception] = None, **kwargs) -> None:
        """Mark operation as failed."""
        duration = (datetime.now() - self.start_time).total_seconds()
        fail_msg = msg or f"Operation failed: {self.operation}"

        if exception:
            self.logger.exception(fail_msg,
                                  duration_seconds=duration,
                                  operation_status="failed",
                                  error=str(exception),
                                  **kwargs)
        else:
            self.logger.error(fail_msg,
                              duration_seconds=duration,
                              operation_status="failed",
                              **kwargs)


def setup_logging(
    level: Union[str, LogLevel] = LogLevel.INFO,
    log_file: Optional[str] = None,
    structured: bool = True,
    console: bool = True
) -> None:
    """Configure root logging handlers."""

    if isinstance(level, str):
        level = LogLevel(level.upper())

    handlers = {}

    if console:
        handlers['console'] = {
            'class': 'logging.StreamHandler',
            'stream': 'ext://sys.stderr',
            'formatter': 'structured' if structured else 'simple',
            'level': level.value
        }

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        handlers['file'] = {
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': str(log_path),
            'maxBytes': 10485760,  # 10MB
            'backupCount': 5,
            'encoding': 'utf-8',
            'formatter': 'structured' if structured else 'simple',
            'level': level.value
        }

    config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'simple': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            },
            'structured': {
                '()': StructuredFormatter
            }
        },
        'handlers': handlers,
        'root': {
            'level': level.value,
            'handlers': list(handlers.keys())
        }
    }

    logging.config.dictConfig(config)


def get_logger(name: str, context: Optional[LogContext] = None) -> GuardLogger:
    """Get a guard logger with optional context."""
    return GuardLogger(name, context)


def set_correlation_id(corr_id: str) -> None:
    """Set correlation ID for current context."""
    correlation_id.set(corr_id)


def get_correlation_id() -> Optional[str]:
    """Get current correlation ID."""
    return correlation_id.get()


def generate_correlation_id() -> str:
    """Generate a new correlation ID."""
    return str(uuid.uuid4())


def with_correlation_id(corr_id: Optional[str] = None):
    """Decorator running the function under a (new) correlation ID."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            id_to_use = corr_id or generate_correlation_id()
            token = correlation_id.set(id_to_use)
            try:
                return func(*args, **kwargs)
            finally:
                correlation_id.reset(token)
        return wrapper
    return decorator


class LoggerMixin:
    """Mixin class to add logging capabilities to any class."""

    _log_context: Optional[LogContext] = None
    _logger: Optional[GuardLogger] = None

    @property
    def logger(self) -> GuardLogger:
        """Get logger for this component."""
        if self._logger is None:
            if self._log_context is None:
                self._log_context = LogContext(component=self.__class__.__name__)
            self._logger = get_logger(self.__class__.__module__, self._log_context)
        return self._logger

    def set_log_context(self, **kwargs) -> None:
        """Update logging context."""
        base = self._log_context or LogContext(component=self.__class__.__name__)
        self._log_context = LogContext(**{**asdict(base), **kwargs})
        self._logger = get_logger(self.__class__.__module__, self._log_context)
