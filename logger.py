"""
Structured Logging for the Numeric Input engine.
Provides console logging for interactive use and, when a log directory
is configured, rotating log files with JSON detail for every record.
"""
import logging
import logging.handlers
import time
import json
import traceback
from pathlib import Path
from typing import Optional, Dict, Any, Union
from enum import Enum, auto
from contextlib import contextmanager
from datetime import datetime
import uuid
class LogLevel(Enum):
    """Log levels, including a TRACE level below DEBUG."""
    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50
class LogCategory(Enum):
    """Categories for engine logging."""
    SYSTEM = auto()
    CONFIG = auto()
    GATEKEEPER = auto()
    VALIDATOR = auto()
    USER_ACTION = auto()
    HOST = auto()
logging.addLevelName(LogLevel.TRACE.value, "TRACE")
class StructuredFormatter(logging.Formatter):
    """Formatter that appends the structured fields of a record as JSON."""
    def __init__(self, include_json=True):
        super().__init__()
        self.include_json = include_json
    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).isoformat()
        basic_line = f"[{timestamp}] {record.levelname:8} {record.name}: {record.getMessage()}"
        structured_data = {}
        for key, value in record.__dict__.items():
            if key.startswith('field_') or key in ['category', 'session_id']:
                structured_data[key] = value
        if record.exc_info:
            structured_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }
        structured_data['location'] = {
            'filename': record.filename,
            'line': record.lineno,
            'function': record.funcName
        }
        if structured_data and self.include_json:
            json_data = json.dumps(structured_data, default=str, ensure_ascii=False)
            return f"{basic_line} | {json_data}"
        return basic_line
class NumericInputLogger:
    """Logger for the numeric input engine and its hosts.

    Without a ``log_dir`` only the console handler is installed, so embedding
    the engine never creates files behind the caller's back.
    """
    def __init__(self, name: str = "numeric_input", log_dir: Optional[Path] = None,
                 console_level: int = logging.INFO):
        self.name = name
        self.session_id = str(uuid.uuid4())[:8]
        self.log_dir = Path(log_dir) if log_dir is not None else None
        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
        self._setup_loggers(console_level)
        self.debug("Numeric input logging initialized",
                   category=LogCategory.SYSTEM,
                   session_id=self.session_id,
                   log_dir=str(self.log_dir) if self.log_dir else None)
    def _setup_loggers(self, console_level: int):
        """Setup main logger and handlers."""
        self.logger = logging.getLogger(self.name)
        self.logger.setLevel(LogLevel.TRACE.value)
        self.logger.propagate = False
        for handler in list(self.logger.handlers):
            handler.close()
        self.logger.handlers.clear()
        self.console_handler = logging.StreamHandler()
        self.console_handler.setLevel(console_level)
        self.console_handler.setFormatter(StructuredFormatter(include_json=False))
        self.logger.addHandler(self.console_handler)
        if self.log_dir is None:
            return
        # File handler with rotation
        file_handler = logging.handlers.RotatingFileHandler(
            self.log_dir / f"{self.name}.log", maxBytes=10*1024*1024, backupCount=5,
            encoding="utf-8"
        )
        file_handler.setLevel(LogLevel.TRACE.value)
        file_handler.setFormatter(StructuredFormatter(include_json=True))
        self.logger.addHandler(file_handler)
        # Errors get their own file
        error_handler = logging.handlers.RotatingFileHandler(
            self.log_dir / f"{self.name}_errors.log", maxBytes=5*1024*1024, backupCount=5,
            encoding="utf-8"
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(StructuredFormatter(include_json=True))
        self.logger.addHandler(error_handler)
    def _log(self, level: int, message: str,
             category: Optional[Union[LogCategory, str]] = None,
             exception: Optional[Exception] = None, **kwargs):
        """Internal logging method adding session, category and custom fields."""
        if isinstance(category, LogCategory):
            category_name = category.name
        elif category:
            category_name = str(category).upper()
        else:
            category_name = 'GENERAL'
        extra = {
            'session_id': self.session_id,
            'category': category_name
        }
        for key, value in kwargs.items():
            if not key.startswith('_'):
                extra[f'field_{key}'] = value
        if exception:
            self.logger.log(level, message, exc_info=(type(exception), exception, exception.__traceback__), extra=extra)
        else:
            self.logger.log(level, message, extra=extra)
    def trace(self, message: str, category: Optional[LogCategory] = None, **kwargs):
        """Log trace message (per-keystroke detail)."""
        self._log(LogLevel.TRACE.value, message, category, **kwargs)
    def debug(self, message: str, category: Optional[LogCategory] = None, **kwargs):
        """Log debug message."""
        self._log(LogLevel.DEBUG.value, message, category, **kwargs)
    def info(self, message: str, category: Optional[LogCategory] = None, **kwargs):
        """Log info message."""
        self._log(LogLevel.INFO.value, message, category, **kwargs)
    def warning(self, message: str, category: Optional[LogCategory] = None, **kwargs):
        """Log warning message."""
        self._log(LogLevel.WARNING.value, message, category, **kwargs)
    def error(self, message: str, exception: Optional[Exception] = None,
              category: Optional[LogCategory] = None, **kwargs):
        """Log error message."""
        self._log(LogLevel.ERROR.value, message, category, exception, **kwargs)
    def critical(self, message: str, exception: Optional[Exception] = None,
                 category: Optional[LogCategory] = None, **kwargs):
        """Log critical message."""
        self._log(LogLevel.CRITICAL.value, message, category, exception, **kwargs)
    def log_user_action(self, action: str, details: Optional[Dict[str, Any]] = None):
        """Log user actions such as keystrokes, pastes and programmatic sets."""
        log_data = {
            'action': action,
            'timestamp': time.time()
        }
        if details:
            log_data.update(details)
        self._log(LogLevel.DEBUG.value, f"USER ACTION: {action}",
                  LogCategory.USER_ACTION, **log_data)
    def log_intent(self, kind: str, allowed: bool, **kwargs):
        """Log a gatekeeper decision for a key or paste intent."""
        decision = "ALLOW" if allowed else "DENY"
        self._log(LogLevel.TRACE.value, f"GATEKEEPER: {kind} -> {decision}",
                  LogCategory.GATEKEEPER, kind=kind, allowed=allowed, **kwargs)
    def log_verdict(self, text: str, verdict: Any):
        """Log a validator verdict for the given field text."""
        payload = verdict.to_dict() if hasattr(verdict, 'to_dict') else verdict
        self._log(LogLevel.TRACE.value, f"VALIDATOR: {text!r} -> {payload}",
                  LogCategory.VALIDATOR, text=text, verdict=payload)
    @contextmanager
    def timer(self, operation: str, log_result: bool = True):
        """Context manager for timing operations."""
        start_time = time.time()
        operation_id = str(uuid.uuid4())[:8]
        self.debug(f"Starting operation: {operation}",
                   category=LogCategory.SYSTEM, operation_id=operation_id)
        try:
            yield operation_id
        finally:
            duration = time.time() - start_time
            if log_result:
                self.debug(f"Completed operation: {operation} in {duration:.3f}s",
                           category=LogCategory.SYSTEM, operation_id=operation_id,
                           duration=duration)
    def get_session_id(self) -> str:
        """Get the current session ID."""
        return self.session_id
    def set_log_level(self, level: Union[str, int, LogLevel]):
        """Set the console logging level."""
        if isinstance(level, LogLevel):
            level = level.value
        elif isinstance(level, str):
            level = logging.getLevelName(level.upper())
            if not isinstance(level, int):
                raise ValueError(f"Unknown log level: {level}")
        self.console_handler.setLevel(level)
        self.debug(f"Log level set to: {logging.getLevelName(level)}")
    def flush(self):
        """Flush every handler."""
        for handler in self.logger.handlers:
            handler.flush()
# Global logger instance
_global_logger: Optional[NumericInputLogger] = None
def get_logger() -> NumericInputLogger:
    """Get the global logger instance."""
    global _global_logger
    if _global_logger is None:
        _global_logger = NumericInputLogger()
    return _global_logger
def setup_logger(name: str = "numeric_input", log_dir: Optional[Path] = None,
                 debug: bool = False) -> NumericInputLogger:
    """Set up and return the global logger."""
    global _global_logger
    console_level = logging.DEBUG if debug else logging.INFO
    _global_logger = NumericInputLogger(name, log_dir, console_level=console_level)
    return _global_logger
# Mixin class for easy logging integration
class LoggableMixin:
    """Mixin class to add logging capabilities to other classes."""
    def __init__(self):
        self._logger = get_logger()
        self._module_name = self.__class__.__name__
    def log_trace(self, message: str, **kwargs):
        """Log trace message."""
        self._logger.trace(f"[{self._module_name}] {message}", **kwargs)
    def log_debug(self, message: str, **kwargs):
        """Log debug message."""
        self._logger.debug(f"[{self._module_name}] {message}", **kwargs)
    def log_info(self, message: str, **kwargs):
        """Log info message."""
        self._logger.info(f"[{self._module_name}] {message}", **kwargs)
    def log_warning(self, message: str, **kwargs):
        """Log warning message."""
        self._logger.warning(f"[{self._module_name}] {message}", **kwargs)
    def log_error(self, message: str, exception: Optional[Exception] = None, **kwargs):
        """Log error message."""
        self._logger.error(f"[{self._module_name}] {message}", exception=exception, **kwargs)
    def log_user_action(self, action: str, details: Optional[Dict[str, Any]] = None):
        """Log user action."""
        action_details = {'module': self._module_name}
        if details:
            action_details.update(details)
        self._logger.log_user_action(action, action_details)
