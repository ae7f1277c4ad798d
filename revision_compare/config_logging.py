"""
Revision Compare Configuration & Logging Module
===============================================
Centralized configuration, structured logging, and error types.

Version: module v1.0
"""

import os
import sys
import json
import logging
import uuid
import time
import functools
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Callable
from pathlib import Path
from dataclasses import dataclass, field
from contextlib import contextmanager
import threading

# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================
DEFAULT_MATCH_THRESHOLD = 0.8       # Similarity above which two blocks correspond
DEFAULT_LOOKAHEAD_WINDOW = 3        # Blocks examined ahead on the opposite side
DEFAULT_PREVIEW_LENGTH = 80         # Placeholder preview characters
DEFAULT_INLINE_PREVIEW_LENGTH = 40  # Inline placeholder preview characters
DEFAULT_DIFF_TIMEOUT = 0.0          # Seconds per diff-match-patch run, 0 = no limit
DEFAULT_DIFF_EDIT_COST = 4
DEFAULT_MAX_DOCUMENT_MB = 10
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024  # 5MB max per log file
LOG_BACKUP_COUNT = 5

DEFAULT_MAX_DOCUMENT_BYTES = DEFAULT_MAX_DOCUMENT_MB * 1024 * 1024

APP_NAME = "RevisionCompare"

# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================

@dataclass
class CompareConfig:
    """Comparison configuration with sane defaults."""

    # Alignment
    match_threshold: float = DEFAULT_MATCH_THRESHOLD
    lookahead_window: int = DEFAULT_LOOKAHEAD_WINDOW

    # Presentation
    preview_length: int = DEFAULT_PREVIEW_LENGTH
    inline_preview_length: int = DEFAULT_INLINE_PREVIEW_LENGTH

    # Text-diff oracle
    diff_timeout: float = DEFAULT_DIFF_TIMEOUT
    diff_edit_cost: int = DEFAULT_DIFF_EDIT_COST

    # Input limits
    max_document_bytes: int = DEFAULT_MAX_DOCUMENT_BYTES

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # Options: json, text
    log_to_file: bool = False
    log_to_console: bool = True
    log_dir: Path = field(default_factory=lambda: Path.cwd() / 'logs')

    def __post_init__(self):
        """Prepare the log directory when file logging is requested."""
        if self.log_to_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        if os.environ.get('RC_ENV', 'development').lower() == 'production':
            self.log_level = "WARNING"

    @classmethod
    def from_env(cls) -> 'CompareConfig':
        """Load configuration from environment variables."""
        return cls(
            match_threshold=float(os.environ.get('RC_MATCH_THRESHOLD', str(DEFAULT_MATCH_THRESHOLD))),
            lookahead_window=int(os.environ.get('RC_LOOKAHEAD_WINDOW', str(DEFAULT_LOOKAHEAD_WINDOW))),
            preview_length=int(os.environ.get('RC_PREVIEW_LENGTH', str(DEFAULT_PREVIEW_LENGTH))),
            inline_preview_length=int(os.environ.get('RC_INLINE_PREVIEW_LENGTH',
                                                     str(DEFAULT_INLINE_PREVIEW_LENGTH))),
            diff_timeout=float(os.environ.get('RC_DIFF_TIMEOUT', str(DEFAULT_DIFF_TIMEOUT))),
            diff_edit_cost=int(os.environ.get('RC_DIFF_EDIT_COST', str(DEFAULT_DIFF_EDIT_COST))),
            max_document_bytes=int(os.environ.get('RC_MAX_DOCUMENT_BYTES', str(DEFAULT_MAX_DOCUMENT_BYTES))),
            log_level=os.environ.get('RC_LOG_LEVEL', 'INFO'),
            log_format=os.environ.get('RC_LOG_FORMAT', 'json'),
            log_to_file=os.environ.get('RC_LOG_TO_FILE', 'false').lower() == 'true',
            log_dir=Path(os.environ.get('RC_LOG_DIR', str(Path.cwd() / 'logs'))),
        )

    def validate(self) -> tuple:
        """Validate configuration and return (is_valid, errors)."""
        errors = []

        if not 0.0 <= self.match_threshold <= 1.0:
            errors.append(f"match_threshold must be within [0, 1], got {self.match_threshold}")

        if self.lookahead_window < 0:
            errors.append(f"lookahead_window cannot be negative, got {self.lookahead_window}")

        if self.preview_length <= 0 or self.inline_preview_length <= 0:
            errors.append("Preview lengths must be positive")

        if self.diff_timeout < 0:
            errors.append("diff_timeout cannot be negative (use 0 for no limit)")

        if self.log_format not in ('json', 'text'):
            errors.append(f"Invalid log_format: {self.log_format}. Must be 'json' or 'text'")

        if self.log_level.upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            errors.append(f"Invalid log_level: {self.log_level}")

        return (len(errors) == 0, errors)


# Global config instance
_config: Optional[CompareConfig] = None

def get_config() -> CompareConfig:
    """Get or create the global configuration."""
    global _config
    if _config is None:
        _config = CompareConfig.from_env()
    return _config


def reset_config():
    """Reset the global configuration (for testing)."""
    global _config
    _config = None


# =============================================================================
# STRUCTURED LOGGING
# =============================================================================

class StructuredLogger:
    """Thread-safe structured JSON logger with correlation IDs."""

    _local = threading.local()

    def __init__(self, name: str, config: Optional[CompareConfig] = None):
        self.name = name
        self.config = config or get_config()
        self._setup_logger()

    def _setup_logger(self):
        """Configure the underlying Python logger."""
        self.logger = logging.getLogger(self.name)
        self.logger.setLevel(getattr(logging, self.config.log_level.upper()))
        self.logger.handlers.clear()

        if self.config.log_format == 'json':
            formatter = JsonFormatter()
        else:
            formatter = logging.Formatter(
                '%(asctime)s [%(levelname)s] %(name)s - %(message)s'
            )

        if self.config.log_to_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        if self.config.log_to_file:
            from logging.handlers import RotatingFileHandler
            log_file = self.config.log_dir / f"{self.name.lower()}.log"
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_BACKUP_COUNT,
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    @classmethod
    def set_correlation_id(cls, correlation_id: str):
        """Set correlation ID for current thread."""
        cls._local.correlation_id = correlation_id

    @classmethod
    def get_correlation_id(cls) -> str:
        """Get correlation ID for current thread."""
        return getattr(cls._local, 'correlation_id', None) or str(uuid.uuid4())[:8]

    @classmethod
    def new_correlation_id(cls) -> str:
        """Generate and set a new correlation ID."""
        correlation_id = str(uuid.uuid4())[:12]
        cls.set_correlation_id(correlation_id)
        return correlation_id

    def _build_log_record(self, level: str, message: str, **kwargs) -> Dict[str, Any]:
        """Build a structured log record."""
        return {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': level,
            'logger': self.name,
            'correlation_id': self.get_correlation_id(),
            'message': message,
            **kwargs
        }

    def _emit(self, level: int, level_name: str, message: str, exc_info: bool = False, **kwargs):
        record = self._build_log_record(level_name, message, **kwargs)
        if exc_info:
            import traceback
            record['traceback'] = traceback.format_exc()
        text = json.dumps(record, default=str) if self.config.log_format == 'json' else message
        self.logger.log(level, text, exc_info=exc_info, extra=kwargs)

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        self._emit(logging.DEBUG, 'DEBUG', message, **kwargs)

    def info(self, message: str, **kwargs):
        """Log info message."""
        self._emit(logging.INFO, 'INFO', message, **kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self._emit(logging.WARNING, 'WARNING', message, **kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs):
        """Log error message with optional exception info."""
        self._emit(logging.ERROR, 'ERROR', message, exc_info=exc_info, **kwargs)

    def exception(self, message: str, **kwargs):
        """Log exception with full traceback."""
        self.error(message, exc_info=True, **kwargs)

    @contextmanager
    def log_operation(self, operation: str, **context):
        """Context manager for logging operation start/end with timing."""
        start_time = time.time()
        self.info(f"{operation} started", operation=operation, status='started', **context)
        try:
            yield
            duration_ms = (time.time() - start_time) * 1000
            self.info(f"{operation} completed", operation=operation, status='completed',
                      duration_ms=round(duration_ms, 2), **context)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            self.error(f"{operation} failed: {e}", operation=operation, status='failed',
                       duration_ms=round(duration_ms, 2), exc_info=True, **context)
            raise


_RESERVED_RECORD_KEYS = frozenset((
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'stack_info', 'thread', 'threadName', 'exc_info', 'exc_text',
    'message', 'taskName',
))


class JsonFormatter(logging.Formatter):
    """JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        # StructuredLogger already serialized the record
        message = record.getMessage()
        if message.startswith('{'):
            return message

        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': message,
        }

        if record.exc_info:
            log_data['traceback'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance."""
    return StructuredLogger(name, get_config())


# =============================================================================
# ERROR HANDLING UTILITIES
# =============================================================================

class RevisionCompareError(Exception):
    """Base exception for Revision Compare."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR",
                 status_code: int = 500, details: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to API response dict."""
        return {
            'success': False,
            'error': {
                'code': self.code,
                'message': self.message,
                'details': self.details
            }
        }


class ValidationError(RevisionCompareError):
    """Input validation error."""
    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400,
                         details={'field': field, **kwargs})


class ProcessingError(RevisionCompareError):
    """Comparison processing error."""
    def __init__(self, message: str, stage: Optional[str] = None, **kwargs):
        super().__init__(message, code="PROCESSING_ERROR", status_code=500,
                         details={'stage': stage, **kwargs})


class DiffOracleError(RevisionCompareError):
    """The text-diff primitive failed on a pair of strings."""
    def __init__(self, message: str, **kwargs):
        super().__init__(message, code="DIFF_ERROR", status_code=500, details=kwargs)


def handle_errors(logger: Optional[StructuredLogger] = None):
    """Decorator for standardized error handling."""
    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            _logger = logger or get_logger(func.__module__)
            try:
                return func(*args, **kwargs)
            except RevisionCompareError:
                raise
            except (ValueError, TypeError) as e:
                _logger.error(f"Validation error: {e}", exc_info=True)
                raise ValidationError(str(e))
            except Exception as e:
                _logger.exception(f"Unexpected error in {func.__name__}: {e}")
                raise ProcessingError(f"An unexpected error occurred: {type(e).__name__}",
                                      stage=func.__name__)
        return wrapper
    return decorator
