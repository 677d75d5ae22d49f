"""
FIXSPEC - Structured Logging System

This module provides structured logging for the dictionary compiler: JSON
line formatting, per-compilation context and timing of compilation phases.
"""

import logging
import logging.config
import json
import time
import traceback
from contextlib import contextmanager
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any
from enum import Enum
from datetime import datetime, timezone
import threading


MAX_OPERATION_SAMPLES = 1000


class LogCategory(Enum):
    """Log categories for filtering and routing."""
    SYSTEM = "system"
    PERFORMANCE = "performance"
    SCHEMA = "schema"
    RESOLUTION = "resolution"
    EMISSION = "emission"


@dataclass
class LogContext:
    """Context information for structured logging."""
    version: Optional[str] = None
    source: Optional[str] = None
    component: Optional[str] = None
    operation: Optional[str] = None
    additional_fields: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = asdict(self)
        # Remove None values
        return {k: v for k, v in result.items() if v is not None}


@dataclass
class LogEvent:
    """Structured log event."""
    timestamp: float
    level: str
    category: LogCategory
    message: str
    component: str
    operation: Optional[str] = None
    context: Optional[LogContext] = None
    exception: Optional[BaseException] = None
    performance_metrics: Optional[Dict[str, float]] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            'timestamp': self.timestamp,
            'iso_timestamp': datetime.fromtimestamp(self.timestamp, timezone.utc).isoformat(),
            'level': self.level,
            'category': self.category.value,
            'message': self.message,
            'component': self.component,
            'operation': self.operation,
            'metadata': self.metadata
        }

        if self.context:
            result['context'] = self.context.to_dict()

        if self.exception:
            result['exception'] = {
                'type': type(self.exception).__name__,
                'message': str(self.exception),
                'traceback': traceback.format_exception(type(self.exception), self.exception, self.exception.__traceback__)
            }

        if self.performance_metrics:
            result['performance_metrics'] = self.performance_metrics

        return result

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured logging."""

    def __init__(self, include_context: bool = True):
        super().__init__()
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        context = getattr(record, 'context', None) if self.include_context else None

        log_event = LogEvent(
            timestamp=record.created,
            level=record.levelname,
            category=getattr(record, 'category', LogCategory.SYSTEM),
            message=record.getMessage(),
            component=getattr(record, 'component', record.name),
            operation=getattr(record, 'operation', None),
            context=context,
            exception=record.exc_info[1] if record.exc_info else None,
            performance_metrics=getattr(record, 'performance_metrics', None),
            metadata=getattr(record, 'metadata', {})
        )

        return log_event.to_json()


class PerformanceLogger:
    """Logger specifically for compilation phase timings."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.operation_times: Dict[str, List[float]] = {}
        self.lock = threading.Lock()

    @contextmanager
    def time_operation(self, operation_name: str, context: Optional[LogContext] = None):
        """Context manager to time operations."""
        start_time = time.perf_counter()

        try:
            yield
        finally:
            duration = time.perf_counter() - start_time

            with self.lock:
                times = self.operation_times.setdefault(operation_name, [])
                times.append(duration)

                # Keep only last 1000 measurements
                if len(times) > MAX_OPERATION_SAMPLES:
                    self.operation_times[operation_name] = times[-MAX_OPERATION_SAMPLES:]

            self.logger.debug(
                f"Operation {operation_name} completed",
                extra={
                    'category': LogCategory.PERFORMANCE,
                    'performance_metrics': {
                        'operation': operation_name,
                        'duration_seconds': duration,
                        'duration_ms': duration * 1000
                    },
                    'context': context
                }
            )

    def get_operation_stats(self, operation_name: str) -> Optional[Dict[str, float]]:
        """Get statistics for an operation."""
        with self.lock:
            times = self.operation_times.get(operation_name)
            if not times:
                return None

            return {
                'count': len(times),
                'total_seconds': sum(times),
                'mean_seconds': sum(times) / len(times),
                'min_seconds': min(times),
                'max_seconds': max(times),
            }


SIMPLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def build_logging_config(level: str = "INFO", json_format: bool = False) -> Dict[str, Any]:
    """Build a dictConfig mapping for the compiler."""
    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'structured': {
                '()': StructuredFormatter,
                'include_context': True
            },
            'simple': {
                'format': SIMPLE_FORMAT
            }
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'level': level,
                'formatter': 'structured' if json_format else 'simple',
                'stream': 'ext://sys.stderr'
            }
        },
        'root': {
            'level': level,
            'handlers': ['console']
        }
    }


def configure_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Configure the logging system for a compiler run."""
    logging.config.dictConfig(build_logging_config(level.upper(), json_format))
