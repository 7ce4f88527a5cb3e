"""
Structured logging configuration for Datadog integration
"""
import logging
import sys
import json
from datetime import datetime, timezone
from typing import Any, Dict
from ddtrace import tracer

from prompt_ab.config import config

# Extra record attributes copied into the JSON payload when present
EXTRA_FIELDS = (
    "request_id",
    "session_key",
    "experiment_id",
    "variant_id",
    "agent_id",
    "assignments",
    "experiments",
    "reason",
    "error",
)


class DatadogJSONFormatter(logging.Formatter):
    """
    Custom JSON formatter for Datadog logs.
    Automatically injects trace and span IDs for correlation.

    The message text is emitted verbatim: log-based analytics parse the
    "prompt-ab-test: ..." lines directly.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON with Datadog fields"""

        # Get trace context from ddtrace
        span = tracer.current_span()

        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": config.DD_SERVICE,
        }

        # Add trace correlation if available
        if span:
            log_data["dd.trace_id"] = str(span.trace_id)
            log_data["dd.span_id"] = str(span.span_id)

        for field in EXTRA_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging() -> logging.Logger:
    """
    Configure structured JSON logging for the application.
    Logs will be automatically forwarded to Datadog when using ddtrace.

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("prompt-ab-test")
    level = getattr(logging, config.LOG_LEVEL, logging.INFO)
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # Create console handler with JSON formatter
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(DatadogJSONFormatter())

    logger.addHandler(console_handler)

    # Prevent propagation to root logger
    logger.propagate = False

    return logger
