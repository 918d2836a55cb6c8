"""
Structured logging configuration.
Outputs logs in JSON format for production observability.
"""
import logging
import sys
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

# Extra attributes callers may attach via `logger.info(..., extra={...})`
CONTEXT_KEYS = ("feed_variant", "post_id")


class LogRecord(BaseModel):
    """Structured log record schema."""
    timestamp: str
    level: str
    logger: str
    message: str
    exception: Optional[str] = None
    context: Dict[str, Any] = Field(default_factory=dict)


class JsonFormatter(logging.Formatter):
    """Format log records as JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the record as JSON."""
        context = {
            key: getattr(record, key)
            for key in CONTEXT_KEYS
            if hasattr(record, key)
        }

        log_obj = LogRecord(
            timestamp=self.formatTime(record, self.datefmt),
            level=record.levelname,
            logger=record.name,
            message=record.getMessage(),
            exception=self.formatException(record.exc_info) if record.exc_info else None,
            context=context,
        )

        return log_obj.model_dump_json(exclude_none=True)


def configure_logging(debug: bool = False) -> None:
    """Configure root logger with JSON formatter."""
    handler = logging.StreamHandler(sys.stdout)

    if debug:
        # Human-readable format for debugging
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
        )
    else:
        formatter = JsonFormatter()

    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    # Reduce noise
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").handlers = [handler]
    logging.getLogger("httpx").setLevel(logging.WARNING)
