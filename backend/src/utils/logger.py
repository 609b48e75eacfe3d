"""
Jersey Catalog API - Structured Logging
Provides JSON-formatted logging for log aggregation queries.
"""

import logging
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger

from .config import LOG_LEVEL, config


def setup_logger(name: str = __name__) -> logging.Logger:
    """
    Configure structured JSON logger.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger(__name__)
        >>> logger.info("Schema loaded", extra={
        ...     "table": "products",
        ...     "column_count": 11
        ... })
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers
    if logger.hasHandlers():
        return logger

    level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    formatter = jsonlogger.JsonFormatter(
        '%(asctime)s %(name)s %(levelname)s %(message)s',
        datefmt='%Y-%m-%dT%H:%M:%S'
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)

    # Don't propagate to root logger
    logger.propagate = False

    return logger


# Global logger instance
logger = setup_logger('jersey_catalog')


def log_api_request(method: str, path: str, status_code: int, duration_ms: float):
    """Log API request metrics."""
    logger.info("API request", extra={
        "event_type": "api_request",
        "method": method,
        "path": path,
        "status_code": status_code,
        "duration_ms": duration_ms
    })


def log_database_error(error: Exception, query_context: Optional[str] = None):
    """Log database error with context."""
    logger.error("Database error", extra={
        "event_type": "database_error",
        "error_type": type(error).__name__,
        "error_message": str(error),
        "query_context": query_context
    }, exc_info=True)


def log_schema_loaded(table: str, column_count: int, foreign_key_count: int):
    """Log a table metadata load (cache miss)."""
    logger.info("Table metadata loaded", extra={
        "event_type": "schema_loaded",
        "table": table,
        "column_count": column_count,
        "foreign_key_count": foreign_key_count,
        "environment": config.environment
    })


def log_auth_event(event: str, user_id: Optional[int] = None, email: Optional[str] = None):
    """Log login/logout/session events. Never pass credentials here."""
    logger.info("Authentication event", extra={
        "event_type": "auth",
        "auth_event": event,
        "user_id": user_id,
        "email": email
    })
