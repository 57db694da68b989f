"""
Errors raised inside gramps-memory

Every error carries the user and operation it happened in, a request id
and a line that is safe to show an elderly storyteller. Creating one logs
it, so callers that turn an error into a failed result don't log twice.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

import psycopg

logger = logging.getLogger(__name__)

DEFAULT_USER_MESSAGE = "Something went wrong. Please try again."


class GrampsMemoryError(Exception):
    """Root of the gramps-memory error tree"""

    def __init__(
        self,
        message: str,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.user_id = user_id
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or DEFAULT_USER_MESSAGE
        self.timestamp = datetime.now(timezone.utc)

        self._log()

    def _log(self) -> None:
        # LogRecord already owns "message", so the text goes under error_message
        extra = {
            "error_type": type(self).__name__,
            "error_message": self.message,
            "request_id": self.request_id,
            "user_id": self.user_id,
            "operation": self.operation,
            "error_context": self.context,
        }
        if self.cause:
            extra["cause"] = str(self.cause)

        logger.error(
            f"{type(self).__name__}: {self.message}",
            extra=extra,
            exc_info=self.cause,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": type(self).__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


class ValidationError(GrampsMemoryError):
    """Bad input to an award or ledger call, e.g. a negative recipient count"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        super().__init__(
            message=message,
            user_message=f"Invalid {field}: {message}" if field else message,
            context={"field": field, "value": value},
            **kwargs
        )


class DatabaseError(GrampsMemoryError):
    pass


class ConnectionError(DatabaseError):
    """Pool or server unreachable; safe to retry"""

    def __init__(self, message: str = "Database connection failed", **kwargs):
        super().__init__(
            message=message,
            user_message="We're having trouble reaching your memory book. Please try again in a moment.",
            **kwargs
        )


class QueryError(DatabaseError):
    """A statement failed for a reason other than the connection"""

    def __init__(
        self,
        message: str,
        query: Optional[str] = None,
        **kwargs
    ):
        self.query = query
        context = kwargs.pop("context", None) or {}
        context.setdefault("query", query)
        super().__init__(
            message=message,
            user_message="We couldn't save your progress. Please try again.",
            context=context,
            **kwargs
        )


class ConfigurationError(GrampsMemoryError):
    """An environment setting is missing or unusable"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The system is not properly configured. Please contact support.",
            context={"config_key": config_key},
            **kwargs
        )


def wrap_external_exception(
    error: Exception,
    operation: str,
    user_id: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None
) -> GrampsMemoryError:
    """
    Turn a psycopg or unexpected error into a GrampsMemoryError

    Lost connections become ConnectionError, other psycopg errors QueryError.
    Errors that are already ours are returned unchanged.
    """
    if isinstance(error, GrampsMemoryError):
        return error

    if isinstance(error, psycopg.OperationalError):
        return ConnectionError(
            message=f"Database connection failed: {str(error)}",
            user_id=user_id,
            operation=operation,
            context=context,
            cause=error
        )
    elif isinstance(error, psycopg.Error):
        return QueryError(
            message=f"Database query failed: {str(error)}",
            user_id=user_id,
            operation=operation,
            context=context,
            cause=error
        )

    return GrampsMemoryError(
        message=f"{operation} failed: {str(error)}",
        user_id=user_id,
        operation=operation,
        context=context,
        cause=error
    )
