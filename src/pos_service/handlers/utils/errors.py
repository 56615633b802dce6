"""
Error taxonomy and error-to-HTTP mapping for the POS handlers.

Service and DAL code raise subclasses of ``BaseServiceError``; the route
boundary (``handle_service_errors``) logs them, records metrics and turns them
into JSON error responses.
"""

import functools
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional

from aws_lambda_powertools.event_handler import Response
from pydantic import BaseModel, Field

from pos_service.handlers.utils.observability import add_count_metric, logger, tracer
from pos_service.handlers.utils.responses import create_api_response
from pos_service.models.output import ErrorOutput

GENERIC_ERROR_MESSAGE = 'Internal server error'


class ErrorSeverity(str, Enum):
    """Error severity levels for classification."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    VALIDATION = "VALIDATION"
    INFRASTRUCTURE = "INFRASTRUCTURE"
    UNEXPECTED = "UNEXPECTED"


class ErrorContext(BaseModel):
    """Context information for errors."""

    request_id: str = Field(description="Unique request identifier")
    operation: str = Field(description="Operation being performed")
    resource_id: Optional[str] = Field(default=None, description="Resource identifier")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class BaseServiceError(Exception):
    """Base exception class for service errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.UNEXPECTED,
        context: Optional[ErrorContext] = None,
        user_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.severity = severity
        self.category = category
        self.context = context
        self.user_message = user_message or message
        self.error_id = str(uuid.uuid4())

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "error_id": self.error_id,
            "error_code": self.error_code,
            "error_message": self.message,
            "user_message": self.user_message,
            "severity": self.severity.value,
            "category": self.category.value,
            "context": self.context.model_dump(mode="json") if self.context else None,
        }


class ValidationError(BaseServiceError):
    """Raised when client input is malformed or missing."""

    def __init__(self, message: str, context: Optional[ErrorContext] = None):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
            context=context,
        )


class StoreError(BaseServiceError):
    """Raised when a statement against the relational store fails."""

    def __init__(
        self,
        message: str,
        operation: str,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=message,
            error_code="STORE_ERROR",
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.INFRASTRUCTURE,
            context=context,
        )
        self.operation = operation


def create_error_context(
    request_id: str,
    operation: str,
    resource_id: Optional[str] = None,
) -> ErrorContext:
    """Create an error context for consistent error handling."""
    return ErrorContext(
        request_id=request_id,
        operation=operation,
        resource_id=resource_id,
    )


def get_http_status_code(error: BaseServiceError) -> int:
    """Get appropriate HTTP status code for error."""
    status_mapping = {
        "VALIDATION_ERROR": 400,
        "STORE_ERROR": 500,
    }

    return status_mapping.get(error.error_code, 500)


def format_error_response(error: BaseServiceError, expose_message: bool = False) -> Dict[str, str]:
    """
    Format error for API response.

    Client errors always carry their message. Server errors carry the
    underlying message only when ``expose_message`` is set; otherwise a generic
    message is returned and the detail stays in the logs.
    """
    if get_http_status_code(error) < 500 or expose_message:
        return ErrorOutput(error=error.user_message).model_dump()
    return ErrorOutput(error=GENERIC_ERROR_MESSAGE).model_dump()


@tracer.capture_method
def log_error_metrics(error: BaseServiceError) -> None:
    """Log error metrics for monitoring and alerting."""
    add_count_metric("ErrorCount")
    add_count_metric(f"Error{error.category.value.title()}Count")

    tracer.put_annotation("error_code", error.error_code)
    tracer.put_metadata("error_details", error.to_dict())

    logger.error("Service error occurred", extra=error.to_dict())


def handle_service_errors(
    func: Optional[Callable[..., Response]] = None,
    *,
    expose_internal_errors: bool = False,
) -> Any:
    """
    Decorator converting service errors raised by a route into HTTP responses.

    Usable bare (``@handle_service_errors``) or with options
    (``@handle_service_errors(expose_internal_errors=True)``).
    """

    def decorator(route: Callable[..., Response]) -> Callable[..., Response]:
        @functools.wraps(route)
        def wrapper(*args, **kwargs) -> Response:
            try:
                return route(*args, **kwargs)
            except BaseServiceError as e:
                log_error_metrics(e)
                return create_api_response(
                    status_code=get_http_status_code(e),
                    body=format_error_response(e, expose_message=expose_internal_errors),
                )
            except Exception as e:
                logger.exception("Unexpected error in handler", extra={
                    "error": str(e),
                    "function_name": route.__name__,
                })
                add_count_metric("UnexpectedError")

                unexpected_error = BaseServiceError(
                    message=str(e) or e.__class__.__name__,
                    error_code="INTERNAL_SERVER_ERROR",
                    severity=ErrorSeverity.CRITICAL,
                )
                return create_api_response(
                    status_code=500,
                    body=format_error_response(unexpected_error, expose_message=expose_internal_errors),
                )

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator
