# =============================================================================
# studio_core/services/base_service.py
# Base Service Class with Common Functionality
# =============================================================================

from __future__ import annotations
from abc import ABC
from dataclasses import dataclass
from typing import Any, Dict, Optional

from studio_core.errors import StudioError, handle_error
from studio_core.logging import LogContext, get_logger


@dataclass
class ServiceResult:
    """
    Standard result container for service operations.

    ``message`` is the user-facing text a caller can show as-is.
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    message: Optional[str] = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(
        cls,
        data: Any = None,
        message: Optional[str] = None,
        metadata: Dict[str, Any] = None,
    ) -> ServiceResult:
        """Create a successful result"""
        return cls(success=True, data=data, message=message, metadata=metadata)

    @classmethod
    def fail(
        cls,
        error: str,
        error_code: str = "UNKNOWN",
        message: Optional[str] = None,
        metadata: Dict[str, Any] = None,
    ) -> ServiceResult:
        """Create a failed result"""
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            message=message or error,
            metadata=metadata,
        )

    @classmethod
    def from_exception(cls, e: Exception, message: Optional[str] = None) -> ServiceResult:
        """Create a failed result from an exception"""
        if isinstance(e, StudioError):
            return cls(
                success=False,
                error=e.message,
                error_code=e.code,
                message=message or e.message,
                metadata=e.details,
            )
        return cls(
            success=False,
            error=str(e),
            error_code="EXCEPTION",
            message=message or str(e),
        )


class BaseService(ABC):
    """
    Abstract base class for services.

    Provides a per-class logger, timed operation logging and ``failure``,
    which reports a caught exception and wraps it in a ServiceResult.

    Usage:
        class MyService(BaseService):
            def do_something(self) -> ServiceResult:
                with self.log_operation("Doing something"):
                    try:
                        result = ...
                    except StudioError as e:
                        return self.failure(e, "Something went wrong.")
                    return ServiceResult.ok(result)
    """

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)

    def log_operation(self, operation: str) -> LogContext:
        return LogContext(self.logger, operation)

    def failure(self, error: Exception, message: Optional[str] = None) -> ServiceResult:
        """Log error through the shared handler and return it as a failed result."""
        handle_error(error, show_user_message=False)
        return ServiceResult.from_exception(error, message=message)
