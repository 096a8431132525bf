"""
Base classes and utilities for the service layer.

This module provides the ServiceResult pattern (inspired by Rust's Result type)
and BaseService class for the catalog services.
"""

import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    A result type that encapsulates success or failure from service operations.

    Attributes:
        ok: True if operation succeeded, False otherwise
        value: The success value (present if ok=True)
        error: Error code (present if ok=False)
        error_detail: Human-readable error message (present if ok=False)
        field: Offending input field for validation failures

    Examples:
        >>> result = service_err(ErrorCodes.VALIDATION_ERROR, "price: must be greater than 0", field="price")
        >>> result.field
        'price'
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_detail: Optional[str] = None
    field: Optional[str] = None

    def to_error_dict(self) -> dict:
        """
        Wire body for a failed result: error code, detail and, for validation
        failures, the offending field.
        """
        if self.ok:
            raise ValueError("A successful result has no error body")
        body = {"error": self.error, "detail": self.error_detail}
        if self.field:
            body["field"] = self.field
        return body


def service_ok(value: T) -> ServiceResult[T]:
    return ServiceResult(ok=True, value=value)


def service_err(error: str, error_detail: str = "", field: Optional[str] = None) -> ServiceResult:
    """
    Create a failed ServiceResult.

    Args:
        error: Error code (e.g., "product_not_found", "validation_error")
        error_detail: Human-readable error message
        field: Offending field name, for validation errors
    """
    return ServiceResult(ok=False, error=error, error_detail=error_detail or error, field=field)


class BaseService:
    """
    Base class for all services providing common functionality.

    Provides:
    - Logging with class name
    - Performance timing decorator
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    @staticmethod
    def log_performance(func: Callable) -> Callable:
        """
        Decorator to log performance of service methods.

        Logs execution time and any errors that occur.
        """

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            start_time = time.time()
            method_name = f"{self.__class__.__name__}.{func.__name__}"

            try:
                self.logger.debug(f"{method_name} started")
                result = func(self, *args, **kwargs)
                elapsed_time = (time.time() - start_time) * 1000

                if isinstance(result, ServiceResult):
                    if result.ok:
                        self.logger.info(f"{method_name} completed successfully in {elapsed_time:.2f}ms")
                    else:
                        self.logger.warning(
                            f"{method_name} failed with error '{result.error}' in {elapsed_time:.2f}ms"
                        )
                else:
                    self.logger.info(f"{method_name} completed in {elapsed_time:.2f}ms")

                return result

            except Exception as e:
                elapsed_time = (time.time() - start_time) * 1000
                self.logger.error(
                    f"{method_name} raised exception after {elapsed_time:.2f}ms: {str(e)}",
                    exc_info=True,
                )
                raise

        return wrapper


class ErrorCodes:
    """Standard error codes used across catalog services."""

    PRODUCT_NOT_FOUND = "product_not_found"
    VALIDATION_ERROR = "validation_error"
    STORAGE_ERROR = "storage_error"
    PERSISTENCE_ERROR = "persistence_error"
    INTERNAL_ERROR = "internal_error"
