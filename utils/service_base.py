"""
Base classes and utilities for the service layer.

This module provides the ServiceResult pattern (inspired by Rust's Result type)
and BaseService class shared by the authentication, marketplace and
payment_system services.

Guidelines
- Services receive their providers through ``__init__``.
- Return structured results instead of raising for expected outcomes.
- Reserve exceptions for truly exceptional/unrecoverable scenarios.
"""

import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Generic, Optional, TypeVar

from rest_framework import status
from rest_framework.response import Response

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

    Examples:
        >>> result = service_ok(product)
        >>> if result.ok:
        ...     return Response({"product": result.value}, 200)

        >>> result = service_err("product_not_found", "Product with ID 123 does not exist")
        >>> print(result.error)  # "product_not_found"
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_detail: Optional[str] = None


def service_ok(value: T = None) -> ServiceResult[T]:
    """
    Create a successful ServiceResult.

    Example:
        >>> product = Product.objects.get(id=product_id)
        >>> return service_ok(product)
    """
    return ServiceResult(ok=True, value=value)


def service_err(error: str, error_detail: str = "") -> ServiceResult:
    """
    Create a failed ServiceResult.

    Args:
        error: Error code (e.g., "product_not_found", "invalid_request_state")
        error_detail: Human-readable error message

    Example:
        >>> return service_err("product_not_found", f"Product {id} does not exist")
    """
    return ServiceResult(ok=False, error=error, error_detail=error_detail or error)


class BaseService:
    """
    Base class for all services providing common functionality.

    Provides:
    - Logging with class name
    - Performance timing decorator

    Usage:
        class CatalogService(BaseService):
            def __init__(self, payment):
                super().__init__()
                self.payment = payment

            @BaseService.log_performance
            def create_product(self, seller, data):
                self.logger.info(f"Creating product for {seller.id}")
    """

    def __init__(self):
        """Initialize base service with logger."""
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    @staticmethod
    def log_performance(func: Callable) -> Callable:
        """
        Decorator to log performance of service methods.

        Logs execution time, the error code of failed results and any
        exception raised (which is re-raised).
        """

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            start_time = time.time()
            method_name = f"{self.__class__.__name__}.{func.__name__}"

            try:
                self.logger.debug(f"{method_name} started")
                result = func(self, *args, **kwargs)
                elapsed_time = (time.time() - start_time) * 1000  # Convert to ms

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
    """Standard error codes used across services."""

    # Authorization errors
    PERMISSION_DENIED = "permission_denied"
    NOT_PRODUCT_OWNER = "not_product_owner"
    NOT_REQUEST_SELLER = "not_request_seller"
    NOT_MARKETPLACE_MEMBER = "not_marketplace_member"

    # Validation errors
    VALIDATION_ERROR = "validation_error"
    MIXED_PAYMENT_STYLES = "mixed_payment_styles"
    EMPTY_CART = "empty_cart"
    MISSING_BUYER_EMAIL = "missing_buyer_email"
    NOT_REQUEST_PRICE = "not_request_price"
    STRIPE_ACCOUNT_REQUIRED = "stripe_account_required"
    ALREADY_MEMBER = "already_member"
    NOT_MEMBER = "not_member"
    OWNER_CANNOT_LEAVE = "owner_cannot_leave"
    TAG_EXISTS = "tag_exists"

    # Not found errors
    PRODUCT_NOT_FOUND = "product_not_found"
    PRICE_NOT_FOUND = "price_not_found"
    MARKETPLACE_NOT_FOUND = "marketplace_not_found"
    REQUEST_NOT_FOUND = "request_not_found"
    USER_NOT_FOUND = "user_not_found"

    # State errors
    INVALID_REQUEST_STATE = "invalid_request_state"

    # Upstream errors
    PAYMENT_PROVIDER_ERROR = "payment_provider_error"
    IDENTITY_PROVIDER_ERROR = "identity_provider_error"

    # Internal errors
    INTERNAL_ERROR = "internal_error"
    DATABASE_ERROR = "database_error"


ERROR_STATUS = {
    ErrorCodes.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCodes.NOT_PRODUCT_OWNER: status.HTTP_403_FORBIDDEN,
    ErrorCodes.NOT_REQUEST_SELLER: status.HTTP_403_FORBIDDEN,
    ErrorCodes.NOT_MARKETPLACE_MEMBER: status.HTTP_403_FORBIDDEN,
    ErrorCodes.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.MIXED_PAYMENT_STYLES: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.EMPTY_CART: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.MISSING_BUYER_EMAIL: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.NOT_REQUEST_PRICE: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.STRIPE_ACCOUNT_REQUIRED: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.ALREADY_MEMBER: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.NOT_MEMBER: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.OWNER_CANNOT_LEAVE: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.TAG_EXISTS: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.PRODUCT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.PRICE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.MARKETPLACE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.REQUEST_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.INVALID_REQUEST_STATE: status.HTTP_409_CONFLICT,
    ErrorCodes.PAYMENT_PROVIDER_ERROR: status.HTTP_502_BAD_GATEWAY,
    ErrorCodes.IDENTITY_PROVIDER_ERROR: status.HTTP_502_BAD_GATEWAY,
}


def error_response(result: ServiceResult) -> Response:
    """Translate a failed ServiceResult into a DRF response with the mapped HTTP status."""
    http_status = ERROR_STATUS.get(result.error, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response({"detail": result.error_detail, "code": result.error}, status=http_status)
