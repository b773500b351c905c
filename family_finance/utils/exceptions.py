"""
Custom exceptions for the analytics core.
All business logic and input exceptions are defined here.
"""

from typing import List, Optional


class AppException(Exception):
    """Base exception for all application exceptions."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        status_code: int = 500,
        details: Optional[List[str]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or []
        super().__init__(self.message)


class ValidationError(AppException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str = "Validation error",
        details: Optional[List[str]] = None
    ):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=422,
            details=details
        )


class NotFoundError(AppException):
    """Raised when a resource is not found."""

    def __init__(
        self,
        message: str = "Resource not found",
        resource_type: str = "resource",
        resource_id: Optional[str] = None
    ):
        if resource_id:
            message = f"{resource_type.title()} with ID '{resource_id}' not found"

        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=404,
            details=[f"Resource type: {resource_type}"]
        )


class EmptyInputError(AppException):
    """Raised when statistics are requested on a zero-length series."""

    def __init__(
        self,
        message: str = "Statistics require at least one value",
        details: Optional[List[str]] = None
    ):
        super().__init__(
            message=message,
            code="EMPTY_INPUT",
            status_code=422,
            details=details
        )


class InvalidPaymentError(AppException):
    """Raised when a payment can never amortize the balance."""

    def __init__(
        self,
        message: str = "Invalid payment amount",
        payment: Optional[float] = None,
        details: Optional[List[str]] = None
    ):
        details = list(details or [])
        if payment is not None:
            details.append(f"Payment: {payment}")

        super().__init__(
            message=message,
            code="INVALID_PAYMENT",
            status_code=422,
            details=details
        )
