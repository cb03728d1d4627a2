"""
Centralized Exception Handling for Retail POS Billing

This module provides:
- Custom exception classes for configuration and input errors
- Standardized error response format
- Exception handler for FastAPI

Offers that do not apply to a cart are never errors; the evaluator returns
None for them. These exceptions cover input that must be rejected before it
reaches the tax and offer calculations.
"""

from datetime import datetime, timezone
import logging
from typing import Dict, Any, Optional

from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

__all__ = [
    "POSBillingException",
    "ValidationError",
    "ConfigurationError",
    "InvalidTaxRateError",
    "InvalidHSNCodeError",
    "InvalidStateError",
    "ProductNotFoundError",
    "create_error_response",
    "pos_exception_handler",
]


class POSBillingException(Exception):
    """Base exception for the billing application"""

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)


class ValidationError(POSBillingException):
    """Data validation error"""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", details, 400)


class ConfigurationError(POSBillingException):
    """Invalid tax or offer configuration"""

    def __init__(self, message: str = "Configuration error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "CONFIG_ERROR", details, 400)


class InvalidTaxRateError(ConfigurationError):
    """Tax rate is non-numeric or outside [0, 100]"""

    def __init__(self, rate: Any):
        super().__init__(
            f"Invalid tax rate: {rate!r}. Rate must be a number between 0 and 100",
            {"field": "rate", "value": str(rate)}
        )
        self.error_code = "INVALID_TAX_RATE"


class InvalidHSNCodeError(ConfigurationError):
    """HSN code is not 4, 6 or 8 digits"""

    def __init__(self, hsn_code: Any):
        super().__init__(
            f"Invalid HSN code: {hsn_code!r}. HSN code must be 4, 6, or 8 digits",
            {"field": "hsn_code", "value": str(hsn_code)}
        )
        self.error_code = "INVALID_HSN_CODE"


class InvalidStateError(ValidationError):
    """State name or code does not match a GST state"""

    def __init__(self, state: Any):
        super().__init__(
            f"Unknown state: {state!r}",
            {"field": "state", "value": str(state)}
        )
        self.error_code = "INVALID_STATE"


class ProductNotFoundError(POSBillingException):
    """Cart line references a product that was not supplied"""

    def __init__(self, product_id: str):
        super().__init__(
            f"Product with identifier '{product_id}' not found",
            "PRODUCT_NOT_FOUND",
            {"resource_type": "product", "identifier": product_id},
            404
        )


def create_error_response(error: POSBillingException, status_code: Optional[int] = None) -> JSONResponse:
    """Create standardized error response"""
    if status_code is None:
        status_code = error.status_code

    error_response = {
        "success": False,
        "error": {
            "code": error.error_code,
            "message": error.message,
            "details": error.details
        },
        "timestamp": datetime.now(timezone.utc).isoformat()
    }

    logger.error(f"Billing error: {error.error_code} - {error.message}", extra={
        "error_code": error.error_code,
        "status_code": status_code,
        "details": error.details
    })

    return JSONResponse(status_code=status_code, content=error_response)


async def pos_exception_handler(request, exc: POSBillingException) -> JSONResponse:
    """Global exception handler for billing exceptions"""
    return create_error_response(exc)
