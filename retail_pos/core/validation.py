"""
Input Validation for Retail POS Billing

Rejects malformed tax configuration before it reaches the calculators.
The calculators themselves assume validated input.

Usage:
    from retail_pos.core.validation import validate_tax_rate, validate_hsn_code
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from retail_pos.core.exceptions import InvalidHSNCodeError, InvalidTaxRateError
from retail_pos.core.money import HUNDRED, ZERO, to_decimal

VALID_HSN_LENGTHS = (4, 6, 8)


def clean_hsn_code(hsn_code: str) -> str:
    """Strip surrounding and embedded spaces from an HSN code."""
    return hsn_code.strip().replace(" ", "")


def validate_hsn_code(hsn_code: str) -> bool:
    """
    Validate HSN code format.
    Valid HSN codes are 4, 6, or 8 digits.

    Args:
        hsn_code: HSN code to validate

    Returns:
        True if valid, False otherwise
    """
    if not hsn_code:
        return False

    hsn_clean = clean_hsn_code(hsn_code)

    if not hsn_clean.isdigit():
        return False

    return len(hsn_clean) in VALID_HSN_LENGTHS


def require_hsn_code(hsn_code: str) -> str:
    """Return the cleaned HSN code or raise InvalidHSNCodeError."""
    if not validate_hsn_code(hsn_code):
        raise InvalidHSNCodeError(hsn_code)
    return clean_hsn_code(hsn_code)


def validate_tax_rate(rate: Any) -> Decimal:
    """
    Validate a tax rate entered by an administrator or API client.

    Args:
        rate: Rate as number or numeric string (e.g., 18, "12.5")

    Returns:
        Rate as Decimal

    Raises:
        InvalidTaxRateError: rate is non-numeric, not finite, or outside [0, 100]
    """
    try:
        value = to_decimal(rate)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidTaxRateError(rate)

    if not value.is_finite() or value < ZERO or value > HUNDRED:
        raise InvalidTaxRateError(rate)

    return value
