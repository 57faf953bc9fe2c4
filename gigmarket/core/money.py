"""Parsing of client-sent monetary amounts."""

from decimal import Decimal, InvalidOperation

from gigmarket.core.errors import ValidationError


def parse_amount(value: object, field: str) -> Decimal:
    """
    Turn a JSON number or numeric string into a positive, finite Decimal.

    Floats go through ``str`` so 50.1 stays 50.1 rather than its binary
    expansion.

    Raises:
        ValidationError: not a number, not finite, or not greater than zero
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return amount
