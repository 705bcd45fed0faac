"""Shared utilities used across the marketplace core."""

import re
from decimal import Decimal

EMAIL_PATTERN = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$", re.IGNORECASE | re.ASCII)


def is_valid_email(value: str) -> bool:
    """Check that a value has the local-part@domain.tld shape."""
    return bool(EMAIL_PATTERN.match(value.strip()))


def format_currency(amount: Decimal) -> str:
    """Format an amount in dollars.

    Examples:
        >>> format_currency(Decimal("85"))
        '$85.00'
        >>> format_currency(Decimal("1250.5"))
        '$1,250.50'
    """
    return f"${amount:,.2f}"
