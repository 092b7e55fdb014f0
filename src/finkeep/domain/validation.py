"""Input validation shared by the domain services.

Every check here runs before a service issues its first write.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional

from finkeep.domain.entities import TransactionType
from finkeep.domain.errors import ValidationError
from finkeep.utils.money import to_decimal


def require_text(value: Optional[str], field: str, min_length: int = 2) -> str:
    """Return the stripped text, or raise if it is too short."""
    text = (value or "").strip()
    if len(text) < min_length:
        raise ValidationError(f"{field} must have at least {min_length} characters")
    return text


def require_amount(value, field: str = "Amount") -> Decimal:
    """Parse an amount and require it to be strictly positive."""
    amount = parse_decimal(value, field)
    if amount <= 0:
        raise ValidationError(f"{field} must be positive")
    return amount


def parse_decimal(value, field: str = "Amount") -> Decimal:
    """Parse a number into a finite Decimal."""
    try:
        amount = to_decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field} is not a valid number: {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"{field} is not a valid number: {value!r}")
    return amount


def require_int_range(value: int, field: str, low: int, high: int) -> int:
    """Require an integer within ``[low, high]``."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer")
    if value < low or value > high:
        raise ValidationError(f"{field} must be between {low} and {high}")
    return value


def parse_transaction_type(value: TransactionType | str) -> TransactionType:
    """Accept an enum member or its name (case-insensitive)."""
    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(str(value).strip().upper())
    except ValueError:
        raise ValidationError(f"Type must be INCOME or EXPENSE, got {value!r}")
