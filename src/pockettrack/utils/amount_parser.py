"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

CENT = Decimal("0.01")


def has_cent_precision(amount) -> bool:
    """Return True if amount is finite and has no digits beyond cents."""
    try:
        amount = Decimal(amount)
        return amount == amount.quantize(CENT)
    except (InvalidOperation, TypeError, ValueError):
        return False


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45" / "R$ 123.45"
    - "1,234.56"

    Transactions carry their direction in their type, so a leading minus sign
    is rejected rather than silently flipped. Amounts are whole cents; more
    than two decimal places are rejected rather than rounded.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount, greater than zero

    Raises:
        ValueError: If amount string cannot be parsed or is not positive
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Remove currency symbols
    amount_str = re.sub(r"R\$|[$€£¥]", "", amount_str)

    # Remove thousands separators
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    if not amount.is_finite() or amount <= 0:
        raise ValueError(f"Amount must be greater than zero, got '{amount_str}'")
    if not has_cent_precision(amount):
        raise ValueError(f"Amount cannot have more than two decimal places, got '{amount_str}'")
    return amount
