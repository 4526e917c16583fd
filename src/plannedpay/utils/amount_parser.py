"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse a positive amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "1,234.56"
    - "21000"

    Planned payments carry their direction in their type, so signs are
    rejected rather than interpreted.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or is not positive
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Remove currency symbols, thousands separators and whitespace
    cleaned = re.sub(r"[$€£¥₹,\s]", "", amount_str)

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite() or amount <= 0:
        raise ValueError(f"Amount must be positive, got '{amount_str}'")
    return amount
