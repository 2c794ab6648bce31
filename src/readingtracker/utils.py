"""Numeric helpers shared by the progress and statistics code."""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Union

from .errors import InvalidInputError


def round_half_up(value: Union[int, float], ndigits: int = 0) -> float:
    """
    Round halves away from zero instead of to the nearest even digit.

    Args:
        value: Number to round
        ndigits: Decimal places to keep

    Returns:
        The rounded value

    Example:
        >>> round_half_up(2.5)
        3.0
        >>> round_half_up(4.25, 1)
        4.3
    """
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def parse_page_count(value: Any, field: str = "pages") -> int:
    """
    Parse a positive whole page count from user input.

    Accepts ints and numeric strings ("12", " 12 "). Booleans, fractions,
    non-numeric text and values below 1 are rejected.

    Raises:
        InvalidInputError: If value is not a positive whole number

    Example:
        >>> parse_page_count("15")
        15
    """
    if isinstance(value, bool) or value is None:
        raise InvalidInputError(f"Please enter a valid number of {field}")

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidInputError(f"Please enter the number of {field}")
        try:
            number = int(text)
        except ValueError:
            raise InvalidInputError(f"Please enter a valid number of {field}")
    elif isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise InvalidInputError(f"Please enter a valid number of {field}")
        number = int(value)
    elif isinstance(value, int):
        number = value
    else:
        raise InvalidInputError(f"Please enter a valid number of {field}")

    if number <= 0:
        raise InvalidInputError(f"Please enter a valid number of {field}")
    return number
