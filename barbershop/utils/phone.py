import re
from typing import Optional

# Customer.phone is a signed 64-bit column
MAX_PHONE_VALUE = 2 ** 63 - 1


def normalize_phone(value: str) -> Optional[int]:
    """Reduce a phone number to the numeric value stored on Customer.

    Every non-digit is dropped, so "+381 64 123-4567" becomes 381641234567.
    Returns None when nothing numeric is left or the number does not fit
    the column.

        >>> normalize_phone("064 123 4567")
        641234567
        >>> normalize_phone("n/a") is None
        True
    """
    digits = re.sub(r"\D", "", value or "")
    if not digits:
        return None
    if len(digits.lstrip("0")) > len(str(MAX_PHONE_VALUE)):
        return None
    number = int(digits)
    if number > MAX_PHONE_VALUE:
        return None
    return number
