"""
Phone number validation and formatting utilities for Indian mobile numbers.
"""
import re
from typing import Optional, Tuple

COUNTRY_CODE = "91"

# 10-digit national number, optionally preceded by the country code
_INDIAN_MOBILE_RE = re.compile(r"^(?:91)?([6-9]\d{9})$")


def cleanup_phone_number(raw: str) -> str:
    """
    Strip everything except digits from a raw phone number string.

    Converts full-width digits to ASCII first, so '＋９１ ９８７６５４３２１０'
    cleans the same way as '+91 9876543210'.

    Args:
        raw (str): The raw phone number input.

    Returns:
        str: Digits only; empty string for non-string input.
    """
    if not isinstance(raw, str):
        return ""

    raw = raw.translate(str.maketrans('０１２３４５６７８９', '0123456789'))
    return re.sub(r'\D', '', raw)


def validate_phone(number: str) -> Tuple[bool, str, Optional[str]]:
    """
    Validate an Indian mobile number.

    A number is valid when its digits form a 10-digit national number
    starting with 6-9, optionally preceded by the 91 country code.

    Args:
        number: Phone number to validate

    Returns:
        Tuple[bool, str, str]: (is_valid, national_number, error_message)
    """
    cleaned = cleanup_phone_number(number)
    if not cleaned:
        return False, cleaned, "Phone number is missing"

    match = _INDIAN_MOBILE_RE.match(cleaned)
    if not match:
        if len(cleaned) not in (10, 12):
            return False, cleaned, "Phone number must have 10 digits"
        return False, cleaned, "Phone number must start with 6, 7, 8 or 9"

    return True, match.group(1), None


def is_valid_phone(number: str) -> bool:
    """
    Check if a phone number is a valid Indian mobile number.

    Args:
        number: Phone number to validate

    Returns:
        bool: True if valid, False otherwise
    """
    is_valid, _, _ = validate_phone(number)
    return is_valid


def format_phone(number: str) -> str:
    """
    Format a phone number for the gateway: digits only, with the 91 prefix.

    The prefix is only added when the digits do not already start with it.

    Args:
        number: Phone number to format

    Returns:
        str: e.g. '919876543210'
    """
    cleaned = cleanup_phone_number(number)
    return cleaned if cleaned.startswith(COUNTRY_CODE) else f"{COUNTRY_CODE}{cleaned}"
