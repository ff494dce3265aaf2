"""Validation of the single-field replies the dialog asks for."""

import re
from typing import Optional

from ticketdesk.config import settings
from ticketdesk.errors import InvalidEmailError, InvalidQuantityError

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
_INTEGER = re.compile(r"[+-]?\d+")

CONFIRM_WORD = "confirm"
CANCEL_WORD = "cancel"


def parse_quantity(
    value: str,
    minimum: int = settings.booking.min_tickets,
    maximum: int = settings.booking.max_tickets,
) -> Optional[int]:
    """Parse a ticket quantity reply.

    Returns the integer when the whole reply is an integer inside
    ``[minimum, maximum]``, otherwise None.
    """
    if not isinstance(value, str) or not _INTEGER.fullmatch(value.strip()):
        return None
    quantity = int(value.strip())
    if minimum <= quantity <= maximum:
        return quantity
    return None


def extract_email(text: str) -> Optional[str]:
    """Return the first email address found in the text, if any."""
    match = EMAIL_PATTERN.search(text or "")
    return match.group(0) if match else None


def is_confirm(text: str) -> bool:
    return (text or "").strip().lower() == CONFIRM_WORD


def is_cancel(text: str) -> bool:
    return (text or "").strip().lower() == CANCEL_WORD


def require_quantity(
    value: str,
    minimum: int = settings.booking.min_tickets,
    maximum: int = settings.booking.max_tickets,
) -> int:
    """Like ``parse_quantity`` but raises InvalidQuantityError on bad input."""
    quantity = parse_quantity(value, minimum, maximum)
    if quantity is None:
        raise InvalidQuantityError(
            f"Expected a whole number between {minimum} and {maximum}, got {value!r}"
        )
    return quantity


def require_email(text: str) -> str:
    """Like ``extract_email`` but raises InvalidEmailError when none is found."""
    email = extract_email(text)
    if email is None:
        raise InvalidEmailError(f"No email address in {text!r}")
    return email
