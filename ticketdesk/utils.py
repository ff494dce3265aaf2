"""Shared utilities used across the ticket desk."""

import re

_CHANNEL_PREFIX = re.compile(r"^[a-z]+:", re.IGNORECASE)


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("07700 900 123")
        '07700900123'
        >>> normalize_phone("+44 (7700) 900-123")
        '+447700900123'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)


def normalize_sender(value: str) -> str:
    """Normalize a sender identity into a stable conversation key.

    Messaging channels prefix the address with the channel name
    (``whatsapp:+44...``). The prefix is dropped and phone-like values are
    normalized; anything else is kept verbatim apart from surrounding
    whitespace.

    Examples:
        >>> normalize_sender("whatsapp:+44 7700 900123")
        '+447700900123'
        >>> normalize_sender("console-user")
        'console-user'
    """
    value = _CHANNEL_PREFIX.sub("", value.strip(), count=1).strip()
    if re.fullmatch(r"\+?[\d\s().-]+", value) and re.search(r"\d", value):
        return normalize_phone(value)
    return value
