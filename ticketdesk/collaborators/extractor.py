"""
Rule-based booking intent extraction for structured text requests.

Handles messages like "2 premium tickets for Chelsea v Arsenal on
15/02/2025, my name is Sam Lee, sam@example.com". Anything it cannot find
is left empty; a missing quantity is reported as 0 so the dialog asks for
it. When no date is mentioned the event's scheduled date is assumed.
"""

import logging
import re
from datetime import datetime
from typing import Optional

from dateutil import parser as date_parser

from ticketdesk.config import settings
from ticketdesk.conversation.validators import EMAIL_PATTERN, extract_email
from ticketdesk.inventory.catalog import InventoryCatalog
from ticketdesk.schemas.booking_schema import BookingIntent

logger = logging.getLogger(__name__)

NUMBER_WORDS: dict[str, int] = {
    "a": 1, "an": 1, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
}

_TICKET_NOUN = r"(?:(?:standard|premium)\s+)?(?:tickets?|seats?|places?)"
_QUANTITY_DIGITS = re.compile(rf"\b(\d{{1,3}})\s*(?:x\s*)?{_TICKET_NOUN}\b", re.IGNORECASE)
_QUANTITY_WORDS = re.compile(
    rf"\b({'|'.join(NUMBER_WORDS)})\s+{_TICKET_NOUN}\b", re.IGNORECASE
)
_QUANTITY_TIMES = re.compile(r"\bx\s*(\d{1,2})\b", re.IGNORECASE)

_MONTHS = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?|"
    r"sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
)
_DATE_PATTERNS = [
    re.compile(r"\b\d{4}-\d{2}-\d{2}\b"),
    re.compile(r"\b\d{1,2}/\d{1,2}/\d{2,4}\b"),
    re.compile(rf"\b\d{{1,2}}(?:st|nd|rd|th)?\s+(?:of\s+)?{_MONTHS}(?:,?\s+\d{{4}})?\b", re.IGNORECASE),
    re.compile(rf"\b{_MONTHS}\s+\d{{1,2}}(?:st|nd|rd|th)?(?:,?\s+\d{{4}})?\b", re.IGNORECASE),
]
_ORDINAL_SUFFIX = re.compile(r"(\d)(?:st|nd|rd|th)\b", re.IGNORECASE)

_NAME = re.compile(
    r"(?i:\bmy name is|\bthis is|\bname:)\s+([A-Z][a-zA-Z'-]+(?:\s+[A-Z][a-zA-Z'-]+)?)"
)
_REQUIREMENTS = re.compile(
    r"\b(wheelchair(?: access(?:ible)?)?|step[- ]free(?: access)?|accessible seating|"
    r"aisle seats?|family section|away end|seated together|sit together)\b",
    re.IGNORECASE,
)


class KeywordExtractor:
    """Extracts a booking intent by matching against the inventory catalog."""

    def __init__(
        self,
        catalog: InventoryCatalog,
        default_ticket_type: str = settings.booking.default_ticket_type,
    ) -> None:
        self._catalog = catalog
        self._default_ticket_type = default_ticket_type

    async def extract(self, text: str) -> BookingIntent:
        return self.parse(text)

    def parse(self, text: str) -> BookingIntent:
        """Synchronous extraction behind ``extract``; also the fallback of ``LLMExtractor``."""
        text = text or ""
        event_id = self._catalog.match_event(text) or ""
        # Emails contain digits and dots that look like dates and quantities.
        scrubbed = EMAIL_PATTERN.sub(" ", text)

        intent = BookingIntent(
            event_id=event_id,
            requested_date=self._find_date(scrubbed, event_id),
            fan_name=self._find_name(text),
            fan_email=extract_email(text) or "",
            ticket_quantity=self._find_quantity(scrubbed),
            special_requirements=", ".join(
                dict.fromkeys(m.lower() for m in _REQUIREMENTS.findall(text))
            ),
            ticket_type=self._find_ticket_type(text),
        )
        logger.debug("Extracted intent: %s", intent.model_dump())
        return intent

    # ------------------------------------------------------------------ #
    # Field finders
    # ------------------------------------------------------------------ #

    @staticmethod
    def _find_quantity(text: str) -> int:
        match = _QUANTITY_DIGITS.search(text)
        if match:
            return int(match.group(1))
        match = _QUANTITY_WORDS.search(text)
        if match:
            return NUMBER_WORDS[match.group(1).lower()]
        match = _QUANTITY_TIMES.search(text)
        if match:
            return int(match.group(1))
        return 0

    def _find_date(self, text: str, event_id: str) -> str:
        listing = self._catalog.get(event_id) if event_id else None
        for pattern in _DATE_PATTERNS:
            match = pattern.search(text)
            if not match:
                continue
            raw = match.group(0)
            cleaned = _ORDINAL_SUFFIX.sub(r"\1", raw).replace(" of ", " ")
            # Dates without a year belong to the event's season.
            year = listing.date.year if listing else datetime.now().year
            try:
                parsed = date_parser.parse(
                    cleaned, dayfirst="/" in cleaned, default=datetime(year, 1, 1)
                )
            except (ValueError, OverflowError):
                logger.debug("Could not parse date %r", raw)
                return raw
            return parsed.date().isoformat()

        if listing is not None:
            return listing.date.isoformat()
        return ""

    @staticmethod
    def _find_name(text: str) -> str:
        match = _NAME.search(text)
        return match.group(1).strip() if match else ""

    def _find_ticket_type(self, text: str) -> str:
        lowered = text.lower()
        if "premium" in lowered:
            return "Premium"
        if "standard" in lowered:
            return "Standard"
        return self._default_ticket_type
