"""Booking intent and booking record data models."""

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

from dateutil import parser as date_parser
from pydantic import BaseModel, ConfigDict, Field


class BookingIntent(BaseModel):
    """
    The structured booking request accumulated across turns.

    Produced by the extraction collaborator and then filled in field by
    field while the dialog asks for what is missing. A quantity of 0 means
    the sender has not said how many tickets they want yet.
    """

    model_config = ConfigDict(validate_assignment=True)

    event_id: str = ""
    requested_date: str = ""
    fan_name: str = ""
    fan_email: str = ""
    ticket_quantity: int = 1
    special_requirements: str = ""
    ticket_type: str = "Standard"

    @property
    def requested_date_parsed(self) -> Optional[date]:
        """Best-effort parse of the raw requested date, None if unparseable."""
        raw = self.requested_date.strip()
        if not raw:
            return None
        try:
            return date_parser.parse(raw, dayfirst=False).date()
        except (ValueError, OverflowError):
            return None

    def requested_date_or_default(self, now: Optional[datetime] = None) -> date:
        """Parsed requested date, falling back to tomorrow."""
        parsed = self.requested_date_parsed
        if parsed is not None:
            return parsed
        return ((now or datetime.now()) + timedelta(days=1)).date()

    @property
    def has_event(self) -> bool:
        return bool(self.event_id.strip())

    @property
    def has_email(self) -> bool:
        return bool(self.fan_email.strip())


class BookingRecord(BaseModel):
    """Immutable result of one successful reservation."""

    model_config = ConfigDict(frozen=True)

    event_id: str
    event_date: date
    venue: str
    kickoff_time: str
    ticket_reference: str
    purchaser_email: str
    quantity: int
    category: str
    ticket_type: str = "Standard"
    booked_at: datetime
    total_price: Decimal
    seat_numbers: tuple[str, ...] = Field(default_factory=tuple)
