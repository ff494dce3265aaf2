"""
Seat reservation engine backed by the inventory catalog.

Owns the only code path that mutates a listing's seat pool. Each listing
has its own lock; the inventory check, payment confirmation, seat dequeue,
and count decrement for one reservation all happen while holding it, so
concurrent reservations can never oversell a listing.
"""

import logging
import threading
import uuid
from datetime import date, datetime, timezone
from typing import Optional, Union

from ticketdesk.config import settings
from ticketdesk.errors import (
    EventNotFoundError,
    InsufficientInventoryError,
    InvalidContactError,
    InvalidQuantityError,
    PaymentNotConfirmedError,
)
from ticketdesk.inventory.catalog import EventListing, InventoryCatalog
from ticketdesk.inventory.payment import AlwaysApprovePayments, PaymentGateway
from ticketdesk.schemas.booking_schema import BookingRecord

logger = logging.getLogger(__name__)

UNASSIGNED_SEAT = "Unassigned"
REFERENCE_LENGTH = 8


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


class BookingEngine:
    """Availability checks and atomic seat reservations."""

    def __init__(
        self,
        catalog: InventoryCatalog,
        payments: Optional[PaymentGateway] = None,
        ticket_ref_prefix: str = settings.booking.ticket_ref_prefix,
        default_ticket_type: str = settings.booking.default_ticket_type,
    ) -> None:
        self._catalog = catalog
        self._payments = payments or AlwaysApprovePayments()
        self._ref_prefix = ticket_ref_prefix
        self._default_ticket_type = default_ticket_type
        self._locks: dict[str, threading.Lock] = {
            listing.name: threading.Lock() for listing in catalog
        }

    @property
    def catalog(self) -> InventoryCatalog:
        return self._catalog

    def check_availability(self, event_id: str, requested: Union[date, datetime]) -> bool:
        """True iff the event exists, has seats left, and is scheduled on that date."""
        listing = self._catalog.get(event_id)
        if listing is None:
            return False
        return listing.available_seats > 0 and listing.date == _as_date(requested)

    def reserve(
        self,
        event_id: str,
        requested: Union[date, datetime],
        purchaser_email: str,
        quantity: int,
        ticket_type: Optional[str] = None,
    ) -> BookingRecord:
        """
        Reserve seats and return the resulting booking record.

        Raises:
            InvalidQuantityError: If quantity is not positive.
            EventNotFoundError: If the event is unknown.
            InsufficientInventoryError: If fewer than ``quantity`` seats remain.
            InvalidContactError: If the email is non-empty but has no '@'.
            PaymentNotConfirmedError: If the payment gateway refuses.
        """
        if quantity < 1:
            raise InvalidQuantityError(f"Quantity must be at least 1, got {quantity}")

        listing = self._catalog.lookup(event_id)
        ticket_type = ticket_type or self._default_ticket_type
        requested_date = _as_date(requested)
        if requested_date != listing.date:
            logger.warning(
                "Reserving %s for %s although %s was requested",
                listing.name, listing.date.isoformat(), requested_date.isoformat(),
            )

        with self._locks[listing.name]:
            if quantity > listing.available_seats:
                raise InsufficientInventoryError(listing.name, quantity, listing.available_seats)

            if purchaser_email and "@" not in purchaser_email:
                raise InvalidContactError(
                    "Invalid email format. Please provide a valid email address."
                )

            if not self._payments.confirm_payment(purchaser_email, listing.name, quantity):
                raise PaymentNotConfirmedError(
                    f"Payment not confirmed for {listing.name} x{quantity}"
                )

            seats = self._take_seats(listing, quantity)

        record = BookingRecord(
            event_id=listing.name,
            event_date=listing.date,
            venue=listing.venue,
            kickoff_time=listing.kickoff_time,
            ticket_reference=self._generate_reference(),
            purchaser_email=purchaser_email,
            quantity=quantity,
            category=listing.category,
            ticket_type=ticket_type,
            booked_at=datetime.now(timezone.utc),
            total_price=listing.unit_price(ticket_type) * quantity,
            seat_numbers=tuple(seats),
        )
        logger.info(
            "Booking created: %s for %s x%d (%s), %d seat(s) left",
            record.ticket_reference, listing.name, quantity,
            ", ".join(seats), listing.available_seats,
        )
        return record

    def remaining_seats(self, event_id: str) -> int:
        return self._catalog.lookup(event_id).available_seats

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _take_seats(listing: EventListing, quantity: int) -> list[str]:
        """Dequeue seat labels and decrement the count. Caller holds the lock."""
        seats = []
        for _ in range(quantity):
            if listing.seat_numbers:
                seats.append(listing.seat_numbers.popleft())
            else:
                seats.append(UNASSIGNED_SEAT)
        listing.available_seats -= quantity
        return seats

    def _generate_reference(self) -> str:
        return f"{self._ref_prefix}{uuid.uuid4().hex[:REFERENCE_LENGTH].upper()}"
