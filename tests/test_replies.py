"""Tests for reply and confirmation-email text."""

from datetime import date, datetime, timezone
from decimal import Decimal

from ticketdesk import replies
from ticketdesk.errors import (
    EventNotFoundError,
    InsufficientInventoryError,
    InvalidContactError,
    PaymentNotConfirmedError,
)
from ticketdesk.schemas.booking_schema import BookingRecord
from tests.conftest import make_intent


def make_record(**overrides) -> BookingRecord:
    fields = {
        "event_id": "Chelsea vs Arsenal",
        "event_date": date(2025, 2, 15),
        "venue": "Stamford Bridge",
        "kickoff_time": "15:00",
        "ticket_reference": "MATCH-1A2B3C4D",
        "purchaser_email": "sam@example.com",
        "quantity": 2,
        "category": "Premier League",
        "booked_at": datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc),
        "total_price": Decimal("120.00"),
        "seat_numbers": ("A1", "A2"),
    }
    fields.update(overrides)
    return BookingRecord(**fields)


class TestFormatting:
    def test_long_date(self):
        assert replies.format_long_date(date(2025, 2, 5)) == "Wednesday, 5 February 2025"

    def test_short_date(self):
        assert replies.format_short_date(date(2025, 5, 10)) == "10 May 2025"

    def test_price_two_decimals(self):
        assert replies.format_price(Decimal("60")).endswith("60.00")


class TestConfirmationSummary:
    def test_lists_booking_details(self):
        summary = replies.build_confirmation_summary(
            make_intent(), date(2025, 2, 15), "Stamford Bridge", "15:00"
        )
        lines = summary.splitlines()
        assert lines[0] == "Please confirm your booking:"
        assert "Match: Chelsea vs Arsenal" in lines
        assert "Tickets: 2" in lines
        assert "Email: sam@example.com" in lines
        assert lines[-1] == replies.CONFIRM_OR_CANCEL

    def test_non_default_ticket_type_shown(self):
        summary = replies.build_confirmation_summary(
            make_intent(ticket_type="Premium"), date(2025, 2, 15), "Stamford Bridge", "15:00"
        )
        assert "Ticket type: Premium" in summary

    def test_default_ticket_type_hidden(self):
        summary = replies.build_confirmation_summary(
            make_intent(), date(2025, 2, 15), "Stamford Bridge", "15:00"
        )
        assert "Ticket type" not in summary


class TestBookingConfirmed:
    def test_email_sent(self):
        text = replies.build_booking_confirmed(make_record(), email_sent=True)
        assert text.startswith("Booking confirmed!")
        assert "MATCH-1A2B3C4D" in text
        assert "seats: A1, A2" in text
        assert "sent to sam@example.com" in text

    def test_email_not_sent(self):
        text = replies.build_booking_confirmed(make_record(), email_sent=False)
        assert "couldn't send the confirmation email" in text
        assert "MATCH-1A2B3C4D" in text


class TestBookingFailed:
    def test_insufficient_inventory_reports_remaining(self):
        text = replies.booking_failed(InsufficientInventoryError("Chelsea vs Arsenal", 6, 5))
        assert "Only 5 ticket(s) remain" in text

    def test_not_found(self):
        assert "Leeds vs Everton" in replies.booking_failed(EventNotFoundError("Leeds vs Everton"))

    def test_invalid_contact(self):
        assert "email" in replies.booking_failed(InvalidContactError("bad")).lower()

    def test_payment(self):
        text = replies.booking_failed(PaymentNotConfirmedError("declined"))
        assert "was not made" in text

    def test_no_failure_sounds_like_success(self):
        for error in (
            InsufficientInventoryError("Chelsea vs Arsenal", 6, 5),
            EventNotFoundError("Leeds vs Everton"),
            InvalidContactError("bad"),
            PaymentNotConfirmedError("declined"),
        ):
            assert "confirmed!" not in replies.booking_failed(error)


class TestConfirmationEmail:
    def test_subject_and_body(self):
        subject, body = replies.build_confirmation_email(make_record())
        assert subject == "Ticket Confirmation - Chelsea vs Arsenal"
        assert "Date: Saturday, 15 February 2025" in body
        assert "Seats: A1, A2" in body
        assert "Booking Reference: MATCH-1A2B3C4D" in body
        assert body.count("MATCH-1A2B3C4D") == 2

    def test_alternative_dates_message(self):
        text = replies.build_alternative_dates_message(
            "Chelsea vs Arsenal", date(2025, 3, 1), [date(2025, 5, 10), date(2025, 8, 22)]
        )
        assert "1 March 2025" in text
        assert "10 May 2025, 22 August 2025" in text
