"""Reply and confirmation-email text built from dialog and booking data."""

from datetime import date
from decimal import Decimal

from ticketdesk.config import settings
from ticketdesk.errors import (
    BookingError,
    EventNotFoundError,
    InsufficientInventoryError,
    InvalidContactError,
    PaymentNotConfirmedError,
)
from ticketdesk.schemas.booking_schema import BookingIntent, BookingRecord

INVALID_EMAIL = "That doesn't look like a valid email address. Please try again."
ASK_EMAIL_AFTER_QUANTITY = (
    "Great! Now, please provide your email address for the booking confirmation."
)
CONFIRM_OR_CANCEL = "Please reply with 'confirm' to complete your booking or 'cancel' to cancel."
BOOKING_CANCELLED = "Booking cancelled. Is there anything else I can help you with?"
NO_PENDING_BOOKING = (
    "I don't have any pending booking to confirm. Please start your request again."
)
EVENT_NOT_DETERMINED = (
    "I couldn't determine which match you're interested in. "
    "Please text the name of the match you want to book tickets for."
)
VOICE_NOT_PROCESSED = (
    "I'm having trouble processing your voice message. "
    "Could you please type your match booking request instead?"
)
GENERIC_FAILURE = (
    "Sorry, something went wrong on our side and your request could not be completed. "
    "Please try again in a moment. If you were expecting a booking confirmation, contact "
    f"{settings.business.support_email} before booking again."
)


def format_long_date(value: date) -> str:
    """'Saturday, 15 February 2025' without zero-padding the day."""
    return f"{value:%A}, {value.day} {value:%B %Y}"


def format_short_date(value: date) -> str:
    return f"{value.day} {value:%B %Y}"


def format_price(amount: Decimal) -> str:
    return f"{settings.business.currency_symbol}{amount:.2f}"


def welcome_message() -> str:
    return (
        f"Welcome to the {settings.business.name} service! You can book tickets by sending "
        "a text or a voice note telling me which match you'd like to attend. "
        "For example: 'I want tickets for Chelsea vs Arsenal on February 15th'."
    )


def ask_quantity(event_id: str) -> str:
    return f"I can help you book tickets for {event_id}. How many tickets would you like?"


def ask_email(intent: BookingIntent) -> str:
    return (
        f"I can help you book {intent.ticket_quantity} ticket(s) for {intent.event_id}. "
        "Please provide your email address for the booking confirmation."
    )


def invalid_quantity(
    minimum: int = settings.booking.min_tickets,
    maximum: int = settings.booking.max_tickets,
) -> str:
    return f"Please enter a valid number of tickets ({minimum}-{maximum})."


def build_confirmation_summary(
    intent: BookingIntent, requested: date, venue: str, kickoff_time: str
) -> str:
    """Read-back of the pending booking, asking for confirm/cancel."""
    lines = [
        "Please confirm your booking:",
        "",
        f"Match: {intent.event_id}",
        f"Date: {format_long_date(requested)}",
        f"Venue: {venue}",
        f"Kick-off: {kickoff_time}",
        f"Tickets: {intent.ticket_quantity}",
    ]
    if intent.ticket_type and intent.ticket_type != settings.booking.default_ticket_type:
        lines.append(f"Ticket type: {intent.ticket_type}")
    lines.append(f"Email: {intent.fan_email}")
    lines.append("")
    lines.append(CONFIRM_OR_CANCEL)
    return "\n".join(lines)


def build_alternative_dates_message(
    event_id: str, requested: date, alternatives: list[date]
) -> str:
    """Offer other dates when the requested one cannot be booked."""
    dates_text = ", ".join(format_short_date(d) for d in alternatives)
    return (
        f"Sorry, tickets for {event_id} on {format_short_date(requested)} are not available. "
        f"Alternative dates: {dates_text}. If one of these suits you, send a new request "
        "for that date."
    )


def no_availability(event_id: str) -> str:
    return f"Sorry, there are no tickets available for {event_id}."


def build_booking_confirmed(record: BookingRecord, email_sent: bool) -> str:
    """Reply sent to the sender after a successful reservation."""
    seats = ", ".join(record.seat_numbers)
    parts = [
        f"Booking confirmed! Your {record.quantity} ticket(s) for {record.event_id} "
        f"have been booked (seats: {seats}).",
        f"Your booking reference is {record.ticket_reference}. "
        f"Amount due: {format_price(record.total_price)}.",
    ]
    if email_sent:
        parts.append(f"A confirmation email has been sent to {record.purchaser_email}.")
    else:
        parts.append(
            "We couldn't send the confirmation email right now, so please keep this "
            "reference safe."
        )
    parts.append(
        f"Please complete payment within {settings.business.payment_window_minutes} "
        "minutes to secure your tickets."
    )
    return " ".join(parts)


def booking_failed(error: BookingError) -> str:
    """Honest, sender-facing explanation for a failed reservation."""
    if isinstance(error, InsufficientInventoryError):
        return (
            f"Sorry, there aren't enough tickets left for {error.event_id}. "
            f"Only {error.available} ticket(s) remain. "
            "Please start a new request with a smaller number."
        )
    if isinstance(error, EventNotFoundError):
        return (
            f"Sorry, I couldn't find the match '{error.event_id}'. "
            "Please start your request again."
        )
    if isinstance(error, InvalidContactError):
        return (
            "Your email address doesn't look valid, so the booking was not made. "
            "Please start your request again with a valid email address."
        )
    if isinstance(error, PaymentNotConfirmedError):
        return (
            "Payment not confirmed, so the booking was not made. "
            "Please complete your payment to receive your ticket."
        )
    return GENERIC_FAILURE


def build_confirmation_email(record: BookingRecord) -> tuple[str, str]:
    """Subject and body of the booking confirmation email."""
    biz = settings.business
    subject = f"Ticket Confirmation - {record.event_id}"
    body = "\n".join([
        "Your match ticket booking is confirmed!",
        "",
        "EVENT DETAILS:",
        f"Match: {record.event_id}",
        f"Date: {format_long_date(record.event_date)}",
        f"Venue: {record.venue}",
        f"Kick-off: {record.kickoff_time}",
        f"Number of Tickets: {record.quantity} ({record.ticket_type})",
        f"Seats: {', '.join(record.seat_numbers)}",
        f"Booking Reference: {record.ticket_reference}",
        "",
        "PAYMENT INSTRUCTIONS:",
        f"Please complete your payment within {biz.payment_window_minutes} minutes to secure "
        "your tickets. After this time, your reservation will be released.",
        "",
        f"Payment Amount: {format_price(record.total_price)}",
        f"Payment Link: {biz.payment_url_base.rstrip('/')}/{record.ticket_reference}",
        "",
        "IMPORTANT INFORMATION:",
        "- Please arrive at least 60 minutes before kick-off",
        "- Bring a valid photo ID matching the name on your booking",
        "- Stadium regulations prohibit large bags and outside food/beverages",
        "",
        f"For any inquiries, contact our fan support team at {biz.support_email} "
        f"or call {biz.support_phone}.",
    ])
    return subject, body
