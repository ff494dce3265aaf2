"""Exception taxonomy shared by the booking engine, dialog, and collaborators."""


class TicketDeskError(Exception):
    """Base class for all ticket desk errors."""


# --- Validation ------------------------------------------------------------


class ValidationError(TicketDeskError):
    """Input from the sender failed validation."""


class InvalidQuantityError(ValidationError):
    """Ticket quantity outside the accepted range."""


class InvalidEmailError(ValidationError):
    """Text does not contain a usable email address."""


# --- Booking engine --------------------------------------------------------


class BookingError(TicketDeskError):
    """A reservation could not be made."""


class EventNotFoundError(BookingError, LookupError):
    """No listing exists for the requested event."""

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event '{event_id}' not found")
        self.event_id = event_id


class InsufficientInventoryError(BookingError):
    """More seats were requested than remain for the listing."""

    def __init__(self, event_id: str, requested: int, available: int) -> None:
        super().__init__(
            f"Requested {requested} seat(s) for '{event_id}' but only {available} left"
        )
        self.event_id = event_id
        self.requested = requested
        self.available = available


class InvalidContactError(BookingError):
    """Purchaser email is present but malformed."""


class PaymentNotConfirmedError(BookingError):
    """The payment gateway refused to confirm payment."""


# --- Collaborators ---------------------------------------------------------


class CollaboratorError(TicketDeskError):
    """An external collaborator (network-bound adapter) failed."""


class MediaFetchError(CollaboratorError):
    """Downloading an inbound voice note failed."""


class TranscriptionFailedError(CollaboratorError):
    """Speech-to-text did not produce a transcript."""


class ExtractionFailedError(CollaboratorError):
    """Intent extraction could not be completed (e.g. timed out)."""


class DeliveryFailedError(CollaboratorError):
    """Outbound notification could not be delivered."""
