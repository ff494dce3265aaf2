"""Default notifier that records confirmations in the application log."""

import logging

from ticketdesk.schemas.booking_schema import BookingRecord

logger = logging.getLogger(__name__)


class LoggingNotifier:
    """Logs the confirmation email instead of sending it."""

    async def send_booking(
        self, record: BookingRecord, recipient: str, subject: str, body: str
    ) -> None:
        logger.info(
            "Confirmation for %s to %s: %s\n%s",
            record.ticket_reference, recipient, subject, body,
        )
