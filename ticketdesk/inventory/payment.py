"""
Payment confirmation hook used by the booking engine.

Payment processing is out of scope: the default gateway approves every
request. A real integration implements the same ``confirm_payment`` method.
It is called from a worker thread while the listing lock is held.
"""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class PaymentGateway(Protocol):
    def confirm_payment(self, purchaser_email: str, event_id: str, quantity: int) -> bool:
        """Return True when payment for the reservation is confirmed."""
        ...


class AlwaysApprovePayments:
    """Stand-in gateway that confirms every payment."""

    def confirm_payment(self, purchaser_email: str, event_id: str, quantity: int) -> bool:
        logger.debug(
            "Payment auto-approved for %s x%d (%s)", event_id, quantity, purchaser_email
        )
        return True
