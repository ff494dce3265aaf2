"""Per-sender conversation state."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from ticketdesk.conversation.state_machine import DialogState, DialogStateMachine
from ticketdesk.schemas.booking_schema import BookingIntent


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ConversationState:
    """
    Everything the desk remembers about one sender between turns.

    The dialog position lives in a single state machine; the
    ``awaiting_*`` flags are derived from it and cannot disagree.
    ``turn_lock`` serializes turns from the same sender.
    """
    sender_id: str
    intent: Optional[BookingIntent] = None
    machine: DialogStateMachine = field(default_factory=DialogStateMachine)
    last_interaction: datetime = field(default_factory=_utcnow)
    turn_count: int = 0
    turn_lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)

    @property
    def dialog_state(self) -> DialogState:
        return self.machine.current_state

    @property
    def awaiting_quantity(self) -> bool:
        return self.dialog_state == DialogState.AWAITING_QUANTITY

    @property
    def awaiting_email(self) -> bool:
        return self.dialog_state == DialogState.AWAITING_EMAIL

    @property
    def awaiting_confirmation(self) -> bool:
        return self.dialog_state == DialogState.AWAITING_CONFIRMATION

    def touch(self) -> None:
        self.last_interaction = _utcnow()
        self.turn_count += 1

    def reset(self) -> None:
        """Drop the pending intent and return to idle. Safe to repeat."""
        self.intent = None
        self.machine.reset()
