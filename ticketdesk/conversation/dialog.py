"""
Dialog engine: decides what to do with one inbound turn.

``DialogEngine.decide`` is a pure function of the sender's current dialog
state and the inbound turn. It never touches the store, the booking engine,
or any collaborator; it only says what should happen next. The orchestrator
carries the decision out.

Usage:
    engine = DialogEngine()
    decision = engine.decide(state, InboundTurn(sender_id="+447700900123", body="2"))
    if decision.type == DecisionType.CHECK_AVAILABILITY:
        ...
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ticketdesk import replies
from ticketdesk.config import settings
from ticketdesk.conversation.session import ConversationState
from ticketdesk.conversation.state_machine import DialogState, TransitionTrigger
from ticketdesk.conversation.validators import (
    is_cancel,
    is_confirm,
    require_email,
    require_quantity,
)
from ticketdesk.errors import InvalidEmailError, InvalidQuantityError
from ticketdesk.schemas.booking_schema import BookingIntent
from ticketdesk.schemas.conversation_schema import InboundTurn, TurnSource

logger = logging.getLogger(__name__)


class DecisionType(str, Enum):
    """What the orchestrator must do with a turn."""
    REPLY = "reply"
    ASK = "ask"
    TRANSCRIBE = "transcribe"
    EXTRACT = "extract"
    CHECK_AVAILABILITY = "check_availability"
    RESERVE = "reserve"
    CANCEL = "cancel"


@dataclass(frozen=True)
class Decision:
    """
    Outcome of classifying one turn.

    ``reply`` is set for REPLY/ASK/CANCEL. ``trigger`` is the state
    transition to apply. ``intent`` carries a freshly extracted intent to
    store, while ``quantity``/``email`` are single-field updates to the
    pending one. ``reset`` asks for the conversation to be cleared.
    """
    type: DecisionType
    reply: Optional[str] = None
    trigger: Optional[TransitionTrigger] = None
    intent: Optional[BookingIntent] = None
    quantity: Optional[int] = None
    email: Optional[str] = None
    reset: bool = False


class DialogEngine:
    """Dispatches a turn on the sender's dialog state."""

    def __init__(
        self,
        min_tickets: int = settings.booking.min_tickets,
        max_tickets: int = settings.booking.max_tickets,
    ) -> None:
        self._min_tickets = min_tickets
        self._max_tickets = max_tickets
        self._handlers: dict[
            DialogState, Callable[[ConversationState, InboundTurn], Decision]
        ] = {
            DialogState.AWAITING_CONFIRMATION: self._on_awaiting_confirmation,
            DialogState.AWAITING_EMAIL: self._on_awaiting_email,
            DialogState.AWAITING_QUANTITY: self._on_awaiting_quantity,
            DialogState.IDLE: self._on_idle,
        }

    def decide(self, state: ConversationState, turn: InboundTurn) -> Decision:
        """Classify a turn against the sender's current dialog state."""
        decision = self._handlers[state.dialog_state](state, turn)
        logger.debug(
            "Decision for %s in %s: %s",
            state.sender_id, state.dialog_state.value, decision.type.value,
        )
        return decision

    def on_new_intent(self, intent: BookingIntent, source: TurnSource) -> Decision:
        """Decide what to ask for after extraction produced a fresh intent.

        Voice requests without a recognizable event get a specific hint;
        text requests fall back to the welcome message.
        """
        if not intent.has_event:
            if source == TurnSource.VOICE:
                return Decision(DecisionType.REPLY, reply=replies.EVENT_NOT_DETERMINED)
            return Decision(DecisionType.REPLY, reply=replies.welcome_message())

        if not self._quantity_in_range(intent.ticket_quantity):
            return Decision(
                DecisionType.ASK,
                reply=replies.ask_quantity(intent.event_id),
                trigger=TransitionTrigger.QUANTITY_MISSING,
                intent=intent,
            )

        if not intent.has_email:
            return Decision(
                DecisionType.ASK,
                reply=replies.ask_email(intent),
                trigger=TransitionTrigger.EMAIL_MISSING,
                intent=intent,
            )

        return Decision(DecisionType.CHECK_AVAILABILITY, intent=intent)

    # ------------------------------------------------------------------ #
    # Per-state handlers
    # ------------------------------------------------------------------ #

    def _on_awaiting_confirmation(self, state: ConversationState, turn: InboundTurn) -> Decision:
        if state.intent is None:
            return Decision(DecisionType.REPLY, reply=replies.NO_PENDING_BOOKING, reset=True)
        if is_confirm(turn.body):
            return Decision(DecisionType.RESERVE)
        if is_cancel(turn.body):
            return Decision(
                DecisionType.CANCEL,
                reply=replies.BOOKING_CANCELLED,
                trigger=TransitionTrigger.BOOKING_CANCELLED,
                reset=True,
            )
        return Decision(DecisionType.REPLY, reply=replies.CONFIRM_OR_CANCEL)

    def _on_awaiting_email(self, state: ConversationState, turn: InboundTurn) -> Decision:
        if state.intent is None:
            return Decision(DecisionType.REPLY, reply=replies.NO_PENDING_BOOKING, reset=True)
        try:
            email = require_email(turn.body)
        except InvalidEmailError:
            return Decision(DecisionType.REPLY, reply=replies.INVALID_EMAIL)
        return Decision(DecisionType.CHECK_AVAILABILITY, email=email)

    def _on_awaiting_quantity(self, state: ConversationState, turn: InboundTurn) -> Decision:
        if state.intent is None:
            return Decision(DecisionType.REPLY, reply=replies.NO_PENDING_BOOKING, reset=True)
        try:
            quantity = require_quantity(turn.body, self._min_tickets, self._max_tickets)
        except InvalidQuantityError:
            return Decision(
                DecisionType.REPLY,
                reply=replies.invalid_quantity(self._min_tickets, self._max_tickets),
            )
        if not state.intent.has_email:
            return Decision(
                DecisionType.ASK,
                reply=replies.ASK_EMAIL_AFTER_QUANTITY,
                trigger=TransitionTrigger.EMAIL_MISSING,
                quantity=quantity,
            )
        return Decision(DecisionType.CHECK_AVAILABILITY, quantity=quantity)

    def _on_idle(self, state: ConversationState, turn: InboundTurn) -> Decision:
        if turn.has_media:
            return Decision(DecisionType.TRANSCRIBE)
        if turn.text:
            return Decision(DecisionType.EXTRACT)
        return Decision(DecisionType.REPLY, reply=replies.welcome_message())

    def _quantity_in_range(self, quantity: int) -> bool:
        return self._min_tickets <= quantity <= self._max_tickets
