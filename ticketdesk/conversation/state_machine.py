"""
Finite state machine for the per-sender booking dialog.

Defines the four dialog states and the explicit transitions between them.
The waiting flags the rest of the system talks about (awaiting quantity,
email, or confirmation) are views over the single current state, so at most
one of them can ever be set.

Usage:
    sm = DialogStateMachine()
    sm.transition(TransitionTrigger.QUANTITY_MISSING)
    assert sm.current_state == DialogState.AWAITING_QUANTITY
"""

import logging
from enum import Enum
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)


class DialogState(str, Enum):
    """All possible states of a sender's booking dialog."""
    IDLE = "idle"
    AWAITING_QUANTITY = "awaiting_quantity"
    AWAITING_EMAIL = "awaiting_email"
    AWAITING_CONFIRMATION = "awaiting_confirmation"


class TransitionTrigger(str, Enum):
    """Events that cause state transitions."""
    QUANTITY_MISSING = "quantity_missing"
    EMAIL_MISSING = "email_missing"
    DETAILS_AVAILABLE = "details_available"
    DETAILS_UNAVAILABLE = "details_unavailable"
    BOOKING_CONFIRMED = "booking_confirmed"
    BOOKING_CANCELLED = "booking_cancelled"
    RESET = "reset"


@dataclass
class Transition:
    """A single valid state transition."""
    from_state: DialogState
    to_state: DialogState
    trigger: TransitionTrigger


@dataclass
class StateEntry:
    """Recorded history entry for a state visit."""
    state: DialogState
    entered_at: datetime
    trigger: Optional[TransitionTrigger] = None


class InvalidTransitionError(Exception):
    """Raised when a transition is not valid from the current state."""


_COLLECTING = (DialogState.IDLE, DialogState.AWAITING_QUANTITY, DialogState.AWAITING_EMAIL)


class DialogStateMachine:
    """
    Deterministic state machine for one sender's booking dialog.

    Every transition must be explicitly defined. A dialog bug that tries to
    jump between states without a matching transition is rejected with an
    error listing what is allowed from the current state.
    """

    TRANSITIONS: list[Transition] = [
        # --- Gap filling ---
        Transition(DialogState.IDLE, DialogState.AWAITING_QUANTITY,
                   TransitionTrigger.QUANTITY_MISSING),
        Transition(DialogState.IDLE, DialogState.AWAITING_EMAIL,
                   TransitionTrigger.EMAIL_MISSING),
        Transition(DialogState.AWAITING_QUANTITY, DialogState.AWAITING_EMAIL,
                   TransitionTrigger.EMAIL_MISSING),

        # --- Availability result ---
        *[
            Transition(state, DialogState.AWAITING_CONFIRMATION,
                       TransitionTrigger.DETAILS_AVAILABLE)
            for state in _COLLECTING
        ],
        *[
            Transition(state, DialogState.IDLE, TransitionTrigger.DETAILS_UNAVAILABLE)
            for state in _COLLECTING
        ],

        # --- Confirmation gate ---
        Transition(DialogState.AWAITING_CONFIRMATION, DialogState.IDLE,
                   TransitionTrigger.BOOKING_CONFIRMED),
        Transition(DialogState.AWAITING_CONFIRMATION, DialogState.IDLE,
                   TransitionTrigger.BOOKING_CANCELLED),

        # --- Reset from anywhere ---
        *[
            Transition(state, DialogState.IDLE, TransitionTrigger.RESET)
            for state in DialogState
        ],
    ]

    def __init__(self) -> None:
        self._current_state = DialogState.IDLE
        self._history: list[StateEntry] = [
            StateEntry(state=DialogState.IDLE, entered_at=datetime.now(timezone.utc))
        ]

    @property
    def current_state(self) -> DialogState:
        return self._current_state

    def transition(self, trigger: TransitionTrigger) -> DialogState:
        """
        Execute a state transition.

        Args:
            trigger: The event triggering the transition.

        Returns:
            The new dialog state.

        Raises:
            InvalidTransitionError: If no valid transition exists.
        """
        for t in self.TRANSITIONS:
            if t.from_state == self._current_state and t.trigger == trigger:
                old_state = self._current_state
                self._current_state = t.to_state

                self._history.append(StateEntry(
                    state=self._current_state,
                    entered_at=datetime.now(timezone.utc),
                    trigger=trigger,
                ))

                logger.debug(
                    "Dialog transition: %s -> %s (trigger: %s)",
                    old_state.value, self._current_state.value, trigger.value,
                )
                return self._current_state

        valid = [t.value for t in self.get_valid_triggers()]
        raise InvalidTransitionError(
            f"No valid transition from '{self._current_state.value}' "
            f"with trigger '{trigger.value}'. Valid triggers: {valid}"
        )

    def move_to(self, target: DialogState, trigger: TransitionTrigger) -> DialogState:
        """Transition only if not already in ``target``."""
        if self._current_state == target:
            return self._current_state
        return self.transition(trigger)

    def reset(self) -> DialogState:
        """Return to IDLE. A no-op when already idle."""
        return self.move_to(DialogState.IDLE, TransitionTrigger.RESET)

    def get_valid_triggers(self) -> list[TransitionTrigger]:
        """Return all triggers valid from the current state."""
        return [t.trigger for t in self.TRANSITIONS if t.from_state == self._current_state]

    def get_history(self) -> list[StateEntry]:
        """Return the full state transition history."""
        return list(self._history)

    def get_state_trace(self) -> list[str]:
        """Return ordered list of state names visited."""
        return [entry.state.value for entry in self._history]
