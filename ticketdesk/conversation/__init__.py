from ticketdesk.conversation.state_machine import (
    DialogState,
    DialogStateMachine,
    TransitionTrigger,
)
from ticketdesk.conversation.session import ConversationState
from ticketdesk.conversation.store import ConversationStore
from ticketdesk.conversation.dialog import Decision, DecisionType, DialogEngine

__all__ = [
    "DialogStateMachine",
    "DialogState",
    "TransitionTrigger",
    "ConversationState",
    "ConversationStore",
    "DialogEngine",
    "Decision",
    "DecisionType",
]
