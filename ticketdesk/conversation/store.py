"""
Concurrency-safe mapping from sender identity to conversation state.

The map is split into shards, each guarded by its own lock, so lookups for
different senders rarely contend. Creation is atomic per key: when two
first turns from the same sender race, exactly one state object is created
and both callers receive it.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Optional

from ticketdesk.config import settings
from ticketdesk.conversation.session import ConversationState
from ticketdesk.utils import normalize_sender

logger = logging.getLogger(__name__)


@dataclass
class _Shard:
    lock: threading.Lock = field(default_factory=threading.Lock)
    states: dict[str, ConversationState] = field(default_factory=dict)


class ConversationStore:
    """In-memory conversation states for the lifetime of the process."""

    def __init__(self, shard_count: int = settings.store.shard_count) -> None:
        if shard_count < 1:
            raise ValueError(f"shard_count must be >= 1, got {shard_count}")
        self._shards = [_Shard() for _ in range(shard_count)]

    def _shard_for(self, key: str) -> _Shard:
        return self._shards[hash(key) % len(self._shards)]

    def get_or_create(self, sender_id: str) -> ConversationState:
        """Return the sender's state, creating it on first contact."""
        key = normalize_sender(sender_id)
        shard = self._shard_for(key)
        with shard.lock:
            state = shard.states.get(key)
            if state is None:
                state = ConversationState(sender_id=key)
                shard.states[key] = state
                logger.info("Created new conversation state for %s", key)
            return state

    def get(self, sender_id: str) -> Optional[ConversationState]:
        key = normalize_sender(sender_id)
        shard = self._shard_for(key)
        with shard.lock:
            return shard.states.get(key)

    def reset(self, sender_id: str) -> None:
        """Clear the sender's intent and waiting flags, keeping the entry."""
        state = self.get(sender_id)
        if state is None:
            logger.debug("Reset requested for unknown sender %s", sender_id)
            return
        state.reset()

    def __len__(self) -> int:
        total = 0
        for shard in self._shards:
            with shard.lock:
                total += len(shard.states)
        return total

    def __contains__(self, sender_id: object) -> bool:
        return isinstance(sender_id, str) and self.get(sender_id) is not None
