"""Tests for the conversation store and per-sender state."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from ticketdesk.conversation.state_machine import DialogState, TransitionTrigger
from ticketdesk.conversation.store import ConversationStore
from tests.conftest import make_intent


class TestConversationState:
    def test_new_state_is_idle(self, conversation):
        assert conversation.dialog_state == DialogState.IDLE
        assert conversation.intent is None
        assert conversation.turn_count == 0

    def test_flags_are_mutually_exclusive(self, conversation):
        for trigger in (
            TransitionTrigger.QUANTITY_MISSING,
            TransitionTrigger.EMAIL_MISSING,
            TransitionTrigger.DETAILS_AVAILABLE,
        ):
            conversation.machine.transition(trigger)
            flags = [
                conversation.awaiting_quantity,
                conversation.awaiting_email,
                conversation.awaiting_confirmation,
            ]
            assert flags.count(True) == 1

    def test_touch_counts_turns(self, conversation):
        before = conversation.last_interaction
        conversation.touch()
        conversation.touch()
        assert conversation.turn_count == 2
        assert conversation.last_interaction >= before

    def test_reset_clears_intent_and_flags(self, conversation):
        conversation.intent = make_intent()
        conversation.machine.transition(TransitionTrigger.EMAIL_MISSING)
        conversation.reset()
        assert conversation.intent is None
        assert conversation.dialog_state == DialogState.IDLE
        assert not conversation.awaiting_email

    def test_reset_is_idempotent(self, conversation):
        conversation.reset()
        conversation.reset()
        assert conversation.dialog_state == DialogState.IDLE


class TestConversationStore:
    def test_get_or_create_returns_same_state(self, store):
        first = store.get_or_create("+447700900123")
        second = store.get_or_create("+447700900123")
        assert first is second
        assert len(store) == 1

    def test_sender_is_normalized(self, store):
        state = store.get_or_create("whatsapp:+44 7700 900123")
        assert state.sender_id == "+447700900123"
        assert store.get("+447700900123") is state
        assert "whatsapp:+447700900123" in store

    def test_get_unknown_returns_none(self, store):
        assert store.get("+440000000000") is None
        assert "+440000000000" not in store

    def test_reset_unknown_sender_is_noop(self, store):
        store.reset("+440000000000")
        assert len(store) == 0

    def test_reset_keeps_entry(self, store):
        state = store.get_or_create("+447700900123")
        state.intent = make_intent()
        state.machine.transition(TransitionTrigger.QUANTITY_MISSING)
        store.reset("+447700900123")
        store.reset("+447700900123")
        assert store.get("+447700900123") is state
        assert state.intent is None
        assert state.dialog_state == DialogState.IDLE

    def test_invalid_shard_count(self):
        with pytest.raises(ValueError):
            ConversationStore(shard_count=0)

    def test_concurrent_first_contact_creates_one_state(self, store):
        with ThreadPoolExecutor(max_workers=16) as pool:
            states = list(pool.map(lambda _: store.get_or_create("+447700900123"), range(64)))
        assert all(s is states[0] for s in states)
        assert len(store) == 1

    def test_many_senders(self, store):
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda i: store.get_or_create(f"+44770090{i:04d}"), range(100)))
        assert len(store) == 100
