"""Shared test fixtures and fake collaborators."""

import asyncio
from types import SimpleNamespace
from typing import Optional

import pytest

from ticketdesk.conversation.dialog import DialogEngine
from ticketdesk.conversation.session import ConversationState
from ticketdesk.conversation.state_machine import DialogStateMachine
from ticketdesk.conversation.store import ConversationStore
from ticketdesk.collaborators.extractor import KeywordExtractor
from ticketdesk.errors import DeliveryFailedError
from ticketdesk.inventory.booking import BookingEngine
from ticketdesk.inventory.catalog import InventoryCatalog
from ticketdesk.orchestrator import BookingOrchestrator
from ticketdesk.schemas.booking_schema import BookingIntent, BookingRecord

SENDER = "whatsapp:+44 7700 900123"


def make_listing_dict(
    name: str = "Chelsea vs Arsenal",
    date: str = "2025-02-15",
    seats: int = 5,
    **overrides,
) -> dict:
    """Helper to create a catalog entry with sensible defaults."""
    entry = {
        "name": name,
        "date": date,
        "venue": "Stamford Bridge",
        "kickoff_time": "15:00",
        "category": "Premier League",
        "ticket_prices": {"Standard": "60.00", "Premium": "120.00"},
        "seat_prefix": "A",
        "capacity": seats,
        "aliases": ["chelsea v arsenal"],
        "alternative_dates": ["2025-05-10", "2025-08-22"],
    }
    entry.update(overrides)
    return entry


def make_intent(**overrides) -> BookingIntent:
    """Helper to create a complete BookingIntent."""
    fields = {
        "event_id": "Chelsea vs Arsenal",
        "requested_date": "2025-02-15",
        "fan_name": "Sam Lee",
        "fan_email": "sam@example.com",
        "ticket_quantity": 2,
    }
    fields.update(overrides)
    return BookingIntent(**fields)


class FakeMediaFetcher:
    def __init__(self, audio: bytes = b"voice-note", error: Optional[Exception] = None) -> None:
        self.audio = audio
        self.error = error
        self.urls: list[str] = []

    async def fetch(self, url: str) -> bytes:
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.audio


class FakeTranscriber:
    def __init__(self, transcript: str = "", error: Optional[Exception] = None) -> None:
        self.transcript = transcript
        self.error = error
        self.calls = 0

    async def transcribe(self, audio: bytes) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.transcript


class RecordingNotifier:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[tuple[BookingRecord, str, str, str]] = []

    async def send_booking(
        self, record: BookingRecord, recipient: str, subject: str, body: str
    ) -> None:
        if self.fail:
            raise DeliveryFailedError(f"SMTP refused {recipient}")
        self.sent.append((record, recipient, subject, body))


class SlowNotifier:
    async def send_booking(
        self, record: BookingRecord, recipient: str, subject: str, body: str
    ) -> None:
        await asyncio.sleep(10)


class TransportErrorNotifier:
    async def send_booking(
        self, record: BookingRecord, recipient: str, subject: str, body: str
    ) -> None:
        raise ConnectionError("smtp connection reset")


class FakeOpenAIClient:
    """Same call shape as ``AsyncOpenAI`` for the audio and chat endpoints."""

    def __init__(
        self,
        transcript: str = "",
        completion: str = "{}",
        error: Optional[Exception] = None,
    ) -> None:
        self.transcript = transcript
        self.completion = completion
        self.error = error
        self.calls: list[dict] = []
        self.audio = SimpleNamespace(transcriptions=SimpleNamespace(create=self._transcribe))
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._complete))

    async def _transcribe(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.transcript)

    async def _complete(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.completion)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class ExplodingExtractor:
    async def extract(self, text: str) -> BookingIntent:
        raise RuntimeError("extractor crashed")


@pytest.fixture
def catalog():
    return InventoryCatalog.default()


@pytest.fixture
def small_catalog():
    return InventoryCatalog.from_dicts([make_listing_dict(seats=5)])


@pytest.fixture
def engine(catalog):
    return BookingEngine(catalog, ticket_ref_prefix="MATCH-", default_ticket_type="Standard")


@pytest.fixture
def small_engine(small_catalog):
    return BookingEngine(small_catalog, ticket_ref_prefix="MATCH-", default_ticket_type="Standard")


@pytest.fixture
def state_machine():
    return DialogStateMachine()


@pytest.fixture
def conversation():
    return ConversationState(sender_id="+447700900123")


@pytest.fixture
def store():
    return ConversationStore(shard_count=4)


@pytest.fixture
def dialog():
    return DialogEngine(min_tickets=1, max_tickets=10)


@pytest.fixture
def extractor(catalog):
    return KeywordExtractor(catalog, default_ticket_type="Standard")


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def transcriber():
    return FakeTranscriber(transcript="Two tickets for Chelsea versus Arsenal please")


@pytest.fixture
def media_fetcher():
    return FakeMediaFetcher()


def make_orchestrator(
    engine: BookingEngine,
    notifier=None,
    transcriber=None,
    media_fetcher=None,
    extractor=None,
) -> BookingOrchestrator:
    """Helper to wire an orchestrator around the given engine with fakes."""
    return BookingOrchestrator(
        engine=engine,
        store=ConversationStore(shard_count=4),
        extractor=extractor or KeywordExtractor(engine.catalog, "Standard"),
        notifier=notifier or RecordingNotifier(),
        transcriber=transcriber or FakeTranscriber(),
        media_fetcher=media_fetcher or FakeMediaFetcher(),
        dialog=DialogEngine(min_tickets=1, max_tickets=10),
    )


@pytest.fixture
def orchestrator(engine, notifier, transcriber, media_fetcher):
    return make_orchestrator(engine, notifier, transcriber, media_fetcher)
