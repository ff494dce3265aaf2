"""
Interfaces of the external collaborators the orchestrator drives.

These are the I/O-bound adapters around the core: fetching a voice note,
speech-to-text, turning free text into a booking intent, and delivering the
confirmation. Implementations signal failure with the matching
``CollaboratorError`` subclass.
"""

from typing import Protocol

from ticketdesk.errors import TranscriptionFailedError
from ticketdesk.schemas.booking_schema import BookingIntent, BookingRecord


class MediaFetcher(Protocol):
    async def fetch(self, url: str) -> bytes:
        """Download inbound media. Raises MediaFetchError."""
        ...


class Transcriber(Protocol):
    async def transcribe(self, audio: bytes) -> str:
        """Speech-to-text. Raises TranscriptionFailedError."""
        ...


class Extractor(Protocol):
    async def extract(self, text: str) -> BookingIntent:
        """Free text to booking intent.

        Must not raise: fields that cannot be found stay empty, and an
        unrecognized event is signalled by an empty ``event_id``.
        """
        ...


class Notifier(Protocol):
    async def send_booking(
        self, record: BookingRecord, recipient: str, subject: str, body: str
    ) -> None:
        """Deliver a booking confirmation. Raises DeliveryFailedError."""
        ...


class UnconfiguredTranscriber:
    """Placeholder used when no speech-to-text backend is wired in."""

    async def transcribe(self, audio: bytes) -> str:
        raise TranscriptionFailedError("No speech-to-text backend configured")
