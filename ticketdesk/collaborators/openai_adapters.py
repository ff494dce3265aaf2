"""
OpenAI-backed speech-to-text and booking intent extraction.

``WhisperTranscriber`` turns a downloaded voice note into text.
``LLMExtractor`` asks a chat model for the booking fields as JSON and
resolves them against the catalog; whenever the model call or its output
is unusable it falls back to the rule-based ``KeywordExtractor``, and it
fills any field the model left empty from that same fallback.

Both take an ``AsyncOpenAI`` client so tests can pass a stand-in object
with the same ``audio.transcriptions`` / ``chat.completions`` shape.
"""

import json
import logging
from typing import Any, Optional

import openai
from openai import AsyncOpenAI
from pydantic import ValidationError

from ticketdesk.collaborators.extractor import KeywordExtractor
from ticketdesk.config import settings
from ticketdesk.conversation.validators import extract_email
from ticketdesk.errors import TranscriptionFailedError
from ticketdesk.inventory.catalog import InventoryCatalog
from ticketdesk.schemas.booking_schema import BookingIntent

logger = logging.getLogger(__name__)

VOICE_NOTE_FILENAME = "voice-note.ogg"

EXTRACTION_SYSTEM_PROMPT = (
    "You extract football ticket booking requests from customer messages. "
    "Return ONLY a JSON object with these keys: "
    '"event" (the match, using one of the listed match names when possible), '
    '"date" (ISO-8601 yyyy-mm-dd, or "" if not mentioned), '
    '"name", "email", '
    '"quantity" (integer, 0 if not mentioned), '
    '"ticket_type" ("Standard" or "Premium", "" if not mentioned), '
    '"special_requirements" (short text, "" if none). No extra text.'
)


def build_client(api_key: str, timeout_sec: float) -> AsyncOpenAI:
    return AsyncOpenAI(api_key=api_key, timeout=timeout_sec)


class WhisperTranscriber:
    """Speech-to-text through the OpenAI audio transcription endpoint."""

    def __init__(self, client: AsyncOpenAI, model: str = "whisper-1") -> None:
        self._client = client
        self._model = model

    async def transcribe(self, audio: bytes) -> str:
        if not audio:
            raise TranscriptionFailedError("Voice note is empty")
        try:
            result = await self._client.audio.transcriptions.create(
                model=self._model,
                file=(VOICE_NOTE_FILENAME, audio),
            )
        except openai.OpenAIError as exc:
            raise TranscriptionFailedError(f"Transcription request failed: {exc}") from exc

        text = (getattr(result, "text", "") or "").strip()
        if not text:
            raise TranscriptionFailedError("Transcription returned no text")
        logger.debug("Transcribed %d bytes of audio into %d chars", len(audio), len(text))
        return text


class LLMExtractor:
    """Chat-model extraction with a rule-based fallback. Never raises."""

    def __init__(
        self,
        client: AsyncOpenAI,
        catalog: InventoryCatalog,
        model: str = "gpt-4o-mini",
        fallback: Optional[KeywordExtractor] = None,
        default_ticket_type: str = settings.booking.default_ticket_type,
    ) -> None:
        self._client = client
        self._catalog = catalog
        self._model = model
        self._fallback = fallback or KeywordExtractor(catalog, default_ticket_type)

    async def extract(self, text: str) -> BookingIntent:
        fallback = self._fallback.parse(text)
        data = await self._complete(text or "")
        if data is None:
            return fallback
        try:
            return self._merge(data, fallback)
        except (ValidationError, TypeError, ValueError) as exc:
            logger.warning("LLM extraction output rejected, using keyword extraction: %s", exc)
            return fallback

    async def _complete(self, text: str) -> Optional[dict[str, Any]]:
        matches = ", ".join(listing.name for listing in self._catalog)
        try:
            completion = await self._client.chat.completions.create(
                model=self._model,
                temperature=0,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": EXTRACTION_SYSTEM_PROMPT},
                    {"role": "user", "content": f"Matches on sale: {matches}\n\nMessage:\n{text}"},
                ],
            )
            raw = completion.choices[0].message.content or ""
            data = json.loads(raw)
        except openai.OpenAIError as exc:
            logger.warning("LLM extraction request failed, using keyword extraction: %s", exc)
            return None
        except (json.JSONDecodeError, IndexError, AttributeError) as exc:
            logger.warning("LLM extraction returned unusable output: %s", exc)
            return None
        if not isinstance(data, dict):
            logger.warning("LLM extraction returned %s instead of an object", type(data).__name__)
            return None
        return data

    def _merge(self, data: dict[str, Any], fallback: BookingIntent) -> BookingIntent:
        """Resolve model output against the catalog; empty fields come from ``fallback``."""
        event_id = self._catalog.match_event(str(data.get("event") or "")) or fallback.event_id

        requested_date = str(data.get("date") or "").strip()
        if not requested_date:
            if event_id == fallback.event_id:
                requested_date = fallback.requested_date
            else:
                listing = self._catalog.get(event_id)
                requested_date = listing.date.isoformat() if listing else ""

        ticket_quantity = max(int(data.get("quantity") or 0), 0) or fallback.ticket_quantity

        ticket_type = str(data.get("ticket_type") or "").strip().capitalize()
        if ticket_type not in ("Standard", "Premium"):
            ticket_type = fallback.ticket_type

        return BookingIntent(
            event_id=event_id,
            requested_date=requested_date,
            fan_name=str(data.get("name") or "").strip() or fallback.fan_name,
            fan_email=extract_email(str(data.get("email") or "")) or fallback.fan_email,
            ticket_quantity=ticket_quantity,
            special_requirements=(
                str(data.get("special_requirements") or "").strip()
                or fallback.special_requirements
            ),
            ticket_type=ticket_type,
        )
