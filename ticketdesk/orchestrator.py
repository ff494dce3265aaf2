"""
Booking orchestrator: the single entry point the transport layer calls.

Takes one inbound turn, asks the dialog engine what to do, performs the
booking-engine and collaborator calls that decision requires, applies the
resulting state transition, and returns the reply text. Turns from the same
sender are serialized; every failure is caught here and turned into a reply.

Usage:
    orchestrator = build_orchestrator()
    reply = await orchestrator.handle_turn("whatsapp:+447700900123", "2 tickets for Chelsea vs Arsenal")
"""

import asyncio
from typing import Optional

from ticketdesk import replies
from ticketdesk.collaborators.base import (
    Extractor,
    MediaFetcher,
    Notifier,
    Transcriber,
    UnconfiguredTranscriber,
)
from ticketdesk.collaborators.extractor import KeywordExtractor
from ticketdesk.collaborators.media import HttpMediaFetcher
from ticketdesk.collaborators.notifier import LoggingNotifier
from ticketdesk.collaborators.openai_adapters import LLMExtractor, WhisperTranscriber, build_client
from ticketdesk.config import AppConfig, settings
from ticketdesk.conversation.dialog import Decision, DecisionType, DialogEngine
from ticketdesk.conversation.session import ConversationState
from ticketdesk.conversation.state_machine import TransitionTrigger
from ticketdesk.conversation.store import ConversationStore
from ticketdesk.errors import (
    BookingError,
    CollaboratorError,
    ExtractionFailedError,
    MediaFetchError,
    TranscriptionFailedError,
)
from ticketdesk.inventory.booking import BookingEngine
from ticketdesk.inventory.catalog import InventoryCatalog
from ticketdesk.logging_context import get_turn_logger, set_turn_id
from ticketdesk.schemas.booking_schema import BookingIntent, BookingRecord
from ticketdesk.schemas.conversation_schema import InboundTurn, TurnSource

logger = get_turn_logger(__name__)


class BookingOrchestrator:
    """Composes dialog decisions with booking and collaborator calls."""

    def __init__(
        self,
        engine: BookingEngine,
        store: ConversationStore,
        extractor: Extractor,
        notifier: Notifier,
        transcriber: Optional[Transcriber] = None,
        media_fetcher: Optional[MediaFetcher] = None,
        dialog: Optional[DialogEngine] = None,
        config: AppConfig = settings,
    ) -> None:
        self._engine = engine
        self._store = store
        self._extractor = extractor
        self._notifier = notifier
        self._transcriber = transcriber or UnconfiguredTranscriber()
        self._media_fetcher = media_fetcher or HttpMediaFetcher()
        self._dialog = dialog or DialogEngine(
            config.booking.min_tickets, config.booking.max_tickets
        )
        self._timeouts = config.collaborators

    @property
    def store(self) -> ConversationStore:
        return self._store

    @property
    def engine(self) -> BookingEngine:
        return self._engine

    async def handle_turn(
        self, sender_id: str, body_text: str, media_ref: Optional[str] = None
    ) -> str:
        """Process one inbound message and return the reply text. Never raises."""
        state = self._store.get_or_create(sender_id)
        async with state.turn_lock:
            state.touch()
            set_turn_id(f"TURN-{state.sender_id}-{state.turn_count}")
            turn = InboundTurn(sender_id=state.sender_id, body=body_text or "", media_ref=media_ref)
            try:
                return await self._process(state, turn)
            except Exception:
                logger.exception(
                    "Unhandled error processing turn from %s in state %s",
                    state.sender_id, state.dialog_state.value,
                )
                state.reset()
                return replies.GENERIC_FAILURE

    # ------------------------------------------------------------------ #
    # Decision execution
    # ------------------------------------------------------------------ #

    async def _process(self, state: ConversationState, turn: InboundTurn) -> str:
        logger.info(
            "Processing turn from %s (state=%s, media=%s)",
            state.sender_id, state.dialog_state.value, turn.has_media,
        )
        decision = self._dialog.decide(state, turn)

        if decision.type == DecisionType.TRANSCRIBE:
            return await self._handle_voice(state, turn.media_ref or "")
        if decision.type == DecisionType.EXTRACT:
            return await self._handle_text(state, turn.text)
        return await self._execute(state, decision)

    async def _execute(self, state: ConversationState, decision: Decision) -> str:
        if decision.intent is not None:
            state.intent = decision.intent
        if state.intent is not None:
            if decision.quantity is not None:
                state.intent.ticket_quantity = decision.quantity
            if decision.email is not None:
                state.intent.fan_email = decision.email

        if decision.type == DecisionType.CHECK_AVAILABILITY:
            return self._check_availability(state)
        if decision.type == DecisionType.RESERVE:
            return await self._reserve(state)

        if decision.trigger is not None:
            state.machine.transition(decision.trigger)
        if decision.reset:
            state.reset()
        return decision.reply or replies.welcome_message()

    async def _handle_voice(self, state: ConversationState, media_ref: str) -> str:
        try:
            audio = await asyncio.wait_for(
                self._media_fetcher.fetch(media_ref), self._timeouts.media_fetch_timeout_sec
            )
            transcript = await asyncio.wait_for(
                self._transcriber.transcribe(audio), self._timeouts.transcription_timeout_sec
            )
        except (MediaFetchError, TranscriptionFailedError) as exc:
            logger.error("Voice note from %s could not be processed: %s", state.sender_id, exc)
            state.reset()
            return replies.VOICE_NOT_PROCESSED
        except asyncio.TimeoutError:
            logger.error("Voice note from %s timed out (%s)", state.sender_id, media_ref)
            state.reset()
            return replies.VOICE_NOT_PROCESSED

        logger.info("Transcribed voice note from %s (%d chars)", state.sender_id, len(transcript))
        return await self._handle_new_request(state, transcript, TurnSource.VOICE)

    async def _handle_text(self, state: ConversationState, text: str) -> str:
        return await self._handle_new_request(state, text, TurnSource.TEXT)

    async def _handle_new_request(
        self, state: ConversationState, text: str, source: TurnSource
    ) -> str:
        try:
            intent = await self._extract(text)
        except ExtractionFailedError as exc:
            logger.error("Extraction failed for %s: %s", state.sender_id, exc)
            state.reset()
            return replies.GENERIC_FAILURE

        decision = self._dialog.on_new_intent(intent, source)
        return await self._execute(state, decision)

    async def _extract(self, text: str) -> BookingIntent:
        try:
            return await asyncio.wait_for(
                self._extractor.extract(text), self._timeouts.extraction_timeout_sec
            )
        except asyncio.TimeoutError:
            raise ExtractionFailedError(
                f"Extraction timed out after {self._timeouts.extraction_timeout_sec}s"
            ) from None

    def _check_availability(self, state: ConversationState) -> str:
        """Availability step: offer confirmation, alternatives, or nothing."""
        intent = state.intent
        if intent is None:
            state.reset()
            return replies.NO_PENDING_BOOKING

        requested = intent.requested_date_or_default()
        if not self._engine.check_availability(intent.event_id, requested):
            alternatives = self._engine.catalog.alternative_dates(intent.event_id)
            logger.info(
                "%s not available on %s; %d alternative date(s)",
                intent.event_id, requested.isoformat(), len(alternatives),
            )
            state.machine.transition(TransitionTrigger.DETAILS_UNAVAILABLE)
            state.reset()
            if alternatives:
                return replies.build_alternative_dates_message(
                    intent.event_id, requested, alternatives
                )
            return replies.no_availability(intent.event_id)

        listing = self._engine.catalog.lookup(intent.event_id)
        state.machine.transition(TransitionTrigger.DETAILS_AVAILABLE)
        return replies.build_confirmation_summary(
            intent, requested, listing.venue, listing.kickoff_time
        )

    async def _reserve(self, state: ConversationState) -> str:
        intent = state.intent
        if intent is None:
            state.reset()
            return replies.NO_PENDING_BOOKING

        try:
            # Payment confirmation is synchronous and may block on I/O.
            record = await asyncio.to_thread(
                self._engine.reserve,
                intent.event_id,
                intent.requested_date_or_default(),
                intent.fan_email,
                intent.ticket_quantity,
                intent.ticket_type,
            )
        except BookingError as exc:
            logger.warning("Reservation failed for %s: %s", state.sender_id, exc)
            state.reset()
            return replies.booking_failed(exc)

        state.machine.transition(TransitionTrigger.BOOKING_CONFIRMED)
        state.reset()
        email_sent = await self._notify(record)
        return replies.build_booking_confirmed(record, email_sent)

    async def _notify(self, record: BookingRecord) -> bool:
        """Send the confirmation email. Failure never undoes the booking."""
        if not record.purchaser_email:
            return False
        try:
            subject, body = replies.build_confirmation_email(record)
            await asyncio.wait_for(
                self._notifier.send_booking(record, record.purchaser_email, subject, body),
                self._timeouts.notification_timeout_sec,
            )
        except (CollaboratorError, asyncio.TimeoutError) as exc:
            logger.error(
                "delivery_failed: confirmation for %s to %s not sent: %r",
                record.ticket_reference, record.purchaser_email, exc,
            )
            return False
        except Exception:
            # Seats are already taken at this point.
            logger.exception(
                "delivery_failed: confirmation for %s to %s not sent",
                record.ticket_reference, record.purchaser_email,
            )
            return False
        return True


def build_orchestrator(
    config: AppConfig = settings,
    catalog: Optional[InventoryCatalog] = None,
    transcriber: Optional[Transcriber] = None,
    notifier: Optional[Notifier] = None,
) -> BookingOrchestrator:
    """Wire the default in-process components together.

    With ``OPENAI_API_KEY`` configured, voice notes are transcribed by
    Whisper and requests are extracted by a chat model; otherwise only the
    keyword extractor runs and voice notes get the typed-request fallback.
    """
    if catalog is None:
        if config.booking.catalog_path:
            catalog = InventoryCatalog.from_file(config.booking.catalog_path)
        else:
            catalog = InventoryCatalog.default()

    collaborators = config.collaborators
    auth = None
    if collaborators.media_auth_user and collaborators.media_auth_token:
        auth = (collaborators.media_auth_user, collaborators.media_auth_token)

    extractor: Extractor = KeywordExtractor(catalog, config.booking.default_ticket_type)
    if collaborators.openai_api_key:
        client = build_client(
            collaborators.openai_api_key,
            max(collaborators.transcription_timeout_sec, collaborators.extraction_timeout_sec),
        )
        transcriber = transcriber or WhisperTranscriber(client, collaborators.transcription_model)
        extractor = LLMExtractor(
            client, catalog, collaborators.extraction_model, fallback=extractor,
        )
        logger.info(
            "OpenAI collaborators enabled (transcription=%s, extraction=%s)",
            collaborators.transcription_model, collaborators.extraction_model,
        )
    else:
        logger.info("OPENAI_API_KEY not set; voice notes cannot be transcribed")

    return BookingOrchestrator(
        engine=BookingEngine(
            catalog,
            ticket_ref_prefix=config.booking.ticket_ref_prefix,
            default_ticket_type=config.booking.default_ticket_type,
        ),
        store=ConversationStore(config.store.shard_count),
        extractor=extractor,
        notifier=notifier or LoggingNotifier(),
        transcriber=transcriber,
        media_fetcher=HttpMediaFetcher(collaborators.media_fetch_timeout_sec, auth),
        config=config,
    )
