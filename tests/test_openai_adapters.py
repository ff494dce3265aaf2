"""Tests for the OpenAI-backed transcriber and extractor."""

import json
import logging

import httpx
import openai
import pytest

from ticketdesk.collaborators.openai_adapters import (
    LLMExtractor,
    WhisperTranscriber,
    build_client,
)
from ticketdesk.errors import TranscriptionFailedError
from tests.conftest import FakeOpenAIClient


def connection_error(path: str) -> openai.APIConnectionError:
    return openai.APIConnectionError(
        request=httpx.Request("POST", f"https://api.openai.com/v1/{path}")
    )


class TestWhisperTranscriber:
    @pytest.mark.asyncio
    async def test_returns_stripped_text(self):
        client = FakeOpenAIClient(transcript="  two tickets for chelsea vs arsenal \n")
        text = await WhisperTranscriber(client, model="whisper-1").transcribe(b"ogg-bytes")
        assert text == "two tickets for chelsea vs arsenal"
        assert client.calls == [{"model": "whisper-1", "file": ("voice-note.ogg", b"ogg-bytes")}]

    @pytest.mark.asyncio
    async def test_api_error_becomes_transcription_failure(self):
        client = FakeOpenAIClient(error=connection_error("audio/transcriptions"))
        with pytest.raises(TranscriptionFailedError, match="Transcription request failed"):
            await WhisperTranscriber(client).transcribe(b"ogg-bytes")

    @pytest.mark.asyncio
    async def test_blank_transcript_is_a_failure(self):
        client = FakeOpenAIClient(transcript="   ")
        with pytest.raises(TranscriptionFailedError, match="no text"):
            await WhisperTranscriber(client).transcribe(b"ogg-bytes")

    @pytest.mark.asyncio
    async def test_empty_audio_skips_the_request(self):
        client = FakeOpenAIClient(transcript="hello")
        with pytest.raises(TranscriptionFailedError):
            await WhisperTranscriber(client).transcribe(b"")
        assert client.calls == []


class TestLLMExtractor:
    @pytest.mark.asyncio
    async def test_model_fields_resolved_against_catalog(self, catalog):
        client = FakeOpenAIClient(completion=json.dumps({
            "event": "chelsea v arsenal",
            "date": "2025-02-15",
            "name": "Sam Lee",
            "email": "sam@example.com",
            "quantity": 3,
            "ticket_type": "premium",
            "special_requirements": "wheelchair access",
        }))
        intent = await LLMExtractor(client, catalog, model="gpt-4o-mini").extract(
            "Three premium seats for the Chelsea Arsenal game, Sam Lee, sam@example.com"
        )
        assert intent.event_id == "Chelsea vs Arsenal"
        assert intent.requested_date == "2025-02-15"
        assert intent.fan_name == "Sam Lee"
        assert intent.fan_email == "sam@example.com"
        assert intent.ticket_quantity == 3
        assert intent.ticket_type == "Premium"
        assert intent.special_requirements == "wheelchair access"

    @pytest.mark.asyncio
    async def test_request_lists_matches_and_asks_for_json(self, catalog):
        client = FakeOpenAIClient(completion="{}")
        await LLMExtractor(client, catalog, model="gpt-4o-mini").extract("hello")
        call = client.calls[0]
        assert call["model"] == "gpt-4o-mini"
        assert call["response_format"] == {"type": "json_object"}
        assert "Chelsea vs Arsenal" in call["messages"][1]["content"]

    @pytest.mark.asyncio
    async def test_empty_fields_filled_from_keyword_extraction(self, catalog):
        client = FakeOpenAIClient(completion=json.dumps({"event": "", "quantity": 0}))
        intent = await LLMExtractor(client, catalog).extract(
            "2 tickets for Chelsea vs Arsenal, email a@b.com"
        )
        assert intent.event_id == "Chelsea vs Arsenal"
        assert intent.ticket_quantity == 2
        assert intent.fan_email == "a@b.com"
        assert intent.requested_date == "2025-02-15"

    @pytest.mark.asyncio
    async def test_event_outside_catalog_stays_empty(self, catalog):
        client = FakeOpenAIClient(completion=json.dumps({"event": "Leeds vs Everton", "quantity": 2}))
        intent = await LLMExtractor(client, catalog).extract("2 tickets for Leeds vs Everton")
        assert intent.event_id == ""

    @pytest.mark.asyncio
    async def test_api_error_falls_back(self, catalog, caplog):
        client = FakeOpenAIClient(error=connection_error("chat/completions"))
        with caplog.at_level(logging.WARNING, logger="ticketdesk.collaborators.openai_adapters"):
            intent = await LLMExtractor(client, catalog).extract(
                "2 tickets for Chelsea vs Arsenal"
            )
        assert intent.event_id == "Chelsea vs Arsenal"
        assert intent.ticket_quantity == 2
        assert "using keyword extraction" in caplog.text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("completion", ["not json", "[1, 2]", '{"quantity": "several"}'])
    async def test_unusable_output_falls_back(self, catalog, completion):
        client = FakeOpenAIClient(completion=completion)
        intent = await LLMExtractor(client, catalog).extract("3 tickets for Arsenal vs Tottenham")
        assert intent.event_id == "Arsenal vs Tottenham"
        assert intent.ticket_quantity == 3


class TestBuildClient:
    def test_builds_async_client(self):
        client = build_client("sk-test", 12.0)
        assert isinstance(client, openai.AsyncOpenAI)
        assert client.api_key == "sk-test"
