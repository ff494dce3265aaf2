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
from ticketdesk.collaborators.openai_adapters import LLMExtractor, WhisperTranscriber

__all__ = [
    "Extractor",
    "MediaFetcher",
    "Notifier",
    "Transcriber",
    "UnconfiguredTranscriber",
    "KeywordExtractor",
    "HttpMediaFetcher",
    "LoggingNotifier",
    "LLMExtractor",
    "WhisperTranscriber",
]
