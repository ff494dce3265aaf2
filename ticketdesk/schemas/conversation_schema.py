"""Inbound turn and per-turn outcome schemas."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class TurnSource(str, Enum):
    """How the booking request in a turn reached us."""
    TEXT = "text"
    VOICE = "voice"


class InboundTurn(BaseModel):
    """A single inbound message as handed over by the transport layer."""

    sender_id: str
    body: str = ""
    media_ref: Optional[str] = None

    @property
    def text(self) -> str:
        return (self.body or "").strip()

    @property
    def has_media(self) -> bool:
        return bool(self.media_ref and self.media_ref.strip())
