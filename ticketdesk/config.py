"""
Centralized configuration with environment variable overrides.

Business wording, booking limits, collaborator timeouts, and store sizing
are all configurable here. Nothing is hardcoded in dialog or booking logic.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class BusinessConfig:
    """Customer-facing wording and payment instructions."""

    name: str = os.getenv("SERVICE_NAME", "Match Ticket Booking")
    currency_symbol: str = os.getenv("CURRENCY_SYMBOL", "£")
    support_email: str = os.getenv("SUPPORT_EMAIL", "support@example.com")
    support_phone: str = os.getenv("SUPPORT_PHONE", "0123-456-7890")
    payment_url_base: str = os.getenv("PAYMENT_URL_BASE", "https://tickets.example.com/pay")
    payment_window_minutes: int = _safe_int("PAYMENT_WINDOW_MINUTES", "15")


@dataclass(frozen=True)
class BookingConfig:
    """Limits and defaults applied by the dialog and the booking engine."""

    min_tickets: int = _safe_int("MIN_TICKETS", "1")
    max_tickets: int = _safe_int("MAX_TICKETS", "10")
    default_ticket_type: str = os.getenv("DEFAULT_TICKET_TYPE", "Standard")
    ticket_ref_prefix: str = os.getenv("TICKET_REF_PREFIX", "MATCH-")
    catalog_path: Optional[str] = os.getenv("CATALOG_PATH") or None


@dataclass(frozen=True)
class CollaboratorConfig:
    """Timeouts (seconds) and credentials for the network-bound collaborator calls.

    Speech-to-text and LLM extraction are enabled only when OPENAI_API_KEY is set.
    """

    media_fetch_timeout_sec: float = _safe_float("MEDIA_FETCH_TIMEOUT", "10.0")
    transcription_timeout_sec: float = _safe_float("TRANSCRIPTION_TIMEOUT", "30.0")
    extraction_timeout_sec: float = _safe_float("EXTRACTION_TIMEOUT", "15.0")
    notification_timeout_sec: float = _safe_float("NOTIFICATION_TIMEOUT", "10.0")
    media_auth_user: Optional[str] = os.getenv("MEDIA_AUTH_USER") or None
    media_auth_token: Optional[str] = os.getenv("MEDIA_AUTH_TOKEN") or None
    openai_api_key: Optional[str] = os.getenv("OPENAI_API_KEY") or None
    transcription_model: str = os.getenv("TRANSCRIPTION_MODEL", "whisper-1")
    extraction_model: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")


@dataclass(frozen=True)
class StoreConfig:
    """Conversation store sizing."""

    shard_count: int = _safe_int("STORE_SHARDS", "16")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    business: BusinessConfig = field(default_factory=BusinessConfig)
    booking: BookingConfig = field(default_factory=BookingConfig)
    collaborators: CollaboratorConfig = field(default_factory=CollaboratorConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    agent_name: str = os.getenv("AGENT_NAME", "ticket-desk")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.booking.min_tickets < 1:
        raise ValueError(
            f"MIN_TICKETS must be >= 1, got {config.booking.min_tickets}"
        )
    if config.booking.max_tickets < config.booking.min_tickets:
        raise ValueError(
            "MAX_TICKETS must be >= MIN_TICKETS, "
            f"got {config.booking.max_tickets} < {config.booking.min_tickets}"
        )
    if not config.booking.default_ticket_type.strip():
        raise ValueError("DEFAULT_TICKET_TYPE must not be empty")
    if not config.booking.ticket_ref_prefix:
        raise ValueError("TICKET_REF_PREFIX must not be empty")
    if config.business.payment_window_minutes < 1:
        raise ValueError(
            "PAYMENT_WINDOW_MINUTES must be >= 1, "
            f"got {config.business.payment_window_minutes}"
        )
    if config.collaborators.openai_api_key and not config.collaborators.extraction_model.strip():
        raise ValueError("OPENAI_MODEL must not be empty when OPENAI_API_KEY is set")
    if config.collaborators.openai_api_key and not config.collaborators.transcription_model.strip():
        raise ValueError("TRANSCRIPTION_MODEL must not be empty when OPENAI_API_KEY is set")
    if config.store.shard_count < 1:
        raise ValueError(
            f"STORE_SHARDS must be >= 1, got {config.store.shard_count}"
        )

    for timeout_name, timeout_value in [
        ("MEDIA_FETCH_TIMEOUT", config.collaborators.media_fetch_timeout_sec),
        ("TRANSCRIPTION_TIMEOUT", config.collaborators.transcription_timeout_sec),
        ("EXTRACTION_TIMEOUT", config.collaborators.extraction_timeout_sec),
        ("NOTIFICATION_TIMEOUT", config.collaborators.notification_timeout_sec),
    ]:
        if timeout_value <= 0:
            raise ValueError(f"{timeout_name} must be > 0, got {timeout_value}")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.business.name)
    return config


# Singleton instance
settings = load_config()
