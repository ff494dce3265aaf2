"""
Event inventory catalog: listings, seat pools, prices, and schedules.

Built once at process start from static configuration and then handed to
the booking engine, which is the only component allowed to mutate a
listing's seat pool.

Usage:
    catalog = InventoryCatalog.default()
    listing = catalog.lookup("Chelsea vs Arsenal")
    catalog.match_event("two tickets for chelsea v arsenal please")
"""

import json
import logging
import re
from collections import deque
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from ticketdesk.errors import EventNotFoundError
from ticketdesk.inventory.default_events import DEFAULT_EVENTS

logger = logging.getLogger(__name__)

STANDARD_TICKET_TYPE = "Standard"

_VERSUS = re.compile(r"\s+(?:v|vs\.?|versus)\s+")


def _normalize_event_text(value: str) -> str:
    """Lowercase, unify 'v'/'versus' to 'vs', and collapse whitespace."""
    lowered = " ".join(value.lower().split())
    return _VERSUS.sub(" vs ", f" {lowered} ").strip()


@dataclass
class EventListing:
    """One bookable event with its seat pool and pricing."""

    name: str
    date: date
    venue: str
    kickoff_time: str
    category: str
    ticket_prices: dict[str, Decimal]
    seat_numbers: deque[str]
    available_seats: Optional[int] = None
    aliases: tuple[str, ...] = ()
    alternative_dates: tuple[date, ...] = ()

    def __post_init__(self) -> None:
        if STANDARD_TICKET_TYPE not in self.ticket_prices:
            raise ValueError(
                f"Listing '{self.name}' has no '{STANDARD_TICKET_TYPE}' price"
            )
        if self.available_seats is None:
            self.available_seats = len(self.seat_numbers)
        if self.available_seats != len(self.seat_numbers):
            raise ValueError(
                f"Listing '{self.name}': available_seats={self.available_seats} "
                f"does not match seat pool size {len(self.seat_numbers)}"
            )

    def unit_price(self, ticket_type: str) -> Decimal:
        """Price for a ticket type, falling back to Standard when unknown."""
        for known, price in self.ticket_prices.items():
            if known.lower() == ticket_type.strip().lower():
                return price
        return self.ticket_prices[STANDARD_TICKET_TYPE]

    @classmethod
    def from_dict(cls, data: dict) -> "EventListing":
        """Build a listing from a config entry.

        Seats come from an explicit ``seat_numbers`` list, or are generated
        as ``<seat_prefix>1..<capacity>``.
        """
        if "seat_numbers" in data:
            seats = deque(str(s) for s in data["seat_numbers"])
        else:
            prefix = data.get("seat_prefix", "")
            seats = deque(f"{prefix}{i}" for i in range(1, int(data["capacity"]) + 1))

        return cls(
            name=data["name"],
            date=date.fromisoformat(data["date"]),
            venue=data.get("venue", ""),
            kickoff_time=data.get("kickoff_time", ""),
            category=data.get("category", ""),
            ticket_prices={k: Decimal(str(v)) for k, v in data["ticket_prices"].items()},
            seat_numbers=seats,
            available_seats=data.get("available_seats"),
            aliases=tuple(data.get("aliases", ())),
            alternative_dates=tuple(
                date.fromisoformat(d) for d in data.get("alternative_dates", ())
            ),
        )


class InventoryCatalog:
    """
    Registry of event listings keyed by event name.

    Reads never mutate listings. Ordering follows the order listings were
    supplied in, which is the order ``list_available`` reports them.
    """

    def __init__(self, listings: Iterable[EventListing]) -> None:
        self._listings: dict[str, EventListing] = {}
        for listing in listings:
            if listing.name in self._listings:
                raise ValueError(f"Duplicate event listing: {listing.name}")
            self._listings[listing.name] = listing
        self._aliases: dict[str, str] = {}
        for listing in self._listings.values():
            self._aliases[_normalize_event_text(listing.name)] = listing.name
            for alias in listing.aliases:
                self._aliases[_normalize_event_text(alias)] = listing.name
        logger.info("Inventory catalog loaded with %d listing(s)", len(self._listings))

    # ------------------------------------------------------------------ #
    # Construction
    # ------------------------------------------------------------------ #

    @classmethod
    def from_dicts(cls, entries: Iterable[dict]) -> "InventoryCatalog":
        return cls(EventListing.from_dict(entry) for entry in entries)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "InventoryCatalog":
        """Load listings from a JSON file: a list of entries or {"events": [...]}."""
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        entries = raw["events"] if isinstance(raw, dict) else raw
        logger.info("Loading inventory catalog from %s", path)
        return cls.from_dicts(entries)

    @classmethod
    def default(cls) -> "InventoryCatalog":
        return cls.from_dicts(DEFAULT_EVENTS)

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    def get(self, event_id: str) -> Optional[EventListing]:
        listing = self._listings.get(event_id)
        if listing is None:
            canonical = self._aliases.get(_normalize_event_text(event_id))
            listing = self._listings.get(canonical) if canonical else None
        return listing

    def lookup(self, event_id: str) -> EventListing:
        """Return the listing for an event.

        Raises:
            EventNotFoundError: If no listing matches.
        """
        listing = self.get(event_id)
        if listing is None:
            raise EventNotFoundError(event_id)
        return listing

    def list_available(self) -> list[str]:
        """Event ids that still have seats, in catalog order."""
        return [name for name, listing in self._listings.items() if listing.available_seats > 0]

    def alternative_dates(self, event_id: str) -> list[date]:
        """Other dates offered for an event. Empty for unknown events."""
        listing = self.get(event_id)
        if listing is None:
            return []
        return list(listing.alternative_dates)

    def match_event(self, text: str) -> Optional[str]:
        """Match free text to an event id. Returns None if no match.

        The longest matching name or alias wins, so "man city vs chelsea"
        is not mistaken for a shorter alias contained in it.
        """
        normalized = _normalize_event_text(text)
        best: Optional[tuple[int, str]] = None
        for alias, event_id in self._aliases.items():
            if alias in normalized and (best is None or len(alias) > best[0]):
                best = (len(alias), event_id)
        return best[1] if best else None

    def __iter__(self) -> Iterator[EventListing]:
        return iter(self._listings.values())

    def __len__(self) -> int:
        return len(self._listings)

    def __contains__(self, event_id: object) -> bool:
        return isinstance(event_id, str) and self.get(event_id) is not None
