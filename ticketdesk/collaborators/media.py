"""Voice-note download over HTTP."""

import logging
from typing import Optional

import httpx

from ticketdesk.config import settings
from ticketdesk.errors import MediaFetchError

logger = logging.getLogger(__name__)


class HttpMediaFetcher:
    """Fetches media URLs handed over by the messaging transport."""

    def __init__(
        self,
        timeout_sec: float = settings.collaborators.media_fetch_timeout_sec,
        auth: Optional[tuple[str, str]] = None,
    ) -> None:
        self._timeout = timeout_sec
        self._auth = auth

    async def fetch(self, url: str) -> bytes:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, auth=self._auth, follow_redirects=True
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise MediaFetchError(f"Failed to download media from {url}: {exc}") from exc

        logger.info("Downloaded voice note (%d bytes)", len(response.content))
        return response.content
