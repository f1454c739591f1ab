"""
httpx-backed implementation of the page-fetch capability.

Bodies are streamed and the read stops at a byte cap, so an oversized or
adversarial response can neither exhaust memory nor stall past the overall
timeout.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

import httpx

from linkscout.config.settings import Settings
from linkscout.config.settings import settings as default_settings
from linkscout.exceptions import FetchError
from linkscout.services.interfaces.fetcher_interface import (
    FetcherInterface,
    FetchResult,
)

logger = logging.getLogger(__name__)


class HttpFetcher(FetcherInterface):
    """
    Fetch pages with ``httpx.AsyncClient``.

    Parameters
    ----------
    settings : Settings | None
        Supplies the default User-Agent and Accept-Language headers.
    transport : httpx.AsyncBaseTransport | None
        Optional transport override (e.g. ``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or default_settings
        self._transport = transport

    def _default_headers(self) -> dict[str, str]:
        return {
            "User-Agent": self._settings.user_agent,
            "Accept-Language": self._settings.accept_language,
            "Accept": "text/html,application/xhtml+xml,application/json;q=0.9,*/*;q=0.8",
        }

    async def fetch(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float,
        max_bytes: int,
    ) -> FetchResult:
        """Retrieve *url*, reading at most *max_bytes* of body."""
        request_headers = self._default_headers()
        if headers:
            request_headers.update(headers)

        try:
            return await asyncio.wait_for(
                self._read(url, request_headers, timeout, max_bytes),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.warning("Timeout fetching %s after %.1fs", url, timeout)
            raise FetchError(url, reason="timeout") from exc
        except httpx.HTTPError as exc:
            logger.warning("HTTP error fetching %s: %s", url, exc)
            raise FetchError(url, reason="transport") from exc
        except httpx.InvalidURL as exc:
            logger.warning("Invalid URL %s: %s", url, exc)
            raise FetchError(url, reason="invalid_url") from exc

    async def _read(
        self,
        url: str,
        headers: dict[str, str],
        timeout: float,
        max_bytes: int,
    ) -> FetchResult:
        async with httpx.AsyncClient(
            follow_redirects=True,
            timeout=timeout,
            transport=self._transport,
        ) as client:
            async with client.stream("GET", url, headers=headers) as response:
                buffer = bytearray()
                truncated = False
                async for chunk in response.aiter_bytes():
                    remaining = max_bytes - len(buffer)
                    if len(chunk) >= remaining:
                        buffer.extend(chunk[:remaining])
                        truncated = len(chunk) > remaining
                        if truncated:
                            break
                        continue
                    buffer.extend(chunk)

                if truncated:
                    logger.info(
                        "Response from %s exceeded %d bytes; body truncated",
                        url,
                        max_bytes,
                    )

                encoding = response.encoding or "utf-8"
                try:
                    text = bytes(buffer).decode(encoding, errors="replace")
                except LookupError:
                    text = bytes(buffer).decode("utf-8", errors="replace")

                return FetchResult(
                    url=str(response.url),
                    status_code=response.status_code,
                    text=text,
                    truncated=truncated,
                )
