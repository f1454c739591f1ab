"""
Abstract Base Class for the page-fetch capability.

The extraction engine never performs network I/O directly; it receives an
implementation of this interface. Production code uses
``linkscout.services.http_fetcher.HttpFetcher``; tests supply in-memory fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class FetchResult:
    """
    Response obtained by a fetcher.

    Attributes
    ----------
    url : str
        Final URL after redirects.
    status_code : int
        HTTP status code.
    text : str
        Decoded response body (possibly truncated).
    truncated : bool
        True when the body exceeded the size cap and was cut short.
    """

    url: str
    status_code: int
    text: str
    truncated: bool = False

    @property
    def ok(self) -> bool:
        """True for 2xx responses."""
        return 200 <= self.status_code < 300


class FetcherInterface(ABC):
    """
    Abstract interface for retrieving raw page content.

    Examples
    --------
    >>> class StaticFetcher(FetcherInterface):
    ...     async def fetch(self, url, *, headers=None, timeout, max_bytes):
    ...         return FetchResult(url=url, status_code=200, text="<html></html>")
    """

    @abstractmethod
    async def fetch(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float,
        max_bytes: int,
    ) -> FetchResult:
        """
        Retrieve *url* once, without retries.

        Parameters
        ----------
        url : str
            URL to retrieve.
        headers : Mapping[str, str] | None
            Extra request headers.
        timeout : float
            Overall time budget in seconds.
        max_bytes : int
            Maximum number of body bytes to read; the rest is discarded.

        Returns
        -------
        FetchResult
            The response, whatever its status code.

        Raises
        ------
        FetchError
            On transport failure (DNS, connection, timeout).
        """
        pass
