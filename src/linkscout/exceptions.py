"""
Custom exceptions for the linkscout application.

Only structural failures are modelled as exceptions. A source pattern that
does not match, or an embedded block that fails to parse, is reported as an
absent field on the returned record rather than as an error.
"""

from __future__ import annotations


class LinkscoutError(Exception):
    """Base exception for all linkscout errors."""

    def __init__(self, message: str) -> None:
        """
        Initialize LinkscoutError.

        Parameters
        ----------
        message : str
            Human-readable error message.
        """
        self.message = message
        super().__init__(message)


class FetchError(LinkscoutError):
    """
    Exception raised when no page content could be obtained for a URL.

    Covers transport failures (DNS, connection, timeout), non-success HTTP
    statuses and empty bodies. It is never retried.

    Attributes
    ----------
    message : str
        Human-readable error message.
    url : str
        The URL whose retrieval failed.
    reason : str
        Short machine-friendly reason (e.g. ``"timeout"``, ``"http_status"``,
        ``"empty_body"``, ``"transport"``, ``"invalid_url"``).
    status_code : int | None
        HTTP status code when a response was received.

    Examples
    --------
    >>> try:
    ...     record = await extractor.extract_metadata(url)
    ... except FetchError as e:
    ...     print(f"Could not fetch {e.url}: {e.reason}")
    """

    def __init__(
        self,
        url: str,
        reason: str = "transport",
        status_code: int | None = None,
        message: str | None = None,
    ) -> None:
        """
        Initialize FetchError.

        Parameters
        ----------
        url : str
            The URL whose retrieval failed.
        reason : str, optional
            Short reason identifier (default: "transport").
        status_code : int | None, optional
            HTTP status code when one was received (default: None).
        message : str | None, optional
            Override for the generated message (default: None).
        """
        self.url = url
        self.reason = reason
        self.status_code: int | None = status_code
        if message is None:
            message = f"Failed to fetch {url}: {reason}"
            if status_code is not None:
                message += f" (HTTP {status_code})"
        super().__init__(message)


EXIT_CODE_SUCCESS = 0
EXIT_CODE_GENERAL_ERROR = 1
EXIT_CODE_FETCH_FAILED = 2
