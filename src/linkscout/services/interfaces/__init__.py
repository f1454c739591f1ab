"""
Service interfaces (ABCs) for the linkscout application.

These abstract base classes define contracts for service implementations,
enabling dependency injection, testing with fakes, and swappable transports.
"""

from .fetcher_interface import FetcherInterface, FetchResult

__all__ = ["FetcherInterface", "FetchResult"]
