# site_crawler/exceptions.py
"""
Exception hierarchy for the SiteCrawler package.
"""
from __future__ import annotations

__all__ = ("CrawlerError", "MalformedURLError", "FetchError", "ParseError")


class CrawlerError(Exception):
    """Base class for all SiteCrawler errors."""


class MalformedURLError(CrawlerError, ValueError):
    """Raised when a string cannot be parsed as an absolute URL."""

    def __init__(self, url: str, reason: str = "") -> None:
        self.url = url
        self.reason = reason
        message = f"Invalid URL: {url!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class FetchError(CrawlerError):
    """Network-level failure: connection error, timeout, DNS."""


class ParseError(CrawlerError):
    """Document body could not be parsed as HTML or XML."""
