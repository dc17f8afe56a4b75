# site_crawler/crawler/fetcher.py
"""
Fetcher module: single GET requests classified into Fetched / Skipped / Failed.

No retries, no custom headers. The per-request timeout comes from the
session the fetcher is built with.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Sequence

from aiohttp import ClientError, ClientSession

from site_crawler.crawler.models import Failed, Fetched, FetchOutcome, Skipped, SkipReason
from site_crawler.exceptions import FetchError

HTML_TYPES: Sequence[str] = ("text/html",)
XML_TYPES: Sequence[str] = ("application/xml", "text/xml")


def classify_response(
    url: str,
    status: int,
    content_type: Optional[str],
    accept: Optional[Sequence[str]],
    mismatch: SkipReason = SkipReason.NON_HTML,
) -> Optional[Skipped]:
    """
    Decide whether a response body should be read.

    Returns None when the body is wanted, otherwise a Skipped outcome.
    ``accept=None`` disables the content-type check.
    """
    if status > 399:
        return Skipped(url, SkipReason.BAD_STATUS, f"status code: {status}")
    if accept is None:
        return None
    if not content_type:
        return Skipped(url, SkipReason.MISSING_CONTENT_TYPE, "content type: None")
    lowered = content_type.lower()
    if not any(kind in lowered for kind in accept):
        return Skipped(url, mismatch, f"content type: {content_type}")
    return None


class Fetcher:
    """Issues plain GET requests through a shared aiohttp session."""

    def __init__(self, session: ClientSession) -> None:
        self.session = session

    async def fetch(
        self,
        url: str,
        accept: Optional[Sequence[str]] = None,
        mismatch: SkipReason = SkipReason.NON_HTML,
    ) -> FetchOutcome:
        """
        GET *url* and classify the response.

        Network errors and timeouts become Failed(FetchError); they are never raised.
        """
        try:
            async with self.session.get(url) as resp:
                content_type = resp.headers.get("Content-Type")
                skipped = classify_response(url, resp.status, content_type, accept, mismatch)
                if skipped is not None:
                    return skipped
                raw = await resp.read()
                text = await resp.text(errors="replace")
                return Fetched(
                    url, text, status=resp.status, content_type=content_type or "", raw=raw
                )
        except asyncio.TimeoutError:
            return Failed(url, FetchError(f"timeout while fetching {url}"))
        except (ClientError, ValueError) as exc:
            return Failed(url, FetchError(str(exc) or type(exc).__name__))

    async def fetch_html(self, url: str) -> FetchOutcome:
        return await self.fetch(url, HTML_TYPES)

    async def fetch_xml(self, url: str) -> FetchOutcome:
        return await self.fetch(url, XML_TYPES, SkipReason.NON_XML)
