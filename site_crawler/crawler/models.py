# site_crawler/crawler/models.py
"""
Data models for the SiteCrawler crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Iterator, Optional, Tuple, Union

__all__ = (
    "SkipReason",
    "Fetched",
    "Skipped",
    "Failed",
    "FetchOutcome",
    "EventSink",
    "VisitedSet",
    "PrefixFilter",
)


class SkipReason(str, Enum):
    """Why a candidate URL contributed no children."""

    BAD_STATUS = "bad-status"
    NON_HTML = "non-html"
    NON_XML = "non-xml"
    MISSING_CONTENT_TYPE = "missing-content-type"
    LARGE_FILE = "large-file"
    CROSS_HOST = "cross-host"
    NOT_INCLUDED = "not-included"
    EXCLUDED = "excluded"
    ALREADY_VISITED = "already-visited"
    LIMIT_REACHED = "limit-reached"


@dataclass(frozen=True, slots=True)
class Fetched:
    """Successful retrieval: decoded body of an accepted response.

    *raw* keeps the undecoded bytes for parsers that honour the
    document's own encoding declaration (XML).
    """

    url: str
    body: str
    status: int = 200
    content_type: str = ""
    raw: bytes = field(default=b"", repr=False)


@dataclass(frozen=True, slots=True)
class Skipped:
    """Candidate rejected by a crawl check or by the response classification."""

    url: str
    reason: SkipReason
    detail: str = ""


@dataclass(frozen=True, slots=True)
class Failed:
    """Candidate abandoned because of an exception (network, URL or parse error)."""

    url: str
    error: Exception


FetchOutcome = Union[Fetched, Skipped, Failed]
EventSink = Callable[[Union[Skipped, Failed]], None]


class VisitedSet:
    """Insertion-ordered set of normalized page keys.

    Order is discovery order and is part of the crawl result.
    """

    __slots__ = ("_keys",)

    def __init__(self, keys: Iterable[str] = ()) -> None:
        self._keys: dict[str, None] = dict.fromkeys(keys)

    def add(self, key: str) -> bool:
        """Append *key*; return False if it was already present."""
        if key in self._keys:
            return False
        self._keys[key] = None
        return True

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def __repr__(self) -> str:
        return f"VisitedSet({list(self._keys)!r})"

    def to_list(self) -> list[str]:
        return list(self._keys)


def _clean_prefixes(prefixes: Optional[Iterable[str]]) -> Tuple[str, ...]:
    if prefixes is None:
        return ()
    if isinstance(prefixes, str):
        prefixes = (prefixes,)
    cleaned = (p.strip().lower() for p in prefixes)
    return tuple(dict.fromkeys(p for p in cleaned if p))


def _matches(url: str, bare: str, prefix: str) -> bool:
    if url.startswith(prefix):
        return True
    return "://" not in prefix and bare.startswith(prefix)


@dataclass(frozen=True, slots=True)
class PrefixFilter:
    """Allow/deny lists of lower-cased, protocol-qualified URL prefixes.

    Build with :meth:`build` so that prefixes are cleaned once per crawl.
    """

    include: Tuple[str, ...] = ()
    exclude: Tuple[str, ...] = ()

    @classmethod
    def build(
        cls,
        include: Optional[Iterable[str]] = None,
        exclude: Optional[Iterable[str]] = None,
    ) -> PrefixFilter:
        return cls(include=_clean_prefixes(include), exclude=_clean_prefixes(exclude))

    def check(self, url: str) -> Optional[SkipReason]:
        """Return the rejection reason for *url* or None if it passes.

        A prefix without ``://`` is also tried against *url* minus its scheme,
        so ``"a.com/blog"`` matches ``"https://a.com/blog/post"``.
        """
        lowered = url.lower()
        bare = lowered.split("://", 1)[-1]
        if self.include and not any(_matches(lowered, bare, p) for p in self.include):
            return SkipReason.NOT_INCLUDED
        if self.exclude and any(_matches(lowered, bare, p) for p in self.exclude):
            return SkipReason.EXCLUDED
        return None

    def __bool__(self) -> bool:
        return bool(self.include or self.exclude)
