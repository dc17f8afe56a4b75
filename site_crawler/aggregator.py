# File: site_crawler/aggregator.py
"""site_crawler.aggregator: Сборка отчёта об обходе из результата и событий диагностики."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Iterable, List, Optional, TypedDict, Union

from site_crawler.crawler.models import Failed, Skipped


class SkippedInfo(TypedDict):
    """Пропущенный URL и причина."""

    url: str
    reason: str
    detail: str


class FailureInfo(TypedDict):
    """URL, обработка которого завершилась ошибкой."""

    url: str
    error: str


@dataclass(slots=True)
class CrawlReport:
    """Результаты обхода: страницы в порядке обнаружения и диагностика."""

    seed_url: str
    limit: int = 0
    pages: List[str] = field(default_factory=list)
    skipped: List[SkippedInfo] = field(default_factory=list)
    failures: List[FailureInfo] = field(default_factory=list)
    sitemap_urls: List[str] = field(default_factory=list)
    elapsed: float = 0.0

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление CrawlReport."""
        return json.dumps(asdict(self), ensure_ascii=False, indent=2 if pretty else None)


class EventCollector:
    """Приёмник событий краулера, накапливающий их для отчёта."""

    def __init__(self) -> None:
        self.events: List[Union[Skipped, Failed]] = []

    def __call__(self, outcome: Union[Skipped, Failed]) -> None:
        self.events.append(outcome)


def _split_events(
    events: Iterable[Union[Skipped, Failed]],
) -> tuple[List[SkippedInfo], List[FailureInfo]]:
    skipped: List[SkippedInfo] = []
    failures: List[FailureInfo] = []
    for event in events:
        if isinstance(event, Skipped):
            skipped.append(
                {"url": event.url, "reason": event.reason.value, "detail": event.detail}
            )
        else:
            failures.append({"url": event.url, "error": str(event.error)})
    return skipped, failures


def build_report(
    seed_url: str,
    pages: List[str],
    events: Iterable[Union[Skipped, Failed]] = (),
    *,
    limit: int = 0,
    sitemap_urls: Optional[List[str]] = None,
    elapsed: float = 0.0,
) -> CrawlReport:
    """Собирает все части отчёта в CrawlReport."""
    skipped, failures = _split_events(events)
    return CrawlReport(
        seed_url=seed_url,
        limit=limit,
        pages=list(pages),
        skipped=skipped,
        failures=failures,
        sitemap_urls=list(sitemap_urls or []),
        elapsed=round(elapsed, 3),
    )
