# File: site_crawler/utils.py
"""site_crawler.utils: Утилиты для разбора и нормализации URL, используемые краулером и парсерами."""

from __future__ import annotations

from typing import Sequence
from urllib.parse import SplitResult, urlsplit, urlunsplit

from site_crawler.exceptions import MalformedURLError

__all__: Sequence[str] = (
    "split_url",
    "normalize_url",
    "resolve_url",
    "origin_of",
    "is_same_host",
    "url_extension",
    "strip_trailing_slash",
)


def split_url(url: str) -> SplitResult:
    """Разбирает абсолютный URL. Бросает MalformedURLError, если это невозможно."""
    try:
        parts = urlsplit(url)
        _ = parts.port  # некорректный порт бросает ValueError только при обращении
    except ValueError as exc:
        raise MalformedURLError(url, str(exc)) from exc
    if not parts.scheme:
        raise MalformedURLError(url, "missing scheme")
    if parts.scheme in ("http", "https") and not parts.hostname:
        raise MalformedURLError(url, "missing host")
    return parts


def normalize_url(url: str, remove_bookmark: bool = False) -> str:
    """Возвращает ключ дедупликации `hostname + path` без схемы, query и завершающего слеша.

    При ``remove_bookmark`` и наличии ``#`` в исходной строке всё, начиная с ``#``,
    отрезается от hostname+path до проверки завершающего слеша.
    """
    parts = split_url(url)
    host_path = (parts.hostname or "") + parts.path

    if remove_bookmark and "#" in url:
        cut = host_path.find("#")
        if cut != -1:
            host_path = host_path[:cut]

    if host_path.endswith("/"):
        host_path = host_path[:-1]

    return host_path


def _remove_dot_segments(path: str) -> str:
    resolved: list[str] = []
    segments = path.split("/")
    for segment in segments:
        if segment == "..":
            # ведущий пустой сегмент (корень) не удаляется
            if len(resolved) > 1:
                resolved.pop()
        elif segment != ".":
            resolved.append(segment)
    if segments[-1] in (".", ".."):
        resolved.append("")
    return "/".join(resolved)


def resolve_url(url: str) -> str:
    """Приводит абсолютный URL к каноническому виду: убирает сегменты ``.`` и ``..`` из пути.

    Остальные части URL не меняются. Некорректный URL бросает MalformedURLError.
    """
    parts = split_url(url)
    path = _remove_dot_segments(parts.path)
    if path == parts.path:
        return url
    return urlunsplit(parts._replace(path=path))


def origin_of(url: str) -> str:
    """`scheme://netloc` для URL (порт сохраняется, путь отбрасывается)."""
    parts = split_url(url)
    return f"{parts.scheme}://{parts.netloc}"


def is_same_host(first: str, second: str) -> bool:
    """Проверяет точное совпадение hostname двух URL."""
    return split_url(first).hostname == split_url(second).hostname


def url_extension(url: str) -> str:
    """Расширение последнего сегмента пути в нижнем регистре или ``""``."""
    last_segment = url[url.rfind("/") + 1:]
    dot = last_segment.rfind(".")
    if dot == -1 or dot == len(last_segment) - 1:
        return ""
    return last_segment[dot + 1:].lower()


def strip_trailing_slash(url: str) -> str:
    """Убирает ровно один завершающий ``/``."""
    return url[:-1] if url.endswith("/") else url
