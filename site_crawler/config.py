# === FILE: site_crawler/config.py ===
"""
Модуль для загрузки и валидации конфигурации краулера SiteCrawler.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from site_crawler.crawler.models import PrefixFilter
from site_crawler.logger import debug_from_env
from site_crawler.utils import split_url


class CrawlerConfig(BaseModel):
    """Конфигурация для одного запуска обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    seed_url: str = Field(..., description="Начальный URL обхода.")
    limit: int = Field(0, ge=0, description="Лимит числа страниц, 0 — без ограничения.")
    include_prefixes: Tuple[str, ...] = Field(
        default_factory=tuple, description="Разрешённые префиксы URL."
    )
    exclude_prefixes: Tuple[str, ...] = Field(
        default_factory=tuple, description="Запрещённые префиксы URL."
    )
    sitemap_limit: int = Field(0, ge=0, description="Лимит URL из sitemap, 0 — без ограничения.")
    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    debug: bool = Field(default_factory=debug_from_env, description="Подробная диагностика.")

    @field_validator("seed_url")
    @classmethod
    def _check_seed(cls, v: str) -> str:
        split_url(v)
        return v

    @field_validator("include_prefixes", "exclude_prefixes", mode="before")
    @classmethod
    def _clean_prefixes(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple)):
            return PrefixFilter.build(v).include
        return v

    @property
    def prefix_filter(self) -> PrefixFilter:
        return PrefixFilter(include=self.include_prefixes, exclude=self.exclude_prefixes)


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None], **overrides: Any) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerConfig.
    Значения из overrides (кроме None) перекрывают значения из файла.
    При отсутствии файла конфига бросает FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    data.update({k: v for k, v in overrides.items() if v is not None})
    return CrawlerConfig(**data)


__all__ = ["CrawlerConfig", "load_config", "debug_from_env", "ValidationError"]
