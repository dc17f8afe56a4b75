# === FILE: site_crawler/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска краулера SiteCrawler через командную строку.

Команды:
  crawl     Обойти сайт от seed-URL и вывести/сохранить список страниц
  sitemap   Извлечь URL из sitemap.xml
  links     Собрать относительные ссылки одной страницы
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования (e.g. "%(asctime)s %(levelname)s %(message)s")
  --debug             Подробная диагностика пропущенных ссылок

Команда crawl опции:
  --limit INT         Макс. число страниц (0 — без ограничения)
  --include PREFIX    Разрешённый префикс URL (можно несколько раз)
  --exclude PREFIX    Запрещённый префикс URL (можно несколько раз)
  --sitemap URL       Дополнительно извлечь URL из sitemap в отчёт
  --json PATH         Сохранить JSON-отчёт в файл
  --html PATH         Сохранить HTML-отчёт в файл
  --template DIR      Папка с Jinja2-шаблонами
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --scan-timeout SEC  Таймаут всего обхода (секунд)

Дополнительно:
  --version, -v       Показать версию SiteCrawler

Пример:
  site-crawler crawl https://example.com --limit 100 --include https://example.com/blog --pretty
"""
import asyncio
import json
import sys
import time
from pathlib import Path

import click
from pydantic import ValidationError

from site_crawler import __version__
from site_crawler.aggregator import EventCollector, build_report
from site_crawler.config import CrawlerConfig, load_config
from site_crawler.exceptions import FetchError
from site_crawler.logger import DEFAULT_FORMAT, configure, logger
from site_crawler.parser.sitemap_parser import fetch_sitemap
from site_crawler.report.html_report import render_html
from site_crawler.report.json_report import render_json
from site_crawler.scanner import get_available_urls, start_scan

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _dump(data, pretty: bool) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2 if pretty else None)


def _build_config(ctx, **overrides) -> CrawlerConfig:
    """Конфиг из файла (если задан) с перекрытием опциями командной строки."""
    if ctx.obj['debug']:
        overrides['debug'] = True
    try:
        if ctx.obj['config_path'] is not None:
            return load_config(ctx.obj['config_path'], **overrides)
        if overrides.get('seed_url') is None:
            print_error('Не задан seed URL: укажите аргумент SEED или --config')
        return CrawlerConfig(**{k: v for k, v in overrides.items() if v is not None})
    except (ValidationError, ValueError, TypeError, FileNotFoundError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteCrawler, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.option('--debug', is_flag=True, help='Подробная диагностика (как DEBUG=true)')
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format, debug):
    """Группа команд SiteCrawler CLI."""
    configure(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format,
        debug=True if debug else None,
    )
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path
    ctx.obj['debug'] = debug


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('seed', required=False)
@click.option('--limit', '-l', 'limit', type=click.IntRange(min=0), default=None,
              help='Макс. число страниц (0 — без ограничения)')
@click.option('--include', '-i', 'include', multiple=True, help='Разрешённый префикс URL')
@click.option('--exclude', '-e', 'exclude', multiple=True, help='Запрещённый префикс URL')
@click.option('--sitemap', 'sitemap_url', default=None, help='URL sitemap.xml для отчёта')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблонами (по умолчанию встроенная)'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.option('--scan-timeout', 'scan_timeout', type=float, default=None,
              help='Таймаут всего обхода (секунд)')
@click.pass_context
def crawl(ctx, seed, limit, include, exclude, sitemap_url, json_output, html_output,
          template_dir, pretty, scan_timeout):
    """Обойти сайт и сгенерировать отчёты."""
    cfg = _build_config(
        ctx,
        seed_url=seed,
        limit=limit,
        include_prefixes=list(include) or None,
        exclude_prefixes=list(exclude) or None,
    )
    logger.info('Starting crawl: %s', cfg.seed_url)

    collector = EventCollector()
    started = time.monotonic()
    try:
        if scan_timeout:
            pages = asyncio.run(
                asyncio.wait_for(start_scan(cfg, on_event=collector), timeout=scan_timeout)
            )
        else:
            pages = asyncio.run(start_scan(cfg, on_event=collector))
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {scan_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    sitemap_urls = []
    if sitemap_url:
        sitemap_urls = asyncio.run(
            fetch_sitemap(sitemap_url, cfg.sitemap_limit, timeout=cfg.timeout, debug=cfg.debug)
        )

    # Если не сохраняем в файл — печатаем в stdout
    if not json_output and not html_output:
        output = {'pages': pages, 'sitemap': sitemap_urls} if sitemap_url else pages
        click.echo(_dump(output, pretty))
        return

    report = build_report(
        cfg.seed_url,
        pages,
        collector.events,
        limit=cfg.limit,
        sitemap_urls=sitemap_urls,
        elapsed=time.monotonic() - started,
    )

    if json_output:
        try:
            saved_json = render_json(report, json_output)
            click.echo(f'JSON report: {saved_json}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')


@cli.command('sitemap', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('--limit', '-l', 'limit', type=click.IntRange(min=0), default=0, show_default=True,
              help='Макс. число URL (0 — без ограничения)')
@click.option('--timeout', 'timeout', type=click.FloatRange(min=0, min_open=True), default=10.0,
              show_default=True, help='Таймаут запроса (секунд)')
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def sitemap(ctx, url, limit, timeout, pretty):
    """Извлечь URL из sitemap.xml."""
    urls = asyncio.run(fetch_sitemap(url, limit, timeout=timeout, debug=ctx.obj['debug'] or None))
    click.echo(_dump(urls, pretty))


@cli.command('links', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('--limit', '-l', 'limit', type=click.IntRange(min=0), default=10, show_default=True,
              help='Макс. число найденных ссылок')
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
def links(url, limit, pretty):
    """Собрать уникальные относительные ссылки одной страницы."""
    try:
        urls = asyncio.run(get_available_urls(url, limit))
    except FetchError as e:
        print_error(f'Ошибка при загрузке страницы: {e}')
    click.echo(_dump(urls, pretty))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    if ctx.obj['config_path'] is None:
        print_error('Конфигурация не задана: используйте --config PATH')
    cfg = _build_config(ctx)
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
