"""Crawl orchestration for single URLs and batches.

``crawl_url`` runs the full pipeline for one locator:

    validate → cache lookup → lightweight fetch → (rendered fetch) →
    detect / prune / filter → cache store

``crawl_urls`` runs it for a batch, strictly one locator at a time with a
mandatory pause between items.
"""

from __future__ import annotations

import time
from typing import Iterable, Optional

from smartcrawl.cache import ResultCache
from smartcrawl.config import settings
from smartcrawl.content.pipeline import build_extraction
from smartcrawl.errors import InvalidUrlError
from smartcrawl.models import BatchResult, CrawlResult
from smartcrawl.scraper.fetcher import fetch_lightweight
from smartcrawl.scraper.models import FetchResult
from smartcrawl.scraper.renderer import fetch_rendered
from smartcrawl.urls import extract_domain, validate_url

MIN_BATCH_DELAY = 1.0


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def _batch_pause(delay: Optional[float]) -> float:
    """Seconds to wait between batch items; never zero."""
    if delay is not None and delay > 0:
        return delay
    if settings.batch_delay > 0:
        return settings.batch_delay
    return MIN_BATCH_DELAY


def _fetch(url: str, fallback: bool) -> FetchResult:
    """Lightweight first; escalate to a rendered fetch when the hint says so."""
    result = fetch_lightweight(url)
    if result.success or not result.should_fallback_to_browser:
        return result
    if not fallback:
        print(f"[CRAWL] browser fallback disabled; not rendering {url}")
        return result

    print(f"[CRAWL] escalating {url} to rendered fetch ({result.error_code})")
    rendered = fetch_rendered(url)
    if not rendered.success:
        rendered.error = f"{rendered.error} (lightweight: {result.error})"
    return rendered


def crawl_url(
    url: str,
    *,
    force_refresh: bool = False,
    fallback: Optional[bool] = None,
    cache: Optional[ResultCache] = None,
) -> CrawlResult:
    """Fetch *url*, keep its main content, and return a :class:`CrawlResult`.

    Args:
        url: Locator as given by the caller; normalised before use.
        force_refresh: Skip the cache lookup and always refetch.
        fallback: Act on ``should_fallback_to_browser``.  Defaults to
            ``settings.browser_fallback``.
        cache: Result store.  Defaults to a :class:`ResultCache` over
            ``settings.cache_dir``.

    Returns:
        A result with ``success=False`` on any fetch failure; this function
        does not raise for fetch or validation errors.
    """
    start = time.monotonic()
    if cache is None:
        settings.ensure_workspace()
        cache = ResultCache()
    use_fallback = settings.browser_fallback if fallback is None else fallback

    try:
        normalized = validate_url(url)
    except InvalidUrlError as exc:
        print(f"[CRAWL] ✗ rejected {url!r}: {exc.message}")
        return CrawlResult(
            success=False,
            url=url,
            domain="",
            method="lightweight",
            processing_time=_elapsed_ms(start),
            error=exc.message,
            error_code=exc.error_code,
            should_fallback_to_browser=False,
        )

    domain = extract_domain(normalized)
    print(f"[CRAWL] {normalized} (domain: {domain})")

    if not force_refresh:
        cached = cache.lookup(normalized)
        if cached is not None:
            return cached

    fetched = _fetch(normalized, use_fallback)
    if not fetched.success or fetched.page is None:
        print(f"[CRAWL] ✗ {normalized} via {fetched.method}: {fetched.error}")
        return CrawlResult(
            success=False,
            url=normalized,
            domain=domain,
            method=fetched.method,
            processing_time=_elapsed_ms(start),
            error=fetched.error,
            error_code=fetched.error_code,
            should_fallback_to_browser=fetched.should_fallback_to_browser,
        )

    page = fetched.page
    extracted = build_extraction(
        page.fragments, url=page.final_url, title=page.title, method=page.method
    )
    result = CrawlResult(
        success=True,
        url=normalized,
        domain=domain,
        method=page.method,
        processing_time=_elapsed_ms(start),
        extracted_data=extracted,
    )
    cache.store(normalized, result)
    print(
        f"[CRAWL] ✓ {normalized} via {page.method} in {result.processing_time}ms "
        f"({extracted.main_content_blocks} main content blocks)"
    )
    return result


def crawl_urls(
    urls: Iterable[str],
    *,
    delay: Optional[float] = None,
    force_refresh: bool = False,
    fallback: Optional[bool] = None,
    cache: Optional[ResultCache] = None,
) -> BatchResult:
    """Crawl *urls* sequentially, pausing ``delay`` seconds between items.

    A missing or non-positive *delay* falls back to ``settings.batch_delay``.
    One failing locator never stops the batch.
    """
    pause = _batch_pause(delay)
    if cache is None:
        settings.ensure_workspace()
        cache = ResultCache()
    items = list(urls)
    batch = BatchResult()

    print(f"[BATCH] crawling {len(items)} URL(s)")
    for i, url in enumerate(items, start=1):
        print(f"[BATCH] [{i}/{len(items)}] {url}")
        try:
            result = crawl_url(
                url, force_refresh=force_refresh, fallback=fallback, cache=cache
            )
        except Exception as exc:
            # unexpected defects still yield a result so the batch can continue
            print(f"[BATCH] [{i}/{len(items)}] ✗ unexpected error for {url!r}: {exc}")
            result = CrawlResult(
                success=False,
                url=url,
                domain="",
                method="lightweight",
                processing_time=0,
                error=str(exc),
            )
        batch.results.append(result)

        if i < len(items):
            time.sleep(pause)

    print(f"[BATCH] done: {batch.successful}/{batch.total} successful")
    return batch
