"""Lightweight HTTP fetch with bounded retries and failure classification.

``fetch_lightweight`` performs up to ``settings.max_retries + 1`` GET
attempts, sleeping ``settings.retry_base_delay × attempt`` between them.  The
final failure is classified (see :mod:`smartcrawl.errors`) and returned as a
structured :class:`~smartcrawl.scraper.models.FetchResult` whose
``should_fallback_to_browser`` tells the caller whether a rendered fetch is
worth trying.
"""

from __future__ import annotations

import re
import time
from typing import Optional

import httpx

from smartcrawl.config import settings
from smartcrawl.errors import (
    ContentTypeError,
    EmptyContentError,
    FetchError,
    FetchTimeoutError,
    HttpStatusError,
    NetworkError,
    ScriptRequiredError,
    ServerBlockError,
)
from smartcrawl.scraper.fragments import html_to_fragments, page_title
from smartcrawl.scraper.models import FetchResult, LightweightPage

# ---------------------------------------------------------------------------
# SPA / JS-rendered page detection heuristics
# ---------------------------------------------------------------------------
_SPA_PATTERNS = [
    re.compile(r'<div[^>]+id=["\'](?:root|app)["\']', re.IGNORECASE),
    re.compile(r"window\.__NEXT_DATA__", re.IGNORECASE),
    re.compile(r"ng-version=", re.IGNORECASE),
    re.compile(r"data-reactroot", re.IGNORECASE),
]

# Anti-bot interstitials served with a 200 status
_CHALLENGE_PATTERNS = [
    re.compile(r"<title>\s*Just a moment\.\.\.\s*</title>", re.IGNORECASE),
    re.compile(r"Attention Required! \| Cloudflare", re.IGNORECASE),
    re.compile(r"cf-browser-verification|cf_chl_opt|challenge-platform", re.IGNORECASE),
]

_BLOCK_STATUSES = (403, 503)

_HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


def _headers() -> dict[str, str]:
    return {
        "User-Agent": settings.user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
    }


def _is_spa(html: str) -> bool:
    """Return ``True`` if *html* looks like a JavaScript SPA that needs rendering."""
    for pattern in _SPA_PATTERNS:
        if pattern.search(html):
            return True
    # Heuristic: very little visible text relative to total HTML size.
    # Strip <script> and <style> blocks first so their source code doesn't
    # count as visible text, then strip remaining tags.
    no_scripts = re.sub(r"<(script|style)[^>]*>.*?</(script|style)>", "", html, flags=re.IGNORECASE | re.DOTALL)
    stripped = re.sub(r"<[^>]+>", "", no_scripts).strip()
    if len(html) > 2000 and len(stripped) < 200:
        return True
    return False


def _is_challenge(html: str) -> bool:
    return any(pattern.search(html) for pattern in _CHALLENGE_PATTERNS)


def _classify_transport_error(exc: httpx.HTTPError) -> FetchError:
    """Map an httpx exception onto the fetch error taxonomy."""
    if isinstance(exc, httpx.TimeoutException):
        return FetchTimeoutError(f"Request timeout: {exc}")
    if isinstance(exc, httpx.ConnectError):
        # name resolution, refused connections and TLS handshakes all land here
        return NetworkError(f"Network error: {exc}")
    return FetchError(f"Request failed: {exc}")


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def _attempt(client: httpx.Client, url: str) -> LightweightPage:
    """One GET attempt.  Raises :class:`FetchError` on any failure."""
    try:
        response = client.get(url)
    except httpx.HTTPError as exc:
        raise _classify_transport_error(exc) from exc

    status = response.status_code
    if status in _BLOCK_STATUSES:
        raise ServerBlockError(f"Request blocked: HTTP {status}")
    if status >= 400:
        raise HttpStatusError(f"HTTP {status} for {url}", status_code=status)

    content_type = response.headers.get("content-type", "")
    if not any(kind in content_type.lower() for kind in _HTML_CONTENT_TYPES):
        raise ContentTypeError(f"Non-HTML content type: {content_type or '(none)'}")

    html = response.text
    if not html.strip():
        raise EmptyContentError("Empty response body")
    if _is_challenge(html):
        raise ServerBlockError("Anti-bot challenge page (cloudflare)")
    if _is_spa(html):
        raise ScriptRequiredError("Page requires javascript to render its content")

    final_url = str(response.url)
    fragments = html_to_fragments(html, final_url)
    if not fragments:
        raise EmptyContentError("No content fragments extracted")

    return LightweightPage(
        url=url,
        final_url=final_url,
        title=page_title(html),
        fragments=fragments,
        status_code=status,
    )


def fetch_lightweight(url: str, client: Optional[httpx.Client] = None) -> FetchResult:
    """Fetch *url* over plain HTTP and convert it to a Fragment Sequence.

    Non-retryable failures (e.g. a non-HTML content type) stop immediately;
    the rest are retried ``settings.max_retries`` times with linear backoff.

    Args:
        url: Normalised locator.
        client: Optional pre-configured client (tests, connection reuse).

    Returns:
        A :class:`FetchResult`; never raises :class:`FetchError`.
    """
    start = time.monotonic()
    max_attempts = settings.max_retries + 1
    print(f"[FETCH] {url}")

    own_client = client is None
    if own_client:
        client = httpx.Client(
            headers=_headers(),
            timeout=settings.request_timeout,
            follow_redirects=True,
            max_redirects=settings.max_redirects,
        )

    try:
        attempt = 1
        while True:
            try:
                page = _attempt(client, url)
            except FetchError as exc:
                print(f"[FETCH] attempt {attempt}/{max_attempts} failed for {url}: {exc.message}")
                if not exc.retryable or attempt >= max_attempts:
                    print(
                        f"[FETCH] ✗ giving up on {url} after {attempt} attempt(s) "
                        f"({exc.error_code}, fallback={exc.escalates})"
                    )
                    return FetchResult.failed(
                        "lightweight", exc, _elapsed_ms(start), attempts=attempt
                    )
                time.sleep(settings.retry_base_delay * attempt)
                attempt += 1
                continue

            print(f"[FETCH] ✓ {url} → {len(page.fragments)} fragment(s)")
            return FetchResult.ok(page, _elapsed_ms(start), attempts=attempt)
    finally:
        if own_client:
            client.close()
