"""Rendered fetch: a headless Chromium navigation for script-dependent pages.

The browser loads the page, waits for ``domcontentloaded`` (bounded by
``settings.render_timeout``), then settles for
``settings.render_settle_delay`` before the DOM is serialised and converted
with the same :func:`~smartcrawl.scraper.fragments.html_to_fragments` used by
the lightweight tier.  A single attempt is made; its failure is final.
"""

from __future__ import annotations

import time

from smartcrawl.config import settings
from smartcrawl.errors import EmptyContentError, FetchError, FetchTimeoutError, NetworkError
from smartcrawl.scraper.fragments import html_to_fragments
from smartcrawl.scraper.models import FetchResult, RenderedPage

_LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-extensions",
    "--no-first-run",
]

_NETWORK_MARKERS = (
    "net::ERR_NAME_NOT_RESOLVED",
    "net::ERR_CONNECTION_REFUSED",
    "net::ERR_CERT_",
    "net::ERR_SSL_",
)


def _classify_browser_error(message: str) -> FetchError:
    """Map a Playwright error message onto the fetch error taxonomy."""
    if any(marker in message for marker in _NETWORK_MARKERS):
        return NetworkError(f"Network error: {message}")
    if "timeout" in message.lower() or "TIMED_OUT" in message:
        return FetchTimeoutError(f"Render timeout: {message}")
    return FetchError(f"Render failed: {message}")


def _render(url: str) -> RenderedPage:
    """Render *url* with a headless Chromium browser and convert the DOM.

    Playwright is imported lazily so tests that don't exercise the browser
    path don't need a browser installed.
    """
    from playwright.sync_api import Error as PlaywrightError  # noqa: PLC0415
    from playwright.sync_api import sync_playwright  # noqa: PLC0415

    try:
        with sync_playwright() as pw:
            browser = pw.chromium.launch(headless=True, args=_LAUNCH_ARGS)
            try:
                page = browser.new_page(
                    user_agent=settings.user_agent,
                    viewport={"width": 1280, "height": 800},
                )
                page.goto(
                    url,
                    timeout=int(settings.render_timeout * 1000),
                    wait_until="domcontentloaded",
                )
                page.wait_for_timeout(int(settings.render_settle_delay * 1000))
                html = page.content()
                title = page.title() or ""
                final_url = page.url
            finally:
                browser.close()
    except PlaywrightError as exc:
        # playwright's TimeoutError subclasses Error; the message tells them apart
        raise _classify_browser_error(str(exc)) from exc

    fragments = html_to_fragments(html, final_url)
    if not fragments:
        raise EmptyContentError("No content fragments extracted from rendered page")

    return RenderedPage(
        url=url,
        final_url=final_url,
        title=title.strip(),
        fragments=fragments,
    )


def fetch_rendered(url: str) -> FetchResult:
    """Render *url* in a browser and return a structured :class:`FetchResult`.

    A rendered failure never suggests another browser fallback.
    """
    start = time.monotonic()
    print(f"[RENDER] {url}")
    try:
        page = _render(url)
    except FetchError as exc:
        elapsed = int((time.monotonic() - start) * 1000)
        print(f"[RENDER] ✗ {url}: {exc.message}")
        return FetchResult.failed("rendered", exc, elapsed, escalate=False)

    elapsed = int((time.monotonic() - start) * 1000)
    print(f"[RENDER] ✓ {url} → {len(page.fragments)} fragment(s)")
    return FetchResult.ok(page, elapsed)
