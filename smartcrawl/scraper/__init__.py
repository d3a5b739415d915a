"""Scraper package — two-tier page fetch & fragment conversion."""

from smartcrawl.scraper.fetcher import fetch_lightweight
from smartcrawl.scraper.fragments import html_to_fragments
from smartcrawl.scraper.models import (
    FetchResult,
    Fragment,
    LightweightPage,
    RenderedPage,
    fragments_from_dicts,
)
from smartcrawl.scraper.renderer import fetch_rendered

__all__ = [
    "fetch_lightweight",
    "fetch_rendered",
    "html_to_fragments",
    "fragments_from_dicts",
    "Fragment",
    "FetchResult",
    "LightweightPage",
    "RenderedPage",
]
