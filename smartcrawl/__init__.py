"""smartcrawl — two-tier page fetch and main-content extraction."""

from smartcrawl.coordinator import crawl_url, crawl_urls
from smartcrawl.models import BatchResult, CrawlResult

__all__ = ["crawl_url", "crawl_urls", "CrawlResult", "BatchResult"]
