"""Result types handed to callers of the crawler.

``CrawlResult.to_dict`` emits the wire shape consumed by orchestration and
persistence collaborators::

    {success, method, processingTime, extractedData?, error?,
     shouldFallbackToBrowser?, url, domain}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from smartcrawl.content.models import ExtractedData


@dataclass
class CrawlResult:
    success: bool
    url: str
    domain: str
    method: str
    processing_time: int
    extracted_data: Optional[ExtractedData] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    should_fallback_to_browser: Optional[bool] = None
    from_cache: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": self.success,
            "url": self.url,
            "domain": self.domain,
            "method": self.method,
            "processingTime": self.processing_time,
        }
        if self.extracted_data is not None:
            data["extractedData"] = self.extracted_data.to_dict()
        if self.error is not None:
            data["error"] = self.error
            data["errorCode"] = self.error_code
        if self.should_fallback_to_browser is not None:
            data["shouldFallbackToBrowser"] = self.should_fallback_to_browser
        return data

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> CrawlResult:
        extracted = raw.get("extractedData")
        return cls(
            success=bool(raw["success"]),
            url=str(raw.get("url", "")),
            domain=str(raw.get("domain", "")),
            method=str(raw.get("method", "lightweight")),
            processing_time=int(raw.get("processingTime", 0)),
            extracted_data=ExtractedData.from_dict(extracted) if extracted else None,
            error=raw.get("error"),
            error_code=raw.get("errorCode"),
            should_fallback_to_browser=raw.get("shouldFallbackToBrowser"),
        )


@dataclass
class BatchResult:
    """Outcome of a sequential multi-URL crawl."""

    results: List[CrawlResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return self.total - self.successful

    @property
    def lightweight_successes(self) -> int:
        return sum(1 for r in self.results if r.success and r.method == "lightweight")

    @property
    def rendered_successes(self) -> int:
        return sum(1 for r in self.results if r.success and r.method == "rendered")

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalUrls": self.total,
            "successfulUrls": self.successful,
            "failedUrls": self.failed,
            "lightweightSuccesses": self.lightweight_successes,
            "renderedSuccesses": self.rendered_successes,
            "results": [r.to_dict() for r in self.results],
        }
