"""Dataclasses produced by the content pipeline.

All of them live for a single extraction call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List

from smartcrawl.scraper.models import Fragment

REASON_TITLE_START = "title_start"
REASON_CONTENT_START = "content_start"
REASON_NO_REGION = "no_region_filter"


@dataclass(frozen=True)
class Region:
    """Inclusive index span ``[start, end]`` believed to hold primary content.

    ``window`` is the extension size chosen when the region opened.
    ``link_pattern_detected`` and ``link_pairs`` are filled in by the
    link-pattern pruner.
    """

    start: int
    end: int
    reason: str
    window: int
    is_first_region: bool = False
    link_pattern_detected: bool = False
    link_pairs: int = 0


@dataclass(frozen=True)
class FilteredFragment:
    """A kept fragment together with the metadata derived while keeping it."""

    fragment: Fragment
    index: int
    region_reason: str
    word_count: int
    is_main_content: bool = True
    is_first_region: bool = False

    @property
    def text_words(self) -> int:
        """Words in the fragment's content, or its title when it has none."""
        if self.fragment.has_content:
            return self.fragment.content_words
        return self.fragment.title_words

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = self.fragment.to_dict()
        data["meta"] = {
            "index": self.index,
            "regionReason": self.region_reason,
            "isMainContent": self.is_main_content,
            "wordCount": self.word_count,
        }
        return data

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> FilteredFragment:
        meta = raw.get("meta") or {}
        return cls(
            fragment=Fragment.from_dict(raw),
            index=int(meta.get("index", 0)),
            region_reason=str(meta.get("regionReason", REASON_NO_REGION)),
            word_count=int(meta.get("wordCount", 0)),
            is_main_content=bool(meta.get("isMainContent", True)),
        )


@dataclass
class ExtractedData:
    """Summary of one page's extraction, the ``extractedData`` wire object."""

    url: str
    title: str
    summary: str
    blocks: List[FilteredFragment] = field(default_factory=list)
    total_words: int = 0
    total_items: int = 0
    main_content_blocks: int = 0
    main_content_words: int = 0
    extraction_method: str = "lightweight"

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "summary": self.summary,
            "totalItems": self.total_items,
            "totalWords": self.total_words,
            "mainContentBlocks": self.main_content_blocks,
            "mainContentWords": self.main_content_words,
            "extractionMethod": self.extraction_method,
            "blocks": [block.to_dict() for block in self.blocks],
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> ExtractedData:
        return cls(
            url=str(raw.get("url", "")),
            title=str(raw.get("title", "")),
            summary=str(raw.get("summary", "")),
            blocks=[FilteredFragment.from_dict(b) for b in raw.get("blocks", [])],
            total_words=int(raw.get("totalWords", 0)),
            total_items=int(raw.get("totalItems", 0)),
            main_content_blocks=int(raw.get("mainContentBlocks", 0)),
            main_content_words=int(raw.get("mainContentWords", 0)),
            extraction_method=str(raw.get("extractionMethod", "lightweight")),
        )
