"""Tests for block comparison between stored extractions."""

from __future__ import annotations

from pathlib import Path

import pytest

from smartcrawl.cache import ResultCache
from smartcrawl.compare import (
    block_hash,
    compare_extractions,
    compare_files,
    unique_block_count,
)
from smartcrawl.content.models import ExtractedData, FilteredFragment
from smartcrawl.errors import ParseError
from smartcrawl.models import CrawlResult
from smartcrawl.scraper.models import Fragment

_BANNER = Fragment(content="Subscribe to our newsletter for weekly updates", link="https://example.com/subscribe")
_BYLINE = Fragment(title="Written by the editorial team")


def _extraction(url: str, fragments: list[Fragment], indices: list[int] | None = None) -> ExtractedData:
    indices = indices or list(range(len(fragments)))
    blocks = [
        FilteredFragment(fragment=f, index=i, region_reason="title_start", word_count=f.content_words)
        for f, i in zip(fragments, indices)
    ]
    return ExtractedData(url=url, title=url, summary="", blocks=blocks, total_items=len(blocks))


class TestBlockHash:
    def test_ignores_construction_order(self) -> None:
        a = Fragment(content="Body", link="https://example.com")
        b = Fragment(link="https://example.com", content="Body")
        assert block_hash(a) == block_hash(b)

    def test_differs_by_link(self) -> None:
        assert block_hash(Fragment(content="Body")) != block_hash(
            Fragment(content="Body", link="https://example.com")
        )

    def test_is_md5_hex(self) -> None:
        assert len(block_hash(_BYLINE)) == 32


class TestCompareExtractions:
    def test_shared_blocks_are_matched(self) -> None:
        first = _extraction(
            "https://example.com/a",
            [_BYLINE, Fragment(content="Story A body"), _BANNER],
            indices=[0, 4, 9],
        )
        second = _extraction(
            "https://example.com/b",
            [Fragment(content="Story B body"), _BANNER, _BYLINE],
            indices=[2, 7, 11],
        )

        comparison = compare_extractions(first, second)

        assert [(m.first_index, m.second_index) for m in comparison.matches] == [(0, 11), (9, 7)]
        assert comparison.first_unique_blocks == 1
        assert comparison.second_unique_blocks == 1
        assert comparison.first_match_percentage == 66.67

    def test_duplicate_block_matches_once(self) -> None:
        first = _extraction("https://example.com/a", [_BANNER, _BANNER])
        second = _extraction("https://example.com/b", [_BANNER, Fragment(content="Other")])

        comparison = compare_extractions(first, second)

        assert len(comparison.matches) == 1
        assert comparison.first_unique_blocks == 1
        assert comparison.second_unique_blocks == 1

    def test_no_overlap(self) -> None:
        comparison = compare_extractions(
            _extraction("https://example.com/a", [Fragment(content="One")]),
            _extraction("https://example.com/b", [Fragment(content="Two")]),
        )

        assert comparison.matches == []
        assert comparison.second_match_percentage == 0.0

    def test_empty_extractions(self) -> None:
        comparison = compare_extractions(
            _extraction("https://example.com/a", []), _extraction("https://example.com/b", [])
        )

        assert comparison.first_match_percentage == 0.0
        assert comparison.to_dict()["comparison"]["totalExactMatches"] == 0

    def test_wire_shape(self) -> None:
        first = _extraction("https://example.com/a", [_BYLINE])
        second = _extraction("https://example.com/b", [_BYLINE])

        wire = compare_extractions(first, second).to_dict()

        assert wire["first"]["url"] == "https://example.com/a"
        assert wire["comparison"]["matchPercentageSecond"] == 100.0
        assert wire["exactMatches"][0]["block"] == {"title": "Written by the editorial team"}
        assert wire["exactMatches"][0]["indices"] == {"first": 0, "second": 0}


class TestUniqueBlockCount:
    def test_counts_blocks_missing_elsewhere(self) -> None:
        page = _extraction("https://example.com/a", [_BYLINE, Fragment(content="Own text"), _BANNER])
        others = [_extraction("https://example.com/b", [_BANNER]), _extraction("https://example.com/c", [_BYLINE])]

        assert unique_block_count(page, others) == 1

    def test_without_others_every_block_is_unique(self) -> None:
        page = _extraction("https://example.com/a", [_BYLINE, _BANNER])
        assert unique_block_count(page) == 2


class TestCompareFiles:
    def _store(self, cache: ResultCache, data: ExtractedData) -> Path:
        result = CrawlResult(
            success=True, url=data.url, domain="example.com",
            method="lightweight", processing_time=1, extracted_data=data,
        )
        return cache.store(data.url, result)

    def test_compares_cache_artifacts(self, tmp_path: Path) -> None:
        cache = ResultCache(directory=tmp_path)
        first = self._store(cache, _extraction("https://example.com/a", [_BYLINE, _BANNER]))
        second = self._store(cache, _extraction("https://example.com/b", [_BANNER]))

        comparison = compare_files(first, second)

        assert len(comparison.matches) == 1
        assert comparison.first.url == "https://example.com/a"

    def test_failed_result_has_nothing_to_compare(self, tmp_path: Path) -> None:
        cache = ResultCache(directory=tmp_path)
        ok = self._store(cache, _extraction("https://example.com/a", [_BYLINE]))
        failed = cache.store(
            "https://example.com/b",
            CrawlResult(
                success=False, url="https://example.com/b", domain="example.com",
                method="lightweight", processing_time=1, error="boom",
            ),
        )

        with pytest.raises(ParseError, match="no extracted data"):
            compare_files(ok, failed)

    def test_corrupt_artifact(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("[", encoding="utf-8")

        with pytest.raises(ParseError):
            compare_files(bad, bad)
