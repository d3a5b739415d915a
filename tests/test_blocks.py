"""Tests for the block filter."""

from __future__ import annotations

from smartcrawl.content.blocks import filter_blocks, should_keep
from smartcrawl.content.models import (
    REASON_CONTENT_START,
    REASON_NO_REGION,
    REASON_TITLE_START,
    Region,
)
from smartcrawl.scraper.models import Fragment


def _words(n: int) -> str:
    return " ".join(f"word{i}" for i in range(n))


class TestShouldKeep:
    def test_short_title_is_kept(self) -> None:
        assert should_keep(Fragment(title="Intro")) is True

    def test_image_is_kept(self) -> None:
        assert should_keep(Fragment(image="https://example.com/a.png", alt="")) is True

    def test_twenty_words_kept(self) -> None:
        assert should_keep(Fragment(content=_words(20))) is True

    def test_nineteen_words_dropped(self) -> None:
        assert should_keep(Fragment(content=_words(19))) is False

    def test_link_only_dropped(self) -> None:
        assert should_keep(Fragment(link="https://example.com/x")) is False

    def test_empty_fragment_dropped(self) -> None:
        assert should_keep(Fragment()) is False

    def test_whitespace_title_is_not_a_title(self) -> None:
        assert should_keep(Fragment(title="   ")) is False


class TestFilterBlocks:
    def test_keeps_only_inside_regions(self) -> None:
        fragments = [
            Fragment(title="Outside before"),
            Fragment(title="Heading"),
            Fragment(content=_words(30)),
            Fragment(content=_words(3)),
            Fragment(title="Outside after"),
        ]
        regions = [Region(start=1, end=3, reason=REASON_TITLE_START, window=10, is_first_region=True)]

        kept = filter_blocks(fragments, regions)

        assert [b.index for b in kept] == [1, 2]
        assert all(b.region_reason == REASON_TITLE_START for b in kept)
        assert all(b.is_first_region for b in kept)
        assert kept[1].word_count == 30

    def test_multiple_regions_in_order(self) -> None:
        fragments = [Fragment(title=f"T{i}") for i in range(10)]
        regions = [
            Region(start=0, end=1, reason=REASON_TITLE_START, window=10, is_first_region=True),
            Region(start=6, end=7, reason=REASON_CONTENT_START, window=10),
        ]

        kept = filter_blocks(fragments, regions)

        assert [b.index for b in kept] == [0, 1, 6, 7]
        assert [b.region_reason for b in kept][-1] == REASON_CONTENT_START

    def test_no_regions_filters_whole_page(self) -> None:
        fragments = [
            Fragment(content=_words(25)),
            Fragment(content=_words(4)),
            Fragment(image="https://example.com/a.png"),
        ]

        kept = filter_blocks(fragments, [])

        assert [b.index for b in kept] == [0, 2]
        assert {b.region_reason for b in kept} == {REASON_NO_REGION}

    def test_no_regions_navigation_page_yields_nothing(self) -> None:
        fragments = [
            Fragment(content=_words(25), link="https://example.com/a"),
            Fragment(content=_words(6), link="https://example.com/b"),
            Fragment(content=_words(6), link="https://example.com/c"),
        ]
        assert filter_blocks(fragments, []) == []

    def test_all_empty_fragments(self) -> None:
        assert filter_blocks([Fragment(), Fragment(), Fragment()], []) == []

    def test_empty_sequence(self) -> None:
        assert filter_blocks([], []) == []

    def test_region_end_past_sequence_is_clipped(self) -> None:
        fragments = [Fragment(title="A"), Fragment(title="B")]
        regions = [Region(start=0, end=9, reason=REASON_TITLE_START, window=10)]

        assert [b.index for b in filter_blocks(fragments, regions)] == [0, 1]
