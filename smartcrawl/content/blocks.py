"""Block Filter: drops individually low-value fragments."""

from __future__ import annotations

from typing import List, Sequence

from smartcrawl.content.links import is_link_pattern_only
from smartcrawl.content.models import REASON_NO_REGION, FilteredFragment, Region
from smartcrawl.scraper.models import Fragment

MIN_KEEP_WORDS = 20


def should_keep(fragment: Fragment) -> bool:
    """Keep titles, images and content of at least ``MIN_KEEP_WORDS`` words.

    Anything else, including a fragment that only carries a link, is dropped.
    """
    if fragment.has_title or fragment.has_image:
        return True
    if fragment.has_content:
        return fragment.content_words >= MIN_KEEP_WORDS
    return False


def _keep(fragment: Fragment, index: int, reason: str, is_first_region: bool) -> FilteredFragment:
    return FilteredFragment(
        fragment=fragment,
        index=index,
        region_reason=reason,
        word_count=fragment.content_words,
        is_first_region=is_first_region,
    )


def filter_blocks(
    fragments: Sequence[Fragment], regions: Sequence[Region]
) -> List[FilteredFragment]:
    """Apply :func:`should_keep` inside *regions*, or across the whole page.

    Without regions a page whose text is mostly linked (see
    :func:`~smartcrawl.content.links.is_link_pattern_only`) is treated as
    navigation and yields nothing.
    """
    if not regions:
        if is_link_pattern_only(fragments):
            return []
        return [
            _keep(fragment, i, REASON_NO_REGION, False)
            for i, fragment in enumerate(fragments)
            if should_keep(fragment)
        ]

    kept: List[FilteredFragment] = []
    for region in regions:
        for i in range(region.start, min(region.end, len(fragments) - 1) + 1):
            if should_keep(fragments[i]):
                kept.append(_keep(fragments[i], i, region.reason, region.is_first_region))
    return kept
