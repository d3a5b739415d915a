"""Main-content pipeline: detect → prune → filter.

    fragments ─▶ detect_regions ─▶ prune_link_runs ─▶ filter_blocks ─▶ kept

The pipeline is pure: identical input always yields identical output and
nothing here raises on empty or unsegmented input.
"""

from __future__ import annotations

from typing import List, Sequence

from smartcrawl.content.blocks import filter_blocks
from smartcrawl.content.links import prune_link_runs
from smartcrawl.content.models import ExtractedData, FilteredFragment
from smartcrawl.content.regions import detect_regions
from smartcrawl.scraper.models import FetchMethod, Fragment, sequence_words


def extract_main_content(fragments: Sequence[Fragment]) -> List[FilteredFragment]:
    """Return the fragments of *fragments* judged to be primary content."""
    if not fragments:
        return []
    regions = detect_regions(fragments)
    pruned = prune_link_runs(fragments, regions)
    return filter_blocks(fragments, pruned)


def build_extraction(
    fragments: Sequence[Fragment],
    *,
    url: str,
    title: str,
    method: FetchMethod,
) -> ExtractedData:
    """Run the pipeline over one page's *fragments* and summarise the result."""
    blocks = extract_main_content(fragments)
    main_blocks = [b for b in blocks if b.is_main_content]
    main_words = sum(b.text_words for b in main_blocks)
    total_items = len(fragments)

    print(
        f"[CONTENT] {url}: {len(main_blocks)}/{total_items} "
        f"fragment(s) kept as main content ({main_words} words)"
    )

    return ExtractedData(
        url=url,
        title=title,
        summary=(
            f"Crawled content with {total_items} items "
            f"({len(main_blocks)} main content blocks)"
        ),
        blocks=blocks,
        total_words=sequence_words(fragments),
        total_items=total_items,
        main_content_blocks=len(main_blocks),
        main_content_words=main_words,
        extraction_method=method,
    )
