"""Content Region Detector.

A single forward scan over the Fragment Sequence proposes inclusive index
spans that are likely to hold the page's primary content.  Article text is
bursty: short captions or asides between paragraphs must not split one
article into many regions, while ten fragments without anything
content-bearing legitimately end a region.

Scan state lives in one :class:`_OpenRegion` accumulator that is updated in
place; a region is emitted as an immutable
:class:`~smartcrawl.content.models.Region` when it closes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from smartcrawl.content.models import REASON_CONTENT_START, REASON_TITLE_START, Region
from smartcrawl.scraper.models import Fragment

# Fragments inspected to decide whether the first region needs a wider window
LEADING_SPAN = 10
DEFAULT_WINDOW = 10
EXTENDED_WINDOW = 20
# Fragments searched past the last content-bearing index before closing
LOOKAHEAD = 10
MIN_CONTENT_WORDS = 15


def is_content_bearing(fragment: Fragment) -> bool:
    """A non-empty title, or content of at least ``MIN_CONTENT_WORDS`` words."""
    if fragment.has_title:
        return True
    return fragment.has_content and fragment.content_words >= MIN_CONTENT_WORDS


@dataclass
class _OpenRegion:
    start: int
    end: int
    reason: str
    window: int
    is_first_region: bool
    last_valid_index: int

    def absorb(self, index: int, last_index: int) -> None:
        """Record a content-bearing fragment at *index*, pushing ``end`` out."""
        self.end = max(self.end, min(index + self.window - 1, last_index))
        self.last_valid_index = index

    def close(self) -> Region:
        return Region(
            start=self.start,
            end=self.end,
            reason=self.reason,
            window=self.window,
            is_first_region=self.is_first_region,
        )


def _next_content_bearing(
    fragments: Sequence[Fragment], first: int, last: int
) -> Optional[int]:
    for j in range(first, last + 1):
        if is_content_bearing(fragments[j]):
            return j
    return None


def detect_regions(fragments: Sequence[Fragment]) -> List[Region]:
    """Propose content regions for *fragments*, in document order.

    Rules:
        1. If none of the first ``LEADING_SPAN`` fragments is content-bearing,
           the first region opens with ``EXTENDED_WINDOW``; every other region
           uses ``DEFAULT_WINDOW``.
        2. A content-bearing fragment at ``i`` opens a region
           ``[i, min(i + window - 1, len - 1)]``.
        3. Inside an open region each content-bearing fragment may push
           ``end`` further out and always becomes the last valid index.
        4. On reaching ``end``, the next ``LOOKAHEAD`` fragments after the
           last valid index are searched; a hit extends the region, a miss
           closes it.
        5. A region still open at the end of the sequence is closed.
    """
    if not fragments:
        return []

    last_index = len(fragments) - 1
    leading_content = any(is_content_bearing(f) for f in fragments[:LEADING_SPAN])

    regions: List[Region] = []
    current: Optional[_OpenRegion] = None
    first_region = True

    for i, fragment in enumerate(fragments):
        if is_content_bearing(fragment):
            if current is None:
                window = EXTENDED_WINDOW if first_region and not leading_content else DEFAULT_WINDOW
                current = _OpenRegion(
                    start=i,
                    end=min(i + window - 1, last_index),
                    reason=REASON_TITLE_START if fragment.has_title else REASON_CONTENT_START,
                    window=window,
                    is_first_region=first_region,
                    last_valid_index=i,
                )
                first_region = False
            else:
                current.absorb(i, last_index)

        if current is not None and i >= current.end:
            base = current.last_valid_index
            found = _next_content_bearing(
                fragments, base + 1, min(base + LOOKAHEAD, last_index)
            )
            if found is not None:
                current.absorb(found, last_index)
            else:
                regions.append(current.close())
                current = None

    if current is not None:
        regions.append(current.close())

    return regions
