"""Link-density heuristics.

Two checks share the notion of an *associated link*: a fragment carries a
link itself, or one of the next ``LINK_LOOKAHEAD`` fragments does.

- :func:`prune_link_runs` trims a region whose tail degenerates into a long
  run of text+link pairs (a menu or related-articles list).
- :func:`is_link_pattern_only` decides whether a page without any region is
  pure navigation.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Sequence

from smartcrawl.content.models import Region
from smartcrawl.scraper.models import Fragment

LINK_LOOKAHEAD = 3
MIN_PAIR_WORDS = 5
MAX_CONSECUTIVE_PAIRS = 15
LINK_ONLY_RATIO = 0.7


def has_associated_link(fragments: Sequence[Fragment], index: int) -> bool:
    """Whether ``fragments[index]`` or one of the next three fragments is linked."""
    last = min(index + LINK_LOOKAHEAD, len(fragments) - 1)
    return any(fragments[j].has_link for j in range(index, last + 1))


def _pair_eligible(fragment: Fragment) -> bool:
    return fragment.title_words >= MIN_PAIR_WORDS or fragment.content_words >= MIN_PAIR_WORDS


def prune_link_runs(
    fragments: Sequence[Fragment], regions: Sequence[Region]
) -> List[Region]:
    """Cut each region at the first run of ``MAX_CONSECUTIVE_PAIRS`` link pairs.

    A link pair is a fragment with at least ``MIN_PAIR_WORDS`` words in its
    title or content that has an associated link.  Any other fragment resets
    the run.  When the run reaches its limit at index ``i`` the region ends at
    ``i - (MAX_CONSECUTIVE_PAIRS - 1)``, where the run began.  A region whose
    new end falls before its start is dropped.
    """
    pruned: List[Region] = []

    for region in regions:
        end = region.end
        pairs = 0
        consecutive = 0
        detected = False

        for i in range(region.start, region.end + 1):
            fragment = fragments[i]
            if _pair_eligible(fragment) and has_associated_link(fragments, i):
                pairs += 1
                consecutive += 1
                if consecutive >= MAX_CONSECUTIVE_PAIRS:
                    end = i - (MAX_CONSECUTIVE_PAIRS - 1)
                    detected = True
                    break
            else:
                consecutive = 0

        if end < region.start:
            continue
        pruned.append(
            replace(region, end=end, link_pattern_detected=detected, link_pairs=pairs)
        )

    return pruned


def is_link_pattern_only(fragments: Sequence[Fragment]) -> bool:
    """True when more than 70% of text-bearing fragments have an associated link."""
    text_bearing = 0
    linked = 0
    for i, fragment in enumerate(fragments):
        if not (fragment.has_title or fragment.has_content):
            continue
        text_bearing += 1
        if has_associated_link(fragments, i):
            linked += 1

    return text_bearing > 0 and linked / text_bearing > LINK_ONLY_RATIO
