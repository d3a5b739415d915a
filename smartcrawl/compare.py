"""Block comparison between two stored extractions.

Blocks that appear verbatim on two pages of the same site are usually
boilerplate (cookie banners, bylines, newsletter boxes); the share of
*unique* blocks is what distinguishes one page's content from another's.

Blocks are bucketed by an MD5 of their canonical JSON payload (title,
content, image, alt, link; never the per-page ``meta``), then matched
one-to-one inside each bucket in document order.
"""

from __future__ import annotations

import hashlib
import json
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from smartcrawl.cache import load_result
from smartcrawl.content.models import ExtractedData, FilteredFragment
from smartcrawl.errors import ParseError
from smartcrawl.scraper.models import Fragment


def block_hash(fragment: Fragment) -> str:
    """MD5 hex digest of *fragment*'s payload, independent of key order."""
    canonical = json.dumps(fragment.to_dict(), sort_keys=True, ensure_ascii=False)
    return hashlib.md5(canonical.encode("utf-8")).hexdigest()


def _percentage(part: int, whole: int) -> float:
    if whole == 0:
        return 0.0
    return round(part / whole * 100, 2)


@dataclass(frozen=True)
class BlockMatch:
    """One block present on both pages."""

    fragment: Fragment
    first_index: int
    second_index: int
    hash: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "block": self.fragment.to_dict(),
            "indices": {"first": self.first_index, "second": self.second_index},
            "hash": self.hash,
        }


@dataclass
class ExtractionComparison:
    """Exact block matches between two extractions plus the derived ratios."""

    first: ExtractedData
    second: ExtractedData
    matches: List[BlockMatch] = field(default_factory=list)

    @property
    def first_unique_blocks(self) -> int:
        return len(self.first.blocks) - len(self.matches)

    @property
    def second_unique_blocks(self) -> int:
        return len(self.second.blocks) - len(self.matches)

    @property
    def first_match_percentage(self) -> float:
        return _percentage(len(self.matches), len(self.first.blocks))

    @property
    def second_match_percentage(self) -> float:
        return _percentage(len(self.matches), len(self.second.blocks))

    def to_dict(self) -> dict[str, Any]:
        def _page(data: ExtractedData) -> dict[str, Any]:
            return {
                "url": data.url,
                "title": data.title,
                "totalItems": data.total_items,
                "totalWords": data.total_words,
                "blocks": len(data.blocks),
            }

        return {
            "first": _page(self.first),
            "second": _page(self.second),
            "comparison": {
                "totalExactMatches": len(self.matches),
                "firstUniqueBlocks": self.first_unique_blocks,
                "secondUniqueBlocks": self.second_unique_blocks,
                "matchPercentageFirst": self.first_match_percentage,
                "matchPercentageSecond": self.second_match_percentage,
            },
            "exactMatches": [match.to_dict() for match in self.matches],
        }


def _buckets(blocks: List[FilteredFragment]) -> Dict[str, List[int]]:
    buckets: Dict[str, List[int]] = defaultdict(list)
    for position, block in enumerate(blocks):
        buckets[block_hash(block.fragment)].append(position)
    return buckets


def compare_extractions(first: ExtractedData, second: ExtractedData) -> ExtractionComparison:
    """Match identical blocks between *first* and *second*.

    Each block of *second* is matched at most once, so a block repeated on
    the first page but present once on the second counts as one match.
    Reported indices are the blocks' positions in their source sequences.
    """
    second_buckets = _buckets(second.blocks)
    comparison = ExtractionComparison(first=first, second=second)

    for block in first.blocks:
        digest = block_hash(block.fragment)
        candidates = second_buckets.get(digest)
        if not candidates:
            continue
        for n, position in enumerate(candidates):
            other = second.blocks[position]
            if other.fragment == block.fragment:
                comparison.matches.append(
                    BlockMatch(
                        fragment=block.fragment,
                        first_index=block.index,
                        second_index=other.index,
                        hash=digest,
                    )
                )
                del candidates[n]
                break

    return comparison


def _load_extraction(path: Path) -> ExtractedData:
    result = load_result(path)
    if result.extracted_data is None:
        raise ParseError(f"{path.name} holds no extracted data")
    return result.extracted_data


def compare_files(first_path: Path, second_path: Path) -> ExtractionComparison:
    """Compare two stored cache artifacts.

    Raises:
        ParseError: If either file is corrupt or holds a failed result.
    """
    print(f"[COMPARE] {first_path.name} ↔ {second_path.name}")
    comparison = compare_extractions(
        _load_extraction(first_path), _load_extraction(second_path)
    )
    print(
        f"[COMPARE] {len(comparison.matches)} exact match(es); "
        f"{comparison.first_match_percentage}% / {comparison.second_match_percentage}%"
    )
    return comparison


def unique_block_count(data: ExtractedData, others: Optional[List[ExtractedData]] = None) -> int:
    """Blocks of *data* that appear on none of *others*."""
    shared = set()
    for other in others or []:
        shared.update(block_hash(block.fragment) for block in other.blocks)
    return sum(1 for block in data.blocks if block_hash(block.fragment) not in shared)
