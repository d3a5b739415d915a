"""Utilities for rendering crawl results in the CLI."""

from __future__ import annotations

from typing import List

from smartcrawl.compare import ExtractionComparison
from smartcrawl.content.models import ExtractedData, FilteredFragment
from smartcrawl.models import BatchResult, CrawlResult
from smartcrawl.scraper.models import Fragment

_PREVIEW_CHARS = 100


def _get_icon(block: FilteredFragment) -> str:
    fragment = block.fragment
    if fragment.has_title:
        return "📌"
    if fragment.has_image:
        return "🖼️"
    return "📄"


def _preview(fragment: Fragment) -> str:
    text = fragment.title or fragment.content or fragment.alt or fragment.image or ""
    if len(text) > _PREVIEW_CHARS:
        text = text[: _PREVIEW_CHARS - 1] + "…"
    return text


def render_blocks(data: ExtractedData) -> str:
    """Render kept blocks as one line each: index, icon, preview, link."""
    lines: List[str] = []
    for block in data.blocks:
        line = f"  #{block.index:<4} {_get_icon(block)} {_preview(block.fragment)}"
        if block.fragment.has_link:
            line += f"  → {block.fragment.link}"
        lines.append(line)
    return "\n".join(lines)


def render_result(result: CrawlResult) -> str:
    """Human-readable summary of a single :class:`CrawlResult`."""
    if not result.success:
        hint = ""
        if result.should_fallback_to_browser:
            hint = " (a rendered fetch may succeed)"
        return f"✗ {result.url} [{result.method}] {result.error}{hint}"

    data = result.extracted_data
    source = "cache" if result.from_cache else result.method
    lines = [
        f"✓ {result.url} [{source}] {result.processing_time}ms",
        f"  Title  : {(data.title if data else '') or '(none)'}",
    ]
    if data is not None:
        lines.append(f"  Items  : {data.total_items} ({data.total_words} words)")
        lines.append(
            f"  Main   : {data.main_content_blocks} block(s), "
            f"{data.main_content_words} words"
        )
        if data.blocks:
            lines.append(render_blocks(data))
    return "\n".join(lines)


def render_batch(batch: BatchResult) -> str:
    """One summary per result followed by the batch totals."""
    parts = [render_result(r) for r in batch.results]
    parts.append(
        f"{batch.successful}/{batch.total} successful, {batch.failed} failed "
        f"({batch.lightweight_successes} lightweight, {batch.rendered_successes} rendered)"
    )
    return "\n".join(parts)


def render_comparison(comparison: ExtractionComparison) -> str:
    """Match totals for both pages followed by one line per shared block."""
    lines: List[str] = []
    for label, data, unique, share in (
        ("First ", comparison.first, comparison.first_unique_blocks, comparison.first_match_percentage),
        ("Second", comparison.second, comparison.second_unique_blocks, comparison.second_match_percentage),
    ):
        lines.append(
            f"  {label} : {data.url}: {len(data.blocks)} block(s), "
            f"{unique} unique, {share}% shared"
        )
    lines.append(f"  Shared : {len(comparison.matches)} exact match(es)")
    for match in comparison.matches:
        lines.append(
            f"  #{match.first_index:<4} ↔ #{match.second_index:<4} {_preview(match.fragment)}"
        )
    return "\n".join(lines)
