"""Content package — main-content detection and filtering."""

from smartcrawl.content.blocks import filter_blocks, should_keep
from smartcrawl.content.links import is_link_pattern_only, prune_link_runs
from smartcrawl.content.models import FilteredFragment, Region
from smartcrawl.content.pipeline import build_extraction, extract_main_content
from smartcrawl.content.regions import detect_regions, is_content_bearing

__all__ = [
    "detect_regions",
    "is_content_bearing",
    "prune_link_runs",
    "is_link_pattern_only",
    "filter_blocks",
    "should_keep",
    "extract_main_content",
    "build_extraction",
    "Region",
    "FilteredFragment",
]
