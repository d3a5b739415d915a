"""Markup conversion: turns an HTML document into a Fragment Sequence.

Both fetch tiers hand their markup to :func:`html_to_fragments`, so a page
fetched over plain HTTP and a page rendered in a browser produce the same
fragment shape.  Elements are visited depth-first in document order; each
element contributes at most one fragment built from its *direct* text.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup, NavigableString, Tag

from smartcrawl.scraper.models import Fragment

_SKIP_TAGS = frozenset(
    ["script", "style", "noscript", "meta", "link", "head", "title", "template", "svg"]
)
_HEADING_TAGS = frozenset(["h1", "h2", "h3", "h4", "h5", "h6"])
_LINK_TAGS = frozenset(["a", "area"])

# class/id markers of page chrome; such elements keep their children but
# contribute no text of their own
_CHROME_MARKERS = ("nav", "menu", "footer", "header")

_MIN_TEXT_CHARS = 3


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _extract_title(html: str) -> str:
    """Return the text content of the first ``<title>`` tag, or empty string."""
    match = re.search(r"<title[^>]*>([^<]+)</title>", html, re.IGNORECASE)
    if match:
        return match.group(1).strip()
    return ""


def _clean_text(text: str) -> str:
    return " ".join(text.split())


def _direct_text(tag: Tag) -> str:
    # exact type check excludes Comment, Doctype and friends
    parts = [str(node) for node in tag.children if type(node) is NavigableString]
    return _clean_text(" ".join(parts))


def _absolute(href: Optional[str], base_url: str) -> Optional[str]:
    if not href or not href.strip():
        return None
    href = href.strip()
    if href.lower().startswith("javascript:"):
        return None
    return urljoin(base_url, href)


def _is_chrome(tag: Tag) -> bool:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = [classes]
    marker_text = " ".join(classes + [tag.get("id") or ""]).lower()
    return any(marker in marker_text for marker in _CHROME_MARKERS)


def _walk(tag: Tag, base_url: str, link: Optional[str], out: List[Fragment]) -> None:
    name = (tag.name or "").lower()
    if name in _SKIP_TAGS:
        return

    if name in _LINK_TAGS:
        link = _absolute(tag.get("href"), base_url) or link

    if name == "img":
        src = _absolute(tag.get("src"), base_url)
        if src:
            alt = _clean_text(tag.get("alt") or "")
            out.append(Fragment(image=src, alt=alt or None, link=link))
        return

    text = _direct_text(tag)
    if len(text) >= _MIN_TEXT_CHARS and not _is_chrome(tag):
        if name in _HEADING_TAGS:
            out.append(Fragment(title=text, link=link))
        else:
            out.append(Fragment(content=text, link=link))

    for child in tag.find_all(recursive=False):
        _walk(child, base_url, link, out)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def html_to_fragments(html: str, base_url: str) -> Tuple[Fragment, ...]:
    """Convert *html* into an ordered, immutable Fragment Sequence.

    Relative ``href``/``src`` values are resolved against *base_url*.  A link
    on an ``<a>`` element is inherited by every fragment nested inside it.
    """
    soup = BeautifulSoup(html, "html.parser")
    root = soup.body or soup
    fragments: List[Fragment] = []
    for child in root.find_all(recursive=False):
        _walk(child, base_url, None, fragments)
    return tuple(fragments)


def page_title(html: str) -> str:
    """Document title taken from the ``<title>`` element."""
    return _extract_title(html)
