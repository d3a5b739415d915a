"""Data models for the fetch stage.

A fetched page is one of two explicit variants, :class:`LightweightPage` or
:class:`RenderedPage`.  Both expose the same fields so the content pipeline
never has to branch on where a Fragment Sequence came from.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Literal, Optional, Sequence, Tuple

from smartcrawl.errors import FetchError, ParseError

FetchMethod = Literal["lightweight", "rendered"]

_FRAGMENT_FIELDS = ("title", "content", "image", "alt", "link")


def count_words(text: Optional[str]) -> int:
    """Number of whitespace-separated words in *text* (0 for ``None``)."""
    if not text:
        return 0
    return len(text.split())


def _present(value: Optional[str]) -> bool:
    return bool(value and value.strip())


@dataclass(frozen=True)
class Fragment:
    """One ordered content unit harvested from a page.

    The primary payload is one of ``title``, ``content`` or ``image``; any of
    them may carry a ``link``.  Position in the sequence is document order.
    """

    title: Optional[str] = None
    content: Optional[str] = None
    image: Optional[str] = None
    alt: Optional[str] = None
    link: Optional[str] = None

    @property
    def has_title(self) -> bool:
        return _present(self.title)

    @property
    def has_content(self) -> bool:
        return _present(self.content)

    @property
    def has_image(self) -> bool:
        return _present(self.image)

    @property
    def has_link(self) -> bool:
        return _present(self.link)

    @property
    def title_words(self) -> int:
        return count_words(self.title) if self.has_title else 0

    @property
    def content_words(self) -> int:
        return count_words(self.content) if self.has_content else 0

    def to_dict(self) -> dict[str, str]:
        """Serialise to the sparse ``{title|content|image, alt?, link?}`` shape."""
        return {
            name: getattr(self, name)
            for name in _FRAGMENT_FIELDS
            if getattr(self, name) is not None
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Fragment:
        values: dict[str, str] = {}
        for name in _FRAGMENT_FIELDS:
            value = raw.get(name)
            if value is None:
                continue
            if not isinstance(value, str):
                raise ParseError(
                    f"Fragment field {name!r} must be a string, got {type(value).__name__}"
                )
            values[name] = value
        return cls(**values)


def sequence_words(fragments: Sequence[Fragment]) -> int:
    """Words across every fragment's text payload (content, title, alt)."""
    return sum(
        count_words(f.content) + count_words(f.title) + count_words(f.alt)
        for f in fragments
    )


def fragments_from_dicts(items: Any) -> Tuple[Fragment, ...]:
    """Build an immutable Fragment Sequence from decoded JSON.

    Raises:
        ParseError: If *items* is not a list of objects.
    """
    if not isinstance(items, list):
        raise ParseError("Fragment sequence must be a JSON list")
    fragments = []
    for position, item in enumerate(items):
        if not isinstance(item, dict):
            raise ParseError(f"Fragment at position {position} is not an object")
        fragments.append(Fragment.from_dict(item))
    return tuple(fragments)


# ---------------------------------------------------------------------------
# Fetched page variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FetchedPage:
    """A page converted into its Fragment Sequence."""

    method: ClassVar[FetchMethod]

    url: str
    final_url: str
    title: str
    fragments: Tuple[Fragment, ...]
    status_code: int = 200


@dataclass(frozen=True)
class LightweightPage(FetchedPage):
    """Fetched with a plain HTTP GET and parsed without script execution."""

    method: ClassVar[FetchMethod] = "lightweight"


@dataclass(frozen=True)
class RenderedPage(FetchedPage):
    """Fetched by a headless browser after the page settled."""

    method: ClassVar[FetchMethod] = "rendered"


@dataclass
class FetchResult:
    """Outcome of one fetch tier; failures are values, never exceptions."""

    success: bool
    method: FetchMethod
    processing_time: int
    page: Optional[FetchedPage] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    should_fallback_to_browser: bool = False
    attempts: int = 1

    @classmethod
    def ok(
        cls, page: FetchedPage, processing_time: int, attempts: int = 1
    ) -> FetchResult:
        return cls(
            success=True,
            method=page.method,
            processing_time=processing_time,
            page=page,
            attempts=attempts,
        )

    @classmethod
    def failed(
        cls,
        method: FetchMethod,
        exc: FetchError,
        processing_time: int,
        attempts: int = 1,
        escalate: Optional[bool] = None,
    ) -> FetchResult:
        return cls(
            success=False,
            method=method,
            processing_time=processing_time,
            error=exc.message,
            error_code=exc.error_code,
            should_fallback_to_browser=exc.escalates if escalate is None else escalate,
            attempts=attempts,
        )
