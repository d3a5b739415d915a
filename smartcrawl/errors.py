"""Failure taxonomy for the fetch stage.

Every class carries three class attributes consulted by the fetcher:

- ``error_code``: stable identifier included in structured results.
- ``retryable``: whether another lightweight attempt may succeed.
- ``escalates``: whether a rendered (browser) fetch may succeed where the
  lightweight fetch failed.

None of these exceptions escape :mod:`smartcrawl.scraper.fetcher`,
:mod:`smartcrawl.scraper.renderer` or :mod:`smartcrawl.coordinator`; they are
turned into ``success=False`` results at that boundary.  ``ParseError`` is the
exception: the fragment and cache loaders raise it straight to their caller.
"""

from __future__ import annotations


class FetchError(Exception):
    """Base class.  Unclassified failures: retry, then try the browser."""

    error_code: str = "FETCH_ERROR"
    retryable: bool = True
    escalates: bool = True

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# --- network layer: a browser will not fix these ---

class NetworkError(FetchError):
    """DNS resolution, refused connection or TLS certificate failure."""

    error_code = "NETWORK_ERROR"
    escalates = False


class InvalidUrlError(FetchError):
    """Locator is malformed, uses a non-HTTP scheme, or points at a private host."""

    error_code = "INVALID_URL"
    retryable = False
    escalates = False


class ContentTypeError(FetchError):
    """The server answered with something other than HTML."""

    error_code = "CONTENT_TYPE"
    retryable = False
    escalates = False


# --- page-level: a rendered fetch may succeed ---

class FetchTimeoutError(FetchError):
    error_code = "TIMEOUT"


class ServerBlockError(FetchError):
    """HTTP 403/503 or an anti-bot challenge page."""

    error_code = "SERVER_BLOCK"


class HttpStatusError(FetchError):
    """Any other 4xx/5xx status."""

    error_code = "HTTP_STATUS"

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmptyContentError(FetchError):
    """Empty response body, or markup that yields no fragments."""

    error_code = "EMPTY_CONTENT"


class ScriptRequiredError(FetchError):
    """The markup carries a JavaScript-application signature."""

    error_code = "SCRIPT_REQUIRED"
    retryable = False


# --- input shape ---

class ParseError(FetchError):
    """A fragment sequence (or cached artifact) is empty or malformed."""

    error_code = "PARSE_ERROR"
    retryable = False
    escalates = False
