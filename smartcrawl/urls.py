"""Locator helpers: normalisation, validation and fingerprinting."""

from __future__ import annotations

import hashlib
import ipaddress
import re
from typing import Optional
from urllib.parse import SplitResult, urlsplit, urlunsplit

from smartcrawl.config import settings
from smartcrawl.errors import InvalidUrlError

# Matched against the last DNS label only, so "printer.local" is private while
# "thelocal.se" and "localnews.com" are not. Internal names under a public
# suffix (e.g. "local.corp.example") are not caught by this rule.
_PRIVATE_TLDS = frozenset(["localhost", "local", "internal"])


def _split(url: str, original: Optional[str] = None) -> SplitResult:
    try:
        return urlsplit(url)
    except ValueError as exc:
        # e.g. an unbalanced IPv6 bracket: "http://[::1"
        raise InvalidUrlError(f"Invalid URL: {original or url}") from exc


def normalize_url(url: str) -> str:
    """Return the canonical form of *url* used for fetching and cache keys.

    A missing scheme defaults to ``https://``; scheme and host are lower-cased
    and any ``#fragment`` is dropped.  Path and query are kept verbatim.

    Raises:
        InvalidUrlError: If *url* is empty, unparsable or has no host.
    """
    if not url or not url.strip():
        raise InvalidUrlError("Invalid URL: empty locator")

    candidate = url.strip()
    if not re.match(r"^[a-zA-Z][a-zA-Z0-9+.-]*://", candidate):
        candidate = "https://" + candidate

    parts = _split(candidate, url)
    if not parts.hostname:
        raise InvalidUrlError(f"Invalid URL: {url}")

    netloc = parts.netloc.lower()
    path = parts.path or "/"
    return urlunsplit((parts.scheme.lower(), netloc, path, parts.query, ""))


def extract_domain(url: str) -> str:
    """Return the lower-cased hostname of *url*."""
    hostname = _split(url).hostname
    if not hostname:
        raise InvalidUrlError(f"Invalid URL: {url}")
    return hostname.lower()


def is_private_host(hostname: str) -> bool:
    """Loopback, private-network or link-local address, or a reserved TLD."""
    try:
        address = ipaddress.ip_address(hostname)
    except ValueError:
        return hostname.rsplit(".", 1)[-1] in _PRIVATE_TLDS
    return address.is_private or address.is_loopback or address.is_link_local


def validate_url(url: str) -> str:
    """Normalise *url* and reject locators the crawler must not visit.

    Only ``http`` and ``https`` are allowed.  When
    ``settings.block_private_hosts`` is on, loopback and private-network
    hosts are refused as well.

    Returns:
        The normalised URL.

    Raises:
        InvalidUrlError: On any rejected locator.
    """
    normalized = normalize_url(url)
    scheme = _split(normalized).scheme
    if scheme not in ("http", "https"):
        raise InvalidUrlError(
            f"Invalid URL: only HTTP and HTTPS protocols are allowed ({url})"
        )

    if settings.block_private_hosts:
        hostname = extract_domain(normalized)
        if is_private_host(hostname):
            raise InvalidUrlError(
                f"Invalid URL: private/internal hosts are not allowed ({hostname})"
            )

    return normalized


def url_hash(url: str) -> str:
    """MD5 hex digest of *url* (32 chars), the page fingerprint."""
    return hashlib.md5(url.encode("utf-8")).hexdigest()


def domain_slug(domain: str) -> str:
    """Make *domain* safe for use inside a file name."""
    return re.sub(r"[^a-zA-Z0-9]", "_", domain)
