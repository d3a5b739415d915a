"""Tests for locator normalisation and validation."""

from __future__ import annotations

import pytest

from smartcrawl.config import settings
from smartcrawl.errors import InvalidUrlError
from smartcrawl.urls import domain_slug, extract_domain, normalize_url, url_hash, validate_url


class TestNormalizeUrl:
    def test_adds_https_scheme(self) -> None:
        assert normalize_url("example.com/page") == "https://example.com/page"

    def test_lowercases_scheme_and_host(self) -> None:
        assert normalize_url("HTTP://Example.COM/Path?Q=1") == "http://example.com/Path?Q=1"

    def test_drops_fragment_and_defaults_path(self) -> None:
        assert normalize_url("https://example.com#top") == "https://example.com/"

    def test_empty_locator(self) -> None:
        with pytest.raises(InvalidUrlError):
            normalize_url("   ")

    def test_missing_host(self) -> None:
        with pytest.raises(InvalidUrlError):
            normalize_url("https:///path-only")

    def test_unbalanced_ipv6_bracket(self) -> None:
        with pytest.raises(InvalidUrlError, match=r"http://\[::1"):
            normalize_url("http://[::1")

    def test_extract_domain_of_unparsable_url(self) -> None:
        with pytest.raises(InvalidUrlError):
            extract_domain("http://[::1")


class TestValidateUrl:
    def test_accepts_public_https(self) -> None:
        assert validate_url("https://example.com/a") == "https://example.com/a"

    def test_rejects_non_http_scheme(self) -> None:
        with pytest.raises(InvalidUrlError, match="HTTP and HTTPS"):
            validate_url("ftp://example.com/file")

    @pytest.mark.parametrize(
        "url",
        [
            "http://localhost:8000/",
            "http://127.0.0.1/",
            "http://10.1.2.3/",
            "http://192.168.0.10/",
            "https://intranet.internal/",
            "http://printer.local/",
            "http://172.16.4.2/",
            "http://[::1]:8080/",
        ],
    )
    def test_rejects_private_hosts(self, url: str) -> None:
        with pytest.raises(InvalidUrlError) as exc_info:
            validate_url(url)

        assert exc_info.value.error_code == "INVALID_URL"
        assert exc_info.value.escalates is False

    @pytest.mark.parametrize(
        "url",
        ["https://thelocal.se/", "https://localnews.com/", "https://internalaffairs.example.org/"],
    )
    def test_public_hosts_containing_reserved_words(self, url: str) -> None:
        assert validate_url(url) == url

    def test_private_hosts_allowed_when_blocking_disabled(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(settings, "block_private_hosts", False)
        assert validate_url("http://localhost:8000/") == "http://localhost:8000/"


class TestFingerprints:
    def test_extract_domain(self) -> None:
        assert extract_domain("https://News.Example.com:8443/a") == "news.example.com"

    def test_url_hash_is_md5_hex(self) -> None:
        digest = url_hash("https://example.com/")
        assert len(digest) == 32
        assert digest == url_hash("https://example.com/")
        assert digest != url_hash("https://example.com/other")

    def test_domain_slug(self) -> None:
        assert domain_slug("news.example-site.com") == "news_example_site_com"
