"""Tests for markup conversion and the Fragment model."""

from __future__ import annotations

import pytest

from smartcrawl.errors import ParseError
from smartcrawl.scraper.fragments import html_to_fragments, page_title
from smartcrawl.scraper.models import Fragment, fragments_from_dicts, sequence_words

BASE = "https://example.com/blog/post"

_ARTICLE = """
<html>
<head><title> My Article </title><style>p { color: red; }</style></head>
<body>
  <div class="site-header">Site wide banner text</div>
  <h1>Main heading</h1>
  <p>First paragraph of the article body. <a href="/about">About us</a> and more text.</p>
  <img src="/img/chart.png" alt="A  chart">
  <a href="related"><h3>Related post title</h3></a>
  <script>console.log("skip me");</script>
  <a href="javascript:void(0)">Click handler</a>
  <p>ok</p>
</body>
</html>
"""


class TestHtmlToFragments:
    def test_document_order_and_kinds(self) -> None:
        fragments = html_to_fragments(_ARTICLE, BASE)

        assert fragments[0] == Fragment(title="Main heading")
        assert fragments[1].content == "First paragraph of the article body. and more text."
        assert fragments[2] == Fragment(content="About us", link="https://example.com/about")

    def test_image_with_alt_and_absolute_src(self) -> None:
        fragments = html_to_fragments(_ARTICLE, BASE)

        images = [f for f in fragments if f.has_image]
        assert images == [Fragment(image="https://example.com/img/chart.png", alt="A chart")]

    def test_link_is_inherited_by_nested_heading(self) -> None:
        fragments = html_to_fragments(_ARTICLE, BASE)

        titles = [f for f in fragments if f.title == "Related post title"]
        assert titles[0].link == "https://example.com/blog/related"

    def test_script_and_style_are_skipped(self) -> None:
        text = " ".join(f.content or "" for f in html_to_fragments(_ARTICLE, BASE))

        assert "skip me" not in text
        assert "color" not in text

    def test_javascript_links_are_dropped(self) -> None:
        fragments = html_to_fragments(_ARTICLE, BASE)

        handler = [f for f in fragments if f.content == "Click handler"]
        assert handler == [Fragment(content="Click handler")]

    def test_page_chrome_text_is_skipped(self) -> None:
        fragments = html_to_fragments(_ARTICLE, BASE)
        assert all(f.content != "Site wide banner text" for f in fragments)

    def test_very_short_text_is_skipped(self) -> None:
        fragments = html_to_fragments(_ARTICLE, BASE)
        assert all(f.content != "ok" for f in fragments)

    def test_empty_document(self) -> None:
        assert html_to_fragments("<html><body></body></html>", BASE) == ()

    def test_returns_immutable_sequence(self) -> None:
        assert isinstance(html_to_fragments(_ARTICLE, BASE), tuple)


class TestPageTitle:
    def test_title_is_stripped(self) -> None:
        assert page_title(_ARTICLE) == "My Article"

    def test_missing_title(self) -> None:
        assert page_title("<html><body><p>No title here</p></body></html>") == ""


class TestFragmentModel:
    def test_blank_fields_are_absent(self) -> None:
        fragment = Fragment(title="  ", content="", link=" ")

        assert not fragment.has_title
        assert not fragment.has_content
        assert not fragment.has_link
        assert fragment.title_words == 0

    def test_word_counts(self) -> None:
        fragment = Fragment(title="Two words", content="one  two\tthree\nfour")

        assert fragment.title_words == 2
        assert fragment.content_words == 4

    def test_to_dict_is_sparse(self) -> None:
        assert Fragment(image="https://example.com/a.png", alt="Alt").to_dict() == {
            "image": "https://example.com/a.png",
            "alt": "Alt",
        }

    def test_sequence_words_counts_alt_text(self) -> None:
        fragments = [Fragment(title="Heading here"), Fragment(image="x.png", alt="three word alt")]
        assert sequence_words(fragments) == 5


class TestFragmentsFromDicts:
    def test_builds_sequence(self) -> None:
        fragments = fragments_from_dicts(
            [{"title": "Hello"}, {"content": "Body text", "link": "https://example.com"}]
        )

        assert fragments == (
            Fragment(title="Hello"),
            Fragment(content="Body text", link="https://example.com"),
        )

    def test_empty_list_is_valid(self) -> None:
        assert fragments_from_dicts([]) == ()

    def test_unknown_keys_are_ignored(self) -> None:
        assert fragments_from_dicts([{"title": "T", "meta": {"index": 3}}]) == (Fragment(title="T"),)

    def test_not_a_list(self) -> None:
        with pytest.raises(ParseError):
            fragments_from_dicts({"title": "Hello"})

    def test_item_not_an_object(self) -> None:
        with pytest.raises(ParseError, match="position 1"):
            fragments_from_dicts([{"title": "ok"}, "nope"])

    def test_non_string_field(self) -> None:
        with pytest.raises(ParseError, match="content"):
            fragments_from_dicts([{"content": 42}])
