"""Tests for readable-text, metadata and link extraction."""

from __future__ import annotations

import pytest

from summarizer.browser.extractor import (
    ContentExtractor,
    clean_text,
    extract_links,
    extract_metadata,
    parse_links,
    parse_metadata,
    remove_duplicate_lines,
)
from summarizer.errors import NoContentError, TransientError

from conftest import ARTICLE_TEXT, FakePage, article_html

LONG_A = "This sentence is comfortably longer than thirty characters."
LONG_B = "Another line that easily passes the thirty character mark."


# ---------------------------------------------------------------------------
# Line deduplication
# ---------------------------------------------------------------------------

class TestRemoveDuplicateLines:
    def test_long_duplicates_keep_first_occurrence(self) -> None:
        text = "\n".join([LONG_A, LONG_B, LONG_A, LONG_B])
        assert remove_duplicate_lines(text) == "\n".join([LONG_A, LONG_B])

    def test_short_lines_never_deduplicated(self) -> None:
        text = "\n".join(["Read more", LONG_A, "Read more", "Read more"])
        assert remove_duplicate_lines(text).split("\n") == [
            "Read more", LONG_A, "Read more", "Read more",
        ]

    def test_comparison_is_trimmed_and_case_insensitive(self) -> None:
        text = "\n".join([LONG_A, "   " + LONG_A.upper() + "  "])
        assert remove_duplicate_lines(text) == LONG_A

    def test_thirty_character_boundary(self) -> None:
        exactly_30 = "x" * 30
        just_under = "y" * 29
        text = "\n".join([exactly_30, exactly_30, just_under, just_under])
        assert remove_duplicate_lines(text).split("\n") == [exactly_30, just_under, just_under]


class TestCleanText:
    def test_collapses_blank_line_runs(self) -> None:
        assert clean_text("a\n\n\n\n\nb") == "a\n\nb"

    def test_collapses_horizontal_whitespace(self) -> None:
        assert clean_text("a  \t  b\t\tc") == "a b c"

    def test_trims(self) -> None:
        assert clean_text("  \n hello \n  ") == "hello"


# ---------------------------------------------------------------------------
# ContentExtractor
# ---------------------------------------------------------------------------

class TestContentExtractor:
    def test_extracts_article_and_strips_noise(self) -> None:
        text = ContentExtractor().extract(article_html())
        assert ARTICLE_TEXT in text
        assert "Home | About" not in text
        assert "Copyright" not in text

    def test_longest_candidate_wins(self) -> None:
        html = f"""
<html><body>
  <article><p>Short teaser.</p></article>
  <div class="content"><p>{ARTICLE_TEXT}</p><p>{LONG_A}</p></div>
</body></html>"""
        text = ContentExtractor().extract(html)
        assert LONG_A in text
        assert "Short teaser" not in text

    def test_tie_keeps_first_candidate(self) -> None:
        first = "A" * 60
        second = "B" * 60
        html = f"<html><body><main><p>{first}</p></main><div class='post'><p>{second}</p></div></body></html>"
        text = ContentExtractor().extract(html)
        assert text == first

    def test_falls_back_to_body(self) -> None:
        html = f"<html><body><div><p>{ARTICLE_TEXT}</p></div></body></html>"
        assert ARTICLE_TEXT in ContentExtractor().extract(html)

    def test_removes_cookie_banner_and_scripts(self) -> None:
        html = f"""
<html><body>
  <div class="cookie">We use cookies to improve your experience on this site.</div>
  <script>var tracking = "should never appear in output";</script>
  <main><p>{ARTICLE_TEXT}</p></main>
</body></html>"""
        text = ContentExtractor().extract(html)
        assert "cookies" not in text
        assert "tracking" not in text

    def test_block_elements_become_lines(self) -> None:
        html = f"<html><body><article><h1>Title</h1><p>{LONG_A}</p><p>{LONG_B}</p></article></body></html>"
        lines = ContentExtractor().extract(html).split("\n")
        assert "Title" in lines
        assert LONG_A in lines
        assert LONG_B in lines

    def test_inline_markup_stays_on_one_line(self) -> None:
        html = (
            "<html><body><article><p>Solid-state cells use a <b>solid</b> electrolyte "
            "instead of a <em>liquid</em> one, which improves safety.</p></article></body></html>"
        )
        text = ContentExtractor().extract(html)
        assert "use a solid electrolyte instead of a liquid one" in text

    def test_duplicated_paragraphs_are_removed(self) -> None:
        html = f"<html><body><article><p>{LONG_A}</p><p>{LONG_B}</p><p>{LONG_A}</p></article></body></html>"
        text = ContentExtractor().extract(html)
        assert text.count(LONG_A) == 1

    def test_nested_wrappers_do_not_inflate_candidate_length(self) -> None:
        article = "Real article body with enough words to clearly be the main content."
        wrapped = "<div>" * 60 + "teaser" + "</div>" * 60
        html = (
            f"<html><body><article><p>{article}</p></article>"
            f"<div class='content'><p>Tiny</p>{wrapped}<p>end</p></div></body></html>"
        )
        text = ContentExtractor().extract(html)
        assert article in text
        assert "teaser" not in text

    def test_empty_wrappers_leave_at_most_one_blank_line(self) -> None:
        html = f"<html><body><main><p>{LONG_A}</p>{'<div></div>' * 10}<p>{LONG_B}</p></main></body></html>"
        assert ContentExtractor().extract(html) == f"{LONG_A}\n\n{LONG_B}"

    def test_source_line_wraps_collapse_to_spaces(self) -> None:
        wrapped = "The quick brown fox jumps\n over the lazy dog again and\n again in this paragraph."
        html = f"<html><body><article><p>{wrapped}</p><p>{wrapped}</p></article></body></html>"
        text = ContentExtractor().extract(html)
        assert text == "The quick brown fox jumps over the lazy dog again and again in this paragraph."
        assert text.count("quick brown fox") == 1

    def test_br_and_pre_keep_their_line_breaks(self) -> None:
        html = (
            f"<html><body><article><p>{LONG_A}<br>{LONG_B}</p>"
            "<pre>line one\nline two</pre></article></body></html>"
        )
        lines = ContentExtractor().extract(html).split("\n")
        assert LONG_A in lines
        assert LONG_B in lines
        assert "line one" in lines
        assert "line two" in lines

    def test_sparse_page_raises_no_content(self) -> None:
        with pytest.raises(NoContentError) as info:
            ContentExtractor().extract("<html><body><p>Too short.</p></body></html>")
        assert info.value.code == "NO_CONTENT"
        assert info.value.retryable is False

    def test_empty_page_raises_no_content(self) -> None:
        with pytest.raises(NoContentError):
            ContentExtractor().extract("<html></html>")

    def test_threshold_is_configurable(self) -> None:
        assert ContentExtractor(min_length=5).extract("<html><body><p>Enough.</p></body></html>") == "Enough."

    def test_exactly_min_length_passes(self) -> None:
        body = "z" * 50
        assert ContentExtractor(min_length=50).extract(f"<html><body><p>{body}</p></body></html>") == body

    async def test_extract_from_page_reads_rendered_html(self) -> None:
        page = FakePage(pages={"https://example.com/": article_html()}, url="https://example.com/")
        text = await ContentExtractor().extract_from_page(page)
        assert ARTICLE_TEXT in text

    async def test_extract_from_page_wraps_read_failures(self) -> None:
        class BrokenPage:
            async def content(self) -> str:
                raise RuntimeError("target closed")

        with pytest.raises(TransientError) as info:
            await ContentExtractor().extract_from_page(BrokenPage())
        assert info.value.code == "TEXT_EXTRACTION_FAILED"


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------

class TestMetadata:
    def test_parse_title_and_description(self) -> None:
        meta = parse_metadata(article_html(title="Batteries"), "https://example.com/b")
        assert meta.title == "Batteries"
        assert meta.description == "A page about Batteries."
        assert meta.url == "https://example.com/b"
        assert "T" in meta.timestamp

    def test_og_fallbacks(self) -> None:
        html = (
            '<html><head><meta property="og:title" content="OG Title">'
            '<meta property="og:description" content="OG description"></head></html>'
        )
        meta = parse_metadata(html, "https://example.com/")
        assert meta.title == "OG Title"
        assert meta.description == "OG description"

    def test_missing_metadata_is_empty(self) -> None:
        meta = parse_metadata("<html><body></body></html>", "https://example.com/")
        assert meta.title == ""
        assert meta.description == ""

    async def test_extract_metadata_uses_page_url(self) -> None:
        page = FakePage(pages={"https://example.com/x": article_html()}, url="https://example.com/x")
        meta = await extract_metadata(page)
        assert meta.url == "https://example.com/x"
        assert meta.title == "Test Page"

    async def test_extract_metadata_failure_is_retryable(self) -> None:
        class BrokenPage:
            url = "https://example.com/"

            async def content(self) -> str:
                raise RuntimeError("detached")

        with pytest.raises(TransientError) as info:
            await extract_metadata(BrokenPage())
        assert info.value.code == "METADATA_EXTRACTION_FAILED"
        assert info.value.retryable is True


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------

class TestLinks:
    def test_same_host_absolute_and_relative(self) -> None:
        html = """
<a href="https://example.com/a">A</a>
<a href="/b">B</a>
<a href="https://other.org/c">C</a>
<a href="#top">Top</a>
<a href="mailto:me@example.com">Mail</a>
"""
        links = parse_links(html, "https://example.com/start")
        assert links == ["https://example.com/a", "https://example.com/b"]

    def test_deduplicates_preserving_order(self) -> None:
        html = '<a href="/a">1</a><a href="/b">2</a><a href="/a">3</a>'
        assert parse_links(html, "https://example.com/") == [
            "https://example.com/a",
            "https://example.com/b",
        ]

    def test_fragments_are_stripped_before_deduplication(self) -> None:
        html = '<a href="/page#a">1</a><a href="/page#b">2</a><a href="/page">3</a><a href="/other#x">4</a>'
        assert parse_links(html, "https://example.com/") == [
            "https://example.com/page",
            "https://example.com/other",
        ]

    def test_capped_at_limit(self) -> None:
        html = "".join(f'<a href="/p{i}">{i}</a>' for i in range(30))
        assert len(parse_links(html, "https://example.com/")) == 20
        assert len(parse_links(html, "https://example.com/", limit=5)) == 5

    async def test_extract_links_failure_returns_empty(self, caplog) -> None:
        class BrokenPage:
            async def content(self) -> str:
                raise RuntimeError("boom")

        assert await extract_links(BrokenPage(), "https://example.com/") == []
        assert "failed to extract links" in caplog.text
