"""Readable-text, metadata and link extraction from a rendered page.

All three helpers work on the page's rendered HTML (``page.content()``)
parsed into a BeautifulSoup tree.  Noise removal therefore only ever mutates
that parsed copy, never the live page the other helpers read from.
"""

from __future__ import annotations

import logging
import re
from typing import Any, List, Sequence
from urllib.parse import urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from summarizer.config import settings
from summarizer.errors import NoContentError, SummarizerError, TransientError
from summarizer.models import PageMetadata, utc_timestamp

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------

NOISE_SELECTORS: tuple[str, ...] = (
    "nav",
    "footer",
    "aside",
    "script",
    "style",
    "noscript",
    "iframe",
    "header",
    '[role="navigation"]',
    ".cookie",
    ".consent",
    ".ads",
    ".popup",
    ".modal",
)

CANDIDATE_SELECTORS: tuple[str, ...] = (
    "article",
    "main",
    '[role="main"]',
    ".content",
    ".post",
)

# Elements that start a new line in rendered text.
_BLOCK_TAGS = frozenset({
    "address", "article", "blockquote", "dd", "div", "dl", "dt", "figcaption",
    "figure", "form", "h1", "h2", "h3", "h4", "h5", "h6", "hr", "li", "main",
    "ol", "p", "pre", "section", "table", "tr", "ul",
})

# Elements whose text keeps its source whitespace.
_PRESERVE_TAGS = frozenset({"pre", "textarea"})

#: Lines shorter than this (after trimming) are never deduplicated.
DEDUPE_MIN_LINE_LENGTH = 30

_MULTI_NEWLINE = re.compile(r"\n{3,}")
_MULTI_SPACE = re.compile(r"[ \t]{2,}")
_WHITESPACE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------

def remove_duplicate_lines(text: str) -> str:
    """Drop repeated long lines, keeping the first occurrence.

    Lines are compared trimmed and lower-cased.  Short lines (headings,
    labels) are always kept, even when repeated.
    """
    seen: set[str] = set()
    kept: List[str] = []
    for line in text.split("\n"):
        normalized = line.strip().lower()
        if len(normalized) < DEDUPE_MIN_LINE_LENGTH:
            kept.append(line)
            continue
        if normalized in seen:
            continue
        seen.add(normalized)
        kept.append(line)
    return "\n".join(kept)


def clean_text(text: str) -> str:
    """Collapse blank-line and whitespace runs, trim, then deduplicate lines."""
    collapsed = _MULTI_NEWLINE.sub("\n\n", text)
    collapsed = _MULTI_SPACE.sub(" ", collapsed).strip()
    return remove_duplicate_lines(collapsed)


def _render_text(element: Tag, parts: List[str], preserve: bool = False) -> None:
    """Append the rendered text of *element* to *parts*.

    Text nodes collapse their whitespace to single spaces (outside
    ``<pre>``); only ``<br>`` and block boundaries produce line breaks.
    """
    for child in element.children:
        if isinstance(child, Tag):
            if child.name == "br":
                parts.append("\n")
                continue
            block = child.name in _BLOCK_TAGS
            if block:
                parts.append("\n")
            _render_text(child, parts, preserve or child.name in _PRESERVE_TAGS)
            if block:
                parts.append("\n")
        elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
            parts.append(str(child) if preserve else _WHITESPACE.sub(" ", str(child)))


def _visible_text(element: Tag) -> str:
    """Approximate ``innerText``: one line per block, each line stripped.

    Runs of block boundaries collapse to at most one blank line, so empty
    wrapper elements add nothing to the text length.
    """
    parts: List[str] = []
    _render_text(element, parts)
    lines = "\n".join(line.strip() for line in "".join(parts).split("\n"))
    return _MULTI_NEWLINE.sub("\n\n", lines).strip()


# ---------------------------------------------------------------------------
# Content extractor
# ---------------------------------------------------------------------------

class ContentExtractor:
    """Pick the page's main readable region and clean it up.

    The region is chosen greedily: of every element matching one of
    ``candidate_selectors``, the one with the longest visible text wins, and
    ties keep the first seen.  Without any match the whole body is used.
    """

    def __init__(
        self,
        min_length: int | None = None,
        noise_selectors: Sequence[str] = NOISE_SELECTORS,
        candidate_selectors: Sequence[str] = CANDIDATE_SELECTORS,
    ) -> None:
        self.min_length = settings.min_content_length if min_length is None else min_length
        self.noise_selectors = tuple(noise_selectors)
        self.candidate_selectors = tuple(candidate_selectors)

    def _strip_noise(self, soup: BeautifulSoup) -> None:
        for selector in self.noise_selectors:
            for element in soup.select(selector):
                # Nested matches go away with their decomposed ancestor.
                if not element.decomposed:
                    element.decompose()

    def _best_candidate(self, soup: BeautifulSoup) -> str:
        best = ""
        for selector in self.candidate_selectors:
            for element in soup.select(selector):
                text = _visible_text(element)
                if len(text) > len(best):
                    best = text
        return best

    def raw_text(self, html: str) -> str:
        """Return the uncleaned text of the best content region of *html*."""
        soup = BeautifulSoup(html, "html.parser")
        self._strip_noise(soup)

        best = self._best_candidate(soup)
        if best:
            return best
        root = soup.body or soup
        return _visible_text(root)

    def extract(self, html: str) -> str:
        """Return cleaned readable text for *html*.

        Raises:
            NoContentError: fewer than ``min_length`` characters survive.
            TransientError: ``TEXT_EXTRACTION_FAILED`` on unexpected parser
                failures.
        """
        try:
            cleaned = clean_text(self.raw_text(html))
        except Exception as exc:
            raise TransientError(
                f"Failed to extract text content: {exc}", code="TEXT_EXTRACTION_FAILED"
            ) from exc

        if not cleaned or len(cleaned) < self.min_length:
            raise NoContentError("No meaningful content found on the page")
        return cleaned

    async def extract_from_page(self, page: Any) -> str:
        """Read the rendered HTML of *page* and :meth:`extract` it."""
        try:
            html = await page.content()
        except Exception as exc:
            raise TransientError(
                f"Failed to extract text content: {exc}", code="TEXT_EXTRACTION_FAILED"
            ) from exc
        return self.extract(html)


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------

def _meta_content(soup: BeautifulSoup, name: str) -> str:
    tag = soup.select_one(f'meta[name="{name}"], meta[property="og:{name}"]')
    if tag is None:
        return ""
    return (tag.get("content") or "").strip()


def parse_metadata(html: str, url: str) -> PageMetadata:
    """Build :class:`PageMetadata` from rendered *html* located at *url*."""
    soup = BeautifulSoup(html, "html.parser")
    title = ""
    if soup.title and soup.title.string:
        title = soup.title.string.strip()
    if not title:
        title = _meta_content(soup, "title")
    return PageMetadata(
        title=title,
        description=_meta_content(soup, "description"),
        url=url,
        timestamp=utc_timestamp(),
    )


async def extract_metadata(page: Any) -> PageMetadata:
    """Return metadata for the page currently loaded in *page*."""
    try:
        html = await page.content()
        return parse_metadata(html, page.url)
    except SummarizerError:
        raise
    except Exception as exc:
        raise TransientError(
            f"Failed to extract metadata: {exc}", code="METADATA_EXTRACTION_FAILED"
        ) from exc


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------

def parse_links(html: str, base_url: str, limit: int | None = None) -> List[str]:
    """Return unique absolute links of *html* on the same host as *base_url*.

    Fragment-only hrefs (``#anchor``) are excluded and other fragments are
    stripped, so one page is listed once.  Order follows the
    document and the list is capped at *limit*.
    """
    if limit is None:
        limit = settings.max_follow_links
    host = urlparse(base_url).hostname
    soup = BeautifulSoup(html, "html.parser")

    seen: set[str] = set()
    links: List[str] = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if not href or href.startswith("#"):
            continue
        absolute = urldefrag(urljoin(base_url, href)).url
        if absolute in seen:
            continue
        parsed = urlparse(absolute)
        if parsed.scheme not in ("http", "https") or parsed.hostname != host:
            continue
        seen.add(absolute)
        links.append(absolute)
    return links[:limit]


async def extract_links(page: Any, base_url: str, limit: int | None = None) -> List[str]:
    """Same-host links of the loaded page; ``[]`` if they cannot be read."""
    try:
        html = await page.content()
        return parse_links(html, base_url, limit=limit)
    except Exception as exc:  # noqa: BLE001
        logger.warning("extractor: failed to extract links from %s: %s", base_url, exc)
        return []
