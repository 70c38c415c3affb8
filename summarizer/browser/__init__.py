"""Browser package — session scope, navigation and content extraction."""

from summarizer.browser.extractor import (
    ContentExtractor,
    extract_links,
    extract_metadata,
    remove_duplicate_lines,
)
from summarizer.browser.session import BrowserSession, navigate, open_browser

__all__ = [
    "BrowserSession",
    "ContentExtractor",
    "extract_links",
    "extract_metadata",
    "navigate",
    "open_browser",
    "remove_duplicate_lines",
]
