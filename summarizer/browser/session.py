"""Headless Chromium session scope and navigation with failure classification.

One :class:`BrowserSession` is opened per top-level invocation and shared by
every URL processed inside it.  :func:`open_browser` guarantees the browser
is closed exactly once on every exit path; a failing close is logged rather
than raised so it never hides the error that ended the run.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator

from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from summarizer.config import settings
from summarizer.errors import PermanentRequestError, SummarizerError, TransientError

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)


@dataclass
class BrowserSession:
    """A launched browser and the single page reused across URLs."""

    browser: Any
    page: Any


# ---------------------------------------------------------------------------
# Session scope
# ---------------------------------------------------------------------------

@asynccontextmanager
async def open_browser(headless: bool | None = None) -> AsyncIterator[BrowserSession]:
    """Launch Chromium, open one page and yield a :class:`BrowserSession`.

    Raises:
        PermanentRequestError: ``BROWSER_LAUNCH_FAILED`` when Chromium cannot
            be started, ``BROWSER_OPERATION_FAILED`` when the body raises an
            error that is not already a :class:`SummarizerError`.
    """
    if headless is None:
        headless = settings.browser_headless

    async with async_playwright() as pw:
        try:
            browser = await pw.chromium.launch(headless=headless)
            page = await browser.new_page(user_agent=USER_AGENT)
        except Exception as exc:
            raise PermanentRequestError(
                f"Failed to launch browser: {exc}", code="BROWSER_LAUNCH_FAILED"
            ) from exc

        try:
            yield BrowserSession(browser=browser, page=page)
        except SummarizerError:
            raise
        except Exception as exc:
            raise PermanentRequestError(
                f"Browser operation failed: {exc}", code="BROWSER_OPERATION_FAILED"
            ) from exc
        finally:
            try:
                await browser.close()
            except Exception as exc:  # noqa: BLE001
                logger.warning("browser: failed to close browser: %s", exc)


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------

async def navigate(page: Any, url: str, timeout_ms: int | None = None) -> None:
    """Load *url* in *page* and classify any failure.

    Raises:
        TransientError: timeouts, missing responses, HTTP 429 and 5xx, and
            other navigation failures.
        PermanentRequestError: HTTP 4xx other than 429.
    """
    if timeout_ms is None:
        timeout_ms = settings.navigation_timeout_ms

    try:
        response = await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
    except PlaywrightTimeoutError as exc:
        raise TransientError(
            "Page load timeout - the website took too long to respond", code="TIMEOUT"
        ) from exc
    except Exception as exc:
        raise TransientError(
            f"Failed to navigate to URL: {exc}", code="NAVIGATION_FAILED"
        ) from exc

    if response is None:
        raise TransientError("No response received from URL", code="NO_RESPONSE")

    status = response.status
    if status == 429:
        raise TransientError("Rate limited by server", code="RATE_LIMITED")
    if status >= 500:
        raise TransientError(
            f"Server error {status}: {response.status_text}", code="SERVER_ERROR"
        )
    if status >= 400:
        raise PermanentRequestError(
            f"HTTP error {status}: {response.status_text}", code="HTTP_ERROR"
        )
