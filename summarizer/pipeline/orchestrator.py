"""Drive URLs through navigate → extract → summarize.

Three entry points share one browser scope per invocation:

``summarize_website``
    Single-URL mode.  Navigation, extraction and summarization are each
    retried on their own; any error propagates to the caller.

``process_batch``
    Many URLs, processed strictly one after another in input order.  Each
    URL's whole navigate → extract → summarize sequence is retried as one
    unit and any error it ends with is recorded on its
    :class:`~summarizer.models.BatchOutcome` instead of aborting the batch.
    The run pauses ``BATCH_DELAY`` seconds after every URL.

``follow_links``
    Summarize one URL, then the same-host links discovered on it, reusing
    the same page and the same per-URL pause.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, AsyncContextManager, Awaitable, Callable, List, Sequence, Tuple
from urllib.parse import urlparse

from summarizer.browser.extractor import ContentExtractor, extract_links, extract_metadata
from summarizer.browser.session import BrowserSession, navigate, open_browser
from summarizer.config import Settings, settings
from summarizer.errors import InvalidInputError
from summarizer.llm.summarizer import Summarizer
from summarizer.models import (
    BatchOutcome,
    BatchReport,
    PageRecord,
    SummaryOptions,
    SummaryResult,
)
from summarizer.pipeline.retry import BackoffExecutor

logger = logging.getLogger(__name__)

BrowserFactory = Callable[[], AsyncContextManager[BrowserSession]]


def is_valid_url(url: str) -> bool:
    """Return ``True`` for absolute ``http``/``https`` URLs with a host."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _require_valid_url(url: str) -> None:
    if not is_valid_url(url):
        raise InvalidInputError(
            "Invalid URL format. Please provide a valid http:// or https:// URL",
            code="INVALID_URL",
        )


class PipelineOrchestrator:
    """Run the scrape-and-summarize pipeline over one or many URLs."""

    def __init__(
        self,
        summarizer: Summarizer,
        extractor: ContentExtractor | None = None,
        browser_factory: BrowserFactory | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        config: Settings = settings,
    ) -> None:
        self.summarizer = summarizer
        self.extractor = extractor or ContentExtractor()
        self.config = config
        self._browser_factory = browser_factory or (
            lambda: open_browser(headless=config.browser_headless)
        )
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def _navigate(self, page: Any, url: str) -> None:
        await navigate(page, url, timeout_ms=self.config.navigation_timeout_ms)

    async def _extract(self, page: Any, url: str, collect_links: bool = False) -> PageRecord:
        """Extract text and metadata concurrently; both must succeed."""
        text, metadata = await asyncio.gather(
            self.extractor.extract_from_page(page),
            extract_metadata(page),
        )
        links: List[str] = []
        if collect_links:
            links = await extract_links(page, url, limit=self.config.max_follow_links)
        return PageRecord(text=text, metadata=metadata, links=links)

    async def _scrape_and_summarize(
        self, page: Any, url: str, options: SummaryOptions, collect_links: bool = False
    ) -> Tuple[PageRecord, str]:
        await self._navigate(page, url)
        record = await self._extract(page, url, collect_links=collect_links)
        summary = await self.summarizer.summarize(record.text, options)
        return record, summary

    def _unit_executor(self, url: str, options: SummaryOptions) -> BackoffExecutor:
        return BackoffExecutor(
            max_retries=options.max_retries,
            base_delay=options.retry_delay_seconds,
            label=f"Processing {url}",
            sleep=self._sleep,
        )

    # ------------------------------------------------------------------
    # Single URL
    # ------------------------------------------------------------------

    async def summarize_website(self, url: str, options: SummaryOptions) -> SummaryResult:
        """Summarize one URL, retrying each sub-step independently.

        Raises:
            InvalidInputError: *url* is not an http(s) URL; no browser is
                launched.
            SummarizerError: whatever the navigation, extraction or
                summarization step finally failed with.
        """
        _require_valid_url(url)
        started = time.perf_counter()

        async with self._browser_factory() as session:
            page = session.page

            await BackoffExecutor(
                max_retries=self.config.navigation_max_retries,
                base_delay=self.config.navigation_retry_delay,
                label="Navigation",
                sleep=self._sleep,
            ).run(lambda: self._navigate(page, url))

            record = await BackoffExecutor(
                max_retries=self.config.extraction_max_retries,
                base_delay=self.config.extraction_retry_delay,
                label="Content extraction",
                sleep=self._sleep,
            ).run(lambda: self._extract(page, url))

            summary = await self.summarizer.summarize(record.text, options)

        return SummaryResult(
            page=record,
            summary=summary,
            processing_time=time.perf_counter() - started,
        )

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    async def process_url(self, page: Any, url: str, options: SummaryOptions) -> BatchOutcome:
        """Process one URL of a batch; never raises for per-URL failures."""
        if not is_valid_url(url):
            return BatchOutcome.failed(
                url, "Invalid URL format. Please provide a valid http:// or https:// URL"
            )

        executor = self._unit_executor(url, options)
        try:
            record, summary = await executor.run(
                lambda: self._scrape_and_summarize(page, url, options)
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning("pipeline: %s failed: %s", url, exc)
            return BatchOutcome.failed(url, str(exc), retry_count=executor.retries)

        return BatchOutcome(
            url=url,
            summary=summary,
            metadata=record.metadata,
            retry_count=executor.retries or None,
        )

    async def _process_sequentially(
        self, page: Any, urls: Sequence[str], options: SummaryOptions, report: BatchReport
    ) -> None:
        for url in urls:
            report.outcomes.append(await self.process_url(page, url, options))
            # Pace the shared page after every URL, failed or not.
            await self._sleep(self.config.batch_delay)

    async def _maybe_compare(self, report: BatchReport, options: SummaryOptions) -> None:
        successes = report.successful
        if not options.comparative or len(successes) < 2:
            return
        try:
            report.comparative = await self.summarizer.compare(successes, options)
        except Exception as exc:  # noqa: BLE001
            logger.warning("pipeline: comparative summary failed: %s", exc)
            report.comparative_error = str(exc)

    async def process_batch(self, urls: Sequence[str], options: SummaryOptions) -> BatchReport:
        """Summarize every URL in order, isolating per-URL failures."""
        report = BatchReport()
        async with self._browser_factory() as session:
            await self._process_sequentially(session.page, list(urls), options, report)
        await self._maybe_compare(report, options)
        return report

    # ------------------------------------------------------------------
    # Link following
    # ------------------------------------------------------------------

    async def follow_links(self, url: str, options: SummaryOptions) -> BatchReport:
        """Summarize *url*, then up to ``options.follow_links`` same-host links.

        The primary URL's failure propagates; failures of followed links are
        recorded on their outcomes.
        """
        _require_valid_url(url)
        report = BatchReport()

        async with self._browser_factory() as session:
            page = session.page
            executor = self._unit_executor(url, options)
            record, summary = await executor.run(
                lambda: self._scrape_and_summarize(page, url, options, collect_links=True)
            )
            report.outcomes.append(
                BatchOutcome(
                    url=url,
                    summary=summary,
                    metadata=record.metadata,
                    retry_count=executor.retries or None,
                )
            )

            count = options.follow_links or 0
            targets = [link for link in record.links if link != url][:count]
            logger.info("pipeline: following %d of %d discovered links", len(targets), len(record.links))
            await self._sleep(self.config.batch_delay)
            await self._process_sequentially(page, targets, options, report)

        await self._maybe_compare(report, options)
        return report
