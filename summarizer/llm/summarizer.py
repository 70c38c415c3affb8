"""Prompt construction and rate-limited, retried summarization calls."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Sequence

from summarizer.errors import TransientError
from summarizer.llm import client
from summarizer.models import BatchOutcome, SummaryFormat, SummaryLength, SummaryOptions
from summarizer.pipeline.retry import BackoffExecutor
from summarizer.pipeline.scheduler import RequestScheduler

Generate = Callable[[str], Awaitable[str]]

_LENGTHS = {
    SummaryLength.short: "one paragraph",
    SummaryLength.medium: "two paragraphs",
    SummaryLength.long: "three to four paragraphs",
}

_STRATEGIES: dict[SummaryFormat, Callable[[str], str]] = {
    SummaryFormat.paragraphs: lambda length: f"Provide a concise {length} summary in paragraph form.",
    SummaryFormat.bullets: lambda _: "Summarize as 5–7 concise bullet points covering the key ideas.",
    SummaryFormat.json: lambda _: (
        'Return a JSON object with keys: "mainTopic", "keyPoints", "conclusion".'
    ),
}


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

def build_prompt(content: str, options: SummaryOptions) -> str:
    """Return the single-page summary prompt for *content*."""
    strategy = _STRATEGIES[options.format](_LENGTHS[options.length])
    return (
        f"{strategy}\n"
        "Focus on the core ideas and conclusions.\n\n"
        f"Content:\n{content}"
    )


def build_comparative_prompt(outcomes: Sequence[BatchOutcome]) -> str:
    """Return the prompt comparing several per-URL summaries."""
    sources = "\n\n---\n\n".join(
        f"Source {i} ({outcome.metadata.title or outcome.url}):\n{outcome.summary}"
        for i, outcome in enumerate(outcomes, start=1)
    )
    return (
        "Compare and contrast the following summaries from different web pages. Identify:\n"
        "1. Common themes and overlapping topics\n"
        "2. Unique perspectives or information in each source\n"
        "3. Contradictions or differing viewpoints\n"
        "4. Overall synthesis of the information\n\n"
        f"Sources:\n{sources}\n\n"
        "Provide a comparative analysis in clear paragraphs."
    )


# ---------------------------------------------------------------------------
# Summarizer
# ---------------------------------------------------------------------------

class Summarizer:
    """Language-model calls routed through a shared :class:`RequestScheduler`.

    Each call gets its own :class:`BackoffExecutor`, built from the options'
    ``max_retries`` and ``retry_delay``, and runs inside a scheduler slot.
    """

    def __init__(
        self,
        scheduler: RequestScheduler,
        generate: Generate = client.generate,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.scheduler = scheduler
        self._generate = generate
        self._sleep = sleep

    async def _complete(self, prompt: str, empty_message: str) -> str:
        text = await self._generate(prompt)
        if not text or not text.strip():
            raise TransientError(empty_message, code="EMPTY_SUMMARY")
        return text

    async def _call(self, prompt: str, options: SummaryOptions, label: str, empty_message: str) -> str:
        executor = BackoffExecutor(
            max_retries=options.max_retries,
            base_delay=options.retry_delay_seconds,
            label=label,
            sleep=self._sleep,
        )
        return await self.scheduler.execute(
            lambda: executor.run(lambda: self._complete(prompt, empty_message))
        )

    async def summarize(self, content: str, options: SummaryOptions) -> str:
        """Summarize one page's *content*."""
        return await self._call(
            build_prompt(content, options),
            options,
            "Summarization",
            "AI model returned empty response",
        )

    async def compare(self, outcomes: Sequence[BatchOutcome], options: SummaryOptions) -> str:
        """Produce a comparative analysis across successful *outcomes*."""
        return await self._call(
            build_comparative_prompt(outcomes),
            options,
            "Comparative summary",
            "AI model returned empty comparative summary",
        )
