"""Shared fakes for the pipeline tests.

No real browser or model is ever started:

* ``FakePage`` stands in for a Playwright page.  Each URL maps to a script of
  responses (status codes or exceptions) consumed one navigation at a time.
* ``make_browser_factory`` returns an ``async with``-able factory yielding a
  session around one ``FakePage`` and counting open/close calls.
* ``RecordingSleep`` records requested delays instead of waiting.
* ``FakeModel`` replaces the language-model client and records prompts.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest

ARTICLE_TEXT = (
    "Solid-state batteries replace the liquid electrolyte with a solid one. "
    "This improves safety and energy density for electric vehicles."
)


def article_html(title: str = "Test Page", body: str = ARTICLE_TEXT, links: str = "") -> str:
    return f"""\
<!DOCTYPE html>
<html>
<head>
  <title>{title}</title>
  <meta name="description" content="A page about {title}.">
</head>
<body>
  <nav>Home | About | Contact</nav>
  <article><h1>{title}</h1><p>{body}</p></article>
  {links}
  <footer>Copyright 2024</footer>
</body>
</html>
"""


@dataclass
class FakeResponse:
    status: int = 200
    status_text: str = "OK"


@dataclass
class FakePage:
    """Minimal async Playwright-page double."""

    pages: Dict[str, str] = field(default_factory=dict)
    scripts: Dict[str, List[Any]] = field(default_factory=dict)
    url: str = "about:blank"
    visits: List[str] = field(default_factory=list)

    async def goto(self, url: str, wait_until: str = "load", timeout: int = 0) -> Any:
        self.visits.append(url)
        script = self.scripts.get(url)
        step: Any = FakeResponse()
        if script:
            step = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(step, BaseException):
            raise step
        if isinstance(step, int):
            step = FakeResponse(status=step, status_text="Status")
        self.url = url
        return step

    async def content(self) -> str:
        return self.pages.get(self.url, "<html><body></body></html>")


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)

    @property
    def total(self) -> float:
        return sum(self.delays)


def make_browser_factory(page: FakePage) -> Any:
    state = SimpleNamespace(opened=0, closed=0)

    @asynccontextmanager
    async def factory():
        state.opened += 1
        try:
            yield SimpleNamespace(browser=None, page=page)
        finally:
            state.closed += 1

    factory.state = state  # type: ignore[attr-defined]
    return factory


@pytest.fixture()
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


class FakeModel:
    """Async ``generate`` stand-in.  Comparative prompts get ``comparison``."""

    def __init__(
        self,
        summary: str = "A concise summary of the page.",
        comparison: str = "Both sources agree on the main points.",
        compare_error: Exception | None = None,
    ) -> None:
        self.summary = summary
        self.comparison = comparison
        self.compare_error = compare_error
        self.prompts: List[str] = []

    async def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if prompt.startswith("Compare and contrast"):
            if self.compare_error is not None:
                raise self.compare_error
            return self.comparison
        return self.summary

    @property
    def comparative_calls(self) -> int:
        return sum(1 for p in self.prompts if p.startswith("Compare and contrast"))
