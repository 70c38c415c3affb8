"""FastAPI application factory.

Lifespan
--------
On startup the app builds one :class:`RequestScheduler` and one
:class:`PipelineOrchestrator` for the lifetime of the process and stores
them on ``app.state``.  Every request shares them, so concurrent requests
are paced together against the language-model provider.

Routers
-------
    /health     — liveness probe
    /summarize  — batch scrape-and-summarize
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from summarizer.config import settings
from summarizer.llm.summarizer import Summarizer
from summarizer.pipeline.orchestrator import PipelineOrchestrator
from summarizer.pipeline.scheduler import RequestScheduler

from summarizer.api.routers import summarize as summarize_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the shared scheduler and orchestrator."""
    scheduler = RequestScheduler(
        max_concurrent=settings.scheduler_max_concurrent,
        min_delay=settings.scheduler_min_delay,
    )
    app.state.scheduler = scheduler
    app.state.orchestrator = PipelineOrchestrator(Summarizer(scheduler))
    yield


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="Web Summarizer API",
        description=(
            "REST interface for the web summarizer: render pages in a headless "
            "browser, extract readable text and summarize it with a language model."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(summarize_router.router, tags=["summarize"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn summarizer.api.app:app --reload
app = create_app()
