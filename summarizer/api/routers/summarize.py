"""Summarization endpoints.

Routes
------
GET  /health      → {"status": "ok"}
POST /summarize   Body: {"urls": [...], "options": {...}}  → batch JSON report
"""

from __future__ import annotations

from typing import Any, List

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from summarizer.errors import SummarizerError
from summarizer.models import SummaryOptions
from summarizer.report.json_output import format_json_batch

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class SummarizeRequest(BaseModel):
    # Plain strings: malformed URLs become failed outcomes, not a 422.
    urls: List[str] = Field(min_length=1, max_length=20)
    options: SummaryOptions = Field(default_factory=SummaryOptions)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/summarize")
async def summarize_endpoint(body: SummarizeRequest, request: Request) -> dict[str, Any]:
    """Summarize every URL in order and return the batch report.

    Per-URL failures are reported inside ``results``; only a failure of the
    batch itself (e.g. the browser cannot be launched) is an HTTP error.
    """
    orchestrator = request.app.state.orchestrator
    try:
        report = await orchestrator.process_batch(body.urls, body.options)
    except SummarizerError as exc:
        raise HTTPException(
            status_code=502, detail=f"[{exc.code}] {exc.message}"
        ) from exc
    return format_json_batch(report, body.options)
