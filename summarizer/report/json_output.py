"""Structured (JSON) report documents."""

from __future__ import annotations

import re
import uuid
from typing import Any, List

from summarizer.models import BatchOutcome, BatchReport, SummaryOptions, SummaryResult, utc_timestamp

_BULLET = re.compile(r"^[•\-*]\s+(.+)$", re.MULTILINE)
_SENTENCE_SPLIT = re.compile(r"[.!?]+")


def extract_key_points(summary: str) -> List[str]:
    """Bullet lines of *summary*, or its first three substantial sentences."""
    bullets = [m.group(1).strip() for m in _BULLET.finditer(summary)]
    if bullets:
        return bullets
    sentences = [s.strip() for s in _SENTENCE_SPLIT.split(summary) if len(s.strip()) > 20]
    return sentences[:3]


def format_json_single(result: SummaryResult, options: SummaryOptions) -> dict[str, Any]:
    """JSON document for a single-URL run."""
    metadata = result.page.metadata
    return {
        "url": metadata.url,
        "timestamp": metadata.timestamp,
        "metadata": {
            "title": metadata.title,
            "description": metadata.description,
            "contentLength": len(result.page.text),
            "processingTime": round(result.processing_time, 2),
        },
        "summary": {
            "content": result.summary,
            "length": options.length.value,
            "keyPoints": extract_key_points(result.summary),
        },
        "status": "success",
    }


def _json_outcome(outcome: BatchOutcome, options: SummaryOptions) -> dict[str, Any]:
    doc: dict[str, Any] = {
        "url": outcome.url,
        "timestamp": outcome.metadata.timestamp,
        "metadata": {
            "title": outcome.metadata.title,
            "description": outcome.metadata.description,
        },
        "summary": {
            "content": outcome.summary,
            "length": options.length.value,
            "keyPoints": extract_key_points(outcome.summary),
        },
        "status": "success" if outcome.ok else "error",
    }
    if outcome.error:
        doc["error"] = outcome.error
    if outcome.retry_count:
        doc["retries"] = outcome.retry_count
    return doc


def format_json_batch(
    report: BatchReport,
    options: SummaryOptions,
    batch_id: str | None = None,
) -> dict[str, Any]:
    """JSON document for a batch or link-following run."""
    doc: dict[str, Any] = {
        "batchId": batch_id or str(uuid.uuid4()),
        "timestamp": utc_timestamp(),
        "summary": report.to_dict(),
        "results": [_json_outcome(o, options) for o in report.outcomes],
    }
    if report.comparative or report.comparative_error:
        comparative: dict[str, Any] = {"analysis": report.comparative or ""}
        if report.comparative_error:
            comparative["error"] = report.comparative_error
        doc["comparative"] = comparative
    return doc
