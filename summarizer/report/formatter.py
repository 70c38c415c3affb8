"""Human-readable report rendering."""

from __future__ import annotations

import json
from datetime import datetime

from summarizer.models import BatchReport, SummaryFormat, SummaryOptions, SummaryResult
from summarizer.report.json_output import format_json_batch, format_json_single


def _display_date(timestamp: str) -> str:
    try:
        return datetime.fromisoformat(timestamp).astimezone().strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return timestamp


def format_output(result: SummaryResult, options: SummaryOptions) -> str:
    """Render a single-URL result as text, or JSON when requested."""
    if options.format == SummaryFormat.json:
        return json.dumps(format_json_single(result, options), indent=2, ensure_ascii=False)

    metadata = result.page.metadata
    lines = ["", "--- Website Summary ---", ""]
    if options.include_metadata:
        lines.append(f"Title: {metadata.title}")
        lines.append(f"URL: {metadata.url}")
        lines.append(f"Date: {_display_date(metadata.timestamp)}")
        if metadata.description:
            lines.append(f"Description: {metadata.description}")
        lines.append("")
    lines.append(result.summary)
    lines.append("")
    lines.append("-----------------------")
    return "\n".join(lines) + "\n"


def format_batch_output(report: BatchReport, options: SummaryOptions) -> str:
    """Render a batch report as text, or JSON when requested."""
    if options.format == SummaryFormat.json:
        return json.dumps(format_json_batch(report, options), indent=2, ensure_ascii=False)

    lines = [
        "",
        "=== BATCH SUMMARY RESULTS ===",
        "",
        f"Total URLs processed: {len(report.outcomes)}",
        f"Successful: {len(report.successful)}",
        f"Failed: {len(report.failed)}",
        "",
    ]

    for index, outcome in enumerate(report.outcomes, start=1):
        lines.append("")
        lines.append(f"--- Summary {index} ---")
        lines.append(f"URL: {outcome.url}")
        if outcome.error:
            lines.append(f"ERROR: {outcome.error}")
            if outcome.retry_count:
                lines.append(f"Attempts: {outcome.retry_count + 1}")
        else:
            lines.append(f"Title: {outcome.metadata.title}")
            lines.append(f"Date: {_display_date(outcome.metadata.timestamp)}")
            if outcome.retry_count:
                lines.append(f"Retries: {outcome.retry_count}")
            lines.append("")
            lines.append(outcome.summary)
        lines.append("")
        lines.append("-" * 50)

    if report.comparative:
        lines.extend(["", "", "=== COMPARATIVE ANALYSIS ===", "", report.comparative, "", "=" * 50])
    elif report.comparative_error:
        lines.extend(["", f"Comparative analysis failed: {report.comparative_error}"])

    return "\n".join(lines) + "\n"
