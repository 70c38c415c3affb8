"""Web summarizer CLI — entry-point for all pipeline operations.

Usage:
    python cli/main.py --help

Commands:
    summarize  → single URL, batch (several URLs / --file) or --follow-links
    serve      → run the HTTP API with uvicorn
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from summarizer.xxx import
# ...` works when the CLI is invoked as `python cli/main.py` from any
# working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import logging
from typing import List, Optional

import typer
from pydantic import ValidationError

from summarizer.config import settings
from summarizer.errors import SummarizerError
from summarizer.llm.summarizer import Summarizer
from summarizer.models import SummaryFormat, SummaryLength, SummaryOptions
from summarizer.pipeline.orchestrator import PipelineOrchestrator
from summarizer.pipeline.scheduler import RequestScheduler
from summarizer.report import (
    format_batch_output,
    format_output,
    load_urls_from_file,
    save_to_file,
)

app = typer.Typer(
    name="summarize",
    help="Summarize web pages with a headless browser and a language model.",
    no_args_is_help=True,
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_orchestrator() -> PipelineOrchestrator:
    """Return an orchestrator owning a fresh scheduler for this invocation."""
    scheduler = RequestScheduler(
        max_concurrent=settings.scheduler_max_concurrent,
        min_delay=settings.scheduler_min_delay,
    )
    return PipelineOrchestrator(Summarizer(scheduler))


async def _run(urls: List[str], options: SummaryOptions, batch: bool) -> str:
    orchestrator = build_orchestrator()

    if options.follow_links:
        typer.echo(f"[summarize] Following up to {options.follow_links} link(s) from {urls[0]!r} …")
        report = await orchestrator.follow_links(urls[0], options)
        return format_batch_output(report, options)

    if batch:
        typer.echo(f"[summarize] Processing {len(urls)} URL(s) …")
        report = await orchestrator.process_batch(urls, options)
        return format_batch_output(report, options)

    typer.echo(f"[summarize] Fetching {urls[0]!r} …")
    result = await orchestrator.summarize_website(urls[0], options)
    return format_output(result, options)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command("summarize")
def summarize(
    urls: Optional[List[str]] = typer.Argument(None, help="URL(s) to summarize."),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", help="Text file with one URL per line ('#' comments allowed)."
    ),
    length: SummaryLength = typer.Option(SummaryLength.medium, help="Summary length."),
    format: SummaryFormat = typer.Option(SummaryFormat.paragraphs, "--format", help="Output format."),
    metadata: bool = typer.Option(False, "--metadata", help="Include page metadata."),
    save: Optional[str] = typer.Option(None, "--save", help="Save the output to summaries/<name>.txt."),
    comparative: bool = typer.Option(
        False, "--comparative", help="Add a comparative analysis across successful URLs."
    ),
    follow_links: Optional[int] = typer.Option(
        None, "--follow-links", min=1, max=20, help="Also summarize N same-site links."
    ),
    max_retries: int = typer.Option(3, "--max-retries", min=0, max=10, help="Retries per URL."),
    retry_delay: int = typer.Option(
        2000, "--retry-delay", min=100, max=30000, help="Base retry delay in milliseconds."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Summarize one URL, a batch of URLs, or a URL and its linked pages."""
    _configure_logging(verbose)

    try:
        all_urls = list(urls or [])
        if file is not None:
            all_urls.extend(load_urls_from_file(file))
        if not all_urls:
            typer.echo("[summarize] No URLs given. Pass URLs or --file.", err=True)
            raise typer.Exit(1)
        if follow_links and len(all_urls) != 1:
            typer.echo("[summarize] --follow-links takes exactly one URL.", err=True)
            raise typer.Exit(1)

        try:
            options = SummaryOptions(
                length=length,
                format=format,
                include_metadata=metadata,
                save_to_file=save,
                comparative=comparative,
                follow_links=follow_links,
                max_retries=max_retries,
                retry_delay=retry_delay,
            )
        except ValidationError as exc:
            typer.echo(f"[summarize] Invalid options: {exc}", err=True)
            raise typer.Exit(1)

        batch = len(all_urls) > 1 or file is not None
        output = asyncio.run(_run(all_urls, options, batch))
        typer.echo(output)

        if options.save_to_file:
            path = save_to_file(output, options.save_to_file)
            typer.echo(f"[summarize] ✓ Summary saved to: {path}")
    except SummarizerError as exc:
        typer.echo(f"\nError [{exc.code}]: {exc.message}\n", err=True)
        raise typer.Exit(1)


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(8000, help="Bind port."),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    _configure_logging(False)
    uvicorn.run("summarizer.api.app:app", host=host, port=port)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
