"""Web summarizer — fetch pages in a headless browser, extract readable
text and summarize it with a hosted language model.

Public API::

    from summarizer import PipelineOrchestrator, SummaryOptions
"""

from summarizer.errors import SummarizerError
from summarizer.models import BatchOutcome, BatchReport, SummaryOptions, SummaryResult
from summarizer.pipeline import PipelineOrchestrator

__all__ = [
    "BatchOutcome",
    "BatchReport",
    "PipelineOrchestrator",
    "SummarizerError",
    "SummaryOptions",
    "SummaryResult",
]
