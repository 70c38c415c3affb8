"""Pipeline package — retry executor, request scheduler and orchestrator."""

from summarizer.pipeline.orchestrator import PipelineOrchestrator, is_valid_url
from summarizer.pipeline.retry import BackoffExecutor
from summarizer.pipeline.scheduler import RequestScheduler

__all__ = ["BackoffExecutor", "PipelineOrchestrator", "RequestScheduler", "is_valid_url"]
