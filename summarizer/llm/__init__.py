"""Language-model package — provider client and summarization calls."""

from summarizer.llm.client import generate
from summarizer.llm.summarizer import Summarizer, build_comparative_prompt, build_prompt

__all__ = ["generate", "Summarizer", "build_prompt", "build_comparative_prompt"]
