"""Centralised settings for the web summarizer.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Language model
    # ------------------------------------------------------------------
    llm_provider: str = field(
        default_factory=lambda: os.environ.get("LLM_PROVIDER", "ollama")
    )
    ollama_base_url: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
    )
    ollama_chat_model: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_CHAT_MODEL", "ministral-3:8b")
    )
    openai_chat_model: str = field(
        default_factory=lambda: os.environ.get("OPENAI_CHAT_MODEL", "gpt-4o-mini")
    )
    gemini_chat_model: str = field(
        default_factory=lambda: os.environ.get("GEMINI_CHAT_MODEL", "gemini-2.5-flash")
    )
    llm_timeout: float = field(
        default_factory=lambda: float(os.environ.get("LLM_TIMEOUT", "120.0"))
    )

    # ------------------------------------------------------------------
    # Browser
    # ------------------------------------------------------------------
    browser_headless: bool = field(
        default_factory=lambda: _env_bool("BROWSER_HEADLESS", "true")
    )
    navigation_timeout_ms: int = field(
        default_factory=lambda: int(os.environ.get("NAVIGATION_TIMEOUT_MS", "60000"))
    )

    # ------------------------------------------------------------------
    # Request scheduler (bounds in-flight language-model calls)
    # ------------------------------------------------------------------
    scheduler_max_concurrent: int = field(
        default_factory=lambda: int(os.environ.get("SCHEDULER_MAX_CONCURRENT", "2"))
    )
    scheduler_min_delay: float = field(
        default_factory=lambda: float(os.environ.get("SCHEDULER_MIN_DELAY", "1.0"))
    )

    # ------------------------------------------------------------------
    # Orchestrator
    # ------------------------------------------------------------------
    batch_delay: float = field(
        default_factory=lambda: float(os.environ.get("BATCH_DELAY", "1.0"))
    )
    max_follow_links: int = field(
        default_factory=lambda: int(os.environ.get("MAX_FOLLOW_LINKS", "20"))
    )
    min_content_length: int = field(
        default_factory=lambda: int(os.environ.get("MIN_CONTENT_LENGTH", "50"))
    )
    # Single-URL mode retries each sub-step on its own, with these defaults.
    navigation_max_retries: int = field(
        default_factory=lambda: int(os.environ.get("NAVIGATION_MAX_RETRIES", "2"))
    )
    navigation_retry_delay: float = field(
        default_factory=lambda: float(os.environ.get("NAVIGATION_RETRY_DELAY", "1.0"))
    )
    extraction_max_retries: int = field(
        default_factory=lambda: int(os.environ.get("EXTRACTION_MAX_RETRIES", "2"))
    )
    extraction_retry_delay: float = field(
        default_factory=lambda: float(os.environ.get("EXTRACTION_RETRY_DELAY", "0.5"))
    )

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    output_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("SUMMARY_OUTPUT_DIR", Path.cwd() / "summaries")
        )
    )


# Module-level singleton — import this everywhere:
#   from summarizer.config import settings
settings = Settings()
