"""Data models for the scrape-and-summarize pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# User-facing options
# ---------------------------------------------------------------------------

class SummaryLength(str, Enum):
    short = "short"
    medium = "medium"
    long = "long"


class SummaryFormat(str, Enum):
    paragraphs = "paragraphs"
    bullets = "bullets"
    json = "json"


class SummaryOptions(BaseModel):
    """Options recognised by the CLI and the HTTP API.

    ``retry_delay`` is expressed in milliseconds, like the CLI flag; use
    :attr:`retry_delay_seconds` when handing it to the retry executor.
    """

    model_config = ConfigDict(frozen=True)

    length: SummaryLength = SummaryLength.medium
    format: SummaryFormat = SummaryFormat.paragraphs
    include_metadata: bool = False
    save_to_file: Optional[str] = None
    comparative: bool = False
    follow_links: Optional[int] = Field(default=None, ge=1, le=20)
    max_retries: int = Field(default=3, ge=0, le=10)
    retry_delay: int = Field(default=2000, ge=100, le=30000)

    @property
    def retry_delay_seconds(self) -> float:
        return self.retry_delay / 1000


# ---------------------------------------------------------------------------
# Attempt results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failure:
    error: BaseException
    retryable: bool

    @property
    def message(self) -> str:
        return str(self.error)


OperationResult = Union[Success[T], Failure]


# ---------------------------------------------------------------------------
# Page data
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PageMetadata:
    """Descriptive metadata captured alongside the page text."""

    title: str
    description: str
    url: str
    timestamp: str = field(default_factory=utc_timestamp)

    @classmethod
    def placeholder(cls, url: str) -> "PageMetadata":
        """Metadata for a URL that never produced a page."""
        return cls(title="", description="", url=url)


@dataclass(frozen=True)
class PageRecord:
    """Readable content extracted from one rendered page."""

    text: str
    metadata: PageMetadata
    links: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Pipeline results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SummaryResult:
    """Outcome of single-URL mode."""

    page: PageRecord
    summary: str
    processing_time: float = 0.0


@dataclass(frozen=True)
class BatchOutcome:
    """One URL's result inside a batch or link-following run.

    Either ``summary`` is non-empty or ``error`` is set.  ``retry_count`` is
    only populated when at least one retry happened.
    """

    url: str
    summary: str
    metadata: PageMetadata
    error: Optional[str] = None
    retry_count: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, url: str, error: str, retry_count: Optional[int] = None) -> "BatchOutcome":
        return cls(
            url=url,
            summary="",
            metadata=PageMetadata.placeholder(url),
            error=error,
            retry_count=retry_count or None,
        )


@dataclass
class BatchReport:
    """Ordered outcomes plus the optional cross-document synthesis."""

    outcomes: List[BatchOutcome] = field(default_factory=list)
    comparative: Optional[str] = None
    comparative_error: Optional[str] = None

    @property
    def successful(self) -> List[BatchOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> List[BatchOutcome]:
        return [o for o in self.outcomes if not o.ok]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": len(self.outcomes),
            "successful": len(self.successful),
            "failed": len(self.failed),
        }
