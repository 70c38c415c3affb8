"""Error taxonomy shared by every pipeline stage.

Every failure the pipeline raises on purpose is a :class:`SummarizerError`
carrying a machine-readable ``code`` and an explicit ``retryable`` flag.  The
retry executor only ever looks at that flag; the subclasses exist to give
each family sensible defaults and a readable name at the raise site.
"""

from __future__ import annotations


class SummarizerError(Exception):
    """Base error with a ``code`` and a ``retryable`` classification."""

    default_code = "SUMMARIZER_ERROR"
    default_retryable = False

    def __init__(
        self,
        message: str,
        code: str | None = None,
        retryable: bool | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.retryable = self.default_retryable if retryable is None else retryable

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.message!r}, code={self.code!r}, "
            f"retryable={self.retryable!r})"
        )


class InvalidInputError(SummarizerError):
    """Bad user input (malformed URL, bad option).  Never retried."""

    default_code = "INVALID_URL"


class TransientError(SummarizerError):
    """Timeouts, 429, 5xx, empty model output — worth another attempt."""

    default_code = "TRANSIENT"
    default_retryable = True


class PermanentRequestError(SummarizerError):
    """4xx (other than 429), malformed content, local I/O failures."""

    default_code = "HTTP_ERROR"


class NoContentError(PermanentRequestError):
    """The rendered page did not yield enough readable text."""

    default_code = "NO_CONTENT"


class ExhaustedRetriesError(SummarizerError):
    """Terminal error raised once every attempt of an operation has failed."""

    default_code = "MAX_RETRIES_EXCEEDED"

    def __init__(self, label: str, attempts: int, last_error: BaseException | None) -> None:
        last_message = str(last_error) if last_error is not None else "unknown error"
        super().__init__(f"{label} failed after {attempts} attempts: {last_message}")
        self.attempts = attempts
        self.last_error = last_error
