"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from summarizer.api import app

    uvicorn summarizer.api:app --reload
"""

from summarizer.api.app import app

__all__ = ["app"]
