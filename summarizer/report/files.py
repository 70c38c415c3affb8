"""Reading URL lists and saving rendered reports."""

from __future__ import annotations

from pathlib import Path
from typing import List

from summarizer.config import settings
from summarizer.errors import PermanentRequestError


def save_to_file(output: str, filename: str, directory: Path | None = None) -> Path:
    """Write *output* to ``<directory>/<filename>.txt`` and return the path.

    ``.txt`` is appended when *filename* does not already end with it.
    """
    target_dir = Path(directory) if directory is not None else settings.output_dir
    name = filename if filename.endswith(".txt") else f"{filename}.txt"
    path = target_dir / name
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(output, encoding="utf-8")
    except OSError as exc:
        raise PermanentRequestError(
            f"Failed to save file: {exc}", code="FILE_SAVE_FAILED"
        ) from exc
    return path


def load_urls_from_file(path: str | Path) -> List[str]:
    """Return the URLs listed in *path*, one per line.

    Blank lines and ``#`` comments are skipped.
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise PermanentRequestError(
            f"Failed to read URL file: {exc}", code="FILE_READ_FAILED"
        ) from exc
    urls = []
    for line in content.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            urls.append(line)
    return urls
