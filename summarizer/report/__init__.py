"""Report package — text / JSON rendering and file I/O."""

from summarizer.report.files import load_urls_from_file, save_to_file
from summarizer.report.formatter import format_batch_output, format_output
from summarizer.report.json_output import format_json_batch, format_json_single

__all__ = [
    "format_output",
    "format_batch_output",
    "format_json_single",
    "format_json_batch",
    "load_urls_from_file",
    "save_to_file",
]
