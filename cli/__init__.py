"""Command-line interface for the web summarizer."""
