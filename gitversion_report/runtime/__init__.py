"""Report rendering and the process entry point."""

from __future__ import annotations

from .reporter import DEFAULT_TITLE, SEPARATOR, format_report, write_report

__all__ = ["DEFAULT_TITLE", "SEPARATOR", "format_report", "write_report"]
